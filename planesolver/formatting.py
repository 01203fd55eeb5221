"""Text rendering helpers for numbers, matrices and solution values."""

from typing import Sequence


def fmt_num(value: float, max_decimals: int = 4) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    if abs(value - round(value)) < 1e-9:
        result = str(int(round(value)))
    else:
        result = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if result == "-0":
        return "0"
    return result


def row_label(index: int) -> str:
    """1-based row name used in step descriptions (``R1``, ``R2``, ...)."""
    return f"R{index + 1}"


def format_matrix(matrix: Sequence[Sequence[float]]) -> str:
    """Render an augmented matrix as aligned text, one row per line.

    The constant column is separated by a bar::

        [ 1   0   0 | 1 ]
        [ 0   1   0 | 2 ]
    """
    if not matrix or not matrix[0]:
        return "[ ]"
    cells = [[fmt_num(v) for v in row] for row in matrix]
    width = max(len(c) for row in cells for c in row)
    lines = []
    for row in cells:
        left = "  ".join(c.rjust(width) for c in row[:-1])
        right = row[-1].rjust(width)
        lines.append(f"[ {left} | {right} ]" if left else f"[ | {right} ]")
    return "\n".join(lines)


def format_point(point: Sequence[float], decimals: int = 2) -> str:
    return "(" + ", ".join(f"{v:.{decimals}f}" for v in point) + ")"
