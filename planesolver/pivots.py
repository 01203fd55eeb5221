"""Row helpers shared by the RREF engine and the solution analyzer.

Both components must agree on what counts as a pivot, so the leading-pivot
rule lives here and nowhere else.
"""

from typing import List, Optional, Sequence

from planesolver.constants import EPSILON

Matrix = List[List[float]]


def clone_matrix(matrix: Sequence[Sequence[float]]) -> Matrix:
    """Return a deep copy of *matrix* as a list of new float lists."""
    return [[float(v) for v in row] for row in matrix]


def snap(value: float) -> float:
    """Collapse floating-point residue: ``|value| < EPSILON`` becomes ``0.0``."""
    if abs(value) < EPSILON:
        return 0.0
    return value


def is_zero(value: float) -> bool:
    return abs(value) < EPSILON


def is_one(value: float) -> bool:
    return abs(value - 1.0) < EPSILON


def find_leading_pivot_column(row: Sequence[float], var_column_count: int) -> Optional[int]:
    """Return the column of the leading 1 in *row*, or ``None``.

    Only the first *var_column_count* columns are scanned. The pivot is the
    first column whose value is ≈1 with every column to its left ≈0. A
    non-zero entry that is not ≈1 ahead of any such column means the row
    has no pivot (it is not in reduced form).
    """
    for col in range(min(var_column_count, len(row))):
        value = row[col]
        if is_one(value):
            return col
        if not is_zero(value):
            return None
    return None


def first_nonzero_column(row: Sequence[float]) -> Optional[int]:
    """Index of the first entry with ``|v| > EPSILON``, over all columns."""
    for col, value in enumerate(row):
        if abs(value) > EPSILON:
            return col
    return None
