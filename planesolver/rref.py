"""Gauss-Jordan elimination that records every row operation.

The engine turns an augmented matrix into reduced row echelon form and keeps
a snapshot after each swap, normalization and elimination, so a caller can
replay the reduction one step at a time. Snapshots are deep copies; later
steps never alter earlier ones.
"""

import logging
from typing import List, Sequence

from planesolver.constants import EPSILON
from planesolver.formatting import fmt_num, row_label
from planesolver.pivots import (
    Matrix,
    clone_matrix,
    find_leading_pivot_column,
    is_one,
    is_zero,
    snap,
)

logger = logging.getLogger(__name__)


# ── Elementary row operations ───────────────────────────────────────────

def _swap_rows(matrix: Matrix, i: int, j: int) -> None:
    matrix[i], matrix[j] = matrix[j], matrix[i]


def _scale_row(matrix: Matrix, index: int, factor: float) -> None:
    matrix[index] = [snap(v * factor) for v in matrix[index]]


def _eliminate(matrix: Matrix, target: int, source: int, factor: float) -> None:
    """``R_target ← R_target − factor · R_source`` with snap-to-zero."""
    src = matrix[source]
    matrix[target] = [snap(t - factor * s) for t, s in zip(matrix[target], src)]


def _step(operation: str, description: str, rows: List[int], matrix: Matrix) -> dict:
    return {
        "operation": operation,
        "description": description,
        "rows": list(rows),
        "matrix": clone_matrix(matrix),
    }


def _describe_elimination(target: int, source: int, factor: float) -> str:
    sign = "−" if factor > 0 else "+"
    magnitude = abs(factor)
    coeff = "" if is_one(magnitude) else f"{fmt_num(magnitude)}·"
    return f"{row_label(target)} → {row_label(target)} {sign} {coeff}{row_label(source)}"


# ── Public API ──────────────────────────────────────────────────────────

def compute_rref_steps(initial: Sequence[Sequence[float]]) -> List[dict]:
    """Reduce *initial* to RREF and return the recorded steps.

    Each step is a dict with ``operation`` (``"initial"``, ``"swap"``,
    ``"scale"`` or ``"eliminate"``), a human readable ``description``, the
    ``rows`` it touched and a ``matrix`` snapshot taken after the operation.
    The first step is always ``"initial"`` and holds a copy of the input.

    A step is recorded only when the matrix actually changes. A matrix with
    no rows or no columns yields just the initial step.
    """
    matrix = clone_matrix(initial)
    steps = [_step("initial", "Initial matrix", [], matrix)]

    n_rows = len(matrix)
    if n_rows == 0 or len(matrix[0]) == 0:
        return steps
    var_cols = len(matrix[0]) - 1

    # Phase 1: forward elimination with partial pivoting
    pivot_row = 0
    for col in range(var_cols):
        if pivot_row >= n_rows:
            break

        max_row = pivot_row
        max_val = abs(matrix[pivot_row][col])
        for r in range(pivot_row + 1, n_rows):
            if abs(matrix[r][col]) > max_val:
                max_val = abs(matrix[r][col])
                max_row = r

        if max_val < EPSILON:
            # No pivot in this column: a free variable
            continue

        if max_row != pivot_row:
            _swap_rows(matrix, pivot_row, max_row)
            steps.append(_step(
                "swap",
                f"{row_label(pivot_row)} ↔ {row_label(max_row)}",
                [pivot_row, max_row],
                matrix,
            ))

        pivot = matrix[pivot_row][col]
        if not is_one(pivot):
            _scale_row(matrix, pivot_row, 1.0 / pivot)
            steps.append(_step(
                "scale",
                f"{row_label(pivot_row)} → {row_label(pivot_row)} / {fmt_num(pivot)}",
                [pivot_row],
                matrix,
            ))

        for r in range(n_rows):
            if r == pivot_row:
                continue
            factor = matrix[r][col]
            if is_zero(factor):
                continue
            _eliminate(matrix, r, pivot_row, factor)
            steps.append(_step(
                "eliminate",
                _describe_elimination(r, pivot_row, factor),
                [r, pivot_row],
                matrix,
            ))

        pivot_row += 1

    # Phase 2: back-substitution, bottom row to top
    for r in range(n_rows - 1, -1, -1):
        pivot_col = find_leading_pivot_column(matrix[r], var_cols)
        if pivot_col is None:
            continue
        for above in range(r):
            factor = matrix[above][pivot_col]
            if is_zero(factor):
                continue
            _eliminate(matrix, above, r, factor)
            steps.append(_step(
                "eliminate",
                _describe_elimination(above, r, factor),
                [above, r],
                matrix,
            ))

    logger.debug("Reduced %dx%d matrix in %d step(s)",
                 n_rows, var_cols + 1, len(steps) - 1)
    return steps


def compute_rref_history(initial: Sequence[Sequence[float]]) -> List[Matrix]:
    """Return the ordered matrix snapshots of the reduction of *initial*.

    ``history[0]`` is a copy of the input and ``history[-1]`` is the matrix
    in reduced row echelon form.
    """
    return [step["matrix"] for step in compute_rref_steps(initial)]


def is_rref(matrix: Sequence[Sequence[float]]) -> bool:
    """Check the reduced row echelon predicate within EPSILON.

    Every row with a non-zero coefficient has a leading entry ≈1 that is
    the only non-zero entry of its column, pivot columns increase from row
    to row and rows without coefficients sit at the bottom. Only variable
    columns are inspected; the constant column never holds a pivot.
    """
    last_pivot = -1
    seen_zero_row = False
    for r, row in enumerate(matrix):
        var_cols = len(row) - 1
        lead = next((c for c in range(var_cols) if not is_zero(row[c])), None)
        if lead is None:
            seen_zero_row = True
            continue
        if seen_zero_row or lead <= last_pivot or not is_one(row[lead]):
            return False
        for other, other_row in enumerate(matrix):
            if other != r and not is_zero(other_row[lead]):
                return False
        last_pivot = lead
    return True
