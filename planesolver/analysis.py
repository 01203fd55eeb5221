"""Classification of a reduced linear system.

Given a matrix that is already in reduced row echelon form, decide whether
the system is consistent and what its solution set looks like: a single
point, a line, a plane, or nothing at all.
"""

from typing import List, Optional, Sequence, Tuple

from planesolver.constants import EPSILON
from planesolver.formatting import fmt_num
from planesolver.pivots import find_leading_pivot_column, first_nonzero_column

CONSISTENT = "consistent"
INCONSISTENT = "inconsistent"

NONE = "none"
UNIQUE = "unique"
INFINITE_LINE = "infinite_line"
INFINITE_PLANE = "infinite_plane"

_VAR_NAMES = ("x", "y", "z")


def _result(consistency: str, solution_type: str, summary: str,
            solution_point: Optional[Tuple[float, float, float]] = None,
            rank: int = 0, num_vars: int = 0) -> dict:
    free_vars = num_vars - rank if consistency == CONSISTENT else 0
    return {
        "consistency": consistency,
        "solution_type": solution_type,
        "summary": summary,
        "solution_point": solution_point,
        "rank": rank,
        "free_vars": free_vars,
        "num_vars": num_vars,
    }


def analyze(rref: Sequence[Sequence[float]]) -> dict:
    """
    Classify the linear system held in *rref*.

    The caller is responsible for passing a matrix that is already reduced
    (for instance the last snapshot of ``compute_rref_history``).

    Returned dict keys:
      consistency    : "consistent" | "inconsistent"
      solution_type  : "none" | "unique" | "infinite_line" | "infinite_plane"
      summary        : human-readable one-line description
      solution_point : (x, y, z) for a unique solution, otherwise None
      rank           : number of pivot rows found
      free_vars      : num_vars - rank when consistent, otherwise 0
      num_vars       : number of variable columns
    """
    n_rows = len(rref)
    n_cols = len(rref[0]) if n_rows else 0
    if n_rows == 0 or n_cols < 2:
        return _result(
            INCONSISTENT, NONE,
            f"Cannot analyze a {n_rows}x{n_cols} matrix: at least one "
            f"equation with one unknown and a constant is needed.",
        )

    num_vars = n_cols - 1
    rank = 0
    for r, row in enumerate(rref):
        lead = first_nonzero_column(row)
        if lead is None:
            continue
        if lead < num_vars:
            rank += 1
            continue
        # Only the constant is left: 0 = k
        return _result(
            INCONSISTENT, NONE,
            f"No solution: row {r + 1} reduces to 0 = {row[lead]:.2f}, "
            f"which is impossible.",
            rank=rank, num_vars=num_vars,
        )

    if rank == num_vars:
        point = _unique_point(rref, rank, num_vars)
        values = ", ".join(
            f"{_VAR_NAMES[i]} = {point[i]:.2f}" for i in range(min(num_vars, 3))
        )
        return _result(
            CONSISTENT, UNIQUE, f"Unique solution: {values}",
            solution_point=point, rank=rank, num_vars=num_vars,
        )

    free_vars = num_vars - rank
    if free_vars == 1:
        return _result(
            CONSISTENT, INFINITE_LINE,
            "Infinitely many solutions: the solutions form a line "
            "(1 free variable).",
            rank=rank, num_vars=num_vars,
        )
    if rank == 0:
        summary = (
            f"Infinitely many solutions: every equation reduces to 0 = 0, so "
            f"every point satisfies the system ({free_vars} free variables)."
        )
    else:
        summary = (
            f"Infinitely many solutions: the solutions form a plane "
            f"({free_vars} free variables)."
        )
    return _result(CONSISTENT, INFINITE_PLANE, summary,
                   rank=rank, num_vars=num_vars)


def _unique_point(rref, rank: int, num_vars: int) -> Tuple[float, float, float]:
    """Read x/y/z off the constant column of the first *rank* pivot rows."""
    values = [0.0, 0.0, 0.0]
    for row in rref[:rank]:
        col = find_leading_pivot_column(row, min(num_vars, 3))
        if col is not None:
            values[col] = float(row[num_vars])
    return values[0], values[1], values[2]


# ── Substitution checks ─────────────────────────────────────────────────

def residuals(matrix: Sequence[Sequence[float]], point: Sequence[float]) -> List[float]:
    """Return ``a·p − d`` for every equation row of *matrix*."""
    out = []
    for row in matrix:
        coeffs = row[:-1]
        lhs = sum(c * p for c, p in zip(coeffs, point))
        out.append(lhs - row[-1])
    return out


def satisfies(matrix: Sequence[Sequence[float]], point: Sequence[float],
              tolerance: float = EPSILON) -> bool:
    """True when *point* solves every equation of *matrix* within *tolerance*."""
    return all(abs(res) < tolerance for res in residuals(matrix, point))


def describe(result: dict) -> str:
    """Multi-line explanation of an analysis result for console output."""
    lines = [result["summary"]]
    if result["consistency"] == CONSISTENT:
        lines.append(
            f"rank = {result['rank']}, unknowns = {result['num_vars']}, "
            f"free variables = {result['free_vars']}"
        )
    if result["solution_point"] is not None:
        x, y, z = result["solution_point"]
        lines.append(f"point: ({fmt_num(x)}, {fmt_num(y)}, {fmt_num(z)})")
    return "\n".join(lines)
