"""Equation text → augmented matrix.

Parses a system such as ``"x + y + z = 3, x - y + z = 1; 2x + y - z = 2"``
with SymPy and extracts the coefficients of x, y and z and the constant on
the right-hand side. The result is always a 3-variable matrix of floats.
"""

import re
from typing import List

from sympy import expand, symbols
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from planesolver.constants import MAX_ROWS
from planesolver.formatting import fmt_num

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

X, Y, Z = symbols("x y z")
_VARIABLES = (X, Y, Z)
_LOCAL = {"x": X, "y": Y, "z": Z}

# Names allowed besides the unknowns.
_RESERVED = {"sqrt", "pi"}


def _validate_characters(equation_str: str) -> None:
    """Reject equations that contain characters outside the allowed set.

    Allowed: letters, digits, whitespace, and the math symbols
    + - * / ^ = ( ) .
    """
    allowed = set("abcdefghijklmnopqrstuvwxyz"
                  "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                  "0123456789"
                  " \t+-*/^=().")
    bad = sorted(set(ch for ch in equation_str if ch not in allowed))
    if bad:
        raise ValueError(
            f"Invalid character(s): {' '.join(bad)}\n"
            f"Only x, y, z, numbers, and math symbols "
            f"(+ - * / ^ = ( ) .) are allowed."
        )


_SCI_NUMBER = re.compile(r"(?<![A-Za-z])\d+(\.\d*)?[eE][+-]?\d+")


def _validate_variables(equation_str: str) -> None:
    # 1e3 is a number, not the unknown e
    for tok in re.findall(r"[A-Za-z]+", _SCI_NUMBER.sub(" ", equation_str)):
        if tok in _RESERVED:
            continue
        unknown = sorted(set(ch for ch in tok if ch not in _LOCAL))
        if unknown:
            raise ValueError(
                f"Unknown variable(s) {', '.join(unknown)} in '{equation_str}'. "
                f"Only x, y and z can be used."
            )


def _expand_implicit_vars(s: str) -> str:
    """Write runs of unknowns with explicit multiplication (``xy`` → ``x*y``)."""
    def _repl(m):
        tok = m.group(0)
        if all(ch in _LOCAL for ch in tok):
            return "*".join(tok)
        return tok
    return re.sub(r"[A-Za-z]+", _repl, s)


def _parse_side(expr_str: str):
    """Parse one side of an equation into a SymPy expression."""
    s = _expand_implicit_vars(expr_str.strip().replace("^", "**"))
    try:
        return parse_expr(s, local_dict=dict(_LOCAL), transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expr_str}'. Error: {e}")


def split_equations(text: str) -> List[str]:
    """Split a system on commas, semicolons and newlines."""
    return [eq.strip() for eq in re.split(r"\s*[;,\n]\s*", text) if eq.strip()]


def parse_equation(equation_str: str) -> List[float]:
    """Return ``[a, b, c, d]`` for a single linear equation in x, y, z."""
    if "=" not in equation_str:
        raise ValueError(
            f"Each equation must contain '='. Problem: {equation_str}")
    parts = equation_str.split("=")
    if len(parts) != 2:
        raise ValueError(
            f"Each equation must have exactly one '='. Problem: {equation_str}")
    lhs_str, rhs_str = parts[0].strip(), parts[1].strip()
    if not lhs_str or not rhs_str:
        raise ValueError("Both sides of the equation must have expressions.")

    _validate_characters(equation_str)
    _validate_variables(equation_str)

    combined = expand(_parse_side(lhs_str) - _parse_side(rhs_str))
    poly = combined.as_poly(*_VARIABLES)
    if poly is None or poly.total_degree() > 1:
        raise ValueError(
            f"'{equation_str}' is not linear in x, y and z. "
            f"Only equations like 2x - y + 3z = 4 are supported."
        )

    try:
        coeffs = [float(combined.coeff(v)) for v in _VARIABLES]
        constant = -float(combined.subs({X: 0, Y: 0, Z: 0}))
    except TypeError as e:
        raise ValueError(f"Could not evaluate coefficients of '{equation_str}': {e}")
    return [c + 0.0 for c in coeffs] + [constant + 0.0]


def parse_system(text: str) -> List[List[float]]:
    """Parse up to ``MAX_ROWS`` comma/semicolon separated equations."""
    equations = split_equations(text)
    if not equations:
        raise ValueError("Enter at least one equation. Example: x + y + z = 3")
    if len(equations) > MAX_ROWS:
        raise ValueError(
            f"At most {MAX_ROWS} equations are supported, got {len(equations)}.")
    return [parse_equation(eq) for eq in equations]


def format_equation(row) -> str:
    """Inverse of ``parse_equation`` for display: ``[1, -2, 0, 3]`` → ``x - 2y = 3``."""
    parts = []
    for value, name in zip(row[:-1], "xyz"):
        if abs(value) < 1e-12:
            continue
        magnitude = abs(value)
        term = name if magnitude == 1 else f"{fmt_num(magnitude)}{name}"
        if not parts:
            parts.append(term if value > 0 else f"-{term}")
        else:
            parts.append(("+ " if value > 0 else "- ") + term)
    lhs = " ".join(parts) if parts else "0"
    return f"{lhs} = {fmt_num(row[-1])}"
