"""
Plane geometry for equation rows ``a·x + b·y + c·z = d``.

Converts a row into a plane pose (position + orientation) and computes the
line shared by two planes and the point shared by three. Everything here is
a pure function of its inputs; the results are recomputed whenever the
displayed matrix changes.

Quaternions are numpy arrays in ``(x, y, z, w)`` order.
"""

from itertools import combinations
from typing import Optional, Sequence

import numpy as np

from planesolver.constants import (
    EPSILON,
    LINE_SEGMENT_LENGTH,
    MIN_DIRECTION_LENGTH_SQ,
    OFF_SCENE_POSITION,
    SQ_EPSILON,
)

X_AXIS = np.array([1.0, 0.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])
IDENTITY_QUATERNION = np.array([0.0, 0.0, 0.0, 1.0])


def _split_row(row: Sequence[float]):
    """Return ``(normal, d)`` for a 4-entry equation row."""
    if len(row) != 4:
        raise ValueError(
            f"An equation row needs exactly 4 entries (a, b, c, d), got {len(row)}."
        )
    normal = np.array([float(row[0]), float(row[1]), float(row[2])])
    return normal, float(row[3])


# ── Rotations ────────────────────────────────────────────────────────────

def quaternion_from_unit_vectors(v_from, v_to) -> np.ndarray:
    """Shortest-arc rotation taking unit vector *v_from* onto unit *v_to*."""
    v_from = np.asarray(v_from, dtype=float)
    v_to = np.asarray(v_to, dtype=float)
    r = float(np.dot(v_from, v_to)) + 1.0
    if r < EPSILON:
        # Opposite vectors: turn half way round any perpendicular axis
        if abs(v_from[0]) > abs(v_from[2]):
            q = np.array([-v_from[1], v_from[0], 0.0, 0.0])
        else:
            q = np.array([0.0, -v_from[2], v_from[1], 0.0])
    else:
        axis = np.cross(v_from, v_to)
        q = np.array([axis[0], axis[1], axis[2], r])
    return q / np.linalg.norm(q)


def rotate_vector(quaternion, vector) -> np.ndarray:
    """Apply the rotation *quaternion* ``(x, y, z, w)`` to *vector*."""
    q = np.asarray(quaternion, dtype=float)
    v = np.asarray(vector, dtype=float)
    u, w = q[:3], q[3]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


# ── Poses ────────────────────────────────────────────────────────────────

def plane_pose_from_equation_row(row: Sequence[float]) -> dict:
    """
    Pose of the plane ``a·x + b·y + c·z = d`` given as ``row = (a, b, c, d)``.

    Returned dict keys:
      position      : foot of the perpendicular from the origin, or None
      orientation   : quaternion turning +Z onto the unit normal, or None
      normal        : unit normal, or None
      is_degenerate : True for ``0 = d`` with d ≠ 0 (never satisfiable);
                      such rows must be skipped for drawing and intersections
      is_identity   : True for ``0 = 0``; parked off-scene
    """
    normal, d = _split_row(row)
    length_sq = float(np.dot(normal, normal))

    if length_sq < SQ_EPSILON:
        if abs(d) < EPSILON:
            return {
                "position": np.array(OFF_SCENE_POSITION, dtype=float),
                "orientation": IDENTITY_QUATERNION.copy(),
                "normal": None,
                "is_degenerate": False,
                "is_identity": True,
            }
        return {
            "position": None,
            "orientation": None,
            "normal": None,
            "is_degenerate": True,
            "is_identity": False,
        }

    unit = normal / np.sqrt(length_sq)
    return {
        "position": normal * (d / length_sq),
        "orientation": quaternion_from_unit_vectors(Z_AXIS, unit),
        "normal": unit,
        "is_degenerate": False,
        "is_identity": False,
    }


def line_pose_from_point_direction(point: Sequence[float],
                                   direction: Sequence[float]) -> dict:
    """Pose of the line ``P = point + t·direction``; +X follows the direction."""
    direction = np.asarray(direction, dtype=float)
    if float(np.dot(direction, direction)) < MIN_DIRECTION_LENGTH_SQ:
        direction = X_AXIS.copy()
    unit = direction / np.linalg.norm(direction)
    return {
        "position": np.asarray(point, dtype=float).copy(),
        "orientation": quaternion_from_unit_vectors(X_AXIS, unit),
        "direction": unit,
    }


def equation_row_from_plane_pose(position: Sequence[float], orientation) -> list:
    """Recover ``[a, b, c, d]`` (unit normal) from a plane's pose.

    The parked pose of a ``0 = 0`` row maps back to ``[0, 0, 0, 0]``.
    """
    if np.allclose(np.asarray(position, dtype=float), OFF_SCENE_POSITION):
        return [0.0, 0.0, 0.0, 0.0]
    normal = rotate_vector(orientation, Z_AXIS)
    normal = normal / np.linalg.norm(normal)
    d = float(np.dot(normal, np.asarray(position, dtype=float)))
    return [float(normal[0]), float(normal[1]), float(normal[2]), d]


# ── Intersections ────────────────────────────────────────────────────────

def intersect_plane_plane(row1: Sequence[float], row2: Sequence[float],
                          segment_length: float = LINE_SEGMENT_LENGTH) -> Optional[dict]:
    """
    Line shared by two planes, or None when they are parallel or coincident.

    Returns a dict with ``point`` (a point on the line), unit ``direction``
    and ``start``/``end`` of a segment of *segment_length* centred on
    ``point``.
    """
    n1, d1 = _split_row(row1)
    n2, d2 = _split_row(row2)
    u = np.cross(n1, n2)
    u_len_sq = float(np.dot(u, u))
    if u_len_sq < SQ_EPSILON:
        return None

    point = (d1 * np.cross(n2, u) + d2 * np.cross(u, n1)) / u_len_sq
    direction = u / np.sqrt(u_len_sq)
    half = 0.5 * segment_length * direction
    return {
        "point": point,
        "direction": direction,
        "start": point - half,
        "end": point + half,
    }


def intersect_three_planes(row1: Sequence[float], row2: Sequence[float],
                           row3: Sequence[float]) -> Optional[np.ndarray]:
    """Point shared by three planes, or None when their normals are dependent."""
    n1, d1 = _split_row(row1)
    n2, d2 = _split_row(row2)
    n3, d3 = _split_row(row3)
    n2xn3 = np.cross(n2, n3)
    det = float(np.dot(n1, n2xn3))
    if abs(det) < EPSILON:
        return None
    return (d1 * n2xn3 + d2 * np.cross(n3, n1) + d3 * np.cross(n1, n2)) / det


# ── Equation text ────────────────────────────────────────────────────────

def _format_coeff(value: float, axis: str, first: bool) -> str:
    if abs(value) < 0.01:
        return ""
    sign = "-" if value < 0 else "+"
    num = f"{abs(value):.2f}"
    if num == "1.00":
        num = ""
    if first:
        return f"{'-' if sign == '-' else ''}{num}{axis}"
    return f" {sign} {num}{axis}"


def format_plane_equation(row: Sequence[float]) -> str:
    """Render ``[a, b, c, d]`` as e.g. ``"x + 2.00y - z = 3.00"``."""
    normal, d = _split_row(row)
    terms = ""
    for value, axis in zip(normal, "xyz"):
        terms += _format_coeff(float(value), axis, first=not terms)
    if not terms:
        terms = "0"
    rhs = 0.0 if abs(d) < 0.01 else d
    return f"{terms} = {rhs:.2f}"


def format_line_equation(point: Sequence[float], direction: Sequence[float]) -> str:
    """Render a parametric line as ``"P = (px, py, pz) + t(dx, dy, dz)"``."""
    p = ", ".join(f"{v:.1f}" for v in point)
    t = ", ".join(f"{v:.1f}" for v in direction)
    return f"P = ({p}) + t({t})"


# ── Scene ────────────────────────────────────────────────────────────────

def build_scene(matrix: Sequence[Sequence[float]],
                segment_length: float = LINE_SEGMENT_LENGTH) -> dict:
    """
    Geometry for every row of a 3-variable matrix snapshot.

    ``planes`` has one entry per row (pose plus ``row`` index and
    ``equation`` text). ``lines`` holds the intersection of each pair of
    drawable planes and ``points`` the intersection of each triple; pairs
    and triples without a unique intersection are left out. Degenerate and
    identity rows are not drawable.
    """
    planes = []
    for index, row in enumerate(matrix):
        pose = plane_pose_from_equation_row(row)
        pose["row"] = index
        pose["equation"] = format_plane_equation(row)
        planes.append(pose)

    drawable = [p["row"] for p in planes
                if not p["is_degenerate"] and not p["is_identity"]]

    lines = []
    for i, j in combinations(drawable, 2):
        line = intersect_plane_plane(matrix[i], matrix[j], segment_length)
        if line is None:
            continue
        line["rows"] = (i, j)
        line["equation"] = format_line_equation(line["point"], line["direction"])
        lines.append(line)

    points = []
    for i, j, k in combinations(drawable, 3):
        point = intersect_three_planes(matrix[i], matrix[j], matrix[k])
        if point is None:
            continue
        points.append({"rows": (i, j, k), "point": point})

    return {"planes": planes, "lines": lines, "points": points}
