"""PlaneSolver: step-by-step RREF of 3-variable linear systems and the
geometry of their planes."""

from planesolver.analysis import analyze
from planesolver.geometry import (
    build_scene,
    intersect_plane_plane,
    intersect_three_planes,
    plane_pose_from_equation_row,
)
from planesolver.rref import compute_rref_history, compute_rref_steps
from planesolver.session import MatrixSession

__all__ = [
    "analyze",
    "build_scene",
    "compute_rref_history",
    "compute_rref_steps",
    "intersect_plane_plane",
    "intersect_three_planes",
    "plane_pose_from_equation_row",
    "MatrixSession",
]
