"""Tests for plane poses and plane intersections."""

import numpy as np
import pytest

from planesolver.constants import LINE_SEGMENT_LENGTH, OFF_SCENE_POSITION
from planesolver.geometry import (
    X_AXIS,
    Z_AXIS,
    build_scene,
    equation_row_from_plane_pose,
    format_line_equation,
    format_plane_equation,
    intersect_plane_plane,
    intersect_three_planes,
    line_pose_from_point_direction,
    plane_pose_from_equation_row,
    quaternion_from_unit_vectors,
    rotate_vector,
)


def _on_plane(row, point) -> bool:
    return abs(np.dot(row[:3], point) - row[3]) < 1e-9


# ── Plane poses ──────────────────────────────────────────────────────────

class TestPlanePose:
    def test_position_is_foot_of_perpendicular(self):
        pose = plane_pose_from_equation_row([0, 2, 0, 4])
        assert np.allclose(pose["position"], [0, 2, 0])
        assert np.allclose(pose["normal"], [0, 1, 0])
        assert pose["is_degenerate"] is False
        assert pose["is_identity"] is False

    def test_orientation_turns_z_onto_normal(self):
        pose = plane_pose_from_equation_row([1, 2, 2, 3])
        turned = rotate_vector(pose["orientation"], Z_AXIS)
        assert np.allclose(turned, np.array([1, 2, 2]) / 3)
        assert np.isclose(np.linalg.norm(pose["orientation"]), 1.0)
        assert _on_plane([1, 2, 2, 3], pose["position"])

    def test_normal_opposite_to_z(self):
        pose = plane_pose_from_equation_row([0, 0, -1, 2])
        assert np.allclose(rotate_vector(pose["orientation"], Z_AXIS), [0, 0, -1])
        assert np.allclose(pose["position"], [0, 0, -2])

    def test_identity_row_is_parked_off_scene(self):
        pose = plane_pose_from_equation_row([0, 0, 0, 0])
        assert pose["is_degenerate"] is False
        assert pose["is_identity"] is True
        assert np.allclose(pose["position"], OFF_SCENE_POSITION)

    def test_contradiction_row_is_degenerate(self):
        pose = plane_pose_from_equation_row([0, 0, 0, 5])
        assert pose["is_degenerate"] is True
        assert pose["position"] is None
        assert pose["orientation"] is None

    @pytest.mark.parametrize("row", [[1, 2, 3], [1, 2, 3, 4, 5]])
    def test_row_length_is_checked(self, row):
        with pytest.raises(ValueError, match="exactly 4 entries"):
            plane_pose_from_equation_row(row)

    def test_pose_round_trip(self):
        pose = plane_pose_from_equation_row([2, -1, 2, 6])
        row = equation_row_from_plane_pose(pose["position"], pose["orientation"])
        assert np.allclose(row, [2 / 3, -1 / 3, 2 / 3, 2])

    def test_parked_identity_pose_maps_to_zero_row(self):
        pose = plane_pose_from_equation_row([0, 0, 0, 0])
        row = equation_row_from_plane_pose(pose["position"], pose["orientation"])
        assert row == [0.0, 0.0, 0.0, 0.0]


class TestRotations:
    def test_same_vector_is_identity(self):
        q = quaternion_from_unit_vectors(X_AXIS, X_AXIS)
        assert np.allclose(q, [0, 0, 0, 1])

    def test_opposite_vectors(self):
        q = quaternion_from_unit_vectors(X_AXIS, -X_AXIS)
        assert np.allclose(rotate_vector(q, X_AXIS), -X_AXIS)

    def test_line_pose_follows_direction(self):
        pose = line_pose_from_point_direction([0, 1, 0], [0, 0, 3])
        assert np.allclose(pose["direction"], [0, 0, 1])
        assert np.allclose(rotate_vector(pose["orientation"], X_AXIS), [0, 0, 1])
        assert np.allclose(pose["position"], [0, 1, 0])

    def test_line_pose_short_direction_falls_back_to_x(self):
        pose = line_pose_from_point_direction([0, 0, 0], [0.001, 0, 0.001])
        assert np.allclose(pose["direction"], X_AXIS)


# ── Intersections ────────────────────────────────────────────────────────

class TestIntersections:
    def test_two_planes_meet_in_a_line(self):
        p1, p2 = [1, 0, 0, 1], [0, 1, 0, 2]
        line = intersect_plane_plane(p1, p2)
        assert line is not None
        assert np.allclose(np.abs(line["direction"]), [0, 0, 1])
        assert _on_plane(p1, line["point"]) and _on_plane(p2, line["point"])
        length = np.linalg.norm(line["end"] - line["start"])
        assert np.isclose(length, LINE_SEGMENT_LENGTH)
        assert np.allclose((line["start"] + line["end"]) / 2, line["point"])

    def test_oblique_planes_point_lies_on_both(self):
        p1, p2 = [1, 1, 1, 3], [1, -1, 1, 1]
        line = intersect_plane_plane(p1, p2, segment_length=4.0)
        assert _on_plane(p1, line["point"]) and _on_plane(p2, line["point"])
        assert _on_plane(p1, line["end"]) and _on_plane(p2, line["start"])
        assert np.isclose(np.linalg.norm(line["end"] - line["start"]), 4.0)

    @pytest.mark.parametrize(
        "p1,p2",
        [
            ([1, 1, 1, 2], [2, 2, 2, 4]),     # coincident
            ([1, 1, 1, 2], [1, 1, 1, 4]),     # parallel
            ([0, 0, 0, 0], [1, 0, 0, 1]),     # zero normal
        ],
    )
    def test_parallel_planes_have_no_line(self, p1, p2):
        assert intersect_plane_plane(p1, p2) is None

    def test_three_planes_meet_in_a_point(self):
        rows = [[1, 1, 1, 3], [1, -1, 1, 1], [2, 1, -1, 2]]
        point = intersect_three_planes(*rows)
        assert np.allclose(point, [1, 1, 1])

    def test_pairwise_parallel_planes(self):
        rows = [[1, 1, 1, 1], [1, 1, 1, 2], [1, 1, 1, 3]]
        assert intersect_three_planes(*rows) is None
        assert intersect_plane_plane(rows[0], rows[1]) is None
        assert intersect_plane_plane(rows[1], rows[2]) is None
        assert intersect_plane_plane(rows[0], rows[2]) is None

    def test_three_planes_through_a_common_line(self):
        rows = [[1, 1, 1, 3], [1, -1, 1, 1], [2, 0, 2, 4]]
        assert intersect_three_planes(*rows) is None


# ── Text ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "row,expected",
    [
        ([1, 2, -1, 3], "x + 2.00y - z = 3.00"),
        ([-1, 0, 0.5, 0], "-x + 0.50z = 0.00"),
        ([0, 0.001, 1, -2], "z = -2.00"),
        ([0, 0, 0, 0], "0 = 0.00"),
    ],
)
def test_format_plane_equation(row, expected) -> None:
    assert format_plane_equation(row) == expected


def test_format_line_equation() -> None:
    assert format_line_equation([1, 2, 0], [0, 0, 1]) == "P = (1.0, 2.0, 0.0) + t(0.0, 0.0, 1.0)"


# ── Scene ────────────────────────────────────────────────────────────────

class TestScene:
    def test_unique_system_scene(self):
        scene = build_scene([[1, 1, 1, 3], [1, -1, 1, 1], [2, 1, -1, 2]])
        assert len(scene["planes"]) == 3
        assert len(scene["lines"]) == 3
        assert len(scene["points"]) == 1
        assert scene["points"][0]["rows"] == (0, 1, 2)
        assert np.allclose(scene["points"][0]["point"], [1, 1, 1])

    def test_degenerate_and_identity_rows_are_skipped(self):
        scene = build_scene([[1, 0, 0, 1], [0, 0, 0, 0], [0, 1, 0, 2], [0, 0, 0, 5]])
        assert [p["row"] for p in scene["planes"]] == [0, 1, 2, 3]
        assert scene["planes"][1]["is_identity"] is True
        assert scene["planes"][3]["is_degenerate"] is True
        assert [line["rows"] for line in scene["lines"]] == [(0, 2)]
        assert scene["points"] == []

    def test_scene_equations(self):
        scene = build_scene([[1, 0, 0, 1], [0, 1, 0, 2]])
        assert scene["planes"][0]["equation"] == "x = 1.00"
        assert scene["lines"][0]["equation"].startswith("P = (1.0, 2.0, 0.0)")
