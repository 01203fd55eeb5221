"""Tests for the RREF step recorder."""

import pytest

from planesolver.constants import EPSILON
from planesolver.rref import compute_rref_history, compute_rref_steps, is_rref


UNIQUE = [[1, 1, 1, 3], [1, -1, 1, 1], [2, 1, -1, 2]]
LINE = [[1, 1, 1, 3], [1, -1, 1, 1], [2, 0, 2, 4]]
PLANE = [[1, 1, 1, 2], [2, 2, 2, 4], [-1, -1, -1, -2]]
INCONSISTENT = [[1, 1, 1, 2], [1, 1, 1, 4], [1, -1, 0, 1]]
IDENTITY = [[1, 0, 0, 1], [0, 1, 0, 2], [0, 0, 1, 3]]

ALL_CASES = [UNIQUE, LINE, PLANE, INCONSISTENT, IDENTITY,
             [[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
             [[0, 2, 4, 6], [0, 0, 0, 5], [3, 0, 0, 3], [1, 1, 1, 1]],
             [[1e-9, 1, 0, 1], [0, 0, 2, 4]]]


def _close(a, b) -> bool:
    return all(abs(x - y) < EPSILON for ra, rb in zip(a, b) for x, y in zip(ra, rb))


# ── History shape ────────────────────────────────────────────────────────

class TestHistory:
    def test_already_reduced_is_single_snapshot(self):
        history = compute_rref_history(IDENTITY)
        assert len(history) == 1
        assert history[0] == IDENTITY

    @pytest.mark.parametrize("matrix", ALL_CASES)
    def test_head_equals_input_and_tail_is_rref(self, matrix):
        history = compute_rref_history(matrix)
        assert history[0] == [[float(v) for v in row] for row in matrix]
        assert is_rref(history[-1])

    @pytest.mark.parametrize("matrix", ALL_CASES)
    def test_final_matrix_is_a_fixed_point(self, matrix):
        final = compute_rref_history(matrix)[-1]
        again = compute_rref_history(final)
        assert len(again) == 1
        assert again[0] == final

    @pytest.mark.parametrize("matrix", ALL_CASES)
    def test_every_recorded_step_changes_the_matrix(self, matrix):
        history = compute_rref_history(matrix)
        for before, after in zip(history, history[1:]):
            assert before != after

    def test_snapshots_do_not_share_rows(self):
        history = compute_rref_history(UNIQUE)
        assert len(history) > 2
        ids = [id(row) for snapshot in history for row in snapshot]
        assert len(ids) == len(set(ids))

    def test_input_is_not_mutated_and_not_aliased(self):
        matrix = [row[:] for row in UNIQUE]
        history = compute_rref_history(matrix)
        assert matrix == UNIQUE
        matrix[0][0] = 99
        assert history[0][0][0] == 1

    @pytest.mark.parametrize("matrix", [[], [[]], [[], []]])
    def test_zero_size_matrix_returns_input_only(self, matrix):
        history = compute_rref_history(matrix)
        assert history == [matrix]

    def test_constant_column_only(self):
        assert compute_rref_history([[5.0], [0.0]]) == [[[5.0], [0.0]]]


# ── Values ───────────────────────────────────────────────────────────────

class TestReduction:
    def test_unique_system_reaches_identity(self):
        final = compute_rref_history(UNIQUE)[-1]
        assert _close(final, [[1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1]])

    def test_dependent_row_becomes_zero(self):
        final = compute_rref_history(LINE)[-1]
        assert final[2] == [0.0, 0.0, 0.0, 0.0]

    def test_plane_case_has_two_zero_rows(self):
        final = compute_rref_history(PLANE)[-1]
        assert _close(final, [[1, 1, 1, 2], [0, 0, 0, 0], [0, 0, 0, 0]])

    def test_inconsistent_row_keeps_constant(self):
        final = compute_rref_history(INCONSISTENT)[-1]
        assert _close(final, [[1, 0, 0.5, 1.5], [0, 1, 0.5, 0.5], [0, 0, 0, 2]])

    def test_near_zero_entries_are_snapped(self):
        final = compute_rref_history([[3, 1, 0, 1], [1, 1 / 3, 0, 1 / 3]])[-1]
        for row in final:
            for value in row:
                assert value == 0.0 or abs(value) >= EPSILON

    def test_zero_column_is_skipped(self):
        final = compute_rref_history([[0, 2, 0, 4], [0, 1, 1, 3]])[-1]
        assert _close(final, [[0, 1, 0, 2], [0, 0, 1, 1]])


# ── Step records ─────────────────────────────────────────────────────────

class TestSteps:
    def test_first_step_is_initial(self):
        steps = compute_rref_steps(UNIQUE)
        assert steps[0]["operation"] == "initial"
        assert steps[0]["rows"] == []

    def test_partial_pivoting_swaps_largest_entry_up(self):
        steps = compute_rref_steps(UNIQUE)
        assert steps[1]["operation"] == "swap"
        assert steps[1]["description"] == "R1 ↔ R3"
        assert steps[1]["matrix"][0] == [2.0, 1.0, -1.0, 2.0]

    def test_scale_then_eliminate(self):
        steps = compute_rref_steps([[2, 4, 0, 6], [1, 0, 1, 1], [0, 0, 1, 2]])
        assert [s["operation"] for s in steps[:3]] == ["initial", "scale", "eliminate"]
        assert steps[1]["description"] == "R1 → R1 / 2"
        assert steps[2]["description"] == "R2 → R2 − R1"
        assert steps[1]["matrix"][0] == [1.0, 2.0, 0.0, 3.0]

    def test_tie_keeps_earliest_row(self):
        steps = compute_rref_steps([[1, 2, 0, 1], [-1, 0, 1, 1], [0, 0, 1, 0]])
        assert "swap" not in [s["operation"] for s in steps[:2]]

    def test_history_matches_steps(self):
        steps = compute_rref_steps(LINE)
        assert compute_rref_history(LINE) == [s["matrix"] for s in steps]

    def test_elimination_description_with_negative_factor(self):
        steps = compute_rref_steps([[4, 0, 0, 4], [-2, 1, 0, 0], [0, 0, 1, 0]])
        assert steps[1]["operation"] == "scale"
        assert steps[2]["description"] == "R2 → R2 + 2·R1"
        assert steps[2]["matrix"][1] == [0.0, 1.0, 0.0, 2.0]


# ── RREF predicate ───────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "matrix,expected",
    [
        (IDENTITY, True),
        ([[1, 2, 0, 3], [0, 0, 1, 4], [0, 0, 0, 0]], True),
        ([[1, 0, 0, 1], [0, 0, 0, 7]], True),
        ([[2, 0, 0, 1], [0, 1, 0, 1]], False),
        ([[1, 1, 0, 1], [0, 1, 0, 1]], False),
        ([[0, 0, 0, 0], [1, 0, 0, 1]], False),
        ([[0, 1, 0, 1], [1, 0, 0, 1]], False),
    ],
)
def test_is_rref(matrix, expected) -> None:
    assert is_rref(matrix) is expected
