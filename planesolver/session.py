"""
Editing / computing / stepping workflow around the numeric core.

A ``MatrixSession`` owns the editable matrix. While *editing*, cells and
rows can be changed; ``compute()`` freezes the matrix, records the RREF
history and analyzes its last snapshot; the step index then moves through
the history until ``reset()`` returns to editing.
"""

import logging
from typing import List, Optional

from planesolver import storage
from planesolver.analysis import UNIQUE, analyze, satisfies
from planesolver.constants import MAX_ROWS, NUM_VARS
from planesolver.geometry import build_scene
from planesolver.pivots import Matrix, clone_matrix
from planesolver.rref import compute_rref_steps, is_rref

logger = logging.getLogger(__name__)

EDITING = "editing"
COMPUTED = "computed"

SAMPLE_MATRICES = {
    "unique": [[1.0, 1.0, 1.0, 3.0], [1.0, -1.0, 1.0, 1.0], [2.0, 1.0, -1.0, 2.0]],
    "infinite_line": [[1.0, 1.0, 1.0, 3.0], [1.0, -1.0, 1.0, 1.0], [2.0, 0.0, 2.0, 4.0]],
    "infinite_plane": [[1.0, 1.0, 1.0, 2.0], [2.0, 2.0, 2.0, 4.0], [-1.0, -1.0, -1.0, -2.0]],
    "inconsistent": [[1.0, 1.0, 1.0, 2.0], [1.0, 1.0, 1.0, 4.0], [1.0, -1.0, 0.0, 1.0]],
    "identity": [[1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 0.0, 2.0], [0.0, 0.0, 1.0, 3.0]],
}


def sample_matrix(name: str) -> Matrix:
    """Return a fresh copy of the sample called *name*."""
    if name not in SAMPLE_MATRICES:
        raise ValueError(
            f"Unknown sample '{name}'. Choose one of: {', '.join(SAMPLE_MATRICES)}."
        )
    return clone_matrix(SAMPLE_MATRICES[name])


class MatrixSession:
    """State holder for one editable linear system and its reduction."""

    def __init__(self, matrix: Optional[Matrix] = None,
                 segment_length: Optional[float] = None):
        settings = storage.get_settings()
        if matrix is None:
            matrix = sample_matrix(settings["default_sample"])
        if segment_length is None:
            segment_length = float(settings["segment_length"])
        self._validate_shape(matrix)
        self.matrix: Matrix = clone_matrix(matrix)
        self.segment_length = segment_length
        self.state = EDITING
        self.steps: Optional[List[dict]] = None
        self.analysis: Optional[dict] = None
        self.step_index = 0

    # ── Validation ───────────────────────────────────────────────────

    @staticmethod
    def _validate_shape(matrix) -> None:
        if not matrix:
            raise ValueError("The matrix needs at least one equation row.")
        if len(matrix) > MAX_ROWS:
            raise ValueError(f"At most {MAX_ROWS} equation rows are supported.")
        for row in matrix:
            if len(row) != NUM_VARS + 1:
                raise ValueError(
                    f"Every row needs {NUM_VARS + 1} entries (a, b, c, d), "
                    f"got {len(row)}."
                )

    def _require_editing(self) -> None:
        if self.state != EDITING:
            raise ValueError("The matrix is locked while a solution is shown. Reset to edit.")

    # ── Editing ──────────────────────────────────────────────────────

    def set_cell(self, row: int, col: int, value: float) -> None:
        self._require_editing()
        if not (0 <= row < len(self.matrix)) or not (0 <= col <= NUM_VARS):
            raise ValueError(f"Cell ({row}, {col}) is outside the matrix.")
        self.matrix[row][col] = float(value)

    def add_row(self) -> int:
        """Append an all-zero equation row and return its index."""
        self._require_editing()
        if len(self.matrix) >= MAX_ROWS:
            raise ValueError(f"At most {MAX_ROWS} equation rows are supported.")
        self.matrix.append([0.0] * (NUM_VARS + 1))
        return len(self.matrix) - 1

    def remove_row(self, index: int) -> None:
        self._require_editing()
        if len(self.matrix) == 1:
            raise ValueError("The last equation row cannot be removed.")
        if not 0 <= index < len(self.matrix):
            raise ValueError(f"Row {index} is outside the matrix.")
        del self.matrix[index]

    # ── Compute / step ───────────────────────────────────────────────

    def compute(self) -> dict:
        """Reduce the current matrix and return the analysis."""
        self._require_editing()
        self.steps = compute_rref_steps(self.matrix)
        final = self.steps[-1]["matrix"]
        if not is_rref(final):
            logger.warning("Final snapshot is not in reduced form: %s", final)
        self.analysis = analyze(final)

        point = self.analysis["solution_point"]
        if self.analysis["solution_type"] == UNIQUE and not satisfies(self.matrix, point):
            logger.warning("Solution %s does not satisfy the original equations", point)

        self.state = COMPUTED
        self.step_index = 0
        logger.info("Computed %d step(s): %s", len(self.steps) - 1,
                    self.analysis["summary"])
        return self.analysis

    @property
    def history(self) -> Optional[List[Matrix]]:
        if self.steps is None:
            return None
        return [step["matrix"] for step in self.steps]

    @property
    def step_count(self) -> int:
        return len(self.steps) if self.steps else 0

    def go_to_step(self, index: int) -> int:
        """Move to *index*, clamped to the recorded history."""
        if self.state != COMPUTED:
            raise ValueError("Compute the solution before stepping through it.")
        self.step_index = max(0, min(index, self.step_count - 1))
        return self.step_index

    def next_step(self) -> int:
        return self.go_to_step(self.step_index + 1)

    def previous_step(self) -> int:
        return self.go_to_step(self.step_index - 1)

    @property
    def current_step(self) -> Optional[dict]:
        if self.state != COMPUTED:
            return None
        return self.steps[self.step_index]

    @property
    def current_matrix(self) -> Matrix:
        """Snapshot at the step index, or the editable matrix while editing."""
        if self.state == COMPUTED:
            return self.steps[self.step_index]["matrix"]
        return self.matrix

    def scene(self) -> dict:
        return build_scene(self.current_matrix, self.segment_length)

    # ── Reset / persistence ──────────────────────────────────────────

    def reset(self, sample: Optional[str] = None) -> None:
        """Drop the history and analysis and return to editing.

        The previous matrix stays editable unless *sample* names one of
        ``SAMPLE_MATRICES``.
        """
        if sample is not None:
            self.matrix = sample_matrix(sample)
        self.steps = None
        self.analysis = None
        self.step_index = 0
        self.state = EDITING
        logger.info("Session reset to editing")

    def save(self, name: str) -> None:
        storage.save_matrix(name, self.matrix)

    def load(self, name: str) -> None:
        self._require_editing()
        matrix = storage.load_matrix(name)
        if matrix is None:
            raise ValueError(f"No saved matrix called '{name}'.")
        self._validate_shape(matrix)
        self.matrix = matrix
