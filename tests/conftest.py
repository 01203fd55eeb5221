import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `planesolver` and `backend` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib

matplotlib.use("Agg")

from planesolver import storage


@pytest.fixture(autouse=True)
def _isolated_storage(monkeypatch, tmp_path: Path) -> Path:
    """Keep every test's settings and saved matrices in a temporary file."""
    data_dir = tmp_path / "data"
    data_file = data_dir / "planesolver.json"
    monkeypatch.setattr(storage, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(storage, "_DATA_FILE", str(data_file))
    return data_file
