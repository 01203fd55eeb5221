"""
PlaneSolver — Local JSON storage for settings and saved matrices.

Data is persisted in ``<project>/data/planesolver.json``.
"""

import json
import logging
import os
from datetime import datetime
from typing import Optional

from planesolver.pivots import clone_matrix

logger = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "planesolver.json")

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "default_sample": "unique",    # key of session.SAMPLE_MATRICES
    "segment_length": 20.0,        # length of drawn intersection lines
    "log_level": "INFO",
    "show_intersections": True,
    "theme": "dark",               # "dark" or "light" figure palette
}


def _empty_db() -> dict:
    return {"settings": dict(DEFAULT_SETTINGS), "saved": {}}


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _load_db() -> dict:
    _ensure_dir()
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                db = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable data file %s: %s", _DATA_FILE, exc)
            return _empty_db()
        if isinstance(db, dict):
            db.setdefault("settings", dict(DEFAULT_SETTINGS))
            db.setdefault("saved", {})
            return db
    return _empty_db()


def _save_db(db: dict) -> None:
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(db, f, indent=2, ensure_ascii=False)


# ── Settings ─────────────────────────────────────────────────────────────

def get_settings() -> dict:
    """Return the stored settings merged over the defaults."""
    merged = dict(DEFAULT_SETTINGS)
    merged.update(_load_db().get("settings", {}))
    return merged


def save_settings(settings: dict) -> None:
    db = _load_db()
    db["settings"] = dict(settings)
    _save_db(db)


# ── Saved matrices ───────────────────────────────────────────────────────

def save_matrix(name: str, matrix) -> None:
    """Store *matrix* under *name*, replacing any previous entry."""
    name = name.strip()
    if not name:
        raise ValueError("A saved matrix needs a name.")
    db = _load_db()
    db["saved"][name] = {
        "matrix": clone_matrix(matrix),
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }
    _save_db(db)


def get_saved_matrices() -> dict:
    """Return ``{name: {"matrix", "timestamp"}}`` for every saved matrix."""
    return _load_db()["saved"]


def load_matrix(name: str) -> Optional[list]:
    entry = _load_db()["saved"].get(name)
    if entry is None:
        return None
    return clone_matrix(entry["matrix"])


def delete_matrix(name: str) -> bool:
    """Remove a saved matrix. Returns False when *name* was not stored."""
    db = _load_db()
    if name not in db["saved"]:
        return False
    del db["saved"][name]
    _save_db(db)
    return True


def clear_all_data() -> None:
    """Reset settings to defaults and forget every saved matrix."""
    _save_db(_empty_db())
