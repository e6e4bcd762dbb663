"""
MatCalc — Local JSON storage for settings and input history.

Data is persisted in ``<project>/data/matcalc.json``.
"""

import json
import os
import time
from datetime import datetime

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "matcalc.json")

# ── Default settings ─────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "precision": 4,            # decimals shown for non-integral numbers
    "show_banner": True,
    "save_history": True,
    "history_limit": 200,
    "log_level": "WARNING",
}


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _empty_db() -> dict:
    return {"settings": dict(DEFAULT_SETTINGS), "history": []}


def _load_db() -> dict:
    _ensure_dir()
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                db = json.load(f)
        except (json.JSONDecodeError, OSError):
            return _empty_db()
        if isinstance(db, dict):
            db.setdefault("settings", dict(DEFAULT_SETTINGS))
            db.setdefault("history", [])
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
    db["settings"] = settings
    _save_db(db)


# ── History ──────────────────────────────────────────────────────────────

def add_history(expression: str, answer: str) -> None:
    """Record an evaluated line (newest first, trimmed to ``history_limit``)."""
    db = _load_db()
    limit = get_settings().get("history_limit", DEFAULT_SETTINGS["history_limit"])
    record = {
        "expression": expression,
        "answer": answer,
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "epoch": time.time(),
    }
    db["history"].insert(0, record)
    db["history"] = db["history"][:limit]
    _save_db(db)


def get_history() -> list[dict]:
    """Return the history list (newest first)."""
    return _load_db().get("history", [])


def clear_history() -> None:
    db = _load_db()
    db["history"] = []
    _save_db(db)


def clear_all_data() -> None:
    """Reset settings to defaults and wipe the history."""
    _save_db(_empty_db())
