"""
Persistent storage for the user's saved search filters.

This module manages the file:

    data/saved_filters.json

Only filters that are actually set are written, so the file stays small
and readable. Loading never crashes: a missing or broken file simply
gives the default filters.
"""

from __future__ import annotations

import json
from pathlib import Path

from badgerbase.config import data_dir
from badgerbase.filters import FilterState


def _default_filters_path() -> Path:
    """
    Return the default path of saved_filters.json inside the package.
    """
    return data_dir() / "saved_filters.json"


def load_saved_filters(path: str | Path | None = None) -> FilterState:
    """
    Load saved filters from saved_filters.json.

    Returns default filters if the file does not exist or is invalid.
    Unknown keys are ignored.
    """
    filters_path = Path(path) if path is not None else _default_filters_path()

    # First run: nothing saved yet
    if not filters_path.exists():
        return FilterState()

    try:
        data = json.loads(filters_path.read_text(encoding="utf-8"))
        saved = data.get("filters", {})
        if not isinstance(saved, dict):
            return FilterState()
        return FilterState.from_mapping(saved)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return FilterState()


def save_saved_filters(filters: FilterState, path: str | Path | None = None) -> None:
    """
    Save the non-empty filters to saved_filters.json.

    Creates parent directories if needed.
    """
    filters_path = Path(path) if path is not None else _default_filters_path()
    filters_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {"filters": filters.to_dict()}

    filters_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
