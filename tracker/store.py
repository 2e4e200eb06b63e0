"""Persisted tracker state.

Two independently keyed entries, ``habits`` and ``projects``, each a JSON
array under ``<root>/data/<key>.json``. Every save rewrites the whole
collection atomically. A missing entry loads as an empty collection.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tracker.fileio import read_json, write_json_atomic
from tracker.models import Habit, Project
from tracker.registry import Registry
from tracker.workspace import data_dir

logger = logging.getLogger(__name__)

HABITS_KEY = "habits"
PROJECTS_KEY = "projects"


def entry_path(key: str, root: Path | None = None) -> Path:
    return data_dir(root) / f"{key}.json"


def read_entry(key: str, root: Path | None = None) -> list[dict[str, Any]]:
    data = read_json(entry_path(key, root))
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Stored {key!r} entry is not a list")
    return data


def write_entry(key: str, records: list[dict[str, Any]], root: Path | None = None) -> None:
    write_json_atomic(entry_path(key, root), records)
    logger.info("Saved %d %s", len(records), key)


def load_habits(root: Path | None = None) -> Registry[Habit]:
    return Registry(Habit.from_dict(d) for d in read_entry(HABITS_KEY, root))


def save_habits(habits: Registry[Habit], root: Path | None = None) -> None:
    write_entry(HABITS_KEY, [h.to_dict() for h in habits], root)


def load_projects(root: Path | None = None) -> Registry[Project]:
    return Registry(Project.from_dict(d) for d in read_entry(PROJECTS_KEY, root))


def save_projects(projects: Registry[Project], root: Path | None = None) -> None:
    write_entry(PROJECTS_KEY, [p.to_dict() for p in projects], root)
