"""Shared test fixtures for the tracker tests."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml


# Wednesday. With a Sunday week start the week runs 2023-12-31 .. 2024-01-06.
NOW = datetime(2024, 1, 3, 12, 0, tzinfo=ZoneInfo("UTC"))


HABITS = [
    {
        "id": "h1",
        "name": "Exercise",
        "category": "Health",
        "color": "#0ea5e9",
        "completions": ["2024-01-01", "2024-01-03"],
    },
    {
        "id": "h2",
        "name": "Read",
        "category": "Learning",
        "color": "#8b5cf6",
        "completions": ["2023-12-20"],
    },
    {
        "id": "h3",
        "name": "Meditate",
        "category": "Health",
        "color": "#ec4899",
        "completions": [],
    },
]

PROJECTS = [
    {
        "id": "p1",
        "name": "Website",
        "description": "Portfolio site",
        "status": "in-progress",
        "progress": 50,
        "startDate": "2023-12-01T09:00:00+00:00",
        "tasks": [
            {"id": "t1", "name": "Design", "completed": True, "completedDate": "2023-12-05"},
        ],
    },
    {
        "id": "p2",
        "name": "Book",
        "description": "",
        "status": "not-started",
        "progress": 0,
        "startDate": "2023-12-10T09:00:00+00:00",
        "tasks": [],
    },
]


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary workspace with settings and seeded data."""
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)

    settings = {"timezone": "UTC", "week_start": "sun", "default_range": "week"}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )
    (root / "data" / "habits.json").write_text(json.dumps(HABITS, indent=2), encoding="utf-8")
    (root / "data" / "projects.json").write_text(json.dumps(PROJECTS, indent=2), encoding="utf-8")

    monkeypatch.setenv("TRACKER_ROOT", str(root))
    return root


@pytest.fixture
def now() -> datetime:
    return NOW
