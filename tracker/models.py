"""Typed dataclasses for the tracker data model.

Entities are frozen: every change produces a new instance through
``dataclasses.replace``. JSON keys are camelCase, Python attributes are
snake_case. Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


COLORS = (
    "#0ea5e9",
    "#8b5cf6",
    "#ec4899",
    "#f59e0b",
    "#10b981",
    "#ef4444",
    "#6366f1",
    "#14b8a6",
)

DEFAULT_CATEGORY = "General"

GRANULARITIES = ("day", "week", "month", "year")

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

STATUS_LABELS = {
    NOT_STARTED: "Not Started",
    IN_PROGRESS: "In Progress",
    COMPLETED: "Completed",
}


def derive_status(progress: int) -> str:
    """Map a progress value to its lifecycle status.

    Only the exact endpoints 0 and 100 are special; every other value,
    including out-of-range ones, counts as in progress.
    """
    if progress == 0:
        return NOT_STARTED
    if progress == 100:
        return COMPLETED
    return IN_PROGRESS


# ── Habits ────────────────────────────────────────────────────


@dataclass(frozen=True)
class Habit:
    id: str
    name: str
    category: str = DEFAULT_CATEGORY
    color: str = COLORS[0]
    completions: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            category=str(d.get("category") or DEFAULT_CATEGORY),
            color=str(d.get("color") or COLORS[0]),
            completions=frozenset(str(c) for c in (d.get("completions") or [])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "color": self.color,
            "completions": sorted(self.completions),
        }


# ── Projects ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ProjectTask:
    id: str = ""
    name: str = ""
    completed: bool = False
    completed_date: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ProjectTask:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            completed=bool(d.get("completed", False)),
            completed_date=d.get("completedDate"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "name": self.name, "completed": self.completed}
        if self.completed_date:
            d["completedDate"] = self.completed_date
        return d


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    description: str = ""
    progress: int = 0
    start_date: str = ""
    end_date: str | None = None
    tasks: tuple[ProjectTask, ...] = ()

    @property
    def status(self) -> str:
        return derive_status(self.progress)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Project:
        # A stored "status" key from older files is ignored; status is derived.
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            description=str(d.get("description", "")),
            progress=int(d.get("progress") or 0),
            start_date=str(d.get("startDate", "")),
            end_date=d.get("endDate"),
            tasks=tuple(ProjectTask.from_dict(t) for t in (d.get("tasks") or [])),
        )

    def to_dict(self) -> dict[str, Any]:
        """Persisted form. Status is not stored."""
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "progress": self.progress,
            "startDate": self.start_date,
            "tasks": [t.to_dict() for t in self.tasks],
        }
        if self.end_date:
            d["endDate"] = self.end_date
        return d

    def to_view(self) -> dict[str, Any]:
        """Display form: the persisted fields plus the derived status."""
        d = self.to_dict()
        d["status"] = self.status
        return d


# ── Derived views ─────────────────────────────────────────────


@dataclass(frozen=True)
class DateInterval:
    """Inclusive ``[start, end]`` range of instants."""

    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(timespec="seconds"),
            "end": self.end.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class HabitStat:
    name: str
    completions: int
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "completions": self.completions, "color": self.color}


@dataclass(frozen=True)
class TrendPoint:
    label: str
    completions: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.label, "completions": self.completions}


@dataclass(frozen=True)
class ProjectStats:
    total: int = 0
    not_started: int = 0
    in_progress: int = 0
    completed: int = 0
    avg_progress: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "notStarted": self.not_started,
            "inProgress": self.in_progress,
            "completed": self.completed,
            "avgProgress": self.avg_progress,
        }


# ── Settings ──────────────────────────────────────────────────


WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass
class Settings:
    timezone: str | None = None
    week_start: str = "sun"
    default_range: str = "week"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        week_start = str(d.get("week_start", "sun")).strip().lower()[:3]
        if week_start not in WEEKDAYS:
            raise ValueError(f"Invalid week_start: {d.get('week_start')!r}")
        default_range = str(d.get("default_range", "week")).strip().lower()
        if default_range not in GRANULARITIES:
            raise ValueError(f"Invalid default_range: {d.get('default_range')!r}")
        return cls(
            timezone=d.get("timezone") or None,
            week_start=week_start,
            default_range=default_range,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.timezone:
            d["timezone"] = self.timezone
        d["week_start"] = self.week_start
        d["default_range"] = self.default_range
        return d
