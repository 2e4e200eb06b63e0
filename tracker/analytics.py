"""Temporal aggregation engine.

Pure functions that turn habit completion logs and project progress
values into windowed statistics. Nothing here reads the clock: callers
pass ``now`` (or an already resolved interval) explicitly.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable

from tracker.models import (
    COMPLETED,
    IN_PROGRESS,
    NOT_STARTED,
    STATUS_LABELS,
    DateInterval,
    Habit,
    HabitStat,
    Project,
    ProjectStats,
    TrendPoint,
)
from tracker.store import load_habits, load_projects
from tracker.windows import in_interval, resolve_window
from tracker.workspace import load_settings, now_local


LOOKBACK_DAYS = {"day": 1, "week": 7, "month": 30, "year": 365}


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def completions_in_window(habit: Habit, interval: DateInterval) -> int:
    return sum(1 for key in habit.completions if in_interval(key, interval))


# ── Habits ────────────────────────────────────────────────────


def habit_stats(habits: Iterable[Habit], interval: DateInterval) -> list[HabitStat]:
    """Per-habit completion counts within *interval*, in input order.

    Habits with no completions in the window are kept with a zero count.
    """
    return [
        HabitStat(name=h.name, completions=completions_in_window(h, interval), color=h.color)
        for h in habits
    ]


def completion_trend(habits: Iterable[Habit], granularity: str, now: datetime) -> list[TrendPoint]:
    """Dense daily series of completion totals ending today.

    The series covers the last 1/7/30/365 days for day/week/month/year,
    one point per day even when nothing was completed. Year labels only
    carry the month, so they repeat across a month's days.
    """
    if granularity not in LOOKBACK_DAYS:
        raise ValueError(f"Invalid granularity: {granularity!r}")
    span = LOOKBACK_DAYS[granularity]
    label_format = "%b" if granularity == "year" else "%b %d"

    per_day: Counter[str] = Counter()
    for habit in habits:
        per_day.update(habit.completions)

    today = now.date()
    points = []
    for offset in range(span - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(TrendPoint(label=day.strftime(label_format), completions=per_day[day.isoformat()]))
    return points


def category_stats(habits: Iterable[Habit], interval: DateInterval) -> dict[str, int]:
    """Completions within *interval* summed per category.

    Categories keep first-seen order; those totalling zero are dropped.
    """
    totals: dict[str, int] = {}
    for habit in habits:
        totals[habit.category] = totals.get(habit.category, 0) + completions_in_window(habit, interval)
    return {name: count for name, count in totals.items() if count > 0}


def habit_summary(habits: Iterable[Habit], interval: DateInterval, today: str) -> dict[str, int]:
    """Headline numbers: habit count, done today, completions in window."""
    habits = list(habits)
    return {
        "totalHabits": len(habits),
        "completedToday": sum(1 for h in habits if today in h.completions),
        "totalCompletions": sum(s.completions for s in habit_stats(habits, interval)),
    }


# ── Projects ──────────────────────────────────────────────────


def project_stats(projects: Iterable[Project]) -> ProjectStats:
    """Status counts and mean progress (0 when there are no projects)."""
    projects = list(projects)
    if not projects:
        return ProjectStats()
    statuses = Counter(p.status for p in projects)
    return ProjectStats(
        total=len(projects),
        not_started=statuses[NOT_STARTED],
        in_progress=statuses[IN_PROGRESS],
        completed=statuses[COMPLETED],
        avg_progress=_round_half_up(sum(p.progress for p in projects) / len(projects)),
    )


def project_status_breakdown(stats: ProjectStats) -> list[dict[str, Any]]:
    rows = [
        {"name": STATUS_LABELS[NOT_STARTED], "value": stats.not_started},
        {"name": STATUS_LABELS[IN_PROGRESS], "value": stats.in_progress},
        {"name": STATUS_LABELS[COMPLETED], "value": stats.completed},
    ]
    return [r for r in rows if r["value"] > 0]


def project_progress_overview(projects: Iterable[Project]) -> list[dict[str, Any]]:
    return [{"name": p.name, "progress": p.progress} for p in projects]


# ── Dashboard ─────────────────────────────────────────────────


def build_dashboard(
    habits: Iterable[Habit],
    projects: Iterable[Project],
    granularity: str,
    now: datetime,
    week_start: str = "sun",
) -> dict[str, Any]:
    """Assemble every derived view for one granularity and instant."""
    habits = list(habits)
    projects = list(projects)
    interval = resolve_window(granularity, now, week_start)
    stats = project_stats(projects)
    return {
        "range": granularity,
        "window": interval.to_dict(),
        "habitStats": [s.to_dict() for s in habit_stats(habits, interval)],
        "trend": [p.to_dict() for p in completion_trend(habits, granularity, now)],
        "categories": [
            {"name": name, "value": value}
            for name, value in category_stats(habits, interval).items()
        ],
        "summary": habit_summary(habits, interval, now.date().isoformat()),
        "projectStats": stats.to_dict(),
        "projectStatus": project_status_breakdown(stats),
        "projectProgress": project_progress_overview(projects),
    }


def load_dashboard(
    root: Path | None = None,
    granularity: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Load stored habits and projects and build the dashboard from them."""
    settings = load_settings(root)
    if granularity is None:
        granularity = settings.default_range
    if now is None:
        now = now_local(root)
    return build_dashboard(
        load_habits(root),
        load_projects(root),
        granularity,
        now,
        week_start=settings.week_start,
    )
