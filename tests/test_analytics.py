"""Tests for tracker/analytics.py — windowed aggregation."""

from datetime import datetime, timezone

import pytest

from tracker.analytics import (
    build_dashboard,
    category_stats,
    completion_trend,
    habit_stats,
    habit_summary,
    load_dashboard,
    project_progress_overview,
    project_stats,
    project_status_breakdown,
)
from tracker.models import Habit, HabitStat, Project, ProjectStats
from tracker.windows import InvalidDateKey, resolve_window


NOW = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)


def _habit(hid, name, category="General", completions=(), color="#0ea5e9"):
    return Habit(id=hid, name=name, category=category, color=color, completions=frozenset(completions))


# ── Habit stats ───────────────────────────────────────────────


def test_habit_stats_week_scenario():
    habit = _habit("h", "Run", completions={"2024-01-01", "2024-01-03"})
    stats = habit_stats([habit], resolve_window("week", NOW))
    assert stats == [HabitStat(name="Run", completions=2, color="#0ea5e9")]


def test_habit_stats_keeps_order_and_zero_counts():
    habits = [
        _habit("b", "B", completions={"2023-06-01"}),
        _habit("a", "A", completions={"2024-01-02"}),
        _habit("c", "C"),
    ]
    stats = habit_stats(habits, resolve_window("week", NOW))
    assert [s.name for s in stats] == ["B", "A", "C"]
    assert [s.completions for s in stats] == [0, 1, 0]


def test_habit_stats_day_counts_only_today():
    habit = _habit("h", "Run", completions={"2024-01-02", "2024-01-03"})
    assert habit_stats([habit], resolve_window("day", NOW))[0].completions == 1


def test_habit_stats_month_and_year():
    habit = _habit("h", "Run", completions={"2023-12-31", "2024-01-01", "2024-01-20", "2024-06-01"})
    assert habit_stats([habit], resolve_window("month", NOW))[0].completions == 2
    assert habit_stats([habit], resolve_window("year", NOW))[0].completions == 3


def test_habit_stats_malformed_key_aborts():
    habits = [_habit("ok", "Fine", completions={"2024-01-01"}), _habit("bad", "Broken", completions={"01/02/2024"})]
    with pytest.raises(InvalidDateKey):
        habit_stats(habits, resolve_window("week", NOW))


# ── Trend ─────────────────────────────────────────────────────


@pytest.mark.parametrize("granularity, span", [("day", 1), ("week", 7), ("month", 30), ("year", 365)])
def test_trend_length(granularity, span):
    assert len(completion_trend([], granularity, NOW)) == span
    busy = _habit("h", "Run", completions={"2024-01-03", "2023-01-01", "2020-05-05"})
    assert len(completion_trend([busy], granularity, NOW)) == span


def test_trend_day_single_point():
    habit = _habit("h", "Run", completions={"2024-01-03"})
    trend = completion_trend([habit], "day", NOW)
    assert [(p.label, p.completions) for p in trend] == [("Jan 03", 1)]


def test_trend_week_sums_across_habits():
    habits = [
        _habit("a", "A", category="Health", completions={"2024-01-03", "2024-01-01"}),
        _habit("b", "B", category="Learning", completions={"2024-01-03", "2023-12-28"}),
    ]
    trend = completion_trend(habits, "week", NOW)
    assert [p.label for p in trend] == ["Dec 28", "Dec 29", "Dec 30", "Dec 31", "Jan 01", "Jan 02", "Jan 03"]
    assert [p.completions for p in trend] == [1, 0, 0, 0, 1, 0, 2]


def test_trend_ignores_completions_outside_span():
    habit = _habit("h", "Run", completions={"2023-12-27", "2024-01-04"})
    assert sum(p.completions for p in completion_trend([habit], "week", NOW)) == 0


def test_trend_year_uses_month_labels():
    trend = completion_trend([], "year", NOW)
    assert trend[-1].label == "Jan"
    assert trend[-2].label == "Jan"
    assert trend[-4].label == "Dec"
    assert trend[0].label == "Jan"  # 2023-01-04


def test_trend_invalid_granularity():
    with pytest.raises(ValueError):
        completion_trend([], "hour", NOW)


# ── Categories ────────────────────────────────────────────────


def test_category_stats_sums_and_omits_zero():
    habits = [
        _habit("a", "A", category="Health", completions={"2024-01-01"}),
        _habit("b", "B", category="Learning", completions={"2023-11-01"}),
        _habit("c", "C", category="Health", completions={"2024-01-02", "2024-01-03"}),
        _habit("d", "D", category="Work", completions={"2024-01-02"}),
    ]
    cats = category_stats(habits, resolve_window("week", NOW))
    assert cats == {"Health": 3, "Work": 1}
    assert list(cats) == ["Health", "Work"]


def test_category_stats_empty():
    assert category_stats([], resolve_window("year", NOW)) == {}


def test_habit_summary():
    habits = [
        _habit("a", "A", completions={"2024-01-03", "2024-01-01"}),
        _habit("b", "B", completions={"2024-01-02"}),
        _habit("c", "C"),
    ]
    summary = habit_summary(habits, resolve_window("week", NOW), "2024-01-03")
    assert summary == {"totalHabits": 3, "completedToday": 1, "totalCompletions": 3}


# ── Projects ──────────────────────────────────────────────────


def test_project_stats_empty():
    assert project_stats([]) == ProjectStats(0, 0, 0, 0, 0)


def test_project_stats_scenario():
    projects = [Project(id=str(i), name=f"P{i}", progress=p) for i, p in enumerate([0, 50, 100])]
    assert project_stats(projects).to_dict() == {
        "total": 3,
        "notStarted": 1,
        "inProgress": 1,
        "completed": 1,
        "avgProgress": 50,
    }


@pytest.mark.parametrize("progress, expected", [([0, 1], 1), ([0, 0, 1], 0), ([25, 50], 38), ([33, 33, 34], 33)])
def test_project_stats_average_rounds_half_up(progress, expected):
    projects = [Project(id=str(i), name="P", progress=p) for i, p in enumerate(progress)]
    assert project_stats(projects).avg_progress == expected


def test_project_status_breakdown_drops_zero():
    stats = ProjectStats(total=2, not_started=0, in_progress=2, completed=0, avg_progress=40)
    assert project_status_breakdown(stats) == [{"name": "In Progress", "value": 2}]


def test_project_progress_overview():
    projects = [Project(id="1", name="Site", progress=20), Project(id="2", name="Book", progress=75)]
    assert project_progress_overview(projects) == [
        {"name": "Site", "progress": 20},
        {"name": "Book", "progress": 75},
    ]


# ── Dashboard ─────────────────────────────────────────────────


def test_build_dashboard():
    habits = [_habit("h", "Run", category="Health", completions={"2024-01-01", "2024-01-03"})]
    projects = [Project(id="p", name="Site", progress=100)]
    dash = build_dashboard(habits, projects, "week", NOW)
    assert dash["range"] == "week"
    assert dash["window"]["start"].startswith("2023-12-31")
    assert dash["habitStats"] == [{"name": "Run", "completions": 2, "color": "#0ea5e9"}]
    assert len(dash["trend"]) == 7
    assert dash["trend"][-1] == {"date": "Jan 03", "completions": 1}
    assert dash["categories"] == [{"name": "Health", "value": 2}]
    assert dash["summary"]["completedToday"] == 1
    assert dash["projectStats"]["completed"] == 1
    assert dash["projectStatus"] == [{"name": "Completed", "value": 1}]
    assert dash["projectProgress"] == [{"name": "Site", "progress": 100}]


def test_load_dashboard_uses_settings_default(workspace):
    dash = load_dashboard(workspace, now=NOW)
    assert dash["range"] == "week"
    assert [s["completions"] for s in dash["habitStats"]] == [2, 0, 0]
    assert dash["categories"] == [{"name": "Health", "value": 2}]
    assert dash["projectStats"] == {
        "total": 2,
        "notStarted": 1,
        "inProgress": 1,
        "completed": 0,
        "avgProgress": 25,
    }


def test_load_dashboard_year(workspace):
    dash = load_dashboard(workspace, "year", now=NOW)
    assert len(dash["trend"]) == 365
    assert sum(p["completions"] for p in dash["trend"]) == 3
    assert dash["summary"]["totalCompletions"] == 2
