"""Habit & project tracker core library — data layer and aggregation engine.

Public API re-exports for convenient imports:
    from tracker import load_habits, toggle_habit, build_dashboard, ...
"""

# Workspace, settings & clock
from tracker.workspace import (
    workspace_root,
    settings_path,
    data_dir,
    load_settings,
    save_settings,
    now_local,
    today_str,
)

# File I/O
from tracker.fileio import (
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Collections
from tracker.registry import Registry, next_id

# Time windows
from tracker.windows import (
    InvalidDateKey,
    resolve_window,
    parse_date_key,
    in_interval,
)

# Habits
from tracker.habits import (
    create_habit,
    is_done_on,
    toggle_completion,
    toggle_habit,
    delete_habit,
)

# Projects
from tracker.projects import (
    create_project,
    set_progress,
    update_project_progress,
    delete_project,
)

# Storage
from tracker.store import (
    HABITS_KEY,
    PROJECTS_KEY,
    load_habits,
    save_habits,
    load_projects,
    save_projects,
)

# Aggregation
from tracker.analytics import (
    LOOKBACK_DAYS,
    habit_stats,
    completion_trend,
    category_stats,
    habit_summary,
    project_stats,
    project_status_breakdown,
    project_progress_overview,
    build_dashboard,
    load_dashboard,
)

# Models
from tracker.models import (
    COLORS,
    DEFAULT_CATEGORY,
    GRANULARITIES,
    NOT_STARTED,
    IN_PROGRESS,
    COMPLETED,
    derive_status,
    Habit,
    Project,
    ProjectTask,
    DateInterval,
    HabitStat,
    TrendPoint,
    ProjectStats,
    Settings,
)
