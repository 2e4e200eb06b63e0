#!/usr/bin/env python3
"""Habit & project tracker TUI — terminal dashboard powered by Textual."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Sparkline,
    Static,
)

from tracker import (
    GRANULARITIES,
    Registry,
    build_dashboard,
    create_habit,
    create_project,
    delete_habit,
    delete_project,
    is_done_on,
    load_habits,
    load_projects,
    load_settings,
    now_local,
    save_habits,
    save_projects,
    save_settings,
    toggle_habit,
    update_project_progress,
    workspace_root,
)

logger = logging.getLogger(__name__)


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 3fr;
    padding: 0 1;
}

#right-pane {
    width: 2fr;
    padding: 0 1;
    border-left: tall $primary-background-darken-2;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

#habits-table, #projects-table {
    height: 1fr;
}

#stats-info {
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

#trend {
    height: 4;
    margin: 1 0;
}

#add-input {
    display: none;
}
"""

PROGRESS_STEP = 10


class TrackerApp(App):
    """Habits, projects and their statistics in one terminal view."""

    TITLE = "Habit & Project Tracker"
    CSS = CSS

    BINDINGS = [
        Binding("tab", "switch_tab", "Habits/Projects", priority=True),
        Binding("g", "cycle_range", "Range"),
        Binding("space", "toggle_habit", "Toggle today"),
        Binding("plus,equals_sign", "progress_up", "+10%"),
        Binding("minus", "progress_down", "-10%"),
        Binding("a", "add_entry", "Add"),
        Binding("x", "delete_entry", "Delete"),
        Binding("escape", "cancel_add", "Cancel"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._root = workspace_root()
        self._settings = load_settings(self._root)
        self._granularity = self._settings.default_range
        self._habits = load_habits(self._root)
        self._projects = load_projects(self._root)
        self.current_tab = "habits"
        # Kind of entry the add field is collecting, None when closed.
        self._adding: str | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Habits", id="list-title", classes="section-title"),
                DataTable(id="habits-table", cursor_type="row"),
                DataTable(id="projects-table", cursor_type="row"),
                Input(id="add-input"),
                id="left-pane",
            ),
            Vertical(
                Label("Statistics", classes="section-title"),
                Static(id="stats-info"),
                Label("Completion trend", id="trend-title", classes="section-title"),
                Sparkline([], id="trend", summary_function=max),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#habits-table", DataTable).add_columns("", "Habit", "Category", "Count")
        self.query_one("#projects-table", DataTable).add_columns("Project", "Status", "Progress")
        self.query_one("#projects-table", DataTable).display = False
        self._refresh_views()

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_views(self) -> None:
        now = now_local(self._root)
        today = now.date().isoformat()
        dash = build_dashboard(
            self._habits,
            self._projects,
            self._granularity,
            now,
            week_start=self._settings.week_start,
        )

        habits_table = self.query_one("#habits-table", DataTable)
        habits_table.clear()
        for habit, stat in zip(self._habits, dash["habitStats"]):
            habits_table.add_row(
                "✔" if is_done_on(habit, today) else " ",
                habit.name,
                habit.category,
                str(stat["completions"]),
                key=habit.id,
            )

        projects_table = self.query_one("#projects-table", DataTable)
        projects_table.clear()
        for project in self._projects:
            projects_table.add_row(
                project.name,
                project.status,
                f"{project.progress}%",
                key=project.id,
            )

        summary = dash["summary"]
        pstats = dash["projectStats"]
        lines = [
            f"Range: {self._granularity}",
            f"Habits: {summary['totalHabits']}  Done today: {summary['completedToday']}",
            f"Completions this {self._granularity}: {summary['totalCompletions']}",
        ]
        if dash["categories"]:
            lines.append("")
            lines += [f"  {c['name']}: {c['value']}" for c in dash["categories"]]
        lines += [
            "",
            f"Projects: {pstats['total']}  (not started {pstats['notStarted']}, "
            f"in progress {pstats['inProgress']}, completed {pstats['completed']})",
            f"Average progress: {pstats['avgProgress']}%",
        ]
        self.query_one("#stats-info", Static).update("\n".join(lines))

        trend = dash["trend"]
        self.query_one("#trend", Sparkline).data = [p["completions"] for p in trend]
        if trend:
            self.query_one("#trend-title", Label).update(
                f"Completion trend ({trend[0]['date']} – {trend[-1]['date']})"
            )
        self.sub_title = f"[{self._granularity.upper()}]"

    def _selected_key(self, table_id: str) -> str | None:
        table = self.query_one(table_id, DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value

    # ── Persistence ────────────────────────────────────────────

    def _save_habits(self, habits: Registry) -> None:
        try:
            save_habits(habits, self._root)
        except OSError as e:
            logger.exception("Saving habits failed")
            self.notify(f"Save failed: {e}", title="Error", severity="error")

    def _save_projects(self, projects: Registry) -> None:
        try:
            save_projects(projects, self._root)
        except OSError as e:
            logger.exception("Saving projects failed")
            self.notify(f"Save failed: {e}", title="Error", severity="error")

    def _set_habits(self, habits: Registry) -> None:
        if habits is self._habits:
            return
        self._habits = habits
        self._save_habits(habits)
        self._refresh_views()

    def _set_projects(self, projects: Registry) -> None:
        if projects is self._projects:
            return
        self._projects = projects
        self._save_projects(projects)
        self._refresh_views()

    # ── Actions ────────────────────────────────────────────────

    def action_switch_tab(self) -> None:
        if self._adding is not None:
            return
        tab = "projects" if self.current_tab == "habits" else "habits"
        self.current_tab = tab
        self.query_one("#habits-table", DataTable).display = tab == "habits"
        self.query_one("#projects-table", DataTable).display = tab == "projects"
        self.query_one("#list-title", Label).update(tab.capitalize())

    def action_cycle_range(self) -> None:
        idx = GRANULARITIES.index(self._granularity)
        self._granularity = GRANULARITIES[(idx + 1) % len(GRANULARITIES)]
        self._settings = replace(self._settings, default_range=self._granularity)
        save_settings(self._settings, self._root)
        self._refresh_views()

    def action_toggle_habit(self) -> None:
        if self.current_tab != "habits":
            return
        habit_id = self._selected_key("#habits-table")
        if habit_id is None:
            return
        today = now_local(self._root).date().isoformat()
        self._set_habits(toggle_habit(self._habits, habit_id, today))

    def _step_progress(self, step: int) -> None:
        if self.current_tab != "projects":
            return
        project_id = self._selected_key("#projects-table")
        project = self._projects.get(project_id) if project_id else None
        if project is None:
            return
        # Clamped to 0..100 here only.
        progress = min(100, max(0, project.progress + step))
        self._set_projects(
            update_project_progress(self._projects, project_id, progress, now_local(self._root))
        )

    def action_progress_up(self) -> None:
        self._step_progress(PROGRESS_STEP)

    def action_progress_down(self) -> None:
        self._step_progress(-PROGRESS_STEP)

    def action_delete_entry(self) -> None:
        if self.current_tab == "habits":
            habit_id = self._selected_key("#habits-table")
            if habit_id:
                self._set_habits(delete_habit(self._habits, habit_id))
        else:
            project_id = self._selected_key("#projects-table")
            if project_id:
                self._set_projects(delete_project(self._projects, project_id))

    def action_add_entry(self) -> None:
        field = self.query_one("#add-input", Input)
        self._adding = self.current_tab
        if self._adding == "habits":
            field.placeholder = "Habit name, category (Enter to add)"
        else:
            field.placeholder = "Project name, description (Enter to add)"
        field.value = ""
        field.display = True
        field.focus()

    def action_cancel_add(self) -> None:
        self._adding = None
        field = self.query_one("#add-input", Input)
        field.display = False
        self.set_focus(None)

    @on(Input.Submitted, "#add-input")
    def _on_add_submitted(self, event: Input.Submitted) -> None:
        name, _, extra = event.value.partition(",")
        now = now_local(self._root)
        if self._adding == "habits":
            habits, _habit = create_habit(self._habits, name.strip(), extra.strip(), now)
            self._set_habits(habits)
        else:
            projects, _project = create_project(self._projects, name.strip(), extra.strip(), now)
            self._set_projects(projects)
        self.action_cancel_add()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    logging.basicConfig(
        filename=os.environ.get("TRACKER_LOG_FILE") or None,
        level=os.environ.get("TRACKER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set TRACKER_ROOT or create the directory first.")
        sys.exit(1)

    app = TrackerApp()
    app.run()


if __name__ == "__main__":
    main()
