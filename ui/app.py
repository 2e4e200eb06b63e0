from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from tracker import (
    GRANULARITIES,
    build_dashboard,
    create_habit,
    create_project,
    delete_habit,
    delete_project,
    is_done_on,
    load_dashboard,
    load_habits,
    load_projects,
    load_settings,
    now_local,
    project_stats,
    save_habits,
    save_projects,
    toggle_habit,
    update_project_progress,
    workspace_root,
)

logging.basicConfig(
    level=os.environ.get("TRACKER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _bar(value: int, top: int, color: str) -> str:
    width = 0 if top <= 0 else round(100 * value / top)
    return f'<div class="bar" style="width:{width}%;background:{_escape(color)}"></div>'


app = FastAPI(title="Habit & Project Tracker", version="0.1.0")

security = HTTPBasic(auto_error=False)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("TRACKER_USERNAME", "")
    expected_password = os.environ.get("TRACKER_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def _check_range(granularity: str | None) -> None:
    if granularity is not None and granularity not in GRANULARITIES:
        raise HTTPException(status_code=400, detail=f"Invalid range: {granularity}")


def _dashboard(granularity: str | None) -> dict[str, Any]:
    _check_range(granularity)
    root = workspace_root()
    return load_dashboard(root, granularity, now_local(root))


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(granularity: str | None = Query(None, alias="range"), username: str = Depends(get_current_user)) -> HTMLResponse:
    _check_range(granularity)
    root = workspace_root()
    settings = load_settings(root)
    now = now_local(root)
    today = now.date().isoformat()
    # One clock reading and one load, so the marks and the stats agree.
    habits = load_habits(root)
    dash = build_dashboard(
        habits,
        load_projects(root),
        granularity or settings.default_range,
        now,
        week_start=settings.week_start,
    )

    tabs = " ".join(
        f'<a class="pill{" active" if g == dash["range"] else ""}" href="/?range={g}">{g}</a>'
        for g in GRANULARITIES
    )

    habit_rows = []
    for habit, stat in zip(habits, dash["habitStats"]):
        mark = "&#10003;" if is_done_on(habit, today) else "&nbsp;"
        habit_rows.append(
            f"<tr><td class=\"mark\">{mark}</td><td>{_escape(habit.name)}</td>"
            f"<td class=\"muted\">{_escape(habit.category)}</td>"
            f"<td>{stat['completions']} times this {dash['range']}</td></tr>"
        )
    habits_html = "\n".join(habit_rows) or '<tr><td colspan="4" class="muted">No habits yet.</td></tr>'

    top = max([p["completions"] for p in dash["trend"]] + [1])
    trend_html = "\n".join(
        f'<div class="trend-row"><span>{_escape(p["date"])}</span>{_bar(p["completions"], top, "#0ea5e9")}'
        f'<span>{p["completions"]}</span></div>'
        for p in dash["trend"]
    )

    cat_html = "\n".join(
        f"<li>{_escape(c['name'])}: {c['value']}</li>" for c in dash["categories"]
    ) or '<li class="muted">(none)</li>'

    project_rows = "\n".join(
        f"<tr><td>{_escape(p['name'])}</td><td>{_bar(p['progress'], 100, '#0ea5e9')}</td><td>{p['progress']}%</td></tr>"
        for p in dash["projectProgress"]
    ) or '<tr><td colspan="3" class="muted">No projects yet.</td></tr>'

    summary = dash["summary"]
    pstats = dash["projectStats"]
    html = f"""<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Habit &amp; Project Tracker</title>
<style>
body {{ font-family: system-ui, sans-serif; max-width: 960px; margin: 2rem auto; color: #1f2937; }}
.pill {{ padding: .3rem .8rem; border-radius: 999px; background: #e5e7eb; text-decoration: none; color: inherit; }}
.pill.active {{ background: #4f46e5; color: white; }}
.muted {{ color: #6b7280; }}
.mark {{ width: 1.5rem; color: #10b981; }}
.bar {{ height: .6rem; border-radius: .3rem; min-width: 1px; }}
.trend-row {{ display: grid; grid-template-columns: 5rem 1fr 2rem; gap: .5rem; align-items: center; }}
table {{ width: 100%; border-collapse: collapse; }}
td {{ padding: .3rem; }}
</style>
</head>
<body>
<h1>Habit &amp; Project Tracker</h1>
<p>{tabs}</p>
<h2>Today's Habits</h2>
<table>{habits_html}</table>
<h2>Summary</h2>
<ul>
<li>Total habits: {summary['totalHabits']}</li>
<li>Completed today: {summary['completedToday']}</li>
<li>Total completions ({dash['range']}): {summary['totalCompletions']}</li>
</ul>
<h2>Completion Trend ({dash['range']})</h2>
{trend_html}
<h2>Category Distribution ({dash['range']})</h2>
<ul>{cat_html}</ul>
<h2>Projects</h2>
<p>Total {pstats['total']} &middot; In progress {pstats['inProgress']} &middot; Completed {pstats['completed']} &middot; Average {pstats['avgProgress']}%</p>
<table>{project_rows}</table>
</body>
</html>"""
    return HTMLResponse(html)


# ── Habits ────────────────────────────────────────────────────

@app.get("/api/habits")
def api_list_habits(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    today = now_local(root).date().isoformat()
    return {
        "habits": [
            {**h.to_dict(), "doneToday": is_done_on(h, today)}
            for h in load_habits(root)
        ],
    }


@app.post("/api/habits")
def api_create_habit(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Create a habit. A blank name is accepted and ignored."""
    root = workspace_root()
    habits, habit = create_habit(
        load_habits(root),
        str(payload.get("name", "")),
        str(payload.get("category", "")),
        now_local(root),
    )
    if habit is None:
        return {"ok": True, "created": False}
    save_habits(habits, root)
    return {"ok": True, "created": True, "habit": habit.to_dict()}


@app.post("/api/habits/{habit_id}/toggle")
def api_toggle_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Flip today's completion mark for a habit."""
    root = workspace_root()
    habits = load_habits(root)
    if habit_id not in habits:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    today = now_local(root).date().isoformat()
    habits = toggle_habit(habits, habit_id, today)
    save_habits(habits, root)
    habit = habits.get(habit_id)
    return {"ok": True, "habit": habit.to_dict(), "doneToday": is_done_on(habit, today)}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    habits = load_habits(root)
    if habit_id not in habits:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    save_habits(delete_habit(habits, habit_id), root)
    return {"ok": True, "habit_id": habit_id}


# ── Projects ──────────────────────────────────────────────────

@app.get("/api/projects")
def api_list_projects(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"projects": [p.to_view() for p in load_projects(workspace_root())]}


@app.post("/api/projects")
def api_create_project(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    projects, project = create_project(
        load_projects(root),
        str(payload.get("name", "")),
        str(payload.get("description", "")),
        now_local(root),
    )
    if project is None:
        return {"ok": True, "created": False}
    save_projects(projects, root)
    return {"ok": True, "created": True, "project": project.to_view()}


@app.put("/api/projects/{project_id}/progress")
def api_update_progress(project_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Set a project's progress; status and end date follow from it."""
    root = workspace_root()
    projects = load_projects(root)
    if project_id not in projects:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")
    try:
        progress = int(payload["progress"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="progress must be an integer")
    projects = update_project_progress(projects, project_id, progress, now_local(root))
    save_projects(projects, root)
    return {"ok": True, "project": projects.get(project_id).to_view()}


@app.delete("/api/projects/{project_id}")
def api_delete_project(project_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    projects = load_projects(root)
    if project_id not in projects:
        raise HTTPException(status_code=404, detail=f"Project not found: {project_id}")
    save_projects(delete_project(projects, project_id), root)
    return {"ok": True, "project_id": project_id}


# ── Statistics ────────────────────────────────────────────────

@app.get("/api/stats")
def api_stats(granularity: str | None = Query(None, alias="range"), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Every derived view for the requested range (default from settings)."""
    return _dashboard(granularity)


@app.get("/api/stats/projects")
def api_project_stats(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return project_stats(load_projects(workspace_root())).to_dict()


@app.get("/api/settings")
def api_settings(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return load_settings(workspace_root()).to_dict()
