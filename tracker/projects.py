"""Project creation, progress updates and deletion.

Progress is the only input to a project's lifecycle; the status
(not-started / in-progress / completed) is always derived from it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from tracker.models import COMPLETED, Project, derive_status
from tracker.registry import Registry, next_id

logger = logging.getLogger(__name__)


def create_project(
    projects: Registry[Project],
    name: str,
    description: str,
    now: datetime,
) -> tuple[Registry[Project], Project | None]:
    """Append a new project at 0% progress. Blank names are a no-op."""
    if not (name or "").strip():
        logger.debug("Ignoring project with blank name")
        return projects, None

    project = Project(
        id=next_id(projects, now),
        name=name,
        description=description or "",
        progress=0,
        start_date=now.isoformat(timespec="seconds"),
    )
    logger.debug("Created project %s (%s)", project.id, project.name)
    return projects.add(project), project


def set_progress(project: Project, progress: int, now: datetime) -> Project:
    """Return *project* with a new progress value.

    end_date is stamped with *now* on every call that sets progress to 100,
    including one on a project that is already completed. Any other value
    keeps the existing stamp.
    """
    end_date = project.end_date
    if derive_status(progress) == COMPLETED:
        end_date = now.isoformat(timespec="seconds")
    return replace(project, progress=progress, end_date=end_date)


def update_project_progress(
    projects: Registry[Project],
    project_id: str,
    progress: int,
    now: datetime,
) -> Registry[Project]:
    logger.debug("Setting project %s progress to %s", project_id, progress)
    return projects.update(project_id, lambda p: set_progress(p, progress, now))


def delete_project(projects: Registry[Project], project_id: str) -> Registry[Project]:
    return projects.remove(project_id)
