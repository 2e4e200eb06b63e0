"""Tests for tracker/projects.py — progress-driven status and end date."""

from datetime import datetime, timedelta, timezone

from tracker.models import COMPLETED, IN_PROGRESS, NOT_STARTED, Project, ProjectTask
from tracker.projects import create_project, delete_project, set_progress, update_project_progress
from tracker.registry import Registry


NOW = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(days=2)


def test_create_project():
    projects, project = create_project(Registry(), "Website", "Portfolio", NOW)
    assert project.progress == 0
    assert project.status == NOT_STARTED
    assert project.start_date == "2024-01-03T12:00:00+00:00"
    assert project.end_date is None
    assert project.tasks == ()
    assert projects.get(project.id) == project


def test_create_project_blank_name_is_noop():
    projects = Registry()
    result, project = create_project(projects, "  ", "desc", NOW)
    assert project is None
    assert result is projects


def test_progress_to_100_completes_and_stamps():
    project = Project(id="p", name="P", progress=40)
    done = set_progress(project, 100, NOW)
    assert done.status == COMPLETED
    assert done.end_date == NOW.isoformat(timespec="seconds")


def test_progress_back_down_keeps_end_date():
    done = set_progress(Project(id="p", name="P", progress=90), 100, NOW)
    reopened = set_progress(done, 50, LATER)
    assert reopened.status == IN_PROGRESS
    assert reopened.end_date == done.end_date


def test_repeated_100_restamps():
    done = set_progress(Project(id="p", name="P", progress=90), 100, NOW)
    again = set_progress(done, 100, LATER)
    assert again.status == COMPLETED
    assert again.end_date == LATER.isoformat(timespec="seconds")


def test_non_100_keeps_existing_stamp():
    project = Project(id="p", name="P", progress=100, end_date="2024-01-01T00:00:00+00:00")
    for value in (0, 40, 99, 150):
        assert set_progress(project, value, LATER).end_date == "2024-01-01T00:00:00+00:00"


def test_recompleting_restamps():
    done = set_progress(Project(id="p", name="P", progress=90), 100, NOW)
    reopened = set_progress(done, 60, LATER)
    redone = set_progress(reopened, 100, LATER)
    assert redone.end_date == LATER.isoformat(timespec="seconds")


def test_progress_to_zero_is_not_started():
    project = set_progress(Project(id="p", name="P", progress=30), 0, NOW)
    assert project.status == NOT_STARTED
    assert project.end_date is None


def test_out_of_range_progress_does_not_raise():
    high = set_progress(Project(id="p", name="P"), 150, NOW)
    assert high.progress == 150
    assert high.status == IN_PROGRESS
    low = set_progress(Project(id="p", name="P"), -10, NOW)
    assert low.status == IN_PROGRESS


def test_set_progress_keeps_tasks():
    tasks = (ProjectTask(id="t", name="Draft"),)
    project = set_progress(Project(id="p", name="P", tasks=tasks), 30, NOW)
    assert project.tasks == tasks


def test_update_project_progress():
    projects = Registry([Project(id="a", name="A"), Project(id="b", name="B")])
    updated = update_project_progress(projects, "b", 100, NOW)
    assert updated.get("b").status == COMPLETED
    assert updated.get("a").status == NOT_STARTED
    assert projects.get("b").progress == 0
    assert update_project_progress(projects, "nope", 10, NOW) is projects


def test_delete_project():
    projects = Registry([Project(id="a", name="A"), Project(id="b", name="B")])
    assert delete_project(projects, "b").ids() == ["a"]
