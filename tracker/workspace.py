"""Workspace root, settings, clock and path helpers."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from tracker.fileio import read_yaml, write_yaml_atomic
from tracker.models import Settings


def workspace_root() -> Path:
    """Get the workspace root directory (contains settings.yaml and data/)."""
    return Path(
        os.environ.get("TRACKER_ROOT", str(Path.home() / "tracker"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def data_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data"


# ── Settings ──────────────────────────────────────────────────


def load_settings(root: Path | None = None) -> Settings:
    return Settings.from_dict(read_yaml(settings_path(root)))


def save_settings(settings: Settings, root: Path | None = None) -> None:
    write_yaml_atomic(settings_path(root), settings.to_dict())


# ── Clock ─────────────────────────────────────────────────────


def now_local(root: Path | None = None) -> datetime:
    """Current time on the user's calendar.

    Uses the zone named in settings.yaml, falling back to the system's
    local zone when none is configured.
    """
    settings = load_settings(root)
    if settings.timezone:
        return datetime.now(ZoneInfo(settings.timezone))
    return datetime.now().astimezone()


def today_str(root: Path | None = None) -> str:
    """Get today's date key (YYYY-MM-DD) on the user's calendar."""
    return now_local(root).date().isoformat()
