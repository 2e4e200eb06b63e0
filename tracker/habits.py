"""Habit creation, completion toggling and deletion."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from tracker.models import COLORS, DEFAULT_CATEGORY, Habit
from tracker.registry import Registry, next_id

logger = logging.getLogger(__name__)


def create_habit(
    habits: Registry[Habit],
    name: str,
    category: str,
    now: datetime,
) -> tuple[Registry[Habit], Habit | None]:
    """Append a new habit. Returns (habits, created).

    A blank name is a no-op: the registry comes back unchanged and
    created is None.
    """
    if not (name or "").strip():
        logger.debug("Ignoring habit with blank name")
        return habits, None

    habit = Habit(
        id=next_id(habits, now),
        name=name,
        category=category or DEFAULT_CATEGORY,
        color=COLORS[len(habits) % len(COLORS)],
    )
    logger.debug("Created habit %s (%s)", habit.id, habit.name)
    return habits.add(habit), habit


def is_done_on(habit: Habit, day_key: str) -> bool:
    return day_key in habit.completions


def toggle_completion(habit: Habit, day_key: str) -> Habit:
    """Flip *day_key* in the habit's completion set."""
    return replace(habit, completions=habit.completions ^ {day_key})


def toggle_habit(habits: Registry[Habit], habit_id: str, day_key: str) -> Registry[Habit]:
    logger.debug("Toggling habit %s for %s", habit_id, day_key)
    return habits.update(habit_id, lambda h: toggle_completion(h, day_key))


def delete_habit(habits: Registry[Habit], habit_id: str) -> Registry[Habit]:
    return habits.remove(habit_id)
