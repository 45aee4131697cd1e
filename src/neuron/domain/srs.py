"""SM-2-family scheduler.

Pure state transitions over ``(interval, ease_factor, due_at)``:

- ``AGAIN``: interval resets to 1 day; ease drops by 0.2, floored at 1.3.
- ``GOOD``: interval grows (x1.6 below 6 days, x ease from 6 days on),
  rounded up to whole days and capped at MAX_INTERVAL; ease unchanged.
- ``EASY``: same growth as ``GOOD``; ease rises by 0.15.

After every rating the note is due ``interval`` days from *now*.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from neuron.domain.note import (
    DEFAULT_EASE,
    DEFAULT_INTERVAL,
    MIN_EASE,
    Note,
    ScheduleState,
    as_utc,
    utc_now,
)
from neuron.domain.types import Rating

__all__ = [
    "AGAIN_EASE_PENALTY",
    "DEFAULT_EASE",
    "DEFAULT_INTERVAL",
    "EASY_EASE_BONUS",
    "MAX_INTERVAL",
    "MIN_EASE",
    "YOUNG_INTERVAL_LIMIT",
    "YOUNG_MULTIPLIER",
    "apply_rating",
    "days_until",
    "grow_interval",
    "next_state",
]

YOUNG_INTERVAL_LIMIT = 6
MAX_INTERVAL = 36500.0
YOUNG_MULTIPLIER = 1.6
AGAIN_EASE_PENALTY = 0.2
EASY_EASE_BONUS = 0.15


def grow_interval(interval: float, ease_factor: float) -> float:
    """Interval after a successful recall."""
    if interval < 1:
        return 1.0
    if interval < YOUNG_INTERVAL_LIMIT:
        return float(math.ceil(interval * YOUNG_MULTIPLIER))
    return min(MAX_INTERVAL, float(math.ceil(interval * ease_factor)))


def next_state(state: ScheduleState, rating: Rating, now: datetime) -> ScheduleState:
    """Compute the scheduling state that follows *rating* at *now*."""
    rating = Rating(rating)
    if rating is Rating.AGAIN:
        interval = DEFAULT_INTERVAL
        ease = max(MIN_EASE, state.ease_factor - AGAIN_EASE_PENALTY)
    else:
        interval = grow_interval(state.interval, state.ease_factor)
        ease = state.ease_factor
        if rating is Rating.EASY:
            ease += EASY_EASE_BONUS

    return ScheduleState(
        interval=interval,
        ease_factor=ease,
        due_at=as_utc(now) + timedelta(days=interval),
    )


def apply_rating(note: Note, rating: Rating, now: datetime | None = None) -> Note:
    """Return a copy of *note* rescheduled for *rating*."""
    return note.with_schedule(next_state(note.schedule, rating, now or utc_now()))


def days_until(due_at: datetime, now: datetime | None = None) -> int:
    """Whole days from *now* until *due_at*, rounded up. Never negative."""
    remaining = as_utc(due_at) - as_utc(now or utc_now())
    return max(0, math.ceil(remaining / timedelta(days=1)))
