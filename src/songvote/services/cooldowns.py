"""Cooldown policy for time-gated actions."""

import math
from datetime import datetime, timedelta

DEFAULT_VOTE_COOLDOWN = timedelta(seconds=60)
DEFAULT_SONG_REMOVAL_COOLDOWN = timedelta(minutes=5)


def remaining(
    last_action_at: datetime, cooldown: timedelta, now: datetime
) -> timedelta | None:
    """Return the time left before the action is allowed, or None if allowed."""
    elapsed = now - last_action_at
    if elapsed >= cooldown:
        return None
    return cooldown - elapsed


def ceil_seconds(duration: timedelta) -> int:
    """Round a duration up to whole seconds for display."""
    return math.ceil(duration.total_seconds())


def ceil_minutes(duration: timedelta) -> int:
    """Round a duration up to whole minutes for display."""
    return math.ceil(duration.total_seconds() / 60)
