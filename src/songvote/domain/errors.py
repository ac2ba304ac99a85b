"""Error taxonomy for session operations."""

from datetime import timedelta


class SongVoteError(Exception):
    """Base class for errors raised by the session engine."""


class InvalidArgument(SongVoteError):
    """Raised when creation input is malformed."""


class ValidationError(SongVoteError):
    """Raised when required song fields are missing."""

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = missing_fields
        super().__init__(f"Missing song information: {', '.join(missing_fields)}")


class NotFound(SongVoteError):
    """Raised when a session, song or vote target does not exist."""


class Conflict(SongVoteError):
    """Raised when a song with the same id is already queued."""


class CooldownActive(SongVoteError):
    """Raised when a time-gated action is attempted too soon.

    ``remaining`` is the exact time left before the action is allowed again.
    """

    def __init__(self, action: str, remaining: timedelta) -> None:
        self.action = action
        self.remaining = remaining
        super().__init__(f"{action} is cooling down for {remaining.total_seconds()}s")


def require_fields(fields: dict[str, str | None]) -> None:
    """Raise ValidationError naming every field that is absent or blank."""
    missing = [
        label
        for label, value in fields.items()
        if not (isinstance(value, str) and value.strip())
    ]
    if missing:
        raise ValidationError(missing)
