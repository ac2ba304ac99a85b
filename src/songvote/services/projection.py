"""Read-only projection of a session for clients."""

from dataclasses import replace
from datetime import timedelta

from songvote.domain.sessions import Session, SessionView
from songvote.services.cooldowns import (
    DEFAULT_SONG_REMOVAL_COOLDOWN,
    DEFAULT_VOTE_COOLDOWN,
    ceil_seconds,
)
from songvote.services.sessions import SessionStore


def project_session(
    session: Session,
    vote_cooldown: timedelta = DEFAULT_VOTE_COOLDOWN,
    removal_cooldown: timedelta = DEFAULT_SONG_REMOVAL_COOLDOWN,
) -> SessionView:
    """Build a view with songs ranked by votes.

    Ties keep the order in which the songs were queued; ``sorted`` is stable
    and ``session.songs`` preserves insertion order.
    """
    songs = sorted(
        (replace(song) for song in session.songs.values()),
        key=lambda song: song.votes,
        reverse=True,
    )
    return SessionView(
        id=session.id,
        name=session.name,
        created_at=session.created_at,
        songs=songs,
        user_votes=dict(session.voters),
        vote_cooldown_seconds=ceil_seconds(vote_cooldown),
        song_removal_cooldown_seconds=ceil_seconds(removal_cooldown),
    )


def view_session(
    store: SessionStore,
    session_id: str,
    vote_cooldown: timedelta = DEFAULT_VOTE_COOLDOWN,
    removal_cooldown: timedelta = DEFAULT_SONG_REMOVAL_COOLDOWN,
) -> SessionView:
    """Project a stored session under its lock."""
    with store.locked(session_id) as session:
        return project_session(session, vote_cooldown, removal_cooldown)
