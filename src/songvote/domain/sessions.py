"""Domain models for collaborative song sessions."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Song:
    """A queued song and its running vote count."""

    id: str
    name: str
    artist: str | None
    album_image: str
    song_link: str | None
    added_by: str
    added_at: datetime
    votes: int = 0


@dataclass(frozen=True)
class VoteRecord:
    """The single standing vote of one user in a session."""

    song_id: str
    last_voted_at: datetime


@dataclass(frozen=True)
class RemovedSongMarker:
    """Records when a song left the queue to block immediate re-adds."""

    id: str
    removed_at: datetime


@dataclass
class Session:
    """Represents a shared queue that participants vote on.

    ``songs`` is keyed by song id and keeps insertion order.
    """

    id: str
    name: str
    created_at: datetime
    songs: dict[str, Song] = field(default_factory=dict)
    removed_songs: list[RemovedSongMarker] = field(default_factory=list)
    voters: dict[str, VoteRecord] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionSummary:
    """Lightweight listing entry for a session."""

    id: str
    name: str
    created_at: datetime
    songs_count: int


@dataclass(frozen=True)
class SessionView:
    """Read-only projection of a session for clients."""

    id: str
    name: str
    created_at: datetime
    songs: list[Song]
    user_votes: dict[str, VoteRecord]
    vote_cooldown_seconds: int
    song_removal_cooldown_seconds: int


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a vote action."""

    song_id: str
    song_votes: int
    next_eligible_at: datetime
    previous_song_id: str | None = None
