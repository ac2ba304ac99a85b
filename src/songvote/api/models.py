"""Pydantic request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from songvote.domain.sessions import (
    Session,
    SessionSummary,
    SessionView,
    Song,
    VoteRecord,
    VoteResult,
)
from songvote.domain.tracks import TrackCandidate


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys with clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateSessionRequest(CamelModel):
    """Payload for creating a session."""

    name: str | None = None


class AddSongRequest(CamelModel):
    """Payload for queueing a song."""

    song_id: str | None = None
    name: str | None = None
    artist: str | None = None
    album_image: str | None = None
    user_id: str | None = None
    song_link: str | None = None


class VoteRequest(CamelModel):
    """Payload for casting a vote."""

    song_id: str | None = None
    user_id: str | None = None


class SongResponse(CamelModel):
    """A queued song."""

    id: str
    name: str
    artist: str | None
    album_image: str
    votes: int
    added_by: str
    added_at: datetime
    song_link: str | None

    @classmethod
    def from_domain(cls, song: Song) -> "SongResponse":
        return cls(
            id=song.id,
            name=song.name,
            artist=song.artist,
            album_image=song.album_image,
            votes=song.votes,
            added_by=song.added_by,
            added_at=song.added_at,
            song_link=song.song_link,
        )


class VoteRecordResponse(CamelModel):
    """A user's standing vote."""

    song_id: str
    last_voted_at: datetime

    @classmethod
    def from_domain(cls, record: VoteRecord) -> "VoteRecordResponse":
        return cls(song_id=record.song_id, last_voted_at=record.last_voted_at)


class SessionResponse(CamelModel):
    """A freshly created session."""

    id: str
    name: str
    created_at: datetime
    songs: list[SongResponse]
    user_votes: dict[str, VoteRecordResponse]

    @classmethod
    def from_domain(cls, session: Session) -> "SessionResponse":
        return cls(
            id=session.id,
            name=session.name,
            created_at=session.created_at,
            songs=[SongResponse.from_domain(song) for song in session.songs.values()],
            user_votes={
                user_id: VoteRecordResponse.from_domain(record)
                for user_id, record in session.voters.items()
            },
        )


class SessionSummaryResponse(CamelModel):
    """Listing entry for a session."""

    id: str
    name: str
    created_at: datetime
    songs_count: int

    @classmethod
    def from_domain(cls, summary: SessionSummary) -> "SessionSummaryResponse":
        return cls(
            id=summary.id,
            name=summary.name,
            created_at=summary.created_at,
            songs_count=summary.songs_count,
        )


class SessionViewResponse(CamelModel):
    """Ranked view of a session polled by clients."""

    id: str
    name: str
    created_at: datetime
    songs: list[SongResponse]
    user_votes: dict[str, VoteRecordResponse]
    vote_cooldown_seconds: int
    song_removal_cooldown_seconds: int

    @classmethod
    def from_domain(cls, view: SessionView) -> "SessionViewResponse":
        return cls(
            id=view.id,
            name=view.name,
            created_at=view.created_at,
            songs=[SongResponse.from_domain(song) for song in view.songs],
            user_votes={
                user_id: VoteRecordResponse.from_domain(record)
                for user_id, record in view.user_votes.items()
            },
            vote_cooldown_seconds=view.vote_cooldown_seconds,
            song_removal_cooldown_seconds=view.song_removal_cooldown_seconds,
        )


class VoteResponse(CamelModel):
    """Result of a vote."""

    success: bool = True
    new_vote_count: int
    next_vote_time: datetime

    @classmethod
    def from_domain(cls, result: VoteResult) -> "VoteResponse":
        return cls(
            new_vote_count=result.song_votes,
            next_vote_time=result.next_eligible_at,
        )


class TrackResponse(CamelModel):
    """A search result that can be queued."""

    id: str
    name: str
    artist: str
    album: str | None
    album_image: str | None
    song_link: str | None
    preview_url: str | None
    duration_ms: int | None

    @classmethod
    def from_domain(cls, track: TrackCandidate) -> "TrackResponse":
        return cls(
            id=track.id,
            name=track.name,
            artist=track.artist,
            album=track.album,
            album_image=track.album_image,
            song_link=track.song_link,
            preview_url=track.preview_url,
            duration_ms=track.duration_ms,
        )


class TrackSearchResponse(BaseModel):
    """Search results."""

    tracks: list[TrackResponse]
