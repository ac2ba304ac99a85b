"""Domain models for track search results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackCandidate:
    """A track returned by the search provider, ready to be queued."""

    id: str
    name: str
    artist: str
    album: str | None
    album_image: str | None
    song_link: str | None
    preview_url: str | None = None
    duration_ms: int | None = None
