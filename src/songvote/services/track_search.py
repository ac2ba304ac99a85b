"""Track search used to populate songs before they are queued."""

import logging
from dataclasses import dataclass

from songvote.adapters.spotify_client import SpotifyClient
from songvote.domain.errors import InvalidArgument
from songvote.domain.tracks import TrackCandidate
from songvote.services.cache import Cache

_logger = logging.getLogger(__name__)

FALLBACK_TRACKS = (
    TrackCandidate(
        id="mock_track1",
        name="Blinding Lights",
        artist="The Weeknd",
        album="After Hours",
        album_image="https://i.scdn.co/image/ab67616d0000b273c06f0e8b33d2d5bb0f36c8de",
        song_link="https://open.spotify.com/track/0VjIjW4GlULA64jZtv6X1N",
        duration_ms=200040,
    ),
    TrackCandidate(
        id="mock_track2",
        name="Watermelon Sugar",
        artist="Harry Styles",
        album="Fine Line",
        album_image="https://i.scdn.co/image/ab67616d0000b273d9985092cd88399b68fe3f85",
        song_link="https://open.spotify.com/track/6UelLqGlWMcVH1E5c4H7lY",
        duration_ms=174000,
    ),
    TrackCandidate(
        id="mock_track3",
        name="Levitating",
        artist="Dua Lipa",
        album="Future Nostalgia",
        album_image="https://i.scdn.co/image/ab67616d0000b273c8b444df094279e70d0ed856",
        song_link="https://open.spotify.com/track/463CkQjx2Zk1yXoBuierM9",
        duration_ms=203064,
    ),
)


@dataclass
class TrackSearchService:
    """Searches Spotify, or a small built-in catalog when unconfigured."""

    client: SpotifyClient | None
    cache: Cache
    cache_ttl_seconds: int = 300
    limit: int = 10

    async def search(self, query: str | None) -> list[TrackCandidate]:
        """Return track candidates matching the query."""
        if not query or not query.strip():
            raise InvalidArgument("Missing search query")
        if self.client is None:
            _logger.warning("Spotify credentials not configured, using fallback data")
            return _search_fallback(query)

        cache_key = f"spotify:search:{query.lower()}:{self.limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self.client.search_tracks(query, limit=self.limit)
        try:
            tracks = _parse_tracks(payload)
        except (KeyError, TypeError, AttributeError) as exc:
            raise RuntimeError("Spotify returned an unexpected payload") from exc
        self.cache.set(cache_key, tracks, ttl_seconds=self.cache_ttl_seconds)
        _logger.info("Spotify search: query=%s results=%s", query, len(tracks))
        return tracks


def _search_fallback(query: str) -> list[TrackCandidate]:
    needle = query.lower()
    return [
        track
        for track in FALLBACK_TRACKS
        if needle in track.name.lower()
        or needle in track.artist.lower()
        or needle in (track.album or "").lower()
    ]


def _parse_tracks(payload: dict[str, object]) -> list[TrackCandidate]:
    tracks_payload = payload.get("tracks")
    items = []
    if isinstance(tracks_payload, dict):
        items = tracks_payload.get("items", [])
    return [_parse_track(item) for item in items]


def _parse_track(item: dict) -> TrackCandidate:
    track_id = item["id"]
    if not isinstance(track_id, str):
        raise TypeError(f"Track id must be a string, got {type(track_id).__name__}")
    album = item.get("album") or {}
    images = album.get("images") or []
    return TrackCandidate(
        id=track_id,
        name=str(item.get("name", "")),
        artist=", ".join(artist.get("name", "") for artist in item.get("artists", [])),
        album=album.get("name"),
        album_image=images[0].get("url") if images else None,
        song_link=(item.get("external_urls") or {}).get("spotify"),
        preview_url=item.get("preview_url"),
        duration_ms=item.get("duration_ms"),
    )
