"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from songvote.adapters.spotify_client import SpotifyClient
from songvote.config import Settings
from songvote.containers import AppContainer, build_container
from songvote.services.clock import Clock
from songvote.services.sessions import SessionStore
from songvote.services.songs import SongQueueService
from songvote.services.voting import VotingService

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


@dataclass
class FakeClock(Clock):
    """Clock that only moves when told to."""

    current: datetime = START

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@dataclass
class FakeSpotifyClient(SpotifyClient):
    """Fake Spotify client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "tracks": {
                "items": [
                    {
                        "id": "track-1",
                        "name": "Hey Jude",
                        "artists": [{"name": "The Beatles"}],
                        "album": {
                            "name": "Hey Jude",
                            "images": [{"url": "https://img.test/hey-jude.jpg"}],
                        },
                        "external_urls": {
                            "spotify": "https://open.spotify.com/track/track-1"
                        },
                        "preview_url": None,
                        "duration_ms": 431000,
                    }
                ]
            }
        }
    )
    queries: list[str] = field(default_factory=list)

    async def search_tracks(self, query: str, limit: int = 10) -> dict[str, object]:
        self.queries.append(query)
        return self.payload


def add_test_song(
    service: SongQueueService, session_id: str, song_id: str, added_by: str = "u1"
):
    return service.add_song(
        session_id,
        song_id=song_id,
        name=f"Song {song_id}",
        album_image="http://x",
        added_by=added_by,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        spotify_client_id=None,
        spotify_client_secret=None,
        environment="test",
        _env_file=None,
    )


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(clock=clock)


@pytest.fixture
def song_queue_service(store: SessionStore, clock: FakeClock) -> SongQueueService:
    return SongQueueService(store=store, clock=clock)


@pytest.fixture
def voting_service(store: SessionStore, clock: FakeClock) -> VotingService:
    return VotingService(store=store, clock=clock)


@pytest.fixture
def container(settings: Settings, clock: FakeClock) -> AppContainer:
    return build_container(settings, clock=clock)
