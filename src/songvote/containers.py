"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from songvote.adapters.spotify_client import HttpxSpotifyClient
from songvote.config import Settings
from songvote.services.cache import InMemoryCache
from songvote.services.clock import Clock, SystemClock
from songvote.services.sessions import SessionStore
from songvote.services.songs import SongQueueService
from songvote.services.track_search import TrackSearchService
from songvote.services.voting import VotingService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    session_store: SessionStore
    song_queue_service: SongQueueService
    voting_service: VotingService
    track_search_service: TrackSearchService
    close_resources: Callable[[], Awaitable[None]]

    @property
    def vote_cooldown(self) -> timedelta:
        return self.voting_service.cooldown

    @property
    def removal_cooldown(self) -> timedelta:
        return self.song_queue_service.removal_cooldown


def build_container(
    settings: Settings | None = None, clock: Clock | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_clock = clock or SystemClock()
    session_store = SessionStore(clock=resolved_clock)
    song_queue_service = SongQueueService(
        store=session_store,
        clock=resolved_clock,
        removal_cooldown=timedelta(
            seconds=resolved_settings.song_removal_cooldown_seconds
        ),
    )
    voting_service = VotingService(
        store=session_store,
        clock=resolved_clock,
        cooldown=timedelta(seconds=resolved_settings.vote_cooldown_seconds),
    )
    spotify_client = None
    if resolved_settings.spotify_configured:
        spotify_client = HttpxSpotifyClient.create(
            client_id=resolved_settings.spotify_client_id,
            client_secret=resolved_settings.spotify_client_secret,
            accounts_url=resolved_settings.spotify_accounts_url,
            api_url=resolved_settings.spotify_api_url,
            clock=resolved_clock,
        )
    track_search_service = TrackSearchService(
        client=spotify_client,
        cache=InMemoryCache(clock=resolved_clock),
        cache_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        if spotify_client is not None:
            await spotify_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=resolved_clock,
        session_store=session_store,
        song_queue_service=song_queue_service,
        voting_service=voting_service,
        track_search_service=track_search_service,
        close_resources=close_resources,
    )
