"""Spotify Web API client."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

import httpx

from songvote.services.clock import Clock, SystemClock

# Tokens are refreshed this long before Spotify says they expire.
_TOKEN_EXPIRY_MARGIN_SECONDS = 600


class SpotifyClient(Protocol):
    """Interface for Spotify track search."""

    async def search_tracks(self, query: str, limit: int = 10) -> dict[str, object]:
        """Search tracks by query and return raw API data."""


@dataclass
class HttpxSpotifyClient(SpotifyClient):
    """HTTPX-backed Spotify client using the client-credentials flow."""

    client_id: str
    client_secret: str
    accounts_url: str
    api_url: str
    http_client: httpx.AsyncClient
    clock: Clock = field(default_factory=SystemClock)
    _access_token: str | None = None
    _token_expires_at: datetime | None = None

    @classmethod
    def create(
        cls,
        client_id: str,
        client_secret: str,
        accounts_url: str,
        api_url: str,
        clock: Clock | None = None,
    ) -> "HttpxSpotifyClient":
        """Create a Spotify client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            accounts_url=accounts_url,
            api_url=api_url,
            http_client=httpx.AsyncClient(),
            clock=clock or SystemClock(),
        )

    async def search_tracks(self, query: str, limit: int = 10) -> dict[str, object]:
        """Search tracks by query."""
        token = await self._fetch_access_token()
        response = await self.http_client.get(
            f"{self.api_url}/search",
            params={"q": query, "type": "track", "limit": limit},
            headers={"Authorization": f"Bearer {token}"},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def _fetch_access_token(self) -> str:
        now = self.clock.now()
        if (
            self._access_token
            and self._token_expires_at is not None
            and now < self._token_expires_at
        ):
            return self._access_token

        response = await self.http_client.post(
            f"{self.accounts_url}/api/token",
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        token = payload.get("access_token")
        if not token:
            raise RuntimeError("Spotify returned no access token")
        expires_in = int(payload.get("expires_in", 3600))
        self._access_token = token
        self._token_expires_at = now + timedelta(
            seconds=expires_in - _TOKEN_EXPIRY_MARGIN_SECONDS
        )
        return token

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
