"""
Spotify catalog client (client-credentials flow) and its token cache.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_URL = "https://api.spotify.com/v1"


@dataclass
class TokenCache:
    """
    Access token plus its absolute expiry (epoch seconds).
    A token is reused until it is within `refresh_margin` seconds of expiring.
    """
    access_token: Optional[str] = None
    expires_at: float = 0.0
    refresh_margin: float = 300.0

    def is_fresh(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return bool(self.access_token) and now < self.expires_at - self.refresh_margin

    def store(self, access_token: str, expires_in: float, now: Optional[float] = None) -> None:
        now = time.time() if now is None else now
        self.access_token = access_token
        self.expires_at = now + float(expires_in)

    def invalidate(self) -> None:
        self.access_token = None
        self.expires_at = 0.0


class SpotifyClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        market: str = "KR",
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.market = market
        self.timeout = timeout
        self.transport = transport
        self.clock = clock

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def refresh_if_stale(self, cache: TokenCache) -> Optional[str]:
        """
        Return a usable token, exchanging credentials only when the cached one
        is missing or close to expiry. Returns None when no token can be had.
        """
        now = self.clock()
        if cache.is_fresh(now):
            return cache.access_token

        try:
            async with self._client() as client:
                resp = await client.post(
                    TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=(self.client_id, self.client_secret),
                )
                resp.raise_for_status()
                data = resp.json()
            cache.store(data["access_token"], data.get("expires_in", 3600), now=now)
            logger.debug("Obtained new Spotify access token")
            return cache.access_token

        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error getting Spotify token: {e}")
            cache.invalidate()
            return None

    async def search(
        self,
        query: str,
        search_type: str,
        token: str,
        limit: int = 5,
    ) -> List[Dict[str, Any]]:
        """Search the catalog; returns the result items (possibly empty)."""
        params = {
            "q": query,
            "type": search_type,
            "limit": str(limit),
            "market": self.market,
        }
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{API_URL}/search",
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
                resp.raise_for_status()
                data = resp.json()
            items = data[f"{search_type}s"]["items"]
            return [item for item in items if isinstance(item, dict)]

        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error searching Spotify for {search_type} '{query}': {e}")
            return []

    async def get_album(self, album_id: str, token: str) -> Optional[Dict[str, Any]]:
        """Full album object (label, copyrights, images) or None."""
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{API_URL}/albums/{album_id}",
                    params={"market": self.market},
                    headers={"Authorization": f"Bearer {token}"},
                )
                resp.raise_for_status()
                data = resp.json()
            if not isinstance(data, dict):
                raise TypeError("album details is not an object")
            return data

        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Error fetching Spotify album details for '{album_id}': {e}")
            return None
