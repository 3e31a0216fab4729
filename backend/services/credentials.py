"""Access-token cache: reuse the stored bearer token until it expires."""

import logging

from errors import AuthUnavailableError, StoreUnavailableError
from models import Credential
from services.spotify import SpotifyClient, SpotifyError
from services.store import CacheStore

logger = logging.getLogger(__name__)


class CredentialCache:
    def __init__(
        self,
        store: CacheStore,
        spotify: SpotifyClient,
        client_id: str,
        client_secret: str,
        ttl_seconds: int = 3600,
    ):
        self.store = store
        self.spotify = spotify
        self.client_id = client_id
        self.client_secret = client_secret
        self.ttl_seconds = ttl_seconds

    async def get_valid_credential(self, now: float, force: bool = False) -> Credential:
        """Return a usable token, fetching and persisting a new one if the cached one is stale.

        Raises AuthUnavailableError when a fresh token is needed and Spotify refuses.
        """
        if not force:
            cached = await self._read(now)
            if cached:
                return Credential(token=cached)

        try:
            token = await self.spotify.fetch_token(self.client_id, self.client_secret)
        except SpotifyError as e:
            # Stale record stays as-is
            logger.error("Could not refresh access token: %s", e)
            raise AuthUnavailableError() from e
        logger.info("Fetched access token %s", "*" * len(token))

        persisted = True
        try:
            await self.store.hset(
                self.store.credential_key(),
                {"access_token": token, "expire_at": now + self.ttl_seconds},
            )
        except StoreUnavailableError as e:
            logger.error("Unable to cache access token: %s", e)
            persisted = False
        return Credential(token=token, persisted=persisted)

    async def _read(self, now: float) -> str | None:
        try:
            record = await self.store.hgetall(self.store.credential_key())
        except StoreUnavailableError as e:
            logger.warning("Unable to read token cache, treating as miss: %s", e)
            return None
        if not record:
            logger.info("Token cache empty")
            return None

        try:
            expire_at = float(record["expire_at"])
            token = record["access_token"]
        except (KeyError, ValueError):
            logger.warning("Token cache record malformed, ignoring")
            return None

        if expire_at <= now or not token:
            logger.info("Token cache expired")
            return None
        return token
