"""Request orchestration: credential, then cached sample, then refresh.

The order is fixed. The credential is obtained even when the track cache
would have answered on its own.
"""

import asyncio
import logging
import re
import time
from typing import Callable

from config import Settings
from errors import BadRequestError, UpstreamTimeoutError
from models import Track
from services.credentials import CredentialCache
from services.tracks import TrackListCache

logger = logging.getLogger(__name__)

# Spotify ids are base62
PLAYLIST_ID_RE = re.compile(r"[0-9A-Za-z]+")


class TrackSampler:
    def __init__(
        self,
        credentials: CredentialCache,
        tracks: TrackListCache,
        default_playlist_id: str | None = None,
        deadline_seconds: float | None = None,
        ignore_cache: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.credentials = credentials
        self.tracks = tracks
        self.default_playlist_id = default_playlist_id
        self.deadline_seconds = deadline_seconds
        self.ignore_cache = ignore_cache
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, store, spotify) -> "TrackSampler":
        return cls(
            credentials=CredentialCache(
                store,
                spotify,
                client_id=settings.spotify_client_id or "",
                client_secret=settings.spotify_client_secret or "",
                ttl_seconds=settings.token_ttl_seconds,
            ),
            tracks=TrackListCache(
                store,
                spotify,
                ttl_seconds=settings.tracks_ttl_seconds,
                sample_size=settings.sample_size,
            ),
            default_playlist_id=settings.default_playlist_id,
            deadline_seconds=settings.request_deadline_seconds,
            ignore_cache=settings.ignore_cache,
        )

    async def sample(self, playlist_id: str | None = None) -> list[Track]:
        """Return a track sample for the playlist (or the configured default)."""
        playlist_id = playlist_id or self.default_playlist_id
        if not playlist_id:
            raise BadRequestError()
        # Ends up in a Spotify URL path and a KEYS glob
        if not PLAYLIST_ID_RE.fullmatch(playlist_id):
            raise BadRequestError(f"Invalid playlistId: {playlist_id!r}")

        if not self.deadline_seconds:
            return await self._sample(playlist_id)
        try:
            return await asyncio.wait_for(self._sample(playlist_id), timeout=self.deadline_seconds)
        except asyncio.TimeoutError as e:
            logger.error("Sampling %s exceeded %.1fs deadline", playlist_id, self.deadline_seconds)
            raise UpstreamTimeoutError(self.deadline_seconds) from e

    async def _sample(self, playlist_id: str) -> list[Track]:
        now = self.clock()
        credential = await self.credentials.get_valid_credential(now, force=self.ignore_cache)

        cached = await self.tracks.get_cached(playlist_id, now, force=self.ignore_cache)
        if cached is not None:
            return cached

        logger.info("Refreshing playlist %s", playlist_id)
        return await self.tracks.refresh(playlist_id, credential.token, now)
