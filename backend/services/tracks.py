"""Track-list cache: one meta hash per playlist plus one hash per sampled track.

The meta hash holds `tracks_expire_at`; track hashes share the
`<prefix>:playlist:<id>:tracks:` namespace and are enumerated by pattern.
A fresh meta record with no readable track records is treated as a miss,
which is how a half-applied write pipeline heals on the next request.
"""

import logging
import random
from typing import Sequence, TypeVar

from errors import StoreUnavailableError, UpstreamUnavailableError
from models import Track
from services.spotify import SpotifyClient, SpotifyError
from services.store import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle_tracks(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of `items` (Fisher-Yates)."""
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


class TrackListCache:
    def __init__(
        self,
        store: CacheStore,
        spotify: SpotifyClient,
        ttl_seconds: int = 360,
        sample_size: int = 50,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.spotify = spotify
        self.ttl_seconds = ttl_seconds
        self.sample_size = sample_size
        self.rng = rng or random.Random()

    async def get_cached(self, playlist_id: str, now: float, force: bool = False) -> list[Track] | None:
        """Return cached tracks for the playlist, or None on any kind of miss."""
        if force:
            return None
        try:
            meta = await self.store.hgetall(self.store.playlist_meta_key(playlist_id))
            if not _is_fresh(meta, now):
                logger.info("Playlist cache for %s missing or expired", playlist_id)
                return None
            remaining = (float(meta["tracks_expire_at"]) - now) / 60
            logger.info("Playlist cache for %s valid for %.0f more minutes", playlist_id, remaining)

            keys = await self.store.keys(self.store.track_pattern(playlist_id))
            records = await self.store.hgetall_many(keys)
        except StoreUnavailableError as e:
            logger.warning("Unable to read playlist cache, treating as miss: %s", e)
            return None

        tracks = [Track.from_hash(r) for r in records if r and "id" in r]
        if not tracks:
            logger.warning("Playlist %s marked fresh but has no cached tracks", playlist_id)
            return None
        logger.info("Fetched %d cached tracks for %s", len(tracks), playlist_id)
        return tracks

    async def refresh(self, playlist_id: str, token: str, now: float) -> list[Track]:
        """Fetch, sample, shuffle and persist; return the freshly fetched tracks."""
        try:
            playlist = await self.spotify.fetch_playlist(token, playlist_id)
        except SpotifyError as e:
            raise UpstreamUnavailableError("Unable to fetch playlist") from e

        # One cached hash per track id, so repeats in the playlist collapse
        unique_ids = list(dict.fromkeys(playlist.track_ids()))
        track_ids = shuffle_tracks(unique_ids[: self.sample_size], self.rng)
        logger.info("Fetching %d tracks from playlist %s", len(track_ids), playlist_id)

        try:
            fetched = await self.spotify.fetch_tracks(token, track_ids)
        except SpotifyError as e:
            raise UpstreamUnavailableError("Unable to fetch tracks") from e

        tracks = [Track.from_spotify(t) for t in fetched]
        await self._persist(playlist_id, tracks, now)
        return tracks

    async def _persist(self, playlist_id: str, tracks: list[Track], now: float) -> None:
        store = self.store
        try:
            stale = await store.keys(store.track_pattern(playlist_id))
            writes = [(store.track_key(playlist_id, t.id), t.to_hash()) for t in tracks]
            writes.append((store.playlist_meta_key(playlist_id), {"tracks_expire_at": now + self.ttl_seconds}))
            await store.replace_hashes(stale, writes)
        except StoreUnavailableError as e:
            logger.error("Unable to cache tracks for %s: %s", playlist_id, e)
            return
        logger.info("Cached %d tracks for %s", len(tracks), playlist_id)


def _is_fresh(meta: dict[str, str] | None, now: float) -> bool:
    if not meta:
        return False
    try:
        return now < float(meta["tracks_expire_at"])
    except (KeyError, ValueError):
        return False
