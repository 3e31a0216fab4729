"""Redis-backed key-value store for the token and track-list caches.

Thin wrapper over redis.asyncio: every Redis error is re-raised as
StoreUnavailableError so the cache managers can degrade uniformly.
Keys are composed as <prefix>:<resource>[:<id>].
"""

import logging
from typing import Any

import redis.asyncio as redis

from errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class CacheStore:
    def __init__(self, client: redis.Redis, prefix: str = "spotify-api"):
        self._client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "spotify-api") -> "CacheStore":
        return cls(redis.from_url(url, decode_responses=True), prefix=prefix)

    # Key layout

    def credential_key(self) -> str:
        return f"{self.prefix}:cache"

    def playlist_meta_key(self, playlist_id: str) -> str:
        return f"{self.prefix}:playlist-cache:{playlist_id}"

    def track_key(self, playlist_id: str, track_id: str) -> str:
        return f"{self.prefix}:playlist:{playlist_id}:tracks:{track_id}"

    def track_pattern(self, playlist_id: str) -> str:
        return f"{self.prefix}:playlist:{playlist_id}:tracks:*"

    # Single commands

    async def hgetall(self, key: str) -> dict[str, str] | None:
        """Return the hash at key, or None when it does not exist."""
        try:
            fields = await self._client.hgetall(key)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"hgetall {key} failed: {e}") from e
        return fields or None

    async def hset(self, key: str, mapping: dict[str, Any]) -> None:
        try:
            await self._client.hset(key, mapping=mapping)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"hset {key} failed: {e}") from e

    async def keys(self, pattern: str) -> list[str]:
        try:
            return list(await self._client.keys(pattern))
        except redis.RedisError as e:
            raise StoreUnavailableError(f"keys {pattern} failed: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except redis.RedisError as e:
            raise StoreUnavailableError(f"ping failed: {e}") from e

    # Batches

    async def hgetall_many(self, keys: list[str]) -> list[dict[str, str]]:
        """Read several hashes in one round trip; results follow `keys` order."""
        if not keys:
            return []
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hgetall(key)
                return await pipe.execute()
        except redis.RedisError as e:
            raise StoreUnavailableError(f"pipelined hgetall failed: {e}") from e

    async def replace_hashes(self, delete: list[str], writes: list[tuple[str, dict[str, Any]]]) -> list:
        """Issue all deletes, then all writes, as one non-transactional pipeline."""
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                for key in delete:
                    pipe.delete(key)
                for key, mapping in writes:
                    pipe.hset(key, mapping=mapping)
                return await pipe.execute()
        except redis.RedisError as e:
            raise StoreUnavailableError(f"pipelined write failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
