import random

import httpx
import pytest

# Backend modules import each other flat ('config', 'services.store', ...);
# pyproject's pytest pythonpath puts backend/ and the repo root on sys.path.
from services.credentials import CredentialCache
from services.sampler import TrackSampler
from services.spotify import SpotifyClient
from services.store import CacheStore
from services.tracks import TrackListCache
from tests.support.stubs import FakeRedis, FakeSpotify

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"
NOW = 1_700_000_000.0


@pytest.fixture
def playlist_tracks():
    """60 playable tracks, so the 50-item prefix is a strict subset."""
    return [f"t{i:02d}" for i in range(60)]


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return CacheStore(fake_redis, prefix="spotify-api")


@pytest.fixture
def fake_spotify(playlist_tracks):
    return FakeSpotify({PLAYLIST_ID: playlist_tracks})


@pytest.fixture
def spotify(fake_spotify):
    return SpotifyClient(httpx.AsyncClient(transport=fake_spotify.transport()))


@pytest.fixture
def credential_cache(store, spotify):
    return CredentialCache(store, spotify, client_id="id", client_secret="secret", ttl_seconds=3600)


@pytest.fixture
def track_cache(store, spotify):
    return TrackListCache(store, spotify, ttl_seconds=360, sample_size=50, rng=random.Random(7))


@pytest.fixture
def clock():
    """Mutable clock: set clock.now to move time."""

    class Clock:
        now = NOW

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def sampler(credential_cache, track_cache, clock):
    return TrackSampler(credential_cache, track_cache, default_playlist_id=None, deadline_seconds=5, clock=clock)
