"""Spotify Web API client: client-credentials auth, playlists and tracks.

The httpx client is injected so one connection pool is shared per process
(created in app startup). Every transport error, non-2xx status and malformed
payload surfaces as SpotifyError.
"""

import logging

import httpx
from pydantic import ValidationError

from models import AccessToken, Playlist, SpotifyTrack, TracksResponse

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"


class SpotifyError(Exception):
    """Transport or provider-reported failure from the Spotify API."""


class SpotifyClient:
    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def fetch_token(self, client_id: str, client_secret: str) -> str:
        """Obtain an app access token via the client-credentials grant."""
        payload = await self._request(
            "POST",
            TOKEN_URL,
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "client_credentials",
            },
        )
        return _parse(AccessToken, payload).access_token

    async def fetch_playlist(self, token: str, playlist_id: str) -> Playlist:
        payload = await self._request("GET", f"{API_BASE}/playlists/{playlist_id}", token=token)
        return _parse(Playlist, payload)

    async def fetch_tracks(self, token: str, track_ids: list[str]) -> list[SpotifyTrack]:
        """Fetch full track objects in one call, in the order of `track_ids`."""
        if not track_ids:
            return []
        payload = await self._request(
            "GET",
            f"{API_BASE}/tracks",
            token=token,
            params={"ids": ",".join(track_ids)},
        )
        return [t for t in _parse(TracksResponse, payload).tracks if t is not None]

    async def _request(self, method: str, url: str, token: str | None = None, **kwargs) -> dict:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = await self._http.request(method, url, headers=headers, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Spotify %s %s returned %d", method, url, e.response.status_code)
            raise SpotifyError(f"Spotify returned {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            logger.warning("Spotify %s %s failed: %s", method, url, e)
            raise SpotifyError(f"Spotify request failed: {e}") from e
        except ValueError as e:
            raise SpotifyError(f"Spotify returned invalid JSON for {url}") from e


def _parse(model, payload: dict):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise SpotifyError(f"Unexpected {model.__name__} payload: {e.error_count()} errors") from e
