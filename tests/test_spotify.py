"""Tests for the Spotify API client boundary."""

import httpx
import pytest

from services.spotify import SpotifyClient, SpotifyError


def _client(handler):
    return SpotifyClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_fetch_token_posts_client_credentials(spotify, fake_spotify):
    token = await spotify.fetch_token("id", "secret")

    request = fake_spotify.requests[0]
    assert token == "token-1"
    assert request.method == "POST"
    assert "client_id=id" in request.content.decode()
    assert "client_secret=secret" in request.content.decode()


@pytest.mark.asyncio
async def test_fetch_playlist_skips_null_tracks(spotify, playlist_tracks):
    playlist = await spotify.fetch_playlist("token-1", "37i9dQZF1DXcBWIGoYBM5M")

    assert playlist.track_ids() == playlist_tracks


@pytest.mark.asyncio
async def test_fetch_tracks_sends_ids_in_order(spotify, fake_spotify):
    tracks = await spotify.fetch_tracks("token-1", ["b", "a"])

    assert [t.id for t in tracks] == ["b", "a"]
    assert fake_spotify.requests[0].url.params["ids"] == "b,a"


@pytest.mark.asyncio
async def test_fetch_tracks_without_ids_makes_no_request(spotify, fake_spotify):
    assert await spotify.fetch_tracks("token-1", []) == []
    assert fake_spotify.requests == []


@pytest.mark.asyncio
async def test_unknown_track_ids_are_dropped():
    client = _client(lambda request: httpx.Response(200, json={"tracks": [None, {"id": "a", "name": "A", "artists": []}]}))

    tracks = await client.fetch_tracks("tok", ["missing", "a"])

    assert [t.id for t in tracks] == ["a"]
    assert tracks[0].preview_url is None


@pytest.mark.asyncio
async def test_error_status_raises(spotify, fake_spotify):
    fake_spotify.fail["token"] = 401

    with pytest.raises(SpotifyError, match="401"):
        await spotify.fetch_token("id", "secret")


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SpotifyError, match="request failed"):
        await _client(handler).fetch_playlist("tok", "pl")


@pytest.mark.asyncio
async def test_malformed_payload_raises():
    client = _client(lambda request: httpx.Response(200, json={"token_type": "Bearer"}))

    with pytest.raises(SpotifyError, match="AccessToken"):
        await client.fetch_token("id", "secret")


@pytest.mark.asyncio
async def test_non_json_body_raises():
    client = _client(lambda request: httpx.Response(200, content=b"<html>busy</html>"))

    with pytest.raises(SpotifyError, match="invalid JSON"):
        await client.fetch_playlist("tok", "pl")
