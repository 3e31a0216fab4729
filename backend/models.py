"""Typed records for Spotify payloads, cache hashes and API responses.

Upstream JSON is validated here, at the provider boundary, so the cache
managers only ever see these shapes.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Spotify payloads
# ---------------------------------------------------------------------------

class AccessToken(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class SpotifyArtist(BaseModel):
    name: str


class SpotifyTrack(BaseModel):
    id: str
    name: str
    preview_url: str | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list)


class PlaylistTrackRef(BaseModel):
    id: str | None = None


class PlaylistItem(BaseModel):
    # Local files and removed tracks come back with a null track
    track: PlaylistTrackRef | None = None


class PlaylistTracks(BaseModel):
    items: list[PlaylistItem] = Field(default_factory=list)


class Playlist(BaseModel):
    id: str
    name: str = ""
    tracks: PlaylistTracks = Field(default_factory=PlaylistTracks)

    def track_ids(self) -> list[str]:
        """Ids of playable items, in playlist order."""
        return [item.track.id for item in self.tracks.items if item.track and item.track.id]


class TracksResponse(BaseModel):
    # Unknown ids come back as null entries
    tracks: list[SpotifyTrack | None] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cache records and API response
# ---------------------------------------------------------------------------

class Track(BaseModel):
    """Cached subset of a track; also the shape returned by GET /tracks."""

    id: str
    name: str
    preview_url: str | None = None
    artists: str = ""

    @classmethod
    def from_spotify(cls, track: SpotifyTrack) -> "Track":
        return cls(
            id=track.id,
            name=track.name,
            preview_url=track.preview_url,
            artists=", ".join(a.name for a in track.artists),
        )

    @classmethod
    def from_hash(cls, fields: dict[str, str]) -> "Track":
        return cls(
            id=fields["id"],
            name=fields.get("name", ""),
            preview_url=fields.get("preview_url") or None,
            artists=fields.get("artists", ""),
        )

    def to_hash(self) -> dict[str, str]:
        # Redis hashes cannot hold None
        return {
            "id": self.id,
            "name": self.name,
            "preview_url": self.preview_url or "",
            "artists": self.artists,
        }


class Credential(BaseModel):
    token: str
    persisted: bool = False
