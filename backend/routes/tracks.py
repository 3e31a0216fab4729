"""Track sample route: the single public read endpoint."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from config import settings
from services.sampler import TrackSampler

logger = logging.getLogger(__name__)

router = APIRouter()


def get_sampler(request: Request) -> TrackSampler:
    """Sampler built at startup and held on app.state."""
    return request.app.state.sampler


@router.get("/tracks")
async def tracks(
    playlist_id: str | None = Query(None, alias="playlistId"),
    sampler: TrackSampler = Depends(get_sampler),
) -> JSONResponse:
    """Shuffled sample of tracks from the requested (or default) playlist."""
    sample = await sampler.sample(playlist_id)
    return JSONResponse(
        [t.model_dump() for t in sample],
        headers={"Cache-Control": f"s-maxage={settings.response_max_age_seconds}"},
    )
