"""
Admin / observability endpoints
===============================

GET /api/v1/admin/stats   -- dataset size and open playback sessions
GET /api/v1/admin/health  -- simple health check
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_playback_registry
from src.api.middleware import limiter
from src.api.schemas import HealthResponse, StatsResponse
from src.config import settings
from src.infrastructure.repositories import CityNodeRepository, StreetEdgeRepository
from src.workers.playback import PlaybackRegistry

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Dataset size and active playback sessions",
)
@limiter.limit(settings.rate_limit)
async def get_stats(
    request: Request,
    db: AsyncSession = Depends(get_db),
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    return StatsResponse(
        nodes=await CityNodeRepository(db).count(),
        edges=await StreetEdgeRepository(db).count(),
        playback_sessions=len(playback),
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
