"""
Playback endpoints
==================

POST   /api/v1/playback                    -- compute a route, open a session on its trace
GET    /api/v1/playback/{session_id}       -- current playback state
POST   /api/v1/playback/{session_id}/play  -- start auto-advance
POST   /api/v1/playback/{session_id}/pause -- stop auto-advance
POST   /api/v1/playback/{session_id}/forward  -- one step forward
POST   /api/v1/playback/{session_id}/backward -- one step back
POST   /api/v1/playback/{session_id}/jump  -- jump to a step index
PUT    /api/v1/playback/{session_id}/speed -- change the advance interval
DELETE /api/v1/playback/{session_id}       -- close the session
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_playback_registry
from src.api.middleware import limiter
from src.api.routes.routing import route_from_dataset
from src.api.schemas import (
    AlgorithmStepSchema,
    JumpRequest,
    PlaybackCreateRequest,
    PlaybackStateResponse,
    SpeedRequest,
)
from src.config import settings
from src.domain.entities import InvalidStepIndex
from src.workers.playback import PlaybackRegistry, PlaybackSession, UnknownSession

router = APIRouter(prefix="/playback", tags=["playback"])


def _state(session: PlaybackSession) -> PlaybackStateResponse:
    snap = session.player.snapshot()
    return PlaybackStateResponse(
        session_id=session.id,
        current_index=snap.current_index,
        total_steps=snap.total_steps,
        is_playing=snap.is_playing,
        speed_ms=snap.speed_ms,
        current_step=(
            AlgorithmStepSchema.model_validate(snap.current_step)
            if snap.current_step
            else None
        ),
    )


def _session(playback: PlaybackRegistry, session_id: str) -> PlaybackSession:
    try:
        return playback.get(session_id)
    except UnknownSession:
        raise HTTPException(status_code=404, detail="Playback session not found")


@router.post(
    "",
    status_code=201,
    response_model=PlaybackStateResponse,
    summary="Compute a route and open a playback session on its step trace",
)
@limiter.limit(settings.rate_limit)
async def create_session(
    request: Request,
    body: PlaybackCreateRequest,
    db: AsyncSession = Depends(get_db),
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    result = await route_from_dataset(db, body)
    session = playback.create(result.steps, speed_ms=body.speed_ms)
    if body.autoplay:
        session.player.play()
    return _state(session)


@router.get(
    "/{session_id}",
    response_model=PlaybackStateResponse,
    summary="Get playback state",
)
@limiter.limit(settings.rate_limit)
async def get_session(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    return _state(_session(playback, session_id))


@router.post("/{session_id}/play", response_model=PlaybackStateResponse)
@limiter.limit(settings.rate_limit)
async def play(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    session.player.play()
    return _state(session)


@router.post("/{session_id}/pause", response_model=PlaybackStateResponse)
@limiter.limit(settings.rate_limit)
async def pause(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    session.player.pause()
    return _state(session)


@router.post("/{session_id}/forward", response_model=PlaybackStateResponse)
@limiter.limit(settings.rate_limit)
async def step_forward(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    session.player.step_forward()
    return _state(session)


@router.post("/{session_id}/backward", response_model=PlaybackStateResponse)
@limiter.limit(settings.rate_limit)
async def step_backward(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    session.player.step_backward()
    return _state(session)


@router.post(
    "/{session_id}/jump",
    response_model=PlaybackStateResponse,
    responses={422: {"description": "Index outside the step trace."}},
)
@limiter.limit(settings.rate_limit)
async def jump(
    request: Request,
    session_id: str,
    body: JumpRequest,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    try:
        session.player.jump_to(body.index)
    except InvalidStepIndex as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _state(session)


@router.put("/{session_id}/speed", response_model=PlaybackStateResponse)
@limiter.limit(settings.rate_limit)
async def set_speed(
    request: Request,
    session_id: str,
    body: SpeedRequest,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    session = _session(playback, session_id)
    session.player.set_speed(body.speed_ms)
    return _state(session)


@router.delete("/{session_id}", status_code=204)
@limiter.limit(settings.rate_limit)
async def close_session(
    request: Request,
    session_id: str,
    playback: PlaybackRegistry = Depends(get_playback_registry),
):
    try:
        playback.close(session_id)
    except UnknownSession:
        raise HTTPException(status_code=404, detail="Playback session not found")
