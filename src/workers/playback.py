"""
Playback Session Worker
=======================

Keeps the in-memory ``StepPlayer`` sessions created through the API and
runs a sweep every ``PLAYBACK_SWEEP_INTERVAL_SECONDS`` (default 60 s) that
closes sessions idle for longer than ``PLAYBACK_SESSION_TTL_SECONDS``.

Sessions live in this process only; step traces are never persisted.
Shutdown cancels every pending playback advance.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional, Sequence

from src.config import settings
from src.domain.entities import AlgorithmStep
from src.domain.playback import StepPlayer

logger = logging.getLogger(__name__)


class UnknownSession(KeyError):
    """Raised when a playback session id is not registered."""


@dataclass
class PlaybackSession:
    id: str
    player: StepPlayer
    last_used: float = field(default_factory=time.monotonic)

    def touch(self) -> None:
        self.last_used = time.monotonic()


class PlaybackRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, PlaybackSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self, steps: Sequence[AlgorithmStep], speed_ms: Optional[int] = None
    ) -> PlaybackSession:
        player = StepPlayer(steps, speed_ms=speed_ms or settings.playback_speed_ms)
        session = PlaybackSession(id=uuid.uuid4().hex, player=player)
        self._sessions[session.id] = session
        logger.debug("Playback session %s created (%d steps)", session.id, len(steps))
        return session

    def get(self, session_id: str) -> PlaybackSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise UnknownSession(session_id) from None
        session.touch()
        return session

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise UnknownSession(session_id)
        session.player.close()

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.player.close()
        self._sessions.clear()

    def sweep(self, ttl_seconds: float) -> int:
        """Close sessions idle for longer than *ttl_seconds*.  Returns count."""
        cutoff = time.monotonic() - ttl_seconds
        expired = [
            sid
            for sid, s in self._sessions.items()
            if s.last_used < cutoff and not s.player.is_playing
        ]
        for sid in expired:
            self.close(sid)
        return len(expired)


registry = PlaybackRegistry()

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_playback_worker() -> None:
    global _task, _stop_event
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop())
    logger.info(
        "Playback worker started (sweep=%ds, ttl=%ds)",
        settings.playback_sweep_interval_seconds,
        settings.playback_session_ttl_seconds,
    )


async def stop_playback_worker() -> None:
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    registry.close_all()
    logger.info("Playback worker stopped")


# ── Internals ─────────────────────────────────────────────────────────


async def _loop() -> None:
    """Periodic loop: sweep idle sessions then sleep."""
    assert _stop_event is not None
    while not _stop_event.is_set():
        try:
            closed = registry.sweep(settings.playback_session_ttl_seconds)
            if closed:
                logger.info("Closed %d idle playback sessions", closed)
        except Exception:
            logger.exception("Unhandled error in playback sweep")
        try:
            await asyncio.wait_for(
                _stop_event.wait(),
                timeout=settings.playback_sweep_interval_seconds,
            )
            break
        except asyncio.TimeoutError:
            pass  # next sweep
