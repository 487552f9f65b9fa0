"""
Step Playback Model
===================

Replays a step trace forward, one step every ``speed_ms``, with random
access jumps.  The timer is a single ``asyncio`` task: starting playback,
pausing, jumping, changing speed or loading a new trace always cancels the
pending advance before (optionally) scheduling a new one, so a trace is
never advanced twice for one tick.

Must be driven from inside a running event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .entities import AlgorithmStep, InvalidStepIndex

logger = logging.getLogger(__name__)

DEFAULT_SPEED_MS = 1000


@dataclass(frozen=True)
class PlaybackState:
    current_index: int
    total_steps: int
    is_playing: bool
    speed_ms: int
    current_step: Optional[AlgorithmStep]


class StepPlayer:
    def __init__(
        self,
        steps: Sequence[AlgorithmStep] = (),
        speed_ms: int = DEFAULT_SPEED_MS,
    ):
        if speed_ms <= 0:
            raise ValueError("speed_ms must be positive")
        self.steps: list[AlgorithmStep] = list(steps)
        self.current_index = 0
        self.is_playing = False
        self.speed_ms = speed_ms
        self._pending: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()
        self._stopped.set()

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def current_step(self) -> Optional[AlgorithmStep]:
        if not self.steps:
            return None
        return self.steps[self.current_index]

    @property
    def at_end(self) -> bool:
        return self.current_index >= len(self.steps) - 1

    def snapshot(self) -> PlaybackState:
        return PlaybackState(
            current_index=self.current_index,
            total_steps=len(self.steps),
            is_playing=self.is_playing,
            speed_ms=self.speed_ms,
            current_step=self.current_step,
        )

    async def wait_stopped(self) -> None:
        """Block until playback is no longer running."""
        await self._stopped.wait()

    # ── Commands ──────────────────────────────────────────────────────

    def load(self, steps: Sequence[AlgorithmStep]) -> None:
        """Replace the trace and rewind to the first step, paused."""
        self._cancel_pending()
        self.steps = list(steps)
        self.current_index = 0
        self._set_playing(False)

    def play(self) -> None:
        if self.at_end:
            self._set_playing(False)
            return
        self._cancel_pending()
        self._set_playing(True)
        self._schedule()

    def pause(self) -> None:
        self._cancel_pending()
        self._set_playing(False)

    def jump_to(self, index: int) -> None:
        if not 0 <= index < len(self.steps):
            raise InvalidStepIndex(
                f"Step index {index} outside 0..{len(self.steps) - 1}"
            )
        self._cancel_pending()
        self.current_index = index
        if self.is_playing:
            if self.at_end:
                self._set_playing(False)
            else:
                self._schedule()

    def step_forward(self) -> None:
        if self.steps and not self.at_end:
            self.jump_to(self.current_index + 1)

    def step_backward(self) -> None:
        if self.current_index > 0:
            self.jump_to(self.current_index - 1)

    def set_speed(self, speed_ms: int) -> None:
        if speed_ms <= 0:
            raise ValueError("speed_ms must be positive")
        self.speed_ms = speed_ms
        if self.is_playing:
            self._cancel_pending()
            self._schedule()

    def close(self) -> None:
        self.pause()

    # ── Internals ─────────────────────────────────────────────────────

    def _set_playing(self, playing: bool) -> None:
        self.is_playing = playing
        if playing:
            self._stopped.clear()
        else:
            self._stopped.set()

    def _schedule(self) -> None:
        self._pending = asyncio.create_task(self._advance_later())

    def _cancel_pending(self) -> None:
        task, self._pending = self._pending, None
        if task is not None and not task.done():
            task.cancel()

    async def _advance_later(self) -> None:
        await asyncio.sleep(self.speed_ms / 1000)
        self._pending = None
        self.current_index += 1
        logger.debug("Playback advanced to step %d", self.current_index)

        if self.is_playing and not self.at_end:
            self._schedule()
        else:
            self._set_playing(False)
