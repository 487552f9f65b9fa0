"""
Step playback tests.

Timer-driven behaviour runs with a few-millisecond interval and waits on
``wait_stopped`` with a timeout, so nothing depends on exact wall-clock
timing.
"""

from __future__ import annotations

import asyncio

import pytest

from src.domain.entities import InvalidStepIndex
from src.domain.graph_builder import build_street_graph
from src.domain.playback import StepPlayer
from src.domain.shortest_path import find_route
from src.workers.playback import PlaybackRegistry, UnknownSession


@pytest.fixture
def steps(triangle_nodes, triangle_edges):
    _, trace, _ = find_route(build_street_graph(triangle_nodes, triangle_edges), 1, 3)
    return trace  # 7 steps


class TestManualControl:
    def test_initial_state(self, steps):
        player = StepPlayer(steps)
        state = player.snapshot()
        assert state.current_index == 0
        assert state.total_steps == 7
        assert not state.is_playing
        assert state.current_step is steps[0]

    def test_empty_player(self):
        player = StepPlayer()
        assert player.current_step is None
        player.step_forward()
        player.step_backward()
        assert player.current_index == 0

    def test_forward_and_backward_are_clamped(self, steps):
        player = StepPlayer(steps)
        player.step_backward()
        assert player.current_index == 0
        for _ in range(20):
            player.step_forward()
        assert player.current_index == len(steps) - 1

    def test_jump_to_valid_index(self, steps):
        player = StepPlayer(steps)
        player.jump_to(4)
        assert player.current_step.step == 5

    @pytest.mark.parametrize("index", [-1, 7, 100])
    def test_jump_outside_trace_raises(self, steps, index):
        player = StepPlayer(steps)
        with pytest.raises(InvalidStepIndex):
            player.jump_to(index)
        assert player.current_index == 0

    def test_invalid_speed(self, steps):
        with pytest.raises(ValueError):
            StepPlayer(steps, speed_ms=0)
        player = StepPlayer(steps)
        with pytest.raises(ValueError):
            player.set_speed(-5)

    def test_play_at_last_step_does_nothing(self, steps):
        player = StepPlayer(steps)
        player.jump_to(len(steps) - 1)
        player.play()
        assert not player.is_playing


class TestTimedPlayback:
    @pytest.mark.asyncio
    async def test_plays_to_the_end_and_stops(self, steps):
        player = StepPlayer(steps, speed_ms=2)
        player.play()
        assert player.is_playing
        await asyncio.wait_for(player.wait_stopped(), timeout=2)
        assert player.current_index == len(steps) - 1
        assert not player.is_playing

    @pytest.mark.asyncio
    async def test_pause_cancels_pending_advance(self, steps):
        player = StepPlayer(steps, speed_ms=20)
        player.play()
        player.pause()
        await asyncio.sleep(0.1)
        assert player.current_index == 0
        assert not player.is_playing

    @pytest.mark.asyncio
    async def test_play_twice_does_not_double_advance(self, steps):
        player = StepPlayer(steps, speed_ms=100)
        player.play()
        player.play()
        player.play()
        await asyncio.sleep(0.15)
        assert player.current_index == 1
        player.close()

    @pytest.mark.asyncio
    async def test_jump_while_playing_continues_from_new_index(self, steps):
        player = StepPlayer(steps, speed_ms=2)
        player.play()
        player.jump_to(5)
        await asyncio.wait_for(player.wait_stopped(), timeout=2)
        assert player.current_index == 6

    @pytest.mark.asyncio
    async def test_speed_change_while_playing_reschedules(self, steps):
        player = StepPlayer(steps, speed_ms=10_000)
        player.play()
        player.set_speed(2)
        assert player.is_playing
        await asyncio.wait_for(player.wait_stopped(), timeout=2)
        assert player.current_index == len(steps) - 1

    @pytest.mark.asyncio
    async def test_speed_change_does_not_double_advance(self, steps):
        player = StepPlayer(steps, speed_ms=100)
        player.play()
        player.set_speed(100)
        player.set_speed(100)
        await asyncio.sleep(0.15)
        assert player.current_index == 1
        player.close()

    @pytest.mark.asyncio
    async def test_load_resets_and_stops(self, steps):
        player = StepPlayer(steps, speed_ms=20)
        player.jump_to(3)
        player.play()
        player.load(steps[:2])
        assert player.current_index == 0
        assert not player.is_playing
        await asyncio.sleep(0.06)
        assert player.current_index == 0


class TestRegistry:
    def test_create_get_close(self, steps):
        registry = PlaybackRegistry()
        session = registry.create(steps, speed_ms=250)
        assert len(registry) == 1
        assert registry.get(session.id).player.speed_ms == 250

        registry.close(session.id)
        assert len(registry) == 0
        with pytest.raises(UnknownSession):
            registry.get(session.id)
        with pytest.raises(UnknownSession):
            registry.close(session.id)

    def test_default_speed_from_settings(self, steps):
        from src.config import settings

        session = PlaybackRegistry().create(steps)
        assert session.player.speed_ms == settings.playback_speed_ms

    def test_sweep_closes_idle_sessions(self, steps):
        registry = PlaybackRegistry()
        idle = registry.create(steps)
        fresh = registry.create(steps)
        idle.last_used -= 3600

        assert registry.sweep(ttl_seconds=60) == 1
        assert len(registry) == 1
        assert registry.get(fresh.id) is fresh
