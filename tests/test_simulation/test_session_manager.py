"""Tests for the asyncio session driver."""

import asyncio
from uuid import uuid4

from lightduel.core.enums import GamePhase, RoundOutcome
from lightduel.simulation.models import AiConfig, GameSettings
from lightduel.simulation.session_manager import GameSessionManager


TINY_ARENA = GameSettings(arena_size=4, speed=10)
PASSIVE_AI = AiConfig(speed=0.1, aggressiveness=0.0)


async def _wait_for_loop(session, timeout: float = 5.0) -> None:
    async def poll():
        while session.is_looping:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout)


class TestSessionLifecycle:
    """Tests for create/get/list/delete."""

    def test_create_and_get(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1)
            session = await manager.create_session(settings=TINY_ARENA, seed=3)

            assert await manager.get_session(session.session_id) is session
            assert await manager.list_sessions() == [session.session_id]
            assert session.engine.phase is GamePhase.IDLE
            assert session.frame_interval_ms == 1

        asyncio.run(scenario())

    def test_frame_interval_override(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=16)
            session = await manager.create_session(frame_interval_ms=250)
            assert session.frame_interval_ms == 250

        asyncio.run(scenario())

    def test_delete(self):
        async def scenario():
            manager = GameSessionManager()
            session = await manager.create_session()

            assert await manager.delete_session(session.session_id)
            assert await manager.get_session(session.session_id) is None
            assert not await manager.delete_session(session.session_id)

        asyncio.run(scenario())

    def test_unknown_session(self):
        async def scenario():
            manager = GameSessionManager()
            missing = uuid4()

            assert await manager.get_session(missing) is None
            assert not await manager.start_game(missing)
            assert not await manager.reset_game(missing)

        asyncio.run(scenario())


class TestFrameLoop:
    """Tests for the per-session frame task."""

    def test_round_plays_to_completion(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1)
            session = await manager.create_session(settings=TINY_ARENA, seed=1)
            ticks, endings = [], []

            assert await manager.start_game(
                session.session_id,
                on_tick=ticks.append,
                on_round_end=endings.append,
            )
            await _wait_for_loop(session)

            assert session.engine.phase is GamePhase.GAMEOVER
            assert [t.tick for t in ticks] == [1]
            assert len(endings) == 1
            assert endings[0].outcome is RoundOutcome.TIE

        asyncio.run(scenario())

    def test_start_while_running_is_rejected(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1000)
            session = await manager.create_session(settings=GameSettings(speed=1))

            assert await manager.start_game(session.session_id)
            assert not await manager.start_game(session.session_id)

            await manager.cleanup_all()

        asyncio.run(scenario())

    def test_reset_cancels_loop(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1000)
            session = await manager.create_session(settings=GameSettings(speed=1))
            await manager.start_game(session.session_id)
            assert session.is_looping

            assert await manager.reset_game(session.session_id, clear_score=True)

            assert not session.is_looping
            assert session.engine.phase is GamePhase.IDLE

        asyncio.run(scenario())

    def test_delete_cancels_loop(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1000)
            session = await manager.create_session(settings=GameSettings(speed=1))
            await manager.start_game(session.session_id)

            await manager.delete_session(session.session_id)

            assert not session.is_looping

        asyncio.run(scenario())

    def test_cleanup_all(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1000)
            sessions = [await manager.create_session() for _ in range(3)]
            for session in sessions:
                await manager.start_game(session.session_id)

            await manager.cleanup_all()

            assert manager.active_sessions == []
            assert not any(s.is_looping for s in sessions)

        asyncio.run(scenario())

    def test_callback_errors_do_not_stop_the_loop(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1)
            session = await manager.create_session(
                settings=GameSettings(arena_size=40, speed=10),
                ai_config=PASSIVE_AI,
            )
            endings = []

            def broken_tick(snapshot):
                raise RuntimeError("renderer exploded")

            await manager.start_game(
                session.session_id,
                on_tick=broken_tick,
                on_round_end=endings.append,
            )
            await _wait_for_loop(session)

            # Riders meet head-on after ten steps
            assert session.engine.step_count == 10
            assert len(endings) == 1

        asyncio.run(scenario())

    def test_score_carries_over_rounds(self):
        async def scenario():
            manager = GameSessionManager(frame_interval_ms=1)
            session = await manager.create_session(settings=TINY_ARENA)

            for _ in range(2):
                await manager.start_game(session.session_id)
                await _wait_for_loop(session)

            assert session.engine.round_number == 2
            assert session.engine.phase is GamePhase.GAMEOVER

        asyncio.run(scenario())
