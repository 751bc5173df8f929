"""Session manager driving game engines with an asyncio frame loop."""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional
from uuid import UUID, uuid4

from lightduel.core.enums import GamePhase
from .engine import GameEngine
from .models import AiConfig, GameSettings, GameSnapshot


logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 16  # ~60 frames per second


@dataclass
class GameSession:
    """A single-player game session."""

    session_id: UUID
    engine: GameEngine
    frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS
    on_tick: Optional[Callable[[GameSnapshot], None]] = None
    on_round_end: Optional[Callable[[GameSnapshot], None]] = None

    # Async control
    _task: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def is_looping(self) -> bool:
        return self._task is not None and not self._task.done()


class GameSessionManager:
    """
    Manages active game sessions and their frame loops.

    Each running session has one asyncio task acting as the per-frame
    callback: it calls ``engine.tick()``, then schedules the next frame,
    and stops rescheduling as soon as the engine leaves the running phase.
    Tearing a session down always cancels its task.
    """

    def __init__(self, frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS) -> None:
        """Initialize the session manager."""
        self.frame_interval_ms = frame_interval_ms
        self._sessions: dict[UUID, GameSession] = {}
        self._lock = asyncio.Lock()

    @property
    def active_sessions(self) -> list[UUID]:
        return list(self._sessions.keys())

    async def create_session(
        self,
        settings: Optional[GameSettings] = None,
        ai_config: Optional[AiConfig] = None,
        seed: Optional[int] = None,
        frame_interval_ms: Optional[int] = None,
    ) -> GameSession:
        """
        Create a new idle game session.

        Args:
            settings: Arena size and game speed
            ai_config: Initial AI opponent parameters
            seed: Seed for the AI random source
            frame_interval_ms: Milliseconds between frames

        Returns:
            New GameSession
        """
        engine = GameEngine(
            settings=settings,
            ai_config=ai_config,
            rng=random.Random(seed),
        )
        session_id = uuid4()
        session = GameSession(
            session_id=session_id,
            engine=engine,
            frame_interval_ms=frame_interval_ms or self.frame_interval_ms,
        )

        async with self._lock:
            self._sessions[session_id] = session

        logger.info(f"Session {session_id} created")
        return session

    async def get_session(self, session_id: UUID) -> Optional[GameSession]:
        """Get a session by ID."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def list_sessions(self) -> list[UUID]:
        """List all active session IDs."""
        async with self._lock:
            return list(self._sessions.keys())

    async def delete_session(self, session_id: UUID) -> bool:
        """
        Delete a session, cancelling its frame loop.

        Returns True if the session existed and was deleted.
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        await self._cancel_loop(session)
        logger.info(f"Session {session_id} deleted")
        return True

    async def start_game(
        self,
        session_id: UUID,
        on_tick: Optional[Callable[[GameSnapshot], None]] = None,
        on_round_end: Optional[Callable[[GameSnapshot], None]] = None,
    ) -> bool:
        """
        Start a round and its frame loop.

        Returns:
            True if a round started, False if the session is missing or
            a round is already running
        """
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False

            if not session.engine.start():
                return False

            if on_tick is not None:
                session.on_tick = on_tick
            if on_round_end is not None:
                session.on_round_end = on_round_end

            await self._cancel_loop(session)
            session._task = asyncio.create_task(self._run_frame_loop(session))
            return True

    async def reset_game(self, session_id: UUID, clear_score: bool = False) -> bool:
        """Cancel any running loop and return the session to idle."""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False

            await self._cancel_loop(session)
            return session.engine.reset(clear_score=clear_score)

    async def cleanup_all(self) -> None:
        """Cancel every loop and drop all sessions."""
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()

        for session in sessions:
            await self._cancel_loop(session)

    async def _cancel_loop(self, session: GameSession) -> None:
        """Cancel a session's outstanding frame task."""
        task = session._task
        session._task = None
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run_frame_loop(self, session: GameSession) -> None:
        """Tick the engine once per frame while its round is running."""
        engine = session.engine
        frame_s = session.frame_interval_ms / 1000.0

        while engine.phase is GamePhase.RUNNING:
            steps_before = engine.step_count
            snapshot = engine.tick()

            if session.on_tick and engine.step_count != steps_before:
                try:
                    session.on_tick(snapshot)
                except Exception:
                    logger.exception(f"Tick callback failed for session {session.session_id}")

            if engine.phase is not GamePhase.RUNNING:
                break

            await asyncio.sleep(frame_s)

        if session.on_round_end and engine.phase is GamePhase.GAMEOVER:
            try:
                session.on_round_end(engine.snapshot())
            except Exception:
                logger.exception(f"Round-end callback failed for session {session.session_id}")


# Global session manager instance
_session_manager: Optional[GameSessionManager] = None


def get_session_manager() -> GameSessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        from lightduel.config import get_config

        _session_manager = GameSessionManager(
            frame_interval_ms=get_config().frame_interval_ms,
        )
    return _session_manager
