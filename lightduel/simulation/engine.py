"""GameEngine - state machine driving a player vs. AI light-cycle duel.

The engine owns both riders and the score. It has no timers of its own:
an external driver calls ``tick()`` once per frame, and the engine only
moves the riders once enough frames have accumulated for the configured
game speed.

Round Lifecycle:
    1. idle - Riders spawned, waiting for start()
    2. running - tick() advances the simulation
    3. gameover - Outcome fixed, state frozen until start() or reset()

Per-step protocol:
    1. Apply the buffered player turn (if any)
    2. AI picks a heading from pre-move positions and trails
    3. Both riders move one cell, leaving their old head on the trail
    4. Both riders are checked for collisions against post-move state
    5. Outcome resolved, score credited, snapshot emitted

Usage:
    engine = GameEngine(settings=GameSettings(arena_size=40, speed=5))
    engine.start()
    while engine.phase is GamePhase.RUNNING:
        snapshot = engine.tick()
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

from lightduel.core.enums import Direction, GamePhase, RiderId, RoundOutcome
from lightduel.core.grid import spawn_points
from lightduel.events.bus import EventBus
from lightduel.events.types import (
    AiConfigChangedEvent,
    GameResetEvent,
    RoundEndedEvent,
    RoundStartedEvent,
    TickEvent,
)
from .ai_policy import AiDecisionPolicy
from .collision import CollisionVerdict, resolve_pair
from .models import AiConfig, GameSettings, GameSnapshot, Rider, Score
from .trail import occupied_cells


logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Default engine clock in milliseconds."""
    return int(time.monotonic() * 1000)


class GameEngine:
    """
    Explicit state machine for one game session.

    All mutation happens synchronously inside the public methods; callers
    receive immutable GameSnapshot objects and never touch rider state.
    Invalid requests are no-ops that return False.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        ai_config: Optional[AiConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize the engine in the idle phase with a fresh spawn.

        Args:
            settings: Arena size and game speed
            ai_config: Initial AI opponent parameters
            rng: Random source for the AI policy (seed for determinism)
            clock: Millisecond clock used for trail timestamps
            event_bus: Bus that receives round/tick events
        """
        self.settings = settings or GameSettings()
        self.ai_config = ai_config or AiConfig()
        self.clock: Clock = clock or monotonic_ms
        self.event_bus = event_bus or EventBus()
        self.policy = AiDecisionPolicy(rng or random.Random())

        self.score = Score()
        self.phase = GamePhase.IDLE
        self.outcome: Optional[RoundOutcome] = None
        self.round_number = 0

        self._spawn()

    # =========================================================================
    # External inputs
    # =========================================================================

    def start(self) -> bool:
        """
        Spawn a fresh round and start running.

        Valid from idle or gameover; ignored while a round is running.
        The cumulative score is preserved.
        """
        if self.phase is GamePhase.RUNNING:
            logger.debug("start() ignored: round already running")
            return False

        self._spawn()
        self.phase = GamePhase.RUNNING
        self.round_number += 1

        logger.info(
            f"Round {self.round_number} started "
            f"(arena={self.settings.arena_size}, speed={self.settings.speed}, "
            f"ai_speed={self.ai_config.speed}, ai_aggressiveness={self.ai_config.aggressiveness})"
        )
        snapshot = self.snapshot()
        self.event_bus.emit(RoundStartedEvent(
            player_score=self.score.player,
            ai_score=self.score.ai,
            round_number=self.round_number,
            snapshot=snapshot,
        ))
        return True

    def reset(self, clear_score: bool = False) -> bool:
        """
        Return to idle with a fresh spawn.

        The arena size always comes from the configured settings.

        Args:
            clear_score: Also zero the cumulative score
        """
        self.phase = GamePhase.IDLE
        if clear_score:
            self.score.clear()
        self._spawn()

        logger.info(f"Game reset (score_cleared={clear_score})")
        self.event_bus.emit(GameResetEvent(
            player_score=self.score.player,
            ai_score=self.score.ai,
            score_cleared=clear_score,
        ))
        return True

    def request_direction(self, direction: Direction) -> bool:
        """
        Buffer a player turn for the next step.

        Only the latest request is kept. Rejected when no round is running
        or when ``direction`` reverses the player's current heading.
        """
        if self.phase is not GamePhase.RUNNING:
            return False
        if direction.is_reverse_of(self.player.direction):
            logger.debug(f"Reverse turn {direction.value} ignored")
            return False

        self._pending_direction = direction
        return True

    def apply_ai_config(self, config: AiConfig) -> bool:
        """
        Accept a new AI configuration.

        Always used for the next spawned round. When no round is running
        it is applied to the current AI rider right away.
        """
        self.ai_config = config
        applied_now = self.phase is not GamePhase.RUNNING
        if applied_now:
            self.ai.ai_config = config

        logger.info(
            f"AI config accepted: speed={config.speed}, "
            f"aggressiveness={config.aggressiveness} ({config.description!r})"
        )
        self.event_bus.emit(AiConfigChangedEvent(
            player_score=self.score.player,
            ai_score=self.score.ai,
            config=config,
            applied_immediately=applied_now,
        ))
        return True

    def update_settings(self, settings: GameSettings) -> bool:
        """
        Change arena size / game speed between rounds.

        Rejected while a round is running. Otherwise the board returns to
        idle, re-spawned for the new arena. The score is kept.
        """
        if self.phase is GamePhase.RUNNING:
            return False

        self.settings = settings
        self.phase = GamePhase.IDLE
        self._spawn()
        logger.info(
            f"Settings updated: arena={settings.arena_size}, speed={settings.speed}"
        )
        return True

    # =========================================================================
    # Tick loop
    # =========================================================================

    def tick(self) -> GameSnapshot:
        """
        Process one frame.

        Frames accumulate against the cadence threshold derived from the
        game speed; the riders only move once the threshold is reached.
        Outside the running phase this is a no-op.
        """
        if self.phase is not GamePhase.RUNNING:
            return self.snapshot()

        self._frame_counter += 1
        if self._frame_counter < self.settings.frames_per_step:
            return self.snapshot()
        self._frame_counter = 0

        return self._step()

    def run_until_round_end(self, max_ticks: int = 100_000) -> GameSnapshot:
        """
        Tick until the round ends or ``max_ticks`` frames have passed.

        Starts a round first if none is running. Useful for headless
        simulation and tests.
        """
        if self.phase is not GamePhase.RUNNING:
            self.start()

        snapshot = self.snapshot()
        for _ in range(max_ticks):
            snapshot = self.tick()
            if self.phase is not GamePhase.RUNNING:
                break
        return snapshot

    def _step(self) -> GameSnapshot:
        """Move both riders one cell and resolve the outcome."""
        now = self.clock()
        self.time_ms = now

        if self._pending_direction is not None:
            self.player.direction = self._pending_direction
            self._pending_direction = None

        occupied = occupied_cells((self.player.trail, self.ai.trail), now)
        self.ai.direction = self.policy.choose_direction(
            position=self.ai.position,
            direction=self.ai.direction,
            target=self.player.position,
            config=self.ai.ai_config or self.ai_config,
            arena_size=self.settings.arena_size,
            occupied=occupied,
        )

        self.player.move(now)
        self.ai.move(now)
        self.step_count += 1

        verdict = resolve_pair(self.player, self.ai, self.settings.arena_size, now)
        outcome = self._outcome_for(verdict)
        if outcome is not None:
            self._end_round(outcome, verdict)

        self.player.trail.prune(now)
        self.ai.trail.prune(now)

        snapshot = self.snapshot()
        self.event_bus.emit(TickEvent(
            player_score=self.score.player,
            ai_score=self.score.ai,
            snapshot=snapshot,
        ))
        if outcome is not None:
            self.event_bus.emit(RoundEndedEvent(
                player_score=self.score.player,
                ai_score=self.score.ai,
                round_number=self.round_number,
                outcome=outcome,
                snapshot=snapshot,
            ))
        return snapshot

    @staticmethod
    def _outcome_for(verdict: CollisionVerdict) -> Optional[RoundOutcome]:
        if verdict.player_crashed and verdict.ai_crashed:
            return RoundOutcome.TIE
        if verdict.player_crashed:
            return RoundOutcome.AI_WIN
        if verdict.ai_crashed:
            return RoundOutcome.PLAYER_WIN
        return None

    def _end_round(self, outcome: RoundOutcome, verdict: CollisionVerdict) -> None:
        if verdict.player_crashed:
            self.player.is_alive = False
        if verdict.ai_crashed:
            self.ai.is_alive = False

        self.score.credit(outcome)
        self.outcome = outcome
        self.phase = GamePhase.GAMEOVER
        self._pending_direction = None

        logger.info(
            f"Round {self.round_number} over after {self.step_count} steps: "
            f"{outcome.value} (score {self.score.player}-{self.score.ai})"
        )

    # =========================================================================
    # State
    # =========================================================================

    def _spawn(self) -> None:
        """Create both riders at their mirrored spawn points."""
        player_pos, ai_pos = spawn_points(self.settings.arena_size)
        self.player = Rider(
            rider_id=RiderId.PLAYER,
            position=player_pos,
            direction=Direction.RIGHT,
        )
        self.ai = Rider(
            rider_id=RiderId.AI,
            position=ai_pos,
            direction=Direction.LEFT,
            ai_config=self.ai_config,
        )
        self.policy.reset()
        self.outcome = None
        self.step_count = 0
        self.time_ms = self.clock()
        self._frame_counter = 0
        self._pending_direction: Optional[Direction] = None

    def snapshot(self) -> GameSnapshot:
        """
        Immutable view of the current state.

        Trail visibility is evaluated at the time of the last step (or
        spawn), so a frozen gameover board stays frozen.
        """
        return GameSnapshot(
            phase=self.phase,
            tick=self.step_count,
            time_ms=self.time_ms,
            arena_size=self.settings.arena_size,
            game_speed=self.settings.speed,
            player=self.player.snapshot(self.time_ms),
            ai=self.ai.snapshot(self.time_ms),
            score_player=self.score.player,
            score_ai=self.score.ai,
            outcome=self.outcome,
        )

    @property
    def pending_direction(self) -> Optional[Direction]:
        return self._pending_direction
