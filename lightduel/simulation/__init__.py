"""Deterministic light-cycle duel simulation."""

from .ai_policy import AiDecisionPolicy, preferred_directions
from .collision import CollisionVerdict, obstacle_cells, resolve, resolve_pair
from .engine import GameEngine, monotonic_ms
from .models import (
    AiConfig,
    GameSettings,
    GameSnapshot,
    Rider,
    RiderSnapshot,
    Score,
)
from .session_manager import GameSession, GameSessionManager, get_session_manager
from .trail import TRAIL_TTL_MS, Trail, TrailCell, occupied_cells

__all__ = [
    "AiConfig",
    "AiDecisionPolicy",
    "CollisionVerdict",
    "GameEngine",
    "GameSession",
    "GameSessionManager",
    "GameSettings",
    "GameSnapshot",
    "Rider",
    "RiderSnapshot",
    "Score",
    "TRAIL_TTL_MS",
    "Trail",
    "TrailCell",
    "get_session_manager",
    "monotonic_ms",
    "obstacle_cells",
    "occupied_cells",
    "preferred_directions",
    "resolve",
    "resolve_pair",
]
