"""Pydantic schemas for game session API."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from lightduel.simulation.models import DEFAULT_AI_DESCRIPTION, GameSnapshot


DirectionName = Literal["UP", "DOWN", "LEFT", "RIGHT"]


class PositionSchema(BaseModel):
    """Grid cell."""

    x: int
    y: int


class TrailCellSchema(BaseModel):
    """Visible trail cell with the time (ms) it was vacated."""

    x: int
    y: int
    timestamp: int


class RiderSchema(BaseModel):
    """Rider state as seen by renderers."""

    id: Literal["player", "ai"]
    position: PositionSchema
    direction: DirectionName
    is_alive: bool
    trail: list[TrailCellSchema]
    speed: Optional[float] = None
    aggressiveness: Optional[float] = None
    description: Optional[str] = None


class ScoreSchema(BaseModel):
    """Cumulative round wins."""

    player: int
    ai: int


class AiConfigSchema(BaseModel):
    """AI opponent parameters."""

    speed: float = Field(default=0.4, gt=0.0, le=1.0)
    aggressiveness: float = Field(default=0.5, ge=0.0, le=1.0)
    description: str = DEFAULT_AI_DESCRIPTION


class SnapshotResponse(BaseModel):
    """Full game snapshot for a session."""

    session_id: str
    phase: Literal["idle", "running", "gameover"]
    tick: int
    time_ms: int
    arena_size: int
    game_speed: int
    player: RiderSchema
    ai: RiderSchema
    score: ScoreSchema
    outcome: Optional[Literal["player_win", "ai_win", "tie"]] = None
    winner: Optional[Literal["player", "ai"]] = None

    @classmethod
    def from_snapshot(cls, session_id: str, snapshot: GameSnapshot) -> "SnapshotResponse":
        return cls(session_id=session_id, **snapshot.to_dict())


class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""

    arena_size: Optional[int] = Field(default=None, ge=4, le=200)
    speed: Optional[int] = Field(default=None, ge=1, le=10)
    ai_config: Optional[AiConfigSchema] = None
    seed: Optional[int] = None
    frame_interval_ms: Optional[int] = Field(default=None, ge=1, le=1000)


class DirectionRequest(BaseModel):
    """Player turn request."""

    direction: DirectionName


class ResetRequest(BaseModel):
    """Reset request; optionally clears the score."""

    clear_score: bool = False


class SettingsRequest(BaseModel):
    """Arena/cadence change between rounds."""

    arena_size: int = Field(ge=4, le=200)
    speed: int = Field(ge=1, le=10)


class TuneRequest(BaseModel):
    """Free-text opponent strategy for the tuning service."""

    strategy_description: str = Field(min_length=10, max_length=1000)


class AcceptedResponse(BaseModel):
    """Result of a state-transition request."""

    accepted: bool
    snapshot: SnapshotResponse


# WebSocket message types

class WSMessageBase(BaseModel):
    """Base WebSocket message."""

    type: str


class StartGameMessage(WSMessageBase):
    """Client message to start a round."""

    type: Literal["start_game"] = "start_game"


class ResetGameMessage(WSMessageBase):
    """Client message to reset to idle."""

    type: Literal["reset_game"] = "reset_game"
    clear_score: bool = False


class SetDirectionMessage(WSMessageBase):
    """Client message to turn the player."""

    type: Literal["set_direction"] = "set_direction"
    direction: DirectionName


class RequestSyncMessage(WSMessageBase):
    """Client message to request a state sync."""

    type: Literal["request_sync"] = "request_sync"
