"""REST API router for game sessions."""

from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from lightduel.ai.tuning import OpponentTuner, TuningError
from lightduel.api.schemas.session import (
    AcceptedResponse,
    AiConfigSchema,
    CreateSessionRequest,
    DirectionRequest,
    ResetRequest,
    SettingsRequest,
    SnapshotResponse,
    TuneRequest,
)
from lightduel.config import get_config
from lightduel.core.enums import Direction
from lightduel.simulation import (
    AiConfig,
    GameSession,
    GameSessionManager,
    GameSettings,
    get_session_manager,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


async def get_tuner() -> AsyncGenerator[OpponentTuner, None]:
    """Provide an opponent tuner for one request."""
    config = get_config()
    if not config.tuning_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Opponent tuning is not configured",
        )

    async with OpponentTuner(
        api_key=config.tuning_api_key,
        model=config.tuning_model,
        timeout=config.tuning_timeout,
    ) as tuner:
        yield tuner


def _parse_session_id(session_id: str) -> UUID:
    try:
        return UUID(session_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid session ID format",
        )


async def _require_session(manager: GameSessionManager, session_id: str) -> GameSession:
    session = await manager.get_session(_parse_session_id(session_id))
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


def _session_to_response(session: GameSession) -> SnapshotResponse:
    return SnapshotResponse.from_snapshot(str(session.session_id), session.engine.snapshot())


def _accepted(session: GameSession, accepted: bool) -> AcceptedResponse:
    return AcceptedResponse(accepted=accepted, snapshot=_session_to_response(session))


@router.post("", response_model=SnapshotResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    manager: GameSessionManager = Depends(get_session_manager),
) -> SnapshotResponse:
    """Create a new idle game session."""
    config = get_config()
    request = request or CreateSessionRequest()

    settings = GameSettings(
        arena_size=request.arena_size or config.arena_size,
        speed=request.speed or config.game_speed,
    )
    ai_config = AiConfig.from_dict(request.ai_config.model_dump()) if request.ai_config else None

    session = await manager.create_session(
        settings=settings,
        ai_config=ai_config,
        seed=request.seed,
        frame_interval_ms=request.frame_interval_ms,
    )
    return _session_to_response(session)


@router.get("", response_model=list[str])
async def list_sessions(
    manager: GameSessionManager = Depends(get_session_manager),
) -> list[str]:
    """List all active session IDs."""
    return [str(s) for s in await manager.list_sessions()]


@router.get("/{session_id}", response_model=SnapshotResponse)
async def get_session(
    session_id: str,
    manager: GameSessionManager = Depends(get_session_manager),
) -> SnapshotResponse:
    """Get the current snapshot of a session."""
    session = await _require_session(manager, session_id)
    return _session_to_response(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    manager: GameSessionManager = Depends(get_session_manager),
) -> None:
    """Delete a session and cancel its frame loop."""
    deleted = await manager.delete_session(_parse_session_id(session_id))
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )


@router.post("/{session_id}/start", response_model=AcceptedResponse)
async def start_game(
    session_id: str,
    manager: GameSessionManager = Depends(get_session_manager),
) -> AcceptedResponse:
    """Start a round. Ignored while a round is running."""
    session = await _require_session(manager, session_id)
    accepted = await manager.start_game(session.session_id)
    return _accepted(session, accepted)


@router.post("/{session_id}/reset", response_model=AcceptedResponse)
async def reset_game(
    session_id: str,
    request: Optional[ResetRequest] = None,
    manager: GameSessionManager = Depends(get_session_manager),
) -> AcceptedResponse:
    """Return to idle, optionally clearing the score."""
    session = await _require_session(manager, session_id)
    clear_score = request.clear_score if request else False
    accepted = await manager.reset_game(session.session_id, clear_score=clear_score)
    return _accepted(session, accepted)


@router.post("/{session_id}/direction", response_model=AcceptedResponse)
async def request_direction(
    session_id: str,
    request: DirectionRequest,
    manager: GameSessionManager = Depends(get_session_manager),
) -> AcceptedResponse:
    """Buffer a player turn for the next step."""
    session = await _require_session(manager, session_id)
    accepted = session.engine.request_direction(Direction(request.direction))
    return _accepted(session, accepted)


@router.put("/{session_id}/ai-config", response_model=AcceptedResponse)
async def set_ai_config(
    session_id: str,
    request: AiConfigSchema,
    manager: GameSessionManager = Depends(get_session_manager),
) -> AcceptedResponse:
    """Apply an AI configuration record directly."""
    session = await _require_session(manager, session_id)
    accepted = session.engine.apply_ai_config(AiConfig.from_dict(request.model_dump()))
    return _accepted(session, accepted)


@router.post("/{session_id}/tune", response_model=AcceptedResponse)
async def tune_opponent(
    session_id: str,
    request: TuneRequest,
    manager: GameSessionManager = Depends(get_session_manager),
    tuner: OpponentTuner = Depends(get_tuner),
) -> AcceptedResponse:
    """
    Tune the AI from a free-text strategy description.

    On failure the AI keeps its current configuration.
    """
    session = await _require_session(manager, session_id)
    try:
        config = await tuner.tune(request.strategy_description)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e),
        )
    except TuningError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Opponent tuning failed: {e}",
        )

    accepted = session.engine.apply_ai_config(config)
    return _accepted(session, accepted)


@router.put("/{session_id}/settings", response_model=AcceptedResponse)
async def update_settings(
    session_id: str,
    request: SettingsRequest,
    manager: GameSessionManager = Depends(get_session_manager),
) -> AcceptedResponse:
    """Change arena size and game speed (only between rounds)."""
    session = await _require_session(manager, session_id)
    settings = GameSettings(arena_size=request.arena_size, speed=request.speed)
    accepted = session.engine.update_settings(settings)
    return _accepted(session, accepted)
