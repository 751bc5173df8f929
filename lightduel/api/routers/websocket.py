"""WebSocket router for real-time game session updates."""

import asyncio
import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from lightduel.api.schemas.session import (
    RequestSyncMessage,
    ResetGameMessage,
    SetDirectionMessage,
    SnapshotResponse,
    StartGameMessage,
    WSMessageBase,
)
from lightduel.core.enums import Direction
from lightduel.events import GameEvent, RoundEndedEvent, TickEvent
from lightduel.simulation import (
    GameSession,
    GameSessionManager,
    GameSnapshot,
    get_session_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])

CLIENT_MESSAGES: dict[str, type[WSMessageBase]] = {
    "start_game": StartGameMessage,
    "reset_game": ResetGameMessage,
    "set_direction": SetDirectionMessage,
    "request_sync": RequestSyncMessage,
}


def _snapshot_payload(session: GameSession, snapshot: GameSnapshot) -> dict:
    return SnapshotResponse.from_snapshot(str(session.session_id), snapshot).model_dump()


async def _send_error(websocket: WebSocket, message: str, code: str) -> None:
    await websocket.send_json({
        "type": "error",
        "message": message,
        "code": code,
    })


@router.websocket("/ws/sessions/{session_id}")
async def session_websocket(
    websocket: WebSocket,
    session_id: str,
    manager: GameSessionManager = Depends(get_session_manager),
) -> None:
    """
    WebSocket endpoint for a game session.

    Client messages:
    - start_game: Start a round and its frame loop
    - reset_game: Return to idle (optional clear_score)
    - set_direction: Buffer a player turn
    - request_sync: Request full state sync

    Server messages:
    - state_sync: Full snapshot on connect, after start/reset, or on request
    - tick_update: Sent after every simulation step
    - round_over: Sent once when a round ends
    - error: Error message
    """
    await websocket.accept()

    try:
        uuid = UUID(session_id)
    except ValueError:
        await _send_error(websocket, "Invalid session ID format", "INVALID_SESSION_ID")
        await websocket.close()
        return

    session = await manager.get_session(uuid)
    if session is None:
        await _send_error(websocket, "Session not found", "SESSION_NOT_FOUND")
        await websocket.close()
        return

    async def send_sync() -> None:
        await websocket.send_json({
            "type": "state_sync",
            "payload": _snapshot_payload(session, session.engine.snapshot()),
        })

    # Engine events fire on this event loop from the session's frame loop,
    # whoever started the round; sends are scheduled as tasks.
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()

    async def push(message_type: str, snapshot: GameSnapshot) -> None:
        try:
            await websocket.send_json({
                "type": message_type,
                "payload": _snapshot_payload(session, snapshot),
            })
        except (WebSocketDisconnect, RuntimeError):
            logger.debug(f"Dropped {message_type} for closed socket on session {uuid}")

    def schedule(message_type: str, snapshot: GameSnapshot) -> None:
        task = loop.create_task(push(message_type, snapshot))
        pending.add(task)
        task.add_done_callback(pending.discard)

    def on_event(event: GameEvent) -> None:
        if isinstance(event, TickEvent) and event.snapshot is not None:
            schedule("tick_update", event.snapshot)
        elif isinstance(event, RoundEndedEvent) and event.snapshot is not None:
            schedule("round_over", event.snapshot)

    event_bus = session.engine.event_bus
    event_bus.subscribe_all(on_event)

    try:
        await send_sync()

        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await _send_error(websocket, "Invalid JSON", "INVALID_JSON")
                continue

            if not isinstance(message, dict):
                await _send_error(websocket, "Message must be an object", "INVALID_MESSAGE")
                continue

            msg_type = message.get("type")
            model = CLIENT_MESSAGES.get(msg_type)
            if model is None:
                await _send_error(
                    websocket,
                    f"Unknown message type: {msg_type}",
                    "UNKNOWN_MESSAGE_TYPE",
                )
                continue

            try:
                parsed = model.model_validate(message)
            except ValidationError as e:
                await _send_error(websocket, str(e), "INVALID_MESSAGE")
                continue

            if isinstance(parsed, StartGameMessage):
                if await manager.start_game(uuid):
                    await send_sync()
                else:
                    await _send_error(
                        websocket,
                        "Could not start game (already running?)",
                        "START_FAILED",
                    )

            elif isinstance(parsed, ResetGameMessage):
                await manager.reset_game(uuid, clear_score=parsed.clear_score)
                await send_sync()

            elif isinstance(parsed, SetDirectionMessage):
                if not session.engine.request_direction(Direction(parsed.direction)):
                    await _send_error(
                        websocket,
                        f"Turn {parsed.direction} rejected",
                        "DIRECTION_REJECTED",
                    )

            elif isinstance(parsed, RequestSyncMessage):
                await send_sync()

    except WebSocketDisconnect:
        logger.info(f"WebSocket for session {uuid} disconnected")
    finally:
        event_bus.unsubscribe_all(on_event)
        await manager.reset_game(uuid)
        for task in list(pending):
            task.cancel()
