"""API request/response schemas."""

from lightduel.api.schemas.session import (
    AcceptedResponse,
    AiConfigSchema,
    CreateSessionRequest,
    DirectionRequest,
    RequestSyncMessage,
    ResetGameMessage,
    ResetRequest,
    RiderSchema,
    SetDirectionMessage,
    SettingsRequest,
    SnapshotResponse,
    StartGameMessage,
    TuneRequest,
)

__all__ = [
    "AcceptedResponse",
    "AiConfigSchema",
    "CreateSessionRequest",
    "DirectionRequest",
    "RequestSyncMessage",
    "ResetGameMessage",
    "ResetRequest",
    "RiderSchema",
    "SetDirectionMessage",
    "SettingsRequest",
    "SnapshotResponse",
    "StartGameMessage",
    "TuneRequest",
]
