"""
Opponent Tuning

Natural-language strategy description -> AI opponent parameters,
via an external generative model.
"""

from .client import (
    GenerationResult,
    TuningAPIError,
    TuningClient,
    TuningClientError,
    TuningError,
    TuningRateLimitError,
)
from .prompts import TUNING_SYSTEM, build_tuning_prompt
from .tuner import (
    MIN_DESCRIPTION_LENGTH,
    OpponentTuner,
    TuningResponse,
    TuningResponseError,
    parse_tuning_reply,
)

__all__ = [
    # Client
    "GenerationResult",
    "TuningAPIError",
    "TuningClient",
    "TuningClientError",
    "TuningError",
    "TuningRateLimitError",
    # Prompts
    "TUNING_SYSTEM",
    "build_tuning_prompt",
    # Tuner
    "MIN_DESCRIPTION_LENGTH",
    "OpponentTuner",
    "TuningResponse",
    "TuningResponseError",
    "parse_tuning_reply",
]
