"""
Opponent Tuner

Maps a natural-language strategy description to an AiConfig using the
generative model. Failures never reach the simulation: they raise
TuningError to the caller, and whatever config the engine already has
stays in effect.
"""

import json
import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from lightduel.simulation.models import AiConfig
from .client import GenerationResult, TuningClient, TuningError
from .prompts import build_tuning_prompt


logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 10


class TuningResponseError(TuningError):
    """Raised when the model reply is not a valid tuning record."""
    pass


class TuningResponse(BaseModel):
    """Expected shape of the model's JSON reply."""

    speed: float = Field(gt=0.0, le=1.0)
    aggressiveness: float = Field(ge=0.0, le=1.0)
    description: str = ""


def parse_tuning_reply(text: str) -> AiConfig:
    """
    Parse the model's reply into an AiConfig.

    Tolerates a Markdown code fence around the JSON object.

    Raises:
        TuningResponseError: If the reply is not valid JSON or out of range
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        cleaned = cleaned.strip()

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise TuningResponseError(f"Tuning reply is not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise TuningResponseError("Tuning reply is not a JSON object")

    try:
        parsed = TuningResponse.model_validate(payload)
    except ValidationError as e:
        raise TuningResponseError(f"Tuning reply failed validation: {e}") from e

    return AiConfig(
        speed=parsed.speed,
        aggressiveness=parsed.aggressiveness,
        description=parsed.description,
    )


class OpponentTuner:
    """
    Produces AI configurations from strategy descriptions.

    Usage:
        async with OpponentTuner() as tuner:
            config = await tuner.tune("A relentless hunter that never lets up")
            engine.apply_ai_config(config)
    """

    TEMPERATURE = 0.4
    MAX_TOKENS = 200

    def __init__(self, client: Optional[TuningClient] = None, **client_kwargs):
        """
        Initialize the tuner.

        Args:
            client: Existing TuningClient. Created from client_kwargs if omitted.
        """
        self._client = client or TuningClient(**client_kwargs)

    async def close(self):
        await self._client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def tune(self, strategy_description: str) -> AiConfig:
        """
        Ask the model for opponent parameters.

        Args:
            strategy_description: Free text describing the desired opponent

        Returns:
            A validated AiConfig

        Raises:
            ValueError: If the description is too short
            TuningError: If the service fails or replies with an invalid record
        """
        if len(strategy_description.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Strategy description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )

        system_prompt, user_prompt = build_tuning_prompt(strategy_description)
        try:
            result: GenerationResult = await self._client.generate(
                system=system_prompt,
                user=user_prompt,
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
            config = parse_tuning_reply(result.text)
        except TuningError as e:
            logger.error(f"Failed to tune AI opponent: {e}")
            raise

        logger.debug(
            f"Tuned opponent in {result.latency_ms:.0f}ms "
            f"(request #{self._client.request_count}): "
            f"speed={config.speed}, aggressiveness={config.aggressiveness}"
        )
        return config
