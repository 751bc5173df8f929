"""
Tuning Prompt Templates

Turns a free-text strategy description into speed/aggressiveness values.
"""


TUNING_SYSTEM = """You are an expert game AI tuning specialist for a light-cycle arena game.

You will be given a description of the desired AI opponent strategy and difficulty level.
Based on it, choose the AI opponent's parameters:

- speed: a number greater than 0 and at most 1, where 1 is the maximum speed.
  Higher speed makes the opponent re-think its heading more often.
- aggressiveness: a number between 0 and 1, where 1 is the most aggressive.
  Higher aggressiveness makes the opponent steer toward the player more often.
- description: a very short description of the resulting AI behavior.

Reply with a single JSON object and nothing else:
{"speed": <number>, "aggressiveness": <number>, "description": "<text>"}
"""


def build_tuning_prompt(strategy_description: str) -> tuple[str, str]:
    """
    Build (system, user) prompts for a strategy description.

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    user = f"Strategy Description: {strategy_description.strip()}"
    return TUNING_SYSTEM, user
