"""Entry point for lightduel package."""

import argparse
import logging
import random

from lightduel.config import get_config


def main() -> None:
    """Main entry point for the Lightduel application."""
    parser = argparse.ArgumentParser(
        description="Lightduel - player vs. AI light-cycle duel",
        prog="lightduel",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Play headless rounds with an idle player (no server)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=3,
        help="Rounds to play in demo mode (default: 3)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the AI random source",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="API host (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="API port (default: 8000)",
    )

    args = parser.parse_args()
    config = get_config()

    if args.demo:
        from lightduel.simulation import GameEngine

        logging.basicConfig(level=config.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

        print("Lightduel - Light-Cycle Duel (Demo Mode)")
        print("=" * 50)

        # Synthetic clock: one second per step keeps trails on the board
        # for five steps, independent of wall time.
        steps = iter(range(0, 10**9, 1000))
        engine = GameEngine(
            settings=config.default_settings(),
            rng=random.Random(args.seed),
            clock=lambda: next(steps),
        )

        for _ in range(args.rounds):
            snapshot = engine.run_until_round_end()
            print(
                f"Round {engine.round_number}: {snapshot.outcome.value if snapshot.outcome else 'unfinished'} "
                f"after {snapshot.tick} steps"
            )

        print()
        print(f"Final Score: Player {engine.score.player} - AI {engine.score.ai}")
    else:
        from lightduel.api.main import run_api

        run_api(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
