"""Helper script to fit distributions for a sample table or a synthetic demo set."""
from __future__ import annotations

import argparse

from planfit.cli import main


def _parse_args(argv: list[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Run the distribution fitting pipeline")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Analyse seeded synthetic data with 2-sigma clipping and 5%% tail trims.",
    )
    return parser.parse_known_args(argv)


if __name__ == "__main__":  # pragma: no cover
    args, remaining = _parse_args()
    forward_args: list[str] = list(remaining)
    if args.demo:
        forward_args.extend(
            ["--synthetic", "--seed", "42", "--sigma", "2", "--trim-bottom", "5", "--trim-top", "5"]
        )
    raise SystemExit(main(forward_args))
