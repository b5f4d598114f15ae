"""Helper functions for classify_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_config_argument, positive_int

DEFAULT_LIMIT = 100


def parse_classify_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for classify_articles."""

    parser = argparse.ArgumentParser(description="Re-classify articles stored without a sentiment")
    add_config_argument(parser)
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=DEFAULT_LIMIT,
        help=f"Maximum number of articles to re-classify (default: {DEFAULT_LIMIT})",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Override the classifier model from config",
    )

    return parser.parse_args(argv)
