"""Helper functions for ingest_articles CLI."""

from __future__ import annotations

import argparse
import logging

from common.cli_helpers import add_config_argument, positive_int
from ingest_articles.fetch_articles.sources import DEFAULT_FEEDS

logger = logging.getLogger(__name__)


def parse_feed_names(value: str | None) -> dict[str, str]:
    '''Parse the --seed-sources argument into the feeds to register.'''

    # If no value is provided or if "all" is specified, return all feeds
    if not value or value.strip().lower() == "all":
        return dict(DEFAULT_FEEDS)

    parsed = [s.strip() for s in value.split(",") if s.strip()]

    # Log any unknown feed names
    for name in parsed:
        if name not in DEFAULT_FEEDS:
            logger.warning("Unknown feed: %s", name)

    feeds = {name: DEFAULT_FEEDS[name] for name in parsed if name in DEFAULT_FEEDS}

    if not feeds:
        raise ValueError(f"No valid feeds provided. Valid feeds: {', '.join(sorted(DEFAULT_FEEDS))}")

    return feeds


def parse_ingest_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_articles.'''

    parser = argparse.ArgumentParser(description="Run one RSS ingestion cycle")
    add_config_argument(parser)
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before ingesting",
    )
    parser.add_argument(
        "--seed-sources",
        nargs="?",
        const="all",
        default=None,
        help="Register default feeds before ingesting (comma-separated names, default: all)",
    )
    parser.add_argument(
        "--max-workers",
        type=positive_int,
        default=None,
        help="Override the number of sources fetched concurrently",
    )
    return parser.parse_args(argv)
