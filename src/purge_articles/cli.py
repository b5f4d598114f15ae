"""CLI for the article retention sweep."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import add_config_argument, positive_int, setup_logging
from common.config import load_config, set_config
from common.errors import StoreUnavailable
from purge_articles.purge_articles import run_retention_sweep
from rds_postgres.connection import get_session

load_dotenv()

logger = logging.getLogger(__name__)


def parse_purge_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete articles older than the retention window")
    add_config_argument(parser)
    parser.add_argument(
        "--retention-days",
        type=positive_int,
        default=None,
        help="Override retention.retention_days from config",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_purge_articles_args(argv)

    config = load_config(args.config)
    set_config(config)
    setup_logging(config.log_level)

    retention_days = args.retention_days or config.retention.retention_days

    try:
        with get_session() as session:
            deleted = run_retention_sweep(session, retention_days=retention_days)
    except StoreUnavailable as e:
        logger.error("Retention sweep aborted: %s", e)
        return 2

    print(json.dumps({"deleted": deleted, "retention_days": retention_days}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
