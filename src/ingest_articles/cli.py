"""CLI for running an ingestion cycle."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from classify_articles.classify_articles import Classifier
from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.errors import StoreUnavailable
from common.serialization import serialize_dataclass
from ingest_articles.helpers import parse_feed_names, parse_ingest_articles_args
from ingest_articles.ingest_articles import run_ingestion_cycle
from rds_postgres.connection import build_session_factory, get_engine, get_session, init_db
from rds_postgres.sources import ensure_sources

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_ingest_articles_args(argv)

    config = load_config(args.config)
    if args.max_workers:
        config = replace(config, ingest=replace(config.ingest, max_workers=args.max_workers))
    set_config(config)
    setup_logging(config.log_level)

    engine = get_engine()
    if args.init_db:
        init_db(engine)

    session_factory = build_session_factory(engine)

    if args.seed_sources:
        feeds = parse_feed_names(args.seed_sources)
        with get_session(session_factory) as session:
            ensure_sources(session, feeds.items())

    classifier = Classifier.from_config(config.classifier)

    try:
        summary = run_ingestion_cycle(session_factory, classifier, config)
    except StoreUnavailable as e:
        logger.error("Ingestion aborted: %s", e)
        return 2

    print(json.dumps(serialize_dataclass(summary), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
