"""CLI for re-classifying articles that were stored unclassified."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from classify_articles.classify_articles import Classifier
from classify_articles.helpers import parse_classify_articles_args
from classify_articles.reclassify import reclassify_articles
from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.serialization import serialize_dataclass
from rds_postgres.connection import get_session

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_classify_articles_args(argv)

    config = load_config(args.config)
    set_config(config)
    setup_logging(config.log_level)

    classifier_config = config.classifier
    if args.model:
        classifier_config = replace(classifier_config, model=args.model)

    classifier = Classifier.from_config(classifier_config)
    if classifier is None:
        logger.error("Classifier unavailable, nothing to do")
        return 1

    with get_session() as session:
        summary = reclassify_articles(session, classifier, limit=args.limit)

    print(json.dumps(serialize_dataclass(summary)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
