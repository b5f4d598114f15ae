"""Retry classification for articles stored without a sentiment."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from classify_articles.classify_articles import ClassificationError, Classifier
from classify_articles.models import ReclassifySummary
from rds_postgres.articles import list_unclassified_articles, update_article_classification
from rds_postgres.topics import upsert_topics

logger = logging.getLogger(__name__)


def reclassify_articles(session: Session, classifier: Classifier, limit: int = 100) -> ReclassifySummary:
    """Classify up to `limit` unclassified articles, newest first.

    Articles that fail again stay unclassified and are picked up by the
    next run.
    """
    summary = ReclassifySummary()
    articles = list_unclassified_articles(session, limit)
    if not articles:
        logger.info("No unclassified articles")
        return summary

    logger.info("Re-classifying %d articles", len(articles))

    for article in articles:
        summary.attempted += 1
        try:
            classification = classifier.classify(article.title, article.description)
        except ClassificationError as e:
            summary.failed += 1
            logger.warning("Classification failed for %s: %s", article.link, e)
            continue

        topic_ids = upsert_topics(session, classification.topics)
        updated = update_article_classification(session, article.id, classification.sentiment, topic_ids)
        if updated is None:
            logger.info("Article %s was deleted before it could be re-classified", article.id)
            continue

        summary.classified += 1
        logger.info(
            "  %s | %s | %s | topics=%s",
            article.id,
            article.title[:80],
            classification.sentiment.value,
            classification.topics,
        )

    logger.info(
        "Re-classification complete: %d attempted, %d classified, %d failed",
        summary.attempted,
        summary.classified,
        summary.failed,
    )
    return summary
