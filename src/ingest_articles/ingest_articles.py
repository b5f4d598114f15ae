"""Ingestion cycle: fetch, parse, classify and persist articles from every active source."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from sqlalchemy.orm import Session

from classify_articles.classify_articles import ClassificationError, Classifier
from classify_articles.models import Classification
from common.config import Config
from common.datetime import utc_now
from common.errors import StoreUnavailable
from ingest_articles.fetch_articles.fetch_feed import fetch_feed
from ingest_articles.fetch_articles.parse_feed import parse_feed
from ingest_articles.models import CycleSummary, FeedItem, SourceSummary
from rds_postgres.articles import NewArticle, article_exists, insert_article
from rds_postgres.connection import SessionFactory, check_connection, get_session, is_store_lost
from rds_postgres.sources import SourceRef, get_active_sources, record_fetch_status
from rds_postgres.topics import upsert_topics

logger = logging.getLogger(__name__)


def run_ingestion_cycle(
    session_factory: SessionFactory,
    classifier: Classifier | None,
    config: Config,
) -> CycleSummary:
    """Run one ingestion cycle across all active sources.

    Sources run on a bounded worker pool and fail independently. Only an
    unreachable database aborts the cycle, by raising StoreUnavailable.
    """
    summary = CycleSummary(started_at=utc_now())

    with get_session(session_factory) as session:
        check_connection(session)
        try:
            sources = get_active_sources(session)
        except Exception as exc:
            if is_store_lost(session, exc):
                raise StoreUnavailable("Database unreachable while loading sources") from exc
            raise

    if not sources:
        logger.warning("No active RSS sources configured")
        summary.finished_at = utc_now()
        return summary

    max_workers = max(1, min(config.ingest.max_workers, len(sources)))
    logger.info("Ingesting %d sources with %d workers", len(sources), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(ingest_source, source, session_factory, classifier, config)
            for source in sources
        ]
        try:
            for future in as_completed(futures):
                summary.add(future.result())
        except StoreUnavailable:
            for future in futures:
                future.cancel()
            logger.error("Database unreachable, aborting ingestion cycle")
            raise

    summary.finished_at = utc_now()
    logger.info(
        "Ingestion cycle complete: %d sources (%d failed), %d created, %d duplicates, %d unclassified",
        summary.sources_processed,
        summary.sources_failed,
        summary.articles_created,
        summary.articles_duplicate,
        summary.articles_unclassified,
    )
    return summary


def ingest_source(
    source: SourceRef,
    session_factory: SessionFactory,
    classifier: Classifier | None,
    config: Config,
) -> SourceSummary:
    """Process one source in its own session; failures are recorded, not raised."""
    source_summary = SourceSummary(source_id=source.id, source_name=source.name)

    with get_session(session_factory) as session:
        try:
            _ingest_source(session, source, classifier, config, source_summary)
        except StoreUnavailable:
            raise
        except Exception as e:
            if is_store_lost(session, e):
                raise StoreUnavailable(f"Database unreachable while ingesting {source.name}") from e
            session.rollback()
            logger.error("Failed to ingest source %s: %s", source.name, e)
            source_summary.succeeded = False
            source_summary.error = str(e)

        try:
            record_fetch_status(session, source.id, source_summary.succeeded, source_summary.error)
        except Exception as e:
            if is_store_lost(session, e):
                raise StoreUnavailable(f"Database unreachable while recording {source.name}") from e
            session.rollback()
            logger.error("Failed to record fetch status for %s: %s", source.name, e)

    return source_summary


def _ingest_source(
    session: Session,
    source: SourceRef,
    classifier: Classifier | None,
    config: Config,
    source_summary: SourceSummary,
) -> None:
    logger.info("Fetching articles from %s (%s)", source.name, source.url)

    fetched_at = utc_now()
    fetch = fetch_feed(source.url, timeout=config.fetch.timeout_seconds, user_agent=config.fetch.user_agent)
    if not fetch.ok:
        source_summary.error = fetch.failure.describe()
        logger.warning("Skipping %s this cycle: %s", source.name, source_summary.error)
        return

    parsed = parse_feed(fetch.content, fetched_at=fetched_at)
    if not parsed.ok:
        source_summary.error = parsed.failure.message
        logger.warning("Skipping %s this cycle: %s", source.name, source_summary.error)
        return

    logger.info("Found %d articles from %s", len(parsed.items), source.name)

    for item in parsed.items:
        try:
            _ingest_item(session, source, item, classifier, source_summary)
        except Exception as e:
            if is_store_lost(session, e):
                raise StoreUnavailable(f"Database unreachable while ingesting {source.name}") from e
            session.rollback()
            source_summary.failed_articles += 1
            logger.warning("Failed to store article %s from %s: %s", item.link, source.name, e)

    source_summary.succeeded = True
    logger.info(
        "Source %s: %d created, %d duplicates, %d unclassified",
        source.name,
        source_summary.articles_created,
        source_summary.duplicates,
        source_summary.unclassified,
    )


def _ingest_item(
    session: Session,
    source: SourceRef,
    item: FeedItem,
    classifier: Classifier | None,
    source_summary: SourceSummary,
) -> None:
    if article_exists(session, item.link):
        logger.info("Skipped duplicate article: link=%s", item.link)
        source_summary.duplicates += 1
        return

    classification = classify_item(classifier, item)
    topic_ids = upsert_topics(session, classification.topics) if classification else []

    result = insert_article(
        session,
        NewArticle(
            source_id=source.id,
            title=item.title,
            link=item.link,
            publication_date=item.published_at,
            description=item.description,
            sentiment=classification.sentiment if classification else None,
        ),
        topic_ids,
    )

    if not result.created:
        source_summary.duplicates += 1
        return

    source_summary.articles_created += 1
    if classification is None:
        source_summary.unclassified += 1


def classify_item(classifier: Classifier | None, item: FeedItem) -> Classification | None:
    """Best-effort classification; None means store the article unclassified."""
    if classifier is None:
        return None
    try:
        return classifier.classify(item.title, item.description)
    except ClassificationError as e:
        logger.warning("Classification failed for %s: %s", item.link, e)
        return None
