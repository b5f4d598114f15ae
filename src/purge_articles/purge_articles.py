"""Retention sweep: delete articles older than the retention window."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from common.datetime import ensure_utc, utc_now
from common.errors import StoreUnavailable, ValidationFailure
from rds_postgres.articles import delete_articles_older_than
from rds_postgres.connection import is_store_lost

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


def retention_cutoff(retention_days: int, now: datetime | None = None) -> datetime:
    """Oldest publication date that survives a sweep run at `now`."""
    if retention_days <= 0:
        raise ValidationFailure("retention_days", "must be greater than zero")
    now = ensure_utc(now) if now is not None else utc_now()
    return now - timedelta(days=retention_days)


def run_retention_sweep(
    session: Session,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    now: datetime | None = None,
) -> int:
    """Delete articles published more than `retention_days` ago.

    Topic links go with their articles; topics themselves are kept. Running
    the sweep twice in a row deletes nothing the second time.

    Returns:
        Number of articles deleted
    """
    cutoff = retention_cutoff(retention_days, now)
    logger.info("Purging articles published before %s", cutoff.isoformat())

    try:
        deleted = delete_articles_older_than(session, cutoff)
    except Exception as exc:
        if is_store_lost(session, exc):
            raise StoreUnavailable("Database unreachable during retention sweep") from exc
        raise

    logger.info("Purged %d articles older than %d days", deleted, retention_days)
    return deleted
