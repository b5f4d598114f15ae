"""Source registry: the feeds to poll and their last fetch outcome."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from common.datetime import utc_now
from rds_postgres.models import RssSource

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 1000


@dataclass(frozen=True)
class SourceRef:
    """Detached view of a source handed to ingestion workers."""
    id: uuid.UUID
    name: str
    url: str


def get_active_sources(session: Session) -> list[SourceRef]:
    """Active sources, least recently fetched first (never fetched first of all)."""
    stmt = (
        select(RssSource)
        .where(RssSource.is_active.is_(True))
        .order_by(RssSource.last_fetched_at.asc().nulls_first(), RssSource.name)
    )
    return [
        SourceRef(id=s.id, name=s.name, url=s.url)
        for s in session.execute(stmt).scalars().all()
    ]


def record_fetch_status(
    session: Session,
    source_id: uuid.UUID,
    success: bool,
    error: str | None = None,
    at: datetime | None = None,
) -> None:
    """Record the outcome of the latest fetch attempt for a source.

    A failure never deactivates the source; the next cycle retries it.
    """
    source = session.get(RssSource, source_id)
    if source is None:
        logger.warning("Cannot record fetch status for unknown source id=%s", source_id)
        return

    if success:
        source.last_fetched_at = at or utc_now()
        source.last_fetch_error = None
    else:
        source.last_fetch_error = (error or "Unknown error")[:MAX_ERROR_LENGTH]
    session.commit()


def ensure_sources(session: Session, feeds: Iterable[tuple[str, str]]) -> int:
    """Register (name, url) pairs that are not already known by url.

    Returns:
        Number of sources added
    """
    known_urls = set(session.execute(select(RssSource.url)).scalars().all())
    added = 0
    for name, url in feeds:
        if url in known_urls:
            continue
        session.add(RssSource(name=name, url=url))
        known_urls.add(url)
        added += 1
    session.commit()
    logger.info("Registered %d new RSS sources", added)
    return added
