"""Topic registry: case-insensitive upsert of topic names to stable ids."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from common.errors import ValidationFailure
from rds_postgres.models import Topic

logger = logging.getLogger(__name__)

MAX_TOPIC_NAME_LENGTH = 50


@dataclass
class TopicUpsert:
    """Result of an upsert: the topic row and whether this call created it."""
    topic: Topic
    created: bool


def normalize_topic_name(name: str) -> str:
    """Strip and collapse whitespace; reject empty or over-long names."""
    normalized = " ".join((name or "").split())
    if not normalized:
        raise ValidationFailure("name", "Topic name cannot be empty")
    if len(normalized) > MAX_TOPIC_NAME_LENGTH:
        raise ValidationFailure("name", f"Topic name must not exceed {MAX_TOPIC_NAME_LENGTH} characters")
    return normalized


def find_topic_by_name(session: Session, name: str) -> Topic | None:
    """Case-insensitive lookup by name."""
    stmt = select(Topic).where(func.lower(Topic.name) == name.lower())
    return session.execute(stmt).scalar_one_or_none()


def upsert_topic(session: Session, name: str) -> TopicUpsert:
    """Return the topic named `name` (any case), creating it if needed.

    Concurrent workers can race on the same name. The unique index on
    lower(name) decides the winner; the loser sees an IntegrityError, rolls
    back, and re-reads the winner's row.
    """
    name = normalize_topic_name(name)

    existing = find_topic_by_name(session, name)
    if existing is not None:
        return TopicUpsert(topic=existing, created=False)

    topic = Topic(name=name)
    session.add(topic)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        existing = find_topic_by_name(session, name)
        if existing is None:
            raise
        logger.info("Topic %r created concurrently, reusing id=%s", name, existing.id)
        return TopicUpsert(topic=existing, created=False)

    logger.info("Created topic %r id=%s", topic.name, topic.id)
    return TopicUpsert(topic=topic, created=True)


def upsert_topics(session: Session, names: Iterable[str]) -> list[uuid.UUID]:
    """Upsert each name and return topic ids in first-seen order.

    Names are deduplicated case-insensitively; invalid names are skipped.
    """
    topic_ids: list[uuid.UUID] = []
    seen: set[str] = set()

    for name in names:
        try:
            normalized = normalize_topic_name(name)
        except ValidationFailure as e:
            logger.warning("Skipping invalid topic name %r: %s", name, e.message)
            continue

        key = normalized.lower()
        if key in seen:
            continue
        seen.add(key)

        result = upsert_topic(session, normalized)
        topic_ids.append(result.topic.id)

    return topic_ids


def get_topic(session: Session, topic_id: uuid.UUID) -> Topic | None:
    return session.get(Topic, topic_id)


def list_topics(
    session: Session,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[Topic], int]:
    """List topics ordered by name, optionally filtered by a substring.

    Returns:
        Tuple of (topics, total_count)
    """
    stmt = select(Topic)
    count_stmt = select(func.count()).select_from(Topic)
    if search:
        condition = func.lower(Topic.name).contains(search.lower(), autoescape=True)
        stmt = stmt.where(condition)
        count_stmt = count_stmt.where(condition)

    total = session.execute(count_stmt).scalar_one()
    topics = session.execute(stmt.order_by(Topic.name).limit(limit).offset(offset)).scalars().all()
    return list(topics), total
