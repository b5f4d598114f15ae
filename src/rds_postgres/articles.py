"""Article store: persistence, dedupe and query primitives for articles."""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from common.datetime import ensure_utc
from rds_postgres.models import Article, ArticleTopic, Sentiment

logger = logging.getLogger(__name__)


class SortField(str, enum.Enum):
    PUBLICATION_DATE = "publication_date"
    CREATED_AT = "created_at"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class InsertStatus(str, enum.Enum):
    CREATED = "created"
    CONFLICT = "conflict"


@dataclass
class NewArticle:
    """Command for inserting an article."""
    source_id: uuid.UUID
    title: str
    link: str
    publication_date: datetime
    description: str | None = None
    sentiment: Sentiment | None = None


@dataclass
class InsertResult:
    status: InsertStatus
    article: Article | None = None

    @property
    def created(self) -> bool:
        return self.status is InsertStatus.CREATED


@dataclass
class ArticleFilters:
    """Database-level filters, AND-combined. None means 'any'."""
    sentiment: Sentiment | None = None
    source_id: uuid.UUID | None = None
    topic_id: uuid.UUID | None = None


@dataclass
class ArticleSort:
    field: SortField = SortField.PUBLICATION_DATE
    order: SortOrder = SortOrder.DESC


@dataclass
class ArticlePage:
    items: list[Article] = field(default_factory=list)
    total: int = 0


def article_exists(session: Session, link: str) -> bool:
    """Cheap existence check. The unique constraint on link stays authoritative."""
    return session.execute(select(exists().where(Article.link == link))).scalar()


def _replace_topic_links(session: Session, article_id: uuid.UUID, topic_ids: Sequence[uuid.UUID]) -> None:
    session.execute(delete(ArticleTopic).where(ArticleTopic.article_id == article_id))
    for topic_id in dict.fromkeys(topic_ids):
        session.add(ArticleTopic(article_id=article_id, topic_id=topic_id))


def insert_article(
    session: Session,
    new_article: NewArticle,
    topic_ids: Sequence[uuid.UUID] = (),
) -> InsertResult:
    """Insert an article and its topic associations in one transaction.

    Either the article and every association are committed, or nothing is.
    A duplicate link is an expected outcome during re-polling and is
    returned as a conflict rather than raised.
    """
    article = Article(
        source_id=new_article.source_id,
        title=new_article.title,
        description=new_article.description,
        link=new_article.link,
        publication_date=ensure_utc(new_article.publication_date),
        sentiment=new_article.sentiment,
    )
    session.add(article)

    try:
        session.flush()
        for topic_id in dict.fromkeys(topic_ids):
            session.add(ArticleTopic(article_id=article.id, topic_id=topic_id))
        session.commit()
    except IntegrityError:
        session.rollback()
        if article_exists(session, new_article.link):
            logger.info("Skipped duplicate article: link=%s", new_article.link)
            return InsertResult(status=InsertStatus.CONFLICT)
        raise

    return InsertResult(status=InsertStatus.CREATED, article=article)


def _apply_filters(stmt, filters: ArticleFilters):
    if filters.sentiment is not None:
        stmt = stmt.where(Article.sentiment == filters.sentiment)
    if filters.source_id is not None:
        stmt = stmt.where(Article.source_id == filters.source_id)
    if filters.topic_id is not None:
        stmt = stmt.where(
            Article.id.in_(
                select(ArticleTopic.article_id).where(ArticleTopic.topic_id == filters.topic_id)
            )
        )
    return stmt


def _order_by(sort: ArticleSort) -> list:
    column = Article.publication_date if sort.field is SortField.PUBLICATION_DATE else Article.created_at
    if sort.order is SortOrder.ASC:
        return [column.asc(), Article.id.asc()]
    return [column.desc(), Article.id.desc()]


def count_articles(session: Session, filters: ArticleFilters) -> int:
    stmt = _apply_filters(select(func.count()).select_from(Article), filters)
    return session.execute(stmt).scalar_one()


def query_articles(
    session: Session,
    filters: ArticleFilters,
    sort: ArticleSort,
    limit: int,
    offset: int,
) -> ArticlePage:
    """Fetch one page of filtered, sorted articles plus the filtered total.

    `id` is appended to the sort so that pages never overlap or skip rows
    when several articles share a timestamp.
    """
    stmt = (
        _apply_filters(select(Article), filters)
        .options(selectinload(Article.topics))
        .order_by(*_order_by(sort))
        .limit(limit)
        .offset(offset)
    )
    items = session.execute(stmt).unique().scalars().all()
    return ArticlePage(items=list(items), total=count_articles(session, filters))


def get_article(session: Session, article_id: uuid.UUID) -> Article | None:
    stmt = select(Article).where(Article.id == article_id).options(selectinload(Article.topics))
    return session.execute(stmt).unique().scalar_one_or_none()


def list_unclassified_articles(session: Session, limit: int) -> list[Article]:
    """Articles whose classification failed or never ran, newest first."""
    stmt = (
        select(Article)
        .where(Article.sentiment.is_(None))
        .order_by(Article.publication_date.desc(), Article.id.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).unique().scalars().all())


def update_article_classification(
    session: Session,
    article_id: uuid.UUID,
    sentiment: Sentiment | None,
    topic_ids: Sequence[uuid.UUID],
) -> Article | None:
    """Set sentiment and replace topic associations atomically.

    Returns:
        The updated article, or None if it no longer exists.
    """
    article = session.get(Article, article_id)
    if article is None:
        return None

    try:
        article.sentiment = sentiment
        _replace_topic_links(session, article_id, topic_ids)
        session.commit()
    except Exception:
        session.rollback()
        raise

    return article


def delete_articles_older_than(session: Session, cutoff: datetime) -> int:
    """Delete articles published before `cutoff` together with their topic links.

    Returns:
        Number of articles deleted
    """
    cutoff = ensure_utc(cutoff)
    old_ids = select(Article.id).where(Article.publication_date < cutoff)

    try:
        session.execute(delete(ArticleTopic).where(ArticleTopic.article_id.in_(old_ids)))
        result = session.execute(delete(Article).where(Article.publication_date < cutoff))
        session.commit()
    except Exception:
        session.rollback()
        raise

    return result.rowcount or 0


def delete_article(session: Session, article_id: uuid.UUID) -> bool:
    """Delete one article and its topic links. Returns False if it didn't exist."""
    try:
        session.execute(delete(ArticleTopic).where(ArticleTopic.article_id == article_id))
        result = session.execute(delete(Article).where(Article.id == article_id))
        session.commit()
    except Exception:
        session.rollback()
        raise

    deleted = bool(result.rowcount)
    if deleted:
        logger.info("Deleted article id=%s", article_id)
    return deleted
