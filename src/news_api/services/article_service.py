"""Article read service: filtering, personalization and pagination."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from common.config import QueryConfig
from common.errors import NotFoundError, PreconditionFailure, ValidationFailure
from news_api.auth import Caller
from rds_postgres.articles import (
    ArticleFilters,
    ArticleSort,
    SortField,
    SortOrder,
    delete_article,
    get_article,
    query_articles,
)
from rds_postgres.models import Article, Profile, Sentiment
from rds_postgres.profiles import get_profile

logger = logging.getLogger(__name__)


@dataclass
class ArticleQuery:
    """One read request. Unset filters mean 'any'."""
    limit: int = 20
    offset: int = 0
    sentiment: Sentiment | None = None
    topic_id: uuid.UUID | None = None
    source_id: uuid.UUID | None = None
    sort_by: SortField = SortField.PUBLICATION_DATE
    sort_order: SortOrder = SortOrder.DESC
    apply_personalization: bool = False

    def validate(self, max_limit: int = 100) -> None:
        """Raises ValidationFailure for out-of-range paging values."""
        if not 1 <= self.limit <= max_limit:
            raise ValidationFailure("limit", f"Limit must be between 1 and {max_limit}")
        if self.offset < 0:
            raise ValidationFailure("offset", "Offset must be non-negative")


@dataclass
class ArticleListResult:
    items: list[Article] = field(default_factory=list)
    total: int = 0
    limit: int = 20
    offset: int = 0
    has_more: bool = False
    next_offset: int = 0
    sentiment: Sentiment | None = None
    personalization: bool = False
    blocked_count: int | None = None


def is_blocked(article: Article, terms: list[str]) -> bool:
    """True if any lowercased term occurs in the article's title, description or link."""
    haystacks = [
        (article.title or "").lower(),
        (article.description or "").lower(),
        (article.link or "").lower(),
    ]
    return any(term in text for term in terms for text in haystacks)


class ArticleService:
    """Serves article pages, optionally shaped by the caller's profile.

    Mood becomes a database-level sentiment filter. The blocklist is applied
    after fetching, so blocklisted requests over-fetch in bounded rounds and
    report `next_offset` as the store position just past the last row they
    consumed.
    """

    def __init__(self, session: Session, config: QueryConfig):
        self.session = session
        self.config = config

    def list_articles(self, query: ArticleQuery, caller: Caller | None = None) -> ArticleListResult:
        query.validate(self.config.max_limit)

        filters = ArticleFilters(
            sentiment=query.sentiment,
            source_id=query.source_id,
            topic_id=query.topic_id,
        )
        sort = ArticleSort(field=query.sort_by, order=query.sort_order)

        if not query.apply_personalization:
            return self._list_unfiltered(query, filters, sort)

        profile = self._load_profile(caller)
        if not profile.personalization_enabled:
            logger.debug("Personalization disabled for user %s", profile.user_id)
            return self._list_unfiltered(query, filters, sort)

        # An explicit sentiment from the caller wins over the profile mood
        if profile.mood is not None and filters.sentiment is None:
            filters.sentiment = profile.mood

        terms = [term.lower() for term in profile.blocklist or [] if term]
        if not terms:
            result = self._list_unfiltered(query, filters, sort)
            result.personalization = True
            result.blocked_count = 0
            return result

        return self._list_overfetched(query, filters, sort, terms)

    def get_article(self, article_id: uuid.UUID) -> Article:
        article = get_article(self.session, article_id)
        if article is None:
            raise NotFoundError(f"Article {article_id} not found")
        return article

    def delete_article(self, article_id: uuid.UUID) -> None:
        if not delete_article(self.session, article_id):
            raise NotFoundError(f"Article {article_id} not found")

    def _load_profile(self, caller: Caller | None) -> Profile:
        if caller is None:
            raise PreconditionFailure(
                PreconditionFailure.AUTHENTICATION_REQUIRED,
                "Authentication required for personalized results",
            )
        profile = get_profile(self.session, caller.user_id)
        if profile is None:
            raise PreconditionFailure(
                PreconditionFailure.PROFILE_NOT_FOUND,
                "User profile not found. Please create a profile first.",
            )
        return profile

    def _list_unfiltered(
        self, query: ArticleQuery, filters: ArticleFilters, sort: ArticleSort
    ) -> ArticleListResult:
        page = query_articles(self.session, filters, sort, query.limit, query.offset)
        next_offset = query.offset + len(page.items)
        return ArticleListResult(
            items=page.items,
            total=page.total,
            limit=query.limit,
            offset=query.offset,
            has_more=next_offset < page.total,
            next_offset=next_offset,
            sentiment=filters.sentiment,
        )

    def _list_overfetched(
        self,
        query: ArticleQuery,
        filters: ArticleFilters,
        sort: ArticleSort,
        terms: list[str],
    ) -> ArticleListResult:
        batch_size = query.limit * max(1, self.config.overfetch_multiplier)
        max_rounds = max(1, self.config.overfetch_max_rounds)

        cursor = query.offset
        items: list[Article] = []
        blocked = 0
        total = 0

        for round_number in range(1, max_rounds + 1):
            page = query_articles(self.session, filters, sort, batch_size, cursor)
            total = page.total

            for article in page.items:
                cursor += 1
                if is_blocked(article, terms):
                    blocked += 1
                    continue
                items.append(article)
                if len(items) == query.limit:
                    break

            if len(items) >= query.limit or len(page.items) < batch_size:
                break
        else:
            logger.info(
                "Over-fetch hit %d rounds with %d of %d items for offset %d",
                round_number,
                len(items),
                query.limit,
                query.offset,
            )

        return ArticleListResult(
            items=items,
            total=total,
            limit=query.limit,
            offset=query.offset,
            has_more=cursor < total,
            next_offset=cursor,
            sentiment=filters.sentiment,
            personalization=True,
            blocked_count=blocked,
        )
