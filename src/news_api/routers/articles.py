"""Article API endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from common.config import Config
from common.errors import ValidationFailure
from news_api.auth import Caller, get_caller, require_service_role
from news_api.dependencies import get_app_config, get_db_session
from news_api.models.article import (
    ArticleListResponse,
    ArticleResponse,
    FiltersApplied,
    PaginationResponse,
)
from news_api.services.article_service import ArticleQuery, ArticleService
from rds_postgres.articles import SortField, SortOrder
from rds_postgres.models import Sentiment

router = APIRouter(prefix="/articles", tags=["articles"])

SORT_FIELDS = {
    "publicationDate": SortField.PUBLICATION_DATE,
    "publication_date": SortField.PUBLICATION_DATE,
    "createdAt": SortField.CREATED_AT,
    "created_at": SortField.CREATED_AT,
}


def get_article_service(
    session: Annotated[Session, Depends(get_db_session)],
    config: Annotated[Config, Depends(get_app_config)],
) -> ArticleService:
    """Dependency to get article service."""
    return ArticleService(session, config.query)


def parse_sort_field(value: str) -> SortField:
    try:
        return SORT_FIELDS[value]
    except KeyError:
        raise ValidationFailure("sortBy", "sortBy must be one of: publicationDate, createdAt") from None


@router.get("", response_model=ArticleListResponse)
def list_articles(
    service: Annotated[ArticleService, Depends(get_article_service)],
    caller: Annotated[Caller | None, Depends(get_caller)],
    limit: Annotated[int | None, Query(ge=1, description="Max results")] = None,
    offset: Annotated[int, Query(ge=0, description="Pagination offset")] = 0,
    sentiment: Annotated[Sentiment | None, Query(description="Filter by sentiment")] = None,
    topic_id: Annotated[uuid.UUID | None, Query(alias="topicId", description="Filter by topic")] = None,
    source_id: Annotated[uuid.UUID | None, Query(alias="sourceId", description="Filter by source")] = None,
    apply_personalization: Annotated[
        bool, Query(alias="applyPersonalization", description="Apply the caller's mood and blocklist")
    ] = False,
    sort_by: Annotated[str, Query(alias="sortBy", description="publicationDate or createdAt")] = "publicationDate",
    sort_order: Annotated[SortOrder, Query(alias="sortOrder", description="asc or desc")] = SortOrder.DESC,
):
    """List articles with optional filtering and personalization.

    Personalization requires an authenticated caller with a profile. When
    the caller's blocklist removes articles, use `nextOffset` rather than
    `offset + limit` to request the following page.
    """
    query = ArticleQuery(
        limit=limit if limit is not None else service.config.default_limit,
        offset=offset,
        sentiment=sentiment,
        topic_id=topic_id,
        source_id=source_id,
        sort_by=parse_sort_field(sort_by),
        sort_order=sort_order,
        apply_personalization=apply_personalization,
    )
    result = service.list_articles(query, caller)

    return ArticleListResponse(
        data=[ArticleResponse.from_article(a) for a in result.items],
        pagination=PaginationResponse(
            limit=result.limit,
            offset=result.offset,
            total=result.total,
            has_more=result.has_more,
            next_offset=result.next_offset,
        ),
        filters_applied=FiltersApplied(
            sentiment=result.sentiment,
            personalization=result.personalization or None,
            blocked_items_count=result.blocked_count,
        ),
    )


@router.get("/{article_id}", response_model=ArticleResponse)
def get_article(
    article_id: uuid.UUID,
    service: Annotated[ArticleService, Depends(get_article_service)],
):
    """Get a single article by ID."""
    return ArticleResponse.from_article(service.get_article(article_id))


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_service_role)],
)
def delete_article(
    article_id: uuid.UUID,
    service: Annotated[ArticleService, Depends(get_article_service)],
):
    """Delete one article and its topic associations (service role only)."""
    service.delete_article(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
