"""Topic API endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from common.errors import NotFoundError
from news_api.dependencies import get_db_session
from news_api.models.article import TopicResponse
from news_api.models.topic import TopicListResponse, TopicPagination
from rds_postgres.topics import get_topic, list_topics

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=TopicListResponse)
def list_topics_route(
    session: Annotated[Session, Depends(get_db_session)],
    limit: Annotated[int, Query(ge=1, le=500, description="Max results")] = 100,
    offset: Annotated[int, Query(ge=0, description="Pagination offset")] = 0,
    search: Annotated[str | None, Query(description="Case-insensitive name substring")] = None,
):
    """List topics alphabetically, optionally narrowed by a name search."""
    search = (search or "").strip() or None
    topics, total = list_topics(session, search=search, limit=limit, offset=offset)
    return TopicListResponse(
        data=[TopicResponse.model_validate(topic) for topic in topics],
        pagination=TopicPagination(
            limit=limit,
            offset=offset,
            total=total,
            has_more=offset + len(topics) < total,
        ),
    )


@router.get("/{topic_id}", response_model=TopicResponse)
def get_topic_route(
    topic_id: uuid.UUID,
    session: Annotated[Session, Depends(get_db_session)],
):
    topic = get_topic(session, topic_id)
    if topic is None:
        raise NotFoundError(f"Topic {topic_id} not found")
    return TopicResponse.model_validate(topic)
