"""Topic Pydantic models."""

from __future__ import annotations

from news_api.models.article import CamelModel, TopicResponse


class TopicPagination(CamelModel):
    limit: int
    offset: int
    total: int
    has_more: bool


class TopicListResponse(CamelModel):
    """Paginated list of topics, ordered by name."""

    data: list[TopicResponse]
    pagination: TopicPagination
