"""Article Pydantic models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from rds_postgres.models import Article, Sentiment


class CamelModel(BaseModel):
    """Serializes with camelCase keys and accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TopicResponse(CamelModel):
    id: uuid.UUID
    name: str


class ArticleResponse(CamelModel):
    """Article response model."""

    id: uuid.UUID
    source_id: uuid.UUID
    source_name: str | None = None
    title: str
    description: str | None = None
    link: str
    publication_date: datetime
    sentiment: Sentiment | None = None
    topics: list[TopicResponse] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_article(cls, article: Article) -> ArticleResponse:
        return cls(
            id=article.id,
            source_id=article.source_id,
            source_name=article.source.name if article.source else None,
            title=article.title,
            description=article.description,
            link=article.link,
            publication_date=article.publication_date,
            sentiment=article.sentiment,
            topics=[TopicResponse.model_validate(topic) for topic in article.topics],
            created_at=article.created_at,
        )


class PaginationResponse(CamelModel):
    limit: int
    offset: int
    total: int
    has_more: bool
    next_offset: int


class FiltersApplied(CamelModel):
    """Only the filters that actually shaped the page are serialized."""

    sentiment: Sentiment | None = None
    personalization: bool | None = None
    blocked_items_count: int | None = None

    @model_serializer(mode="wrap")
    def _drop_unset(self, handler):
        return {key: value for key, value in handler(self).items() if value is not None}


class ArticleListResponse(CamelModel):
    """Paginated list of articles."""

    data: list[ArticleResponse]
    pagination: PaginationResponse
    filters_applied: FiltersApplied
