"""Ingestion trigger response models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from news_api.models.article import CamelModel


class SourceSummaryResponse(CamelModel):
    source_id: uuid.UUID
    source_name: str
    succeeded: bool
    articles_created: int
    duplicates: int
    unclassified: int
    failed_articles: int
    error: str | None = None


class CycleSummaryResponse(CamelModel):
    started_at: datetime
    finished_at: datetime | None = None
    sources_processed: int
    sources_failed: int
    articles_created: int
    articles_duplicate: int
    articles_unclassified: int
    sources: list[SourceSummaryResponse] = Field(default_factory=list)
