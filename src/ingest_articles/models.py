"""Data models for ingest_articles pipeline stage."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


class FetchFailureKind(str, enum.Enum):
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    HTTP_ERROR = "http_error"


@dataclass
class FetchFailure:
    """Why a feed could not be retrieved this cycle."""
    kind: FetchFailureKind
    message: str
    status: Optional[int] = None

    def describe(self) -> str:
        if self.status is not None:
            return f"{self.kind.value} (HTTP {self.status}): {self.message}"
        return f"{self.kind.value}: {self.message}"


@dataclass
class FeedFetch:
    """Raw feed bytes, or the failure that prevented retrieving them."""
    url: str
    content: Optional[bytes] = None
    failure: Optional[FetchFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class FeedItem:
    """Candidate article parsed from a feed entry."""
    title: str
    link: str
    published_at: datetime
    description: Optional[str] = None


@dataclass
class ParseFailure:
    message: str


@dataclass
class ParsedFeed:
    """Items in feed order, or the failure that made the document unreadable."""
    items: list[FeedItem] = field(default_factory=list)
    skipped: int = 0
    failure: Optional[ParseFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class SourceSummary:
    """Outcome of one source within an ingestion cycle."""
    source_id: uuid.UUID
    source_name: str
    succeeded: bool = False
    articles_created: int = 0
    duplicates: int = 0
    unclassified: int = 0
    failed_articles: int = 0
    error: Optional[str] = None


@dataclass
class CycleSummary:
    """Aggregated counters for one ingestion cycle."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    sources_processed: int = 0
    sources_failed: int = 0
    articles_created: int = 0
    articles_duplicate: int = 0
    articles_unclassified: int = 0
    sources: list[SourceSummary] = field(default_factory=list)

    def add(self, summary: SourceSummary) -> None:
        self.sources.append(summary)
        self.sources_processed += 1
        if not summary.succeeded:
            self.sources_failed += 1
        self.articles_created += summary.articles_created
        self.articles_duplicate += summary.duplicates
        self.articles_unclassified += summary.unclassified
