"""Data models for classify_articles pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, field_validator

from rds_postgres.models import Sentiment


@dataclass
class Classification:
    """Sentiment and topic names assigned to one article."""
    sentiment: Sentiment
    topics: list[str] = field(default_factory=list)


class ClassifierResponse(BaseModel):
    """Shape the classifier must return: {"sentiment": ..., "topics": [...]}."""

    sentiment: Sentiment
    topics: list[str] = Field(min_length=1, max_length=5)

    @field_validator("sentiment", mode="before")
    @classmethod
    def _lowercase_sentiment(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("topics")
    @classmethod
    def _clean_topics(cls, topics: list[str]) -> list[str]:
        cleaned = []
        seen = set()
        for topic in topics:
            topic = " ".join(topic.split())
            if not topic or len(topic) > 50:
                raise ValueError(f"Topic must be 1-50 characters: {topic!r}")
            if topic.lower() in seen:
                raise ValueError(f"Duplicate topic (case-insensitive): {topic!r}")
            seen.add(topic.lower())
            cleaned.append(topic)
        return cleaned

    def to_classification(self) -> Classification:
        return Classification(sentiment=self.sentiment, topics=list(self.topics))


@dataclass
class ReclassifySummary:
    """Counters for one re-classification run."""
    attempted: int = 0
    classified: int = 0
    failed: int = 0
