"""Shared fixtures: a throwaway SQLite database built from the real models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from common.config import load_config, reset_config, set_config
from rds_postgres.connection import build_engine, build_session_factory, init_db
from rds_postgres.models import Article, RssSource

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(
        f"sqlite:///{tmp_path / 'pulsereader.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def config():
    config = load_config("test")
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def make_source(session):
    def _make(name: str = "Example Feed", url: str | None = None, is_active: bool = True) -> RssSource:
        source = RssSource(
            name=name,
            url=url or f"https://example.com/{name.lower().replace(' ', '-')}/rss",
            is_active=is_active,
        )
        session.add(source)
        session.commit()
        return source

    return _make


@pytest.fixture
def make_articles(session):
    """Insert `count` articles one hour apart, newest at BASE_TIME."""

    def _make(source: RssSource, count: int, title=None, description=None, sentiment=None, prefix="story"):
        articles = []
        for i in range(count):
            article = Article(
                source_id=source.id,
                title=title(i) if callable(title) else (title or f"Headline {prefix} {i}"),
                description=description(i) if callable(description) else description,
                link=f"https://example.com/{prefix}/{i}",
                publication_date=BASE_TIME - timedelta(hours=i),
                sentiment=sentiment(i) if callable(sentiment) else sentiment,
            )
            session.add(article)
            articles.append(article)
        session.commit()
        return articles

    return _make
