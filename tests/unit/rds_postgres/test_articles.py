"""Tests for rds_postgres.articles module."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from rds_postgres.articles import (
    ArticleFilters,
    ArticleSort,
    InsertStatus,
    NewArticle,
    SortField,
    SortOrder,
    article_exists,
    delete_article,
    delete_articles_older_than,
    get_article,
    insert_article,
    list_unclassified_articles,
    query_articles,
    update_article_classification,
)
from rds_postgres.models import Article, ArticleTopic, Sentiment, Topic
from rds_postgres.topics import upsert_topics

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _new_article(source, link="https://example.com/a", **kwargs) -> NewArticle:
    return NewArticle(
        source_id=source.id,
        title=kwargs.pop("title", "Headline"),
        link=link,
        publication_date=kwargs.pop("publication_date", BASE_TIME),
        **kwargs,
    )


class TestInsertArticle:
    def test_creates_article_with_topics(self, session, make_source) -> None:
        source = make_source()
        topic_ids = upsert_topics(session, ["Economy", "Markets"])

        result = insert_article(session, _new_article(source, sentiment=Sentiment.POSITIVE), topic_ids)

        assert result.status is InsertStatus.CREATED
        article = get_article(session, result.article.id)
        assert article.sentiment is Sentiment.POSITIVE
        assert sorted(t.name for t in article.topics) == ["Economy", "Markets"]

    def test_duplicate_link_is_conflict(self, session, make_source) -> None:
        source = make_source()
        insert_article(session, _new_article(source))

        result = insert_article(session, _new_article(source, title="Other headline"))

        assert result.status is InsertStatus.CONFLICT
        assert result.created is False
        assert session.execute(select(func.count()).select_from(Article)).scalar_one() == 1

    def test_bad_topic_id_rolls_back_article(self, session, make_source) -> None:
        source = make_source()
        with pytest.raises(IntegrityError):
            insert_article(session, _new_article(source), [uuid.uuid4()])

        assert not article_exists(session, "https://example.com/a")
        assert session.execute(select(func.count()).select_from(ArticleTopic)).scalar_one() == 0

    def test_repeated_topic_ids_linked_once(self, session, make_source) -> None:
        source = make_source()
        topic_ids = upsert_topics(session, ["Science"])

        result = insert_article(session, _new_article(source), topic_ids + topic_ids)

        assert result.created
        assert session.execute(select(func.count()).select_from(ArticleTopic)).scalar_one() == 1


class TestQueryArticles:
    def test_filters_are_and_combined(self, session, make_source, make_articles) -> None:
        bbc = make_source("BBC")
        npr = make_source("NPR")
        make_articles(bbc, 4, sentiment=lambda i: Sentiment.NEGATIVE if i % 2 else Sentiment.POSITIVE, prefix="bbc")
        make_articles(npr, 3, sentiment=Sentiment.NEGATIVE, prefix="npr")

        page = query_articles(
            session,
            ArticleFilters(sentiment=Sentiment.NEGATIVE, source_id=bbc.id),
            ArticleSort(),
            limit=10,
            offset=0,
        )

        assert page.total == 2
        assert all(a.source_id == bbc.id and a.sentiment is Sentiment.NEGATIVE for a in page.items)

    def test_topic_filter(self, session, make_source) -> None:
        source = make_source()
        [economy] = upsert_topics(session, ["Economy"])
        insert_article(session, _new_article(source, link="https://example.com/1"), [economy])
        insert_article(session, _new_article(source, link="https://example.com/2"))

        page = query_articles(session, ArticleFilters(topic_id=economy), ArticleSort(), 10, 0)

        assert page.total == 1
        assert page.items[0].link == "https://example.com/1"

    def test_sort_ascending(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 3)
        page = query_articles(
            session,
            ArticleFilters(),
            ArticleSort(SortField.PUBLICATION_DATE, SortOrder.ASC),
            10,
            0,
        )
        dates = [a.publication_date for a in page.items]
        assert dates == sorted(dates)

    def test_pages_cover_total_without_gaps(self, session, make_source) -> None:
        source = make_source()
        # Shared timestamps force the id tiebreaker to keep pages stable
        for i in range(23):
            insert_article(
                session,
                _new_article(
                    source,
                    link=f"https://example.com/{i}",
                    publication_date=BASE_TIME - timedelta(hours=i // 5),
                ),
            )

        seen = []
        offset, limit = 0, 5
        while True:
            page = query_articles(session, ArticleFilters(), ArticleSort(), limit, offset)
            seen.extend(a.id for a in page.items)
            offset += len(page.items)
            if offset >= page.total:
                break

        assert len(seen) == 23
        assert len(set(seen)) == 23


class TestReclassificationStore:
    def test_lists_only_unclassified(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 4, sentiment=lambda i: None if i < 2 else Sentiment.NEUTRAL)
        unclassified = list_unclassified_articles(session, limit=10)
        assert len(unclassified) == 2
        assert all(a.sentiment is None for a in unclassified)

    def test_update_replaces_topics(self, session, make_source) -> None:
        source = make_source()
        old_ids = upsert_topics(session, ["Old"])
        article = insert_article(session, _new_article(source), old_ids).article
        new_ids = upsert_topics(session, ["New", "Newer"])

        updated = update_article_classification(session, article.id, Sentiment.NEGATIVE, new_ids)

        assert updated.sentiment is Sentiment.NEGATIVE
        assert sorted(t.name for t in get_article(session, article.id).topics) == ["New", "Newer"]

    def test_update_missing_article_returns_none(self, session) -> None:
        assert update_article_classification(session, uuid.uuid4(), Sentiment.NEUTRAL, []) is None


class TestDeleteArticlesOlderThan:
    def test_deletes_old_articles_and_links_but_keeps_topics(self, session, make_source) -> None:
        source = make_source()
        topic_ids = upsert_topics(session, ["Archive"])
        insert_article(
            session,
            _new_article(source, link="https://example.com/old", publication_date=BASE_TIME - timedelta(days=40)),
            topic_ids,
        )
        insert_article(session, _new_article(source, link="https://example.com/new"), topic_ids)

        deleted = delete_articles_older_than(session, BASE_TIME - timedelta(days=30))

        assert deleted == 1
        assert not article_exists(session, "https://example.com/old")
        assert article_exists(session, "https://example.com/new")
        assert session.execute(select(func.count()).select_from(ArticleTopic)).scalar_one() == 1
        assert session.execute(select(func.count()).select_from(Topic)).scalar_one() == 1

    def test_second_run_deletes_nothing(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 5)
        cutoff = BASE_TIME - timedelta(hours=2)
        assert delete_articles_older_than(session, cutoff) == 2
        assert delete_articles_older_than(session, cutoff) == 0


class TestDeleteArticle:
    def test_deletes_article_and_links_but_keeps_topics(self, session, make_source) -> None:
        source = make_source()
        topic_ids = upsert_topics(session, ["Markets"])
        result = insert_article(session, _new_article(source, link="https://example.com/gone"), topic_ids)
        insert_article(session, _new_article(source, link="https://example.com/kept"), topic_ids)

        assert delete_article(session, result.article.id) is True

        assert not article_exists(session, "https://example.com/gone")
        assert article_exists(session, "https://example.com/kept")
        assert session.execute(select(func.count()).select_from(ArticleTopic)).scalar_one() == 1
        assert session.execute(select(func.count()).select_from(Topic)).scalar_one() == 1

    def test_missing_article_returns_false(self, session) -> None:
        assert delete_article(session, uuid.uuid4()) is False
