"""Tests for classify_articles.reclassify module."""

from classify_articles.classify_articles import ClassificationError, ClassificationErrorKind
from classify_articles.models import Classification
from classify_articles.reclassify import reclassify_articles
from rds_postgres.articles import get_article
from rds_postgres.models import Sentiment


class ScriptedClassifier:
    """Fails for titles containing 'fail', otherwise tags everything 'Economy'."""

    def classify(self, title, description):
        if "fail" in title:
            raise ClassificationError(ClassificationErrorKind.UNAVAILABLE, "HTTP 503")
        return Classification(sentiment=Sentiment.NEUTRAL, topics=["Economy"])


class TestReclassifyArticles:
    def test_classifies_pending_and_leaves_failures(self, session, make_source, make_articles) -> None:
        articles = make_articles(
            make_source(),
            3,
            title=lambda i: "will fail" if i == 1 else f"ok {i}",
        )

        summary = reclassify_articles(session, ScriptedClassifier(), limit=10)

        assert (summary.attempted, summary.classified, summary.failed) == (3, 2, 1)
        assert get_article(session, articles[0].id).sentiment is Sentiment.NEUTRAL
        assert [t.name for t in get_article(session, articles[0].id).topics] == ["Economy"]
        assert get_article(session, articles[1].id).sentiment is None

    def test_respects_limit(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 5)
        summary = reclassify_articles(session, ScriptedClassifier(), limit=2)
        assert summary.attempted == 2

    def test_nothing_pending(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 2, sentiment=Sentiment.POSITIVE)
        summary = reclassify_articles(session, ScriptedClassifier(), limit=10)
        assert summary.attempted == 0
