"""Tests for purge_articles.purge_articles module."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from common.errors import StoreUnavailable, ValidationFailure
from purge_articles.purge_articles import retention_cutoff, run_retention_sweep
from rds_postgres.articles import ArticleFilters, count_articles

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestRetentionCutoff:
    def test_subtracts_days(self) -> None:
        assert retention_cutoff(30, NOW) == NOW - timedelta(days=30)

    def test_rejects_non_positive_window(self) -> None:
        with pytest.raises(ValidationFailure):
            retention_cutoff(0, NOW)


class TestRunRetentionSweep:
    def test_deletes_only_expired_articles(self, session, make_source, make_articles) -> None:
        # make_articles spaces articles an hour apart ending at NOW
        make_articles(make_source(), 5)

        deleted = run_retention_sweep(session, retention_days=1, now=NOW + timedelta(days=1) - timedelta(hours=2, minutes=30))

        assert deleted == 2
        assert count_articles(session, ArticleFilters()) == 3

    def test_is_idempotent(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 3)
        later = NOW + timedelta(days=60)

        assert run_retention_sweep(session, retention_days=30, now=later) == 3
        assert run_retention_sweep(session, retention_days=30, now=later) == 0

    def test_lost_connection_is_store_unavailable(self, session) -> None:
        lost = OperationalError("DELETE", {}, Exception("connection refused"), connection_invalidated=True)
        with patch("purge_articles.purge_articles.delete_articles_older_than", side_effect=lost):
            with pytest.raises(StoreUnavailable):
                run_retention_sweep(session, now=NOW)

    def test_lock_timeout_is_not_store_unavailable(self, session, make_source, make_articles) -> None:
        make_articles(make_source(), 2)
        locked = OperationalError("DELETE", {}, Exception("lock timeout"))
        with patch("purge_articles.purge_articles.delete_articles_older_than", side_effect=locked):
            with pytest.raises(OperationalError):
                run_retention_sweep(session, now=NOW)

        # the session is still usable for the next sweep
        assert run_retention_sweep(session, retention_days=30, now=NOW + timedelta(days=60)) == 2
