"""Tests for ingest_articles.fetch_articles.fetch_feed module."""

from unittest.mock import Mock, patch

import requests

from ingest_articles.fetch_articles.fetch_feed import fetch_feed
from ingest_articles.models import FetchFailureKind

URL = "https://example.com/rss"


class TestFetchFeed:
    @patch("ingest_articles.fetch_articles.fetch_feed.requests.get")
    def test_returns_content_on_success(self, mock_get) -> None:
        mock_get.return_value = Mock(content=b"<rss/>", raise_for_status=Mock())

        result = fetch_feed(URL, timeout=5, user_agent="agent/1.0")

        assert result.ok
        assert result.content == b"<rss/>"
        mock_get.assert_called_once_with(URL, timeout=5, headers={"User-Agent": "agent/1.0"})

    @patch("ingest_articles.fetch_articles.fetch_feed.requests.get")
    def test_timeout_is_typed_failure(self, mock_get) -> None:
        mock_get.side_effect = requests.Timeout("read timed out")

        result = fetch_feed(URL)

        assert not result.ok
        assert result.failure.kind is FetchFailureKind.TIMEOUT

    @patch("ingest_articles.fetch_articles.fetch_feed.requests.get")
    def test_http_error_carries_status(self, mock_get) -> None:
        response = Mock(status_code=503)
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error", response=response)
        mock_get.return_value = response

        result = fetch_feed(URL)

        assert result.failure.kind is FetchFailureKind.HTTP_ERROR
        assert result.failure.status == 503
        assert "HTTP 503" in result.failure.describe()

    @patch("ingest_articles.fetch_articles.fetch_feed.requests.get")
    def test_connection_error_is_unreachable(self, mock_get) -> None:
        mock_get.side_effect = requests.ConnectionError("Name or service not known")

        result = fetch_feed(URL)

        assert result.failure.kind is FetchFailureKind.UNREACHABLE
        assert result.content is None
