"""Tests for classify_articles.classify_articles module."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from classify_articles.classify_articles import (
    ClassificationError,
    ClassificationErrorKind,
    Classifier,
    build_input_text,
    parse_classifier_content,
)
from common.config import ClassifierConfig
from rds_postgres.models import Sentiment

REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _classifier(create) -> Classifier:
    client = MagicMock()
    client.chat.completions.create = create
    return Classifier(client=client, model="test-model")


class TestBuildInputText:
    def test_combines_title_and_description(self) -> None:
        assert build_input_text("Title", "Some body") == "Title Some body"

    def test_skips_title_already_in_description(self) -> None:
        assert build_input_text("Rates rise", "Rates rise again this month") == "Rates rise again this month"

    def test_missing_description(self) -> None:
        assert build_input_text("Title only", None) == "Title only"

    def test_char_limit(self) -> None:
        result = build_input_text("t", "x" * 50, char_limit=10)
        assert result.endswith("...")
        assert len(result) == 13


class TestParseClassifierContent:
    def test_valid_json(self) -> None:
        result = parse_classifier_content('{"sentiment": "Negative", "topics": ["Flooding", "Weather"]}')
        assert result.sentiment is Sentiment.NEGATIVE
        assert result.topics == ["Flooding", "Weather"]

    def test_strips_code_fence(self) -> None:
        content = '```json\n{"sentiment": "neutral", "topics": ["Markets"]}\n```'
        assert parse_classifier_content(content).topics == ["Markets"]

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "not json",
            '{"sentiment": "ecstatic", "topics": ["x"]}',
            '{"sentiment": "positive", "topics": []}',
            '{"sentiment": "positive", "topics": ["AI", "ai"]}',
            '{"topics": ["x"]}',
        ],
    )
    def test_malformed_content(self, content) -> None:
        with pytest.raises(ClassificationError) as exc_info:
            parse_classifier_content(content)
        assert exc_info.value.kind is ClassificationErrorKind.MALFORMED


class TestClassifier:
    def test_happy_path(self) -> None:
        create = MagicMock(return_value=_completion('{"sentiment": "positive", "topics": ["Space"]}'))
        classifier = _classifier(create)

        result = classifier.classify("Rocket launch", "It went well")

        assert result.sentiment is Sentiment.POSITIVE
        assert result.topics == ["Space"]
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "Rocket launch" in kwargs["messages"][1]["content"]

    def test_timeout(self) -> None:
        classifier = _classifier(MagicMock(side_effect=openai.APITimeoutError(request=REQUEST)))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.TIMEOUT

    def test_rate_limited(self) -> None:
        error = openai.RateLimitError("slow down", response=httpx.Response(429, request=REQUEST), body=None)
        classifier = _classifier(MagicMock(side_effect=error))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.RATE_LIMITED

    def test_quota_exhausted(self) -> None:
        error = openai.APIStatusError("no credits", response=httpx.Response(402, request=REQUEST), body=None)
        classifier = _classifier(MagicMock(side_effect=error))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.QUOTA

    def test_server_error_is_unavailable(self) -> None:
        error = openai.InternalServerError("boom", response=httpx.Response(500, request=REQUEST), body=None)
        classifier = _classifier(MagicMock(side_effect=error))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.UNAVAILABLE

    def test_client_side_sdk_error_is_unavailable(self) -> None:
        classifier = _classifier(MagicMock(side_effect=openai.OpenAIError("client misconfigured")))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.UNAVAILABLE

    def test_no_choices_is_malformed(self) -> None:
        classifier = _classifier(MagicMock(return_value=SimpleNamespace(choices=[])))
        with pytest.raises(ClassificationError) as exc_info:
            classifier.classify("t", None)
        assert exc_info.value.kind is ClassificationErrorKind.MALFORMED


class TestClassifierFromConfig:
    def test_disabled_returns_none(self) -> None:
        assert Classifier.from_config(ClassifierConfig(enabled=False)) is None

    def test_missing_api_key_returns_none(self, monkeypatch) -> None:
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        assert Classifier.from_config(ClassifierConfig()) is None

    def test_builds_client_with_key(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
        classifier = Classifier.from_config(ClassifierConfig(model="some/model", temperature=0.1))
        assert classifier is not None
        assert classifier.model == "some/model"
        assert classifier.temperature == 0.1
        assert classifier.client.max_retries == 0
