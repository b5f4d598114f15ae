"""Article sentiment and topic classification via an LLM."""

from __future__ import annotations

import enum
import json
import logging
import os
import re

import openai
from openai import OpenAI
from pydantic import ValidationError

from classify_articles.instructions import CLASSIFY_ARTICLE_TEMPLATE, CLASSIFY_SYSTEM_INSTRUCTIONS
from classify_articles.models import Classification, ClassifierResponse
from common.config import ClassifierConfig
from common.errors import TransientIOError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class ClassificationErrorKind(str, enum.Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    QUOTA = "quota"
    UNAVAILABLE = "unavailable"
    MALFORMED = "malformed"


class ClassificationError(TransientIOError):
    """The classifier could not produce a usable answer for this article."""

    def __init__(self, kind: ClassificationErrorKind, message: str):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


def build_input_text(title: str, description: str | None, char_limit: int = 1500) -> str:
    """Combine title and description into one whitespace-collapsed block."""
    title = (title or "").strip()
    description = (description or "").strip()

    if description and title and title in description:
        combined = description
    elif description:
        combined = f"{title}\n\n{description}" if title else description
    else:
        combined = title

    combined = " ".join(combined.split())
    if len(combined) > char_limit:
        combined = combined[:char_limit].rstrip() + "..."
    return combined


def parse_classifier_content(content: str | None) -> Classification:
    """Validate the raw text returned by the model.

    Raises:
        ClassificationError: If the content isn't the expected JSON shape
    """
    if not content or not content.strip():
        raise ClassificationError(ClassificationErrorKind.MALFORMED, "empty response content")

    text = _CODE_FENCE.sub("", content.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ClassificationError(ClassificationErrorKind.MALFORMED, f"invalid JSON: {e}") from e

    try:
        return ClassifierResponse.model_validate(data).to_classification()
    except ValidationError as e:
        raise ClassificationError(
            ClassificationErrorKind.MALFORMED, f"unexpected response shape: {e.error_count()} errors"
        ) from e


class Classifier:
    """Classifies articles through an OpenAI-compatible chat completions API.

    Every failure (timeout, rate limit, quota, outage, bad payload) surfaces
    as ClassificationError so callers can degrade to "unclassified".
    """

    def __init__(
        self,
        client: OpenAI,
        model: str,
        temperature: float = 0.3,
        max_input_chars: int = 1500,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_input_chars = max_input_chars

    @classmethod
    def from_config(cls, config: ClassifierConfig) -> Classifier | None:
        """Build a classifier, or None when disabled or no API key is set."""
        if not config.enabled:
            logger.info("Classifier disabled by config")
            return None

        api_key = os.environ.get(config.api_key_env)
        if not api_key:
            logger.warning("%s not set, articles will be stored unclassified", config.api_key_env)
            return None

        client = OpenAI(
            api_key=api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
        )
        return cls(
            client=client,
            model=config.model,
            temperature=config.temperature,
            max_input_chars=config.max_input_chars,
        )

    def classify(self, title: str, description: str | None) -> Classification:
        """Return sentiment and topics for one article.

        Raises:
            ClassificationError: On any failure of the remote call or its payload
        """
        content = build_input_text(title, description, self.max_input_chars)
        prompt = CLASSIFY_ARTICLE_TEMPLATE.format(title=title.strip(), content=content)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": CLASSIFY_SYSTEM_INSTRUCTIONS},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except openai.APITimeoutError as e:
            raise ClassificationError(ClassificationErrorKind.TIMEOUT, str(e)) from e
        except openai.RateLimitError as e:
            raise ClassificationError(ClassificationErrorKind.RATE_LIMITED, str(e)) from e
        except openai.APIStatusError as e:
            kind = ClassificationErrorKind.QUOTA if e.status_code == 402 else ClassificationErrorKind.UNAVAILABLE
            raise ClassificationError(kind, f"HTTP {e.status_code}") from e
        except openai.APIError as e:
            raise ClassificationError(ClassificationErrorKind.UNAVAILABLE, str(e)) from e
        except openai.OpenAIError as e:
            raise ClassificationError(ClassificationErrorKind.UNAVAILABLE, str(e)) from e

        if not response.choices:
            raise ClassificationError(ClassificationErrorKind.MALFORMED, "response has no choices")

        classification = parse_classifier_content(response.choices[0].message.content)
        logger.debug(
            "Classified %r as %s topics=%s",
            title[:80],
            classification.sentiment.value,
            classification.topics,
        )
        return classification
