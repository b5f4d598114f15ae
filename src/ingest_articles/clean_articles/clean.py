"""Text cleanup for feed fields."""

import html
import re
from typing import Optional

MAX_DESCRIPTION_LENGTH = 5000


def clean_text(text: Optional[str]) -> Optional[str]:
    """Clean text by stripping HTML, decoding entities, and collapsing whitespace."""
    if not text:
        return None
    # Strip HTML tags (keep text content)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html.unescape(text)
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    # Collapse whitespace
    text = re.sub(r"\s+", " ", text).strip()
    return text if text else None


def clean_description(text: Optional[str]) -> Optional[str]:
    """Clean a feed description and cap it at MAX_DESCRIPTION_LENGTH characters."""
    text = clean_text(text)
    if text and len(text) > MAX_DESCRIPTION_LENGTH:
        text = text[:MAX_DESCRIPTION_LENGTH].rstrip()
    return text
