"""RSS/Atom parsing into candidate articles."""

import logging
from datetime import datetime, timezone, timedelta

import feedparser
from dateutil.parser import parse as parse_date

from ingest_articles.clean_articles.clean import clean_description, clean_text
from ingest_articles.models import FeedItem, ParsedFeed, ParseFailure

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "CET": timezone(timedelta(hours=1)),
    "CEST": timezone(timedelta(hours=2)),
}


def parse_feed(content: bytes, fetched_at: datetime | None = None) -> ParsedFeed:
    """Parse raw feed bytes into candidate articles in feed order.

    Entries without a title or link are skipped one by one. A document that
    isn't a feed at all is a ParseFailure; a feed with no usable entries is
    simply empty.
    """
    fetched_at = fetched_at or datetime.now(timezone.utc)
    feed = feedparser.parse(content)

    if feed.bozo and not feed.entries and not feed.get("version"):
        reason = feed.get("bozo_exception") or "unrecognised document"
        return ParsedFeed(failure=ParseFailure(f"Not a parseable feed: {reason}"))

    items = []
    skipped = 0
    for entry in feed.entries:
        try:
            item = _parse_entry(entry, fetched_at)
        except Exception as e:
            logger.warning("Failed to parse entry: %s", e)
            item = None

        if item is None:
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.info("Skipped %d malformed entries out of %d", skipped, len(feed.entries))

    return ParsedFeed(items=items, skipped=skipped)


def _parse_entry(entry, fetched_at: datetime) -> FeedItem | None:
    """Parse a single feed entry into a FeedItem."""
    link = (entry.get("link") or "").strip()
    if not link:
        return None

    title = clean_text(entry.get("title"))
    if not title:
        return None

    published_at = _parse_published_date(entry) or fetched_at

    return FeedItem(
        title=title,
        link=link,
        published_at=published_at,
        description=clean_description(_entry_description(entry)),
    )


def _entry_description(entry) -> str | None:
    """Summary/description first, then the first content block."""
    summary = entry.get("summary") or entry.get("description")
    if summary:
        return summary

    content = entry.get("content") or []
    for block in content:
        value = block.get("value") if hasattr(block, "get") else None
        if value:
            return value
    return None


def _parse_published_date(entry) -> datetime | None:
    """Extract and parse the published date from a feed entry."""
    published = entry.get("published") or entry.get("updated") or entry.get("created")
    if not published:
        return None

    try:
        dt = parse_date(published, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
