"""Normalization of raw provider records into news cards.

Provider records come in different shapes (Google News results, YouTube
video results). normalize_results maps them to NewsItem with a category
cycled by rank and a viral score that decays with rank plus a small
random jitter.
"""

import random
import re
from datetime import datetime, timezone
from typing import Any, Sequence

from dateutil import parser as date_parser

from .models import NewsItem

DEFAULT_HEADLINE = "News Update"
DEFAULT_URL = "#"
DEFAULT_SOURCE = "Unknown"

MAX_SCORE = 10.0
MIN_SCORE = 0.0
TOP_SCORE = 9.9
RANK_DECAY = 0.8
MAX_JITTER = 0.5

HEADLINE_FIELDS = ("title", "snippet")
TIMESTAMP_FIELDS = ("iso_date", "date", "published_date")
URL_FIELDS = ("link", "url")
# Google News absolute dates, e.g. "01/15/2024, 08:00 AM, +0000 UTC"
GOOGLE_NEWS_DATE_FORMAT = "%m/%d/%Y, %I:%M %p, %z UTC"

_NUMERIC_RE = re.compile(r"\d+(\.\d+)?")


def normalize_results(
    results: Sequence[dict[str, Any]],
    categories: Sequence[str],
    max_items: int,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[NewsItem]:
    """Map raw provider records to news cards.

    Args:
        results: Raw provider records, best ranked first
        categories: Category labels assigned cyclically by index
        max_items: Maximum number of cards to produce
        rng: Source of jitter (defaults to a fresh unseeded Random)
        now: Fallback timestamp for records without a usable date

    Returns:
        List of NewsItem of length min(len(results), max_items)
    """
    if max_items <= 0 or not results:
        return []
    if not categories:
        raise ValueError("categories must not be empty")

    if rng is None:
        rng = random.Random()
    now = now or datetime.now(timezone.utc)

    items = []
    for index, record in enumerate(results[:max_items]):
        items.append(
            NewsItem(
                category=categories[index % len(categories)],
                headline=_first_text(record, HEADLINE_FIELDS) or DEFAULT_HEADLINE,
                timestamp=_timestamp(record, now),
                viral_score=viral_score(index, rng.random() * MAX_JITTER),
                url=_first_text(record, URL_FIELDS) or DEFAULT_URL,
                source=_source_name(record) or DEFAULT_SOURCE,
                viewers=_viewers(record.get("views")),
                thumbnail=_thumbnail(record.get("thumbnail")),
            )
        )
    return items


def viral_score(index: int, jitter: float) -> float:
    """Score a result by rank: 9.9 minus 0.8 per rank plus jitter.

    The result is rounded to one decimal and clamped to [0, 10].
    """
    score = round(TOP_SCORE - index * RANK_DECAY + jitter, 1)
    return max(MIN_SCORE, min(MAX_SCORE, score))


def _first_text(record: dict[str, Any], fields: Sequence[str]) -> str | None:
    for name in fields:
        value = record.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _timestamp(record: dict[str, Any], now: datetime) -> str:
    for name in TIMESTAMP_FIELDS:
        value = record.get(name)
        if not isinstance(value, str) or not value.strip():
            continue
        parsed = _parse_date(value.strip())
        if parsed is None:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.isoformat()
    return now.isoformat()


def _parse_date(value: str) -> datetime | None:
    try:
        return datetime.strptime(value, GOOGLE_NEWS_DATE_FORMAT)
    except ValueError:
        pass
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        # Relative dates such as "2 hours ago"
        return None


def _source_name(record: dict[str, Any]) -> str | None:
    source = record.get("source")
    if isinstance(source, dict):
        source = source.get("name")
    if isinstance(source, str) and source.strip():
        return source.strip()

    channel = record.get("channel")
    if isinstance(channel, dict):
        name = channel.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def _viewers(views: Any) -> str | None:
    """Format a view count as thousands, e.g. 22400 -> "22.4K"."""
    if isinstance(views, bool):
        return None
    if isinstance(views, (int, float)):
        count = float(views)
    elif isinstance(views, str):
        cleaned = views.replace(",", "").strip()
        if not _NUMERIC_RE.fullmatch(cleaned):
            return None
        count = float(cleaned)
    else:
        return None
    if count < 0:
        return None
    return f"{count / 1000:.1f}K"


def _thumbnail(thumbnail: Any) -> str | None:
    if isinstance(thumbnail, dict):
        thumbnail = thumbnail.get("static") or thumbnail.get("rich")
    if isinstance(thumbnail, str) and thumbnail.strip():
        return thumbnail.strip()
    return None
