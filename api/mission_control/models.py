"""Data models for Mission Control.

This module defines the core data structures used throughout the application:
- NewsItem: Normalized news card
- AggregatedNewsResponse: Three-bucket news payload served to the dashboard
- BucketQuery: Upstream query definition for a single bucket
- Error types for upstream, cache, and task store failures
"""

from dataclasses import dataclass, field
from typing import Any, Literal

BucketName = Literal["global", "tech", "ai"]
SourceKind = Literal["general-news", "video"]

BUCKETS: tuple[BucketName, ...] = ("global", "tech", "ai")


@dataclass
class NewsItem:
    """Represents a single normalized news card.

    Attributes:
        category: Label cycled from the bucket's category list
        headline: Display headline (never empty)
        timestamp: ISO 8601 publication time
        viral_score: Score in [0, 10] with one decimal place
        url: Link to the content ("#" if unavailable)
        source: Outlet or channel name ("Unknown" if unavailable)
        viewers: View counter such as "22.4K" (video items only)
        thumbnail: Thumbnail image URL (video items only)
    """

    category: str
    headline: str
    timestamp: str
    viral_score: float
    url: str = "#"
    source: str = "Unknown"
    viewers: str | None = None
    thumbnail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape expected by the dashboard."""
        data: dict[str, Any] = {
            "category": self.category,
            "headline": self.headline,
            "timestamp": self.timestamp,
            "viralScore": self.viral_score,
            "url": self.url,
            "source": self.source,
        }
        if self.viewers is not None:
            data["viewers"] = self.viewers
        if self.thumbnail is not None:
            data["thumbnail"] = self.thumbnail
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsItem":
        """Build a NewsItem from its serialized form."""
        return cls(
            category=data["category"],
            headline=data["headline"],
            timestamp=data["timestamp"],
            viral_score=float(data["viralScore"]),
            url=data.get("url") or "#",
            source=data.get("source") or "Unknown",
            viewers=data.get("viewers"),
            thumbnail=data.get("thumbnail"),
        )


@dataclass
class AggregatedNewsResponse:
    """News payload with exactly three buckets.

    Attributes:
        global_: Global headlines (serialized as "global")
        tech: Local technology headlines
        ai: Trending video items
    """

    global_: list[NewsItem] = field(default_factory=list)
    tech: list[NewsItem] = field(default_factory=list)
    ai: list[NewsItem] = field(default_factory=list)

    def bucket(self, name: BucketName) -> list[NewsItem]:
        """Return the items of a bucket by its serialized name."""
        if name == "global":
            return self.global_
        if name == "tech":
            return self.tech
        if name == "ai":
            return self.ai
        raise KeyError(name)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {name: [item.to_dict() for item in self.bucket(name)] for name in BUCKETS}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AggregatedNewsResponse":
        """Build a response from its serialized form.

        Missing buckets become empty lists.
        """
        return cls(
            global_=[NewsItem.from_dict(item) for item in data.get("global") or []],
            tech=[NewsItem.from_dict(item) for item in data.get("tech") or []],
            ai=[NewsItem.from_dict(item) for item in data.get("ai") or []],
        )


@dataclass(frozen=True)
class BucketQuery:
    """Upstream query feeding one bucket.

    Attributes:
        bucket: Target bucket name
        query: Free-text search query
        kind: Upstream search vertical
        categories: Category labels cycled over the results
    """

    bucket: BucketName
    query: str
    kind: SourceKind
    categories: tuple[str, ...]


class UpstreamUnavailableError(Exception):
    """Error for a failed upstream search call.

    Attributes:
        kind: The search vertical that failed
        message: Human-readable error description
    """

    def __init__(self, kind: SourceKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


class CacheReadError(Exception):
    """The persisted cache snapshot is missing, unreadable, or invalid."""


class CachePersistError(Exception):
    """The cache snapshot could not be written back to storage."""


class TaskStoreError(Exception):
    """The task file is missing or does not contain a task list."""
