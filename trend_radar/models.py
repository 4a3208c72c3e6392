"""Canonical records produced by the source adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class HashtagProvider(str, Enum):
    """Adapter that produced the hashtag list."""

    API = "api"
    SCRAPE = "scrape"


@dataclass(slots=True)
class TrendItem:
    """Entry of the trending-searches feed."""

    title: str
    link: str | None = None
    published_at: str | None = None
    approx_traffic: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "title": self.title,
                "link": self.link,
                "pubDate": self.published_at,
                "approxTraffic": self.approx_traffic,
                "description": self.description,
            }
        )


@dataclass(slots=True)
class HashtagTrend:
    """Ranked hashtag reported by a hashtag source."""

    rank: int
    hashtag: str
    source_url: str
    posts_text: str | None = None
    raw_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "rank": self.rank,
                "hashtag": self.hashtag,
                "postsText": self.posts_text,
                "rawText": self.raw_text,
                "sourceUrl": self.source_url,
            }
        )


@dataclass(slots=True)
class SourceErrors:
    feed_source: str | None = None
    hashtag_source: str | None = None


@dataclass(slots=True)
class AggregatedPayload:
    """Combined, best-effort result of one aggregation request."""

    hashtag_provider: HashtagProvider
    feed_items: list[TrendItem] = field(default_factory=list)
    hashtag_items: list[HashtagTrend] = field(default_factory=list)
    errors: SourceErrors = field(default_factory=SourceErrors)
    ok: bool = True
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the field names the existing consumers expect."""

        fetched = self.fetched_at.astimezone(timezone.utc)
        return {
            "ok": self.ok,
            "fetchedAt": fetched.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "google": [item.to_dict() for item in self.feed_items],
            "tiktokHashtags": [item.to_dict() for item in self.hashtag_items],
            "errors": {
                "google": self.errors.feed_source,
                "tiktok": self.errors.hashtag_source,
            },
            "hashtagProvider": self.hashtag_provider.value,
        }


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


__all__ = [
    "AggregatedPayload",
    "HashtagProvider",
    "HashtagTrend",
    "SourceErrors",
    "TrendItem",
]
