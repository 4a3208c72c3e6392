"""Trending-searches syndication feed adapter."""

from __future__ import annotations

from typing import Any

import feedparser
import structlog
from selectolax.parser import HTMLParser

from ..config import FeedConfig
from ..engine import FetchRequest, Fetcher, normalize_spaces
from ..errors import ParseError, TransportError
from ..models import TrendItem

# feedparser flattens "ht:approx_traffic" to "ht_approx_traffic"
APPROX_TRAFFIC_FIELDS = ("ht_approx_traffic", "approx_traffic")


class FeedSource:
    """Fetch the feed and map its entries to :class:`TrendItem` in feed order."""

    name = "feed"

    def __init__(
        self,
        fetcher: Fetcher,
        config: FeedConfig | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.config = config or FeedConfig()
        self.logger = logger or structlog.get_logger("trend_radar.sources.feed")

    def fetch(self, feed_url: str | None = None) -> list[TrendItem]:
        url = feed_url or self.config.url
        response = self.fetcher.fetch(FetchRequest(url=url))
        if not response.ok:
            raise TransportError(
                f"Feed fetch failed: {response.status_code} {response.reason}".rstrip()
            )
        items = self.parse(response.raw.content if response.raw is not None else response.text)
        self.logger.info("feed_parsed", url=url, items=len(items))
        return items

    def parse(self, document: bytes | str) -> list[TrendItem]:
        parsed = feedparser.parse(document)
        entries = list(parsed.get("entries") or [])
        if parsed.get("bozo") and not entries:
            reason = parsed.get("bozo_exception")
            raise ParseError(f"Feed could not be parsed: {reason or 'unknown error'}")
        items: list[TrendItem] = []
        for index, entry in enumerate(entries):
            try:
                item = self._to_item(entry)
            except (AttributeError, TypeError, ValueError, KeyError) as exc:
                self.logger.warning("feed_entry_skipped", index=index, error=str(exc))
                continue
            if item is None:
                continue
            items.append(item)
            if len(items) >= self.config.max_items:
                break
        return items

    def _to_item(self, entry: Any) -> TrendItem | None:
        title = str(entry.get("title") or "").strip()
        if not title:
            return None
        return TrendItem(
            title=title,
            link=entry.get("link") or None,
            published_at=entry.get("published") or None,
            approx_traffic=_first_present(entry, APPROX_TRAFFIC_FIELDS),
            description=_description(entry),
        )


def _first_present(entry: Any, names: tuple[str, ...]) -> str | None:
    for name in names:
        value = entry.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _description(entry: Any) -> str | None:
    summary = entry.get("summary") or entry.get("description")
    snippet = normalize_spaces(HTMLParser(summary).text(separator=" ")) if summary else ""
    content = entry.get("content") or []
    content_value = content[0].get("value") if content else None
    for candidate in (snippet, content_value, summary):
        if candidate:
            return candidate
    return None


__all__ = ["APPROX_TRAFFIC_FIELDS", "FeedSource"]
