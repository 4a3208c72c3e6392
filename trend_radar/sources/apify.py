"""Third-party actor API adapter for hashtag rankings."""

from __future__ import annotations

import math
from threading import Event
from typing import Any, Mapping, Sequence
from urllib.parse import quote

import structlog

from ..config import ApifyConfig
from ..engine import FetchRequest, Fetcher, merge_hashtags, rank_sorted
from ..errors import AggregationCancelled, EmptyResultError, ParseError, TransportError
from ..models import HashtagTrend

# Field-name candidates per logical value, first present wins.
HASHTAG_FIELDS = ("hashtag_name", "hashtag", "name")
RANK_FIELDS = ("rank", "position")
PUBLISH_FIELDS = ("publish_cnt", "public_posts_count", "posts")
VIEW_FIELDS = ("video_views", "views")

ERROR_SNIPPET_LENGTH = 200
# output cap, independent of the maxItems requested from the actor
MAX_RESULTS = 100


def to_api_actor_id(actor_id: str) -> str:
    """The API addresses actors as ``user~actor``; store pages show ``user/actor``."""

    actor_id = actor_id.strip()
    if "~" in actor_id:
        return actor_id
    return actor_id.replace("/", "~", 1)


def compact_number(value: Any) -> str:
    """Render large counts with a K/M/B suffix, e.g. ``1234567`` -> ``"1.2M"``."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if not math.isfinite(number):
        return str(value)
    magnitude = abs(number)
    for threshold, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if magnitude >= threshold:
            text = f"{number / threshold:.1f}"
            if text.endswith(".0"):
                text = text[:-2]
            return text + suffix
    if number.is_integer():
        return str(int(number))
    return str(number)


def first_present(record: Mapping[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return None


def _coerce_rank(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


class ApifyHashtagSource:
    """Run the configured actor synchronously and normalise its dataset items."""

    name = "api"

    def __init__(
        self,
        fetcher: Fetcher,
        config: ApifyConfig,
        cancel_event: Event | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.config = config
        self.cancel_event = cancel_event
        self.logger = logger or structlog.get_logger("trend_radar.sources.apify")

    @property
    def endpoint(self) -> str:
        actor = quote(to_api_actor_id(self.config.actor_id), safe="")
        return f"{self.config.base_url.rstrip('/')}/v2/acts/{actor}/run-sync-get-dataset-items"

    @property
    def source_url(self) -> str:
        return "https://apify.com/" + to_api_actor_id(self.config.actor_id).replace("~", "/", 1)

    def build_input(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "countryCode": (self.config.country_code or "US").upper(),
            "maxItems": self.config.max_items,
            "period": str(self.config.period),
        }
        if self.config.industry:
            payload["industry"] = self.config.industry
        return payload

    def fetch(self) -> list[HashtagTrend]:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise AggregationCancelled("API fetch cancelled")
        response = self.fetcher.fetch(
            FetchRequest(
                url=self.endpoint,
                method="POST",
                params={"token": self.config.token, "format": "json", "clean": "true"},
                json=self.build_input(),
                headers={"Content-Type": "application/json"},
            )
        )
        if not response.ok:
            snippet = (response.text or "")[:ERROR_SNIPPET_LENGTH]
            message = f"Apify fetch failed: {response.status_code} {response.reason}".rstrip()
            if snippet:
                message += f" - {snippet}"
            raise TransportError(message)
        try:
            records = response.json()
        except ValueError as exc:
            raise ParseError(f"Apify returned a non-JSON body: {exc}") from exc
        items = self.normalise(records)
        if not items:
            raise EmptyResultError(
                "Apify returned 0 hashtags (check actor settings, countryCode, or plan limits)."
            )
        self.logger.info("api_items_normalised", actor=self.config.actor_id, items=len(items))
        return items

    def normalise(self, records: Any) -> list[HashtagTrend]:
        if records is None:
            return []
        if not isinstance(records, list):
            raise ParseError(f"Apify returned {type(records).__name__}, expected a list of items")
        mapped = (self._map_record(record) for record in records if isinstance(record, Mapping))
        candidates = [item for item in mapped if item.hashtag]
        limit = min(self.config.max_items, MAX_RESULTS)
        return rank_sorted(merge_hashtags(candidates), limit=limit)

    def _map_record(self, record: Mapping[str, Any]) -> HashtagTrend:
        hashtag = str(first_present(record, HASHTAG_FIELDS) or "").strip().lstrip("#").strip()
        publish = first_present(record, PUBLISH_FIELDS)
        views = first_present(record, VIEW_FIELDS)
        posts_text: str | None = None
        if publish is not None:
            posts_text = compact_number(publish)
        elif views is not None:
            posts_text = compact_number(views)

        raw_parts: list[str] = []
        for label, value in (
            ("publish_cnt", publish),
            ("views", views),
            ("rank_diff_type", record.get("rank_diff_type")),
        ):
            if value is not None:
                raw_parts.append(f"{label}={value}")

        return HashtagTrend(
            rank=_coerce_rank(first_present(record, RANK_FIELDS)),
            hashtag=hashtag,
            posts_text=posts_text,
            raw_text=" · ".join(raw_parts) or None,
            source_url=self.source_url,
        )


__all__ = [
    "ApifyHashtagSource",
    "HASHTAG_FIELDS",
    "MAX_RESULTS",
    "PUBLISH_FIELDS",
    "RANK_FIELDS",
    "VIEW_FIELDS",
    "compact_number",
    "first_present",
    "to_api_actor_id",
]
