"""Pydantic models describing every tunable of the aggregation flow."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_FEED_URL = "https://trends.google.com/trending/rss?geo=US"
DEFAULT_SCRAPE_URL = (
    "https://ads.tiktok.com/business/creativecenter/inspiration/popular/hashtag/pc/en"
)
DEFAULT_FALLBACK_URLS = [
    "https://ads.tiktok.com/business/creativecenter/inspiration/popular/hashtag/pad/en",
    "https://ads.tiktok.com/business/creativecenter/inspiration/popular/hashtag/pc/en?period=7",
]
DEFAULT_ACTOR_ID = "lexis-solutions/tiktok-trending-hashtags-scraper"

DEFAULT_BLOCK_INDICATORS = [
    "access denied",
    "captcha",
    "unusual traffic",
    "enable javascript",
    "security check",
    "robot",
]
# rank, optional signed delta, "#tag", bounded gap, compact count, "Post(s)"
DEFAULT_HASHTAG_PATTERN = (
    r"(?<!\d)(?P<rank>\d{1,3})\s+"
    r"(?:[+-]\d+\s+)?"
    r"#\s*(?P<hashtag>[^\s#]+)"
    r".{0,80}?"
    r"\s(?P<posts>\d+(?:\.\d+)?[KMB]?)\s+Posts?\b"
)


class ExtractionRules(BaseModel):
    """Versioned heuristics for block detection and hashtag extraction."""

    version: str = "2024.1"
    block_indicators: list[str] = Field(default_factory=lambda: list(DEFAULT_BLOCK_INDICATORS))
    hashtag_pattern: str = DEFAULT_HASHTAG_PATTERN
    table_markers: list[str] = Field(default_factory=lambda: ["Rank", "Hashtags"])

    @field_validator("block_indicators", mode="after")
    @classmethod
    def _normalise_indicators(cls, value: list[str]) -> list[str]:
        return [item.strip().lower() for item in value if item and item.strip()]

    @field_validator("hashtag_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid hashtag pattern: {exc}") from exc
        missing = {"rank", "hashtag", "posts"} - set(compiled.groupindex)
        if missing:
            raise ValueError(f"Hashtag pattern lacks named groups: {sorted(missing)}")
        return value


class HttpConfig(BaseModel):
    """Outbound HTTP settings shared by all adapters."""

    request_timeout: float = 15.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.9"
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    referer: str = "https://ads.tiktok.com/business/creativecenter/"

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be > 0")
        return value

    def browser_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept-Language": self.accept_language,
            "Accept": self.accept,
            "Referer": self.referer,
        }


class FeedConfig(BaseModel):
    url: str = DEFAULT_FEED_URL
    max_items: int = 50

    @field_validator("max_items")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_items must be >= 1")
        return value


class ScrapeConfig(BaseModel):
    """Scraped-page source: a primary URL tried before the fallbacks."""

    primary_url: str = DEFAULT_SCRAPE_URL
    fallback_urls: list[str] = Field(default_factory=lambda: list(DEFAULT_FALLBACK_URLS))
    max_items: int = 100
    rules: ExtractionRules = Field(default_factory=ExtractionRules)

    def candidate_urls(self) -> list[str]:
        candidates: list[str] = []
        for url in [self.primary_url, *self.fallback_urls]:
            url = (url or "").strip()
            if url and url not in candidates:
                candidates.append(url)
        return candidates


class ApifyConfig(BaseModel):
    """Third-party actor API used instead of scraping when a token is set."""

    token: str = ""
    actor_id: str = DEFAULT_ACTOR_ID
    base_url: str = "https://api.apify.com"
    country_code: str = "US"
    period: str = "7"
    max_items: int = 100
    industry: str | None = None

    @field_validator("token", mode="before")
    @classmethod
    def _strip_token(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("period", mode="before")
    @classmethod
    def _stringify_period(cls, value: Any) -> str:
        return str(value)

    @field_validator("industry", mode="before")
    @classmethod
    def _blank_industry(cls, value: Any) -> str | None:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator("max_items")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_items must be >= 1")
        return value

    @property
    def enabled(self) -> bool:
        return bool(self.token)


class CacheConfig(BaseModel):
    max_age: int = 300
    stale_while_revalidate: int = 600

    def header_value(self) -> str:
        return f"s-maxage={self.max_age}, stale-while-revalidate={self.stale_while_revalidate}"


class RadarConfig(BaseModel):
    """Root configuration, constructed once per aggregation call."""

    feed: FeedConfig = Field(default_factory=FeedConfig)
    scrape: ScrapeConfig = Field(default_factory=ScrapeConfig)
    apify: ApifyConfig = Field(default_factory=ApifyConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    # room for every scrape candidate to hit request_timeout, plus slack
    source_timeout: float = 50.0
    log_dir: Path | None = None

    @field_validator("log_dir", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value)

    @model_validator(mode="after")
    def _validate_timeouts(self) -> "RadarConfig":
        if self.source_timeout <= 0:
            raise ValueError("source_timeout must be > 0")
        return self


__all__ = [
    "ApifyConfig",
    "CacheConfig",
    "DEFAULT_ACTOR_ID",
    "DEFAULT_BLOCK_INDICATORS",
    "DEFAULT_FALLBACK_URLS",
    "DEFAULT_FEED_URL",
    "DEFAULT_HASHTAG_PATTERN",
    "DEFAULT_SCRAPE_URL",
    "ExtractionRules",
    "FeedConfig",
    "HttpConfig",
    "RadarConfig",
    "ScrapeConfig",
]
