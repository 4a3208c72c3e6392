"""Scraped ranking page adapter with sequential endpoint fallback."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Event

import structlog

from ..config import ScrapeConfig
from ..engine import (
    BlockDetector,
    FetchRequest,
    Fetcher,
    PatternExtractor,
    extract_anchor_rows,
    extract_page_text,
    merge_hashtags,
    rank_sorted,
)
from ..errors import AggregationCancelled, BlockedError, ParseError, SourceError, TransportError
from ..models import HashtagTrend


@dataclass(slots=True)
class CandidateAttempt:
    url: str
    error: SourceError


class ScrapedPageSource:
    """Try each candidate endpoint in order and return the first non-empty ranking.

    A candidate that serves a challenge page is abandoned immediately: the
    adapter moves on instead of trying to get past the block.
    """

    name = "scrape"

    def __init__(
        self,
        fetcher: Fetcher,
        config: ScrapeConfig | None = None,
        cancel_event: Event | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.config = config or ScrapeConfig()
        self.cancel_event = cancel_event
        self.detector = BlockDetector(self.config.rules.block_indicators)
        self.extractor = PatternExtractor(self.config.rules)
        self.logger = logger or structlog.get_logger("trend_radar.sources.scrape")

    def candidates(self, primary_url: str | None = None) -> list[str]:
        if primary_url is None:
            return self.config.candidate_urls()
        return self.config.model_copy(update={"primary_url": primary_url}).candidate_urls()

    def fetch(self, primary_url: str | None = None) -> list[HashtagTrend]:
        attempts: list[CandidateAttempt] = []
        for url in self.candidates(primary_url):
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise AggregationCancelled("Scrape cancelled before trying " + url)
            try:
                items = self.fetch_candidate(url)
            except SourceError as exc:
                attempts.append(CandidateAttempt(url=url, error=exc))
                self.logger.info(
                    "candidate_failed",
                    url=url,
                    kind=type(exc).__name__,
                    reason=str(exc),
                )
                continue
            self.logger.info(
                "candidate_succeeded", url=url, items=len(items), attempts=len(attempts) + 1
            )
            return items
        cause = attempts[-1].error if attempts else None
        raise self._exhausted(attempts) from cause

    def fetch_candidate(self, url: str) -> list[HashtagTrend]:
        response = self.fetcher.fetch(FetchRequest(url=url, browser_identity=True))
        if not response.ok:
            raise TransportError(
                f"Fetch {url} failed: {response.status_code} {response.reason}".rstrip()
            )
        return parse_ranking_page(
            response.text,
            url,
            detector=self.detector,
            extractor=self.extractor,
            max_items=self.config.max_items,
        )

    @staticmethod
    def _exhausted(attempts: list[CandidateAttempt]) -> SourceError:
        if not attempts:
            return ParseError("No candidate endpoints configured")
        last = attempts[-1].error
        history = "; ".join(f"{type(item.error).__name__}: {item.url}" for item in attempts)
        return type(last)(f"{last} (tried {len(attempts)} endpoints: {history})")


def parse_ranking_page(
    html: str,
    url: str,
    *,
    detector: BlockDetector,
    extractor: PatternExtractor,
    max_items: int = 100,
) -> list[HashtagTrend]:
    """Block check, extraction and merge for one fetched page.

    Anchor rows are matched first; the whole body text is scanned only when
    no anchor looks like a ranking row.
    """

    text = extract_page_text(html)
    indicator = detector.detect(text)
    if indicator is not None:
        raise BlockedError(f"Blocked at {url} (matched '{indicator}')")

    candidates: list[HashtagTrend] = []
    for row in extract_anchor_rows(html):
        candidates.extend(extractor.extract(row, url, narrow=False))
    if not candidates:
        candidates = extractor.extract(text, url)

    merged = merge_hashtags(candidates)
    if not merged:
        raise ParseError(f"Fetched {url} but parsed 0 hashtags")
    return rank_sorted(merged, limit=max_items)


__all__ = ["CandidateAttempt", "ScrapedPageSource", "parse_ranking_page"]
