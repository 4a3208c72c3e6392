"""Aggregator fanning out to the feed and hashtag sources concurrently."""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Event, Lock
from typing import Any, Callable

import httpx
import structlog

from .config import RadarConfig
from .engine import Fetcher
from .errors import AggregationCancelled
from .logging_conf import component_logger
from .models import AggregatedPayload, HashtagProvider, SourceErrors
from .sources import ApifyHashtagSource, FeedSource, ScrapedPageSource

# how often a waiting aggregate() notices cancel()
CANCEL_POLL_INTERVAL = 0.05


@dataclass(slots=True)
class BranchOutcome:
    """Settled result of one source branch: either items or an error string."""

    name: str
    items: list[Any]
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def select_provider(config: RadarConfig) -> HashtagProvider:
    return HashtagProvider.API if config.apify.enabled else HashtagProvider.SCRAPE


def describe_error(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or type(exc).__name__


class Aggregator:
    """Run both sources in parallel and assemble a best-effort payload.

    Each branch is settled independently: an exception or a timeout in one
    branch becomes an ``errors.*`` string and never affects the other branch.
    """

    def __init__(
        self,
        config: RadarConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or RadarConfig()
        self.transport = transport
        self.logger = logger or component_logger("aggregator")
        self._cancel_event = Event()
        self._lock = Lock()
        self._fetcher: Fetcher | None = None

    # ------------------------------------------------------------------
    def aggregate(self) -> AggregatedPayload:
        """Run one aggregation. An instance may be reused after a cancelled run."""

        self._cancel_event.clear()
        provider = select_provider(self.config)
        fetcher = self._open_fetcher()
        branches: dict[str, Callable[[], list[Any]]] = {
            "feed": self._feed_branch(fetcher),
            "hashtag": self._hashtag_branch(provider, fetcher),
        }
        self.logger.info("aggregate_started", hashtag_provider=provider.value)
        executor = ThreadPoolExecutor(max_workers=len(branches), thread_name_prefix="radar")
        futures: dict[str, Future[list[Any]]] = {}
        try:
            for name, branch in branches.items():
                futures[name] = executor.submit(branch)
            pending = self._wait_for_branches(list(futures.values()))
            outcomes = {
                name: self._settle(name, future, future not in pending)
                for name, future in futures.items()
            }
        finally:
            for future in futures.values():
                future.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            self._close_fetcher(fetcher)

        feed, hashtag = outcomes["feed"], outcomes["hashtag"]
        payload = AggregatedPayload(
            ok=True,
            fetched_at=datetime.now(timezone.utc),
            feed_items=feed.items,
            hashtag_items=hashtag.items,
            errors=SourceErrors(feed_source=feed.error, hashtag_source=hashtag.error),
            hashtag_provider=provider,
        )
        self.logger.info(
            "aggregate_finished",
            feed_items=len(payload.feed_items),
            hashtag_items=len(payload.hashtag_items),
            feed_error=feed.error,
            hashtag_error=hashtag.error,
        )
        return payload

    def cancel(self) -> None:
        """Abort the running aggregation; in-flight requests fail promptly."""

        self._cancel_event.set()
        with self._lock:
            fetcher = self._fetcher
        if fetcher is not None:
            fetcher.close()
        self.logger.warning("aggregate_cancelled")

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    # ------------------------------------------------------------------
    def _wait_for_branches(self, futures: list[Future[list[Any]]]) -> set[Future[list[Any]]]:
        """Wait up to ``source_timeout`` and return the futures still running.

        The wait is sliced so that a cancel() from another thread is seen
        within CANCEL_POLL_INTERVAL even when a request ignores the closed client.
        """

        deadline = time.monotonic() + self.config.source_timeout
        pending = set(futures)
        while pending:
            if self._cancel_event.is_set():
                raise AggregationCancelled("Aggregation cancelled by caller")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            _done, pending = wait(pending, timeout=min(remaining, CANCEL_POLL_INTERVAL))
        if self._cancel_event.is_set():
            raise AggregationCancelled("Aggregation cancelled by caller")
        return pending

    def _feed_branch(self, fetcher: Fetcher) -> Callable[[], list[Any]]:
        source = FeedSource(fetcher, self.config.feed, logger=self.logger.bind(source="feed"))
        return lambda: source.fetch(self.config.feed.url)

    def _hashtag_branch(self, provider: HashtagProvider, fetcher: Fetcher) -> Callable[[], list[Any]]:
        if provider is HashtagProvider.API:
            api = ApifyHashtagSource(
                fetcher,
                self.config.apify,
                cancel_event=self._cancel_event,
                logger=self.logger.bind(source="api"),
            )
            return api.fetch
        scraper = ScrapedPageSource(
            fetcher,
            self.config.scrape,
            cancel_event=self._cancel_event,
            logger=self.logger.bind(source="scrape"),
        )
        return lambda: scraper.fetch(self.config.scrape.primary_url)

    def _settle(self, name: str, future: Future[list[Any]], finished: bool) -> BranchOutcome:
        if not finished:
            error = f"{name} source timed out after {self.config.source_timeout:g}s"
            self.logger.warning("source_failed", source=name, kind="timeout", error=error)
            return BranchOutcome(name=name, items=[], error=error)
        exc = future.exception()
        if exc is not None:
            self.logger.warning(
                "source_failed", source=name, kind=type(exc).__name__, error=str(exc)
            )
            return BranchOutcome(name=name, items=[], error=describe_error(exc))
        items = list(future.result() or [])
        self.logger.info("source_ok", source=name, items=len(items))
        return BranchOutcome(name=name, items=items)

    def _open_fetcher(self) -> Fetcher:
        client = httpx.Client(
            follow_redirects=True,
            timeout=self.config.http.request_timeout,
            transport=self.transport,
        )
        fetcher = Fetcher(self.config.http, client=client, logger=self.logger.bind(layer="http"))
        with self._lock:
            self._fetcher = fetcher
        return fetcher

    def _close_fetcher(self, fetcher: Fetcher) -> None:
        with self._lock:
            if self._fetcher is fetcher:
                self._fetcher = None
        fetcher.close()


def aggregate(config: RadarConfig | None = None, transport: httpx.BaseTransport | None = None) -> AggregatedPayload:
    """Convenience wrapper running a single aggregation."""

    return Aggregator(config, transport=transport).aggregate()


__all__ = ["Aggregator", "BranchOutcome", "aggregate", "describe_error", "select_provider"]
