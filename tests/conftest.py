"""Shared fixtures: config builders, canned pages and a routing mock transport."""

from __future__ import annotations

from typing import Any, Callable, Iterable

import httpx
import pytest

from trend_radar.config import (
    ApifyConfig,
    FeedConfig,
    HttpConfig,
    RadarConfig,
    ScrapeConfig,
)
from trend_radar.config.loader import ENV_OVERRIDES
from trend_radar.engine import Fetcher

FEED_URL = "https://feeds.example.com/trending/rss?geo=US"
PRIMARY_URL = "https://pages.example.com/hashtag/pc/en"
FALLBACK_URLS = [
    "https://pages.example.com/hashtag/pad/en",
    "https://pages.example.com/hashtag/pc/en?period=7",
]

FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:ht="https://trends.google.com/trending/rss">
  <channel>
    <title>Daily Search Trends</title>
    <item>
      <title>  solar eclipse  </title>
      <link>https://trends.example.com/eclipse</link>
      <pubDate>Mon, 08 Apr 2024 10:00:00 -0700</pubDate>
      <ht:approx_traffic>500K+</ht:approx_traffic>
      <description>&lt;b&gt;Total&lt;/b&gt; eclipse today</description>
    </item>
    <item>
      <title>   </title>
      <link>https://trends.example.com/blank</link>
    </item>
    <item>
      <title>world cup</title>
      <link>https://trends.example.com/cup</link>
    </item>
  </channel>
</rss>
"""

RANKING_HTML = """<html><head><title>Trending hashtags</title></head>
<body>
  <nav>Home Inspiration</nav>
  <div class="table">
    <div class="header">Rank Hashtags Posts</div>
    <a href="/tag/catmeme"><span>1</span> <span>#</span> <span>catmeme</span>
       <span>Comedy</span> <span>241K</span> <span>Posts</span></a>
    <a href="/tag/f1"><span>2</span> <span>+3</span> <span># f1</span>
       <span>Sports</span> <span>6K</span> <span>Posts</span></a>
  </div>
</body></html>
"""

BLOCKED_HTML = """<html><body>
  <h1>Please complete the security check to continue</h1>
</body></html>
"""

EMPTY_HTML = """<html><body><p>Nothing trending in your region.</p></body></html>"""


def make_transport(routes: dict[str, Any], calls: list[httpx.Request] | None = None) -> httpx.MockTransport:
    """Build a transport answering each URL from ``routes``.

    A route value is an ``httpx.Response``, an exception instance to raise, or
    a callable receiving the request.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        url = str(request.url)
        route = routes.get(url)
        if route is None:
            base = url.split("?", 1)[0]
            route = routes.get(base)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in [*ENV_OVERRIDES, "TREND_RADAR_CONFIG"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_config() -> Callable[..., RadarConfig]:
    def _builder(**overrides: Any) -> RadarConfig:
        base: dict[str, Any] = {
            "feed": FeedConfig(url=FEED_URL),
            "scrape": ScrapeConfig(primary_url=PRIMARY_URL, fallback_urls=list(FALLBACK_URLS)),
            "apify": ApifyConfig(),
            "http": HttpConfig(request_timeout=5),
            "source_timeout": 5,
        }
        base.update(overrides)
        return RadarConfig(**base)

    return _builder


@pytest.fixture
def fetcher_factory() -> Iterable[Callable[..., Fetcher]]:
    opened: list[Fetcher] = []

    def _factory(routes: dict[str, Any], calls: list[httpx.Request] | None = None) -> Fetcher:
        client = httpx.Client(transport=make_transport(routes, calls), follow_redirects=True)
        fetcher = Fetcher(HttpConfig(request_timeout=5), client=client)
        opened.append(fetcher)
        return fetcher

    yield _factory
    for fetcher in opened:
        fetcher.close()
