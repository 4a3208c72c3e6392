from __future__ import annotations

import json

import httpx
import pytest

from trend_radar.config import HttpConfig
from trend_radar.engine.fetcher import FetchRequest, Fetcher
from trend_radar.errors import FetchError, TransportError


def test_fetcher_sends_browser_identity(fetcher_factory) -> None:
    calls: list[httpx.Request] = []
    fetcher = fetcher_factory({"https://example.com/page": httpx.Response(200, text="ok")}, calls)

    response = fetcher.fetch(FetchRequest(url="https://example.com/page", browser_identity=True))

    assert response.ok
    assert response.text == "ok"
    headers = calls[0].headers
    defaults = HttpConfig()
    assert headers["User-Agent"] == defaults.user_agent
    assert headers["Accept-Language"] == defaults.accept_language
    assert headers["Accept"] == defaults.accept
    assert headers["Referer"] == defaults.referer


def test_fetcher_returns_non_success_status(fetcher_factory) -> None:
    fetcher = fetcher_factory({"https://example.com/x": httpx.Response(503, text="busy")})
    response = fetcher.fetch(FetchRequest(url="https://example.com/x"))
    assert not response.ok
    assert response.status_code == 503
    assert response.reason == "Service Unavailable"


def test_fetcher_wraps_transport_errors(fetcher_factory) -> None:
    fetcher = fetcher_factory({"https://example.com/x": httpx.ConnectError("refused")})
    with pytest.raises(TransportError, match="refused"):
        fetcher.fetch(FetchRequest(url="https://example.com/x"))


def test_fetcher_reports_timeouts(fetcher_factory) -> None:
    fetcher = fetcher_factory({"https://example.com/slow": httpx.ReadTimeout("slow")})
    with pytest.raises(FetchError, match="timed out"):
        fetcher.fetch(FetchRequest(url="https://example.com/slow", timeout=2))


def test_fetcher_posts_json(fetcher_factory) -> None:
    calls: list[httpx.Request] = []
    fetcher = fetcher_factory({"https://example.com/api": httpx.Response(200, json=[1, 2])}, calls)
    response = fetcher.fetch(
        FetchRequest(url="https://example.com/api", method="POST", json={"a": 1}, params={"q": "x"})
    )
    assert response.json() == [1, 2]
    assert calls[0].method == "POST"
    assert calls[0].url.params["q"] == "x"
    assert json.loads(calls[0].content) == {"a": 1}


def test_closed_fetcher_raises_transport_error(fetcher_factory) -> None:
    fetcher = fetcher_factory({"https://example.com/x": httpx.Response(200)})
    fetcher.close()
    assert fetcher.closed
    with pytest.raises(TransportError):
        fetcher.fetch(FetchRequest(url="https://example.com/x"))
