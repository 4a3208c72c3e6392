"""HTTP fetching shared by every source adapter."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx
import structlog

from ..config import HttpConfig
from ..errors import TransportError


@dataclass(slots=True)
class FetchRequest:
    """Input for the fetcher."""

    url: str
    method: str = "GET"
    params: dict[str, Any] | None = None
    json: Any = None
    headers: dict[str, str] | None = None
    timeout: float | None = None
    # send the browser-like identity headers from HttpConfig
    browser_identity: bool = False


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    reason: str
    text: str
    headers: Dict[str, str]
    raw: httpx.Response | None = field(repr=False, default=None)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self.raw is not None:
            return self.raw.json()
        return json.loads(self.text)


class Fetcher:
    """Execute single HTTP requests against a shared httpx client."""

    def __init__(
        self,
        http_config: HttpConfig,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.http_config = http_config
        self.logger = logger or structlog.get_logger("trend_radar.fetcher")
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=http_config.request_timeout,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._client.close()

    def fetch(self, request: FetchRequest) -> FetchResponse:
        """Perform the request; transport failures surface as :class:`TransportError`.

        Non-2xx responses are returned as-is so callers can decide how to
        report them.
        """

        headers: dict[str, str] = {}
        if request.browser_identity:
            headers.update(self.http_config.browser_headers())
        if request.headers:
            headers.update(request.headers)
        timeout = request.timeout or self.http_config.request_timeout
        try:
            response = self._client.request(
                request.method,
                request.url,
                params=request.params,
                json=request.json,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            self.logger.warning("fetch_timeout", url=request.url, timeout=timeout)
            raise TransportError(f"Request to {request.url} timed out after {timeout:g}s") from exc
        except (httpx.HTTPError, RuntimeError) as exc:
            # RuntimeError: the client was closed underneath us by a cancellation
            self.logger.warning("fetch_error", url=request.url, error=str(exc))
            raise TransportError(f"Request to {request.url} failed: {exc}") from exc
        self.logger.debug("fetch_done", url=request.url, status=response.status_code)
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            reason=response.reason_phrase,
            text=response.text,
            headers=dict(response.headers),
            raw=response,
        )


__all__ = ["Fetcher", "FetchRequest", "FetchResponse"]
