"""Inbound read-only query returning the JSON body plus response headers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import RadarConfig
from .logging_conf import component_logger
from .orchestrator import Aggregator


@dataclass(slots=True)
class TrendResponse:
    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    def json(self, indent: int | None = None) -> str:
        return json.dumps(self.body, ensure_ascii=False, indent=indent)


def query_trends(
    config: RadarConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> TrendResponse:
    """Aggregate all sources; only a defect outside the adapters yields ``ok: false``."""

    config = config or RadarConfig()
    logger = component_logger("service")
    try:
        payload = Aggregator(config, transport=transport).aggregate()
    except Exception as exc:  # noqa: BLE001
        logger.error("query_failed", error=str(exc), exc_info=True)
        return TrendResponse(
            status_code=500,
            body={"ok": False, "error": str(exc) or type(exc).__name__},
            headers={"Content-Type": "application/json"},
        )
    return TrendResponse(
        status_code=200,
        body=payload.to_dict(),
        headers={
            "Content-Type": "application/json",
            "Cache-Control": config.cache.header_value(),
        },
    )


__all__ = ["TrendResponse", "query_trends"]
