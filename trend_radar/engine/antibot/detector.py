"""Recognise anti-bot challenge pages before any extraction is attempted."""

from __future__ import annotations

from typing import Iterable

from ...config.models import DEFAULT_BLOCK_INDICATORS


class BlockDetector:
    """Case-insensitive substring match against a fixed indicator set."""

    def __init__(self, indicators: Iterable[str] | None = None) -> None:
        source = DEFAULT_BLOCK_INDICATORS if indicators is None else indicators
        self.indicators = [item.strip().lower() for item in source if item and item.strip()]

    def detect(self, text: str) -> str | None:
        """Return the first matching indicator, or ``None`` for real content."""

        haystack = (text or "").lower()
        for indicator in self.indicators:
            if indicator in haystack:
                return indicator
        return None

    def is_blocked(self, text: str) -> bool:
        return self.detect(text) is not None


__all__ = ["BlockDetector"]
