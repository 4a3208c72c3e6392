"""Error taxonomy shared by source adapters and the aggregator."""

from __future__ import annotations


class TrendRadarError(Exception):
    """Base class for all errors raised by Trend Radar."""


class ConfigError(TrendRadarError):
    """Configuration could not be loaded or validated."""


class SourceError(TrendRadarError):
    """A single source failed to produce usable records."""


class TransportError(SourceError):
    """Network or HTTP level failure."""


FetchError = TransportError


class ParseError(SourceError):
    """Content was fetched but its structure was not recognised."""


class BlockedError(SourceError):
    """The upstream answered with an anti-bot challenge page."""


class EmptyResultError(SourceError):
    """A well-formed response carried zero usable records."""


class AggregationCancelled(TrendRadarError):
    """The caller aborted the aggregation before it settled."""


__all__ = [
    "AggregationCancelled",
    "BlockedError",
    "ConfigError",
    "EmptyResultError",
    "FetchError",
    "ParseError",
    "SourceError",
    "TransportError",
    "TrendRadarError",
]
