"""Trend Radar: resilient multi-source trend aggregation."""

from .config import RadarConfig, load_config
from .models import AggregatedPayload, HashtagProvider, HashtagTrend, TrendItem
from .orchestrator import Aggregator, aggregate
from .service import TrendResponse, query_trends

__version__ = "0.1.0"

__all__ = [
    "AggregatedPayload",
    "Aggregator",
    "HashtagProvider",
    "HashtagTrend",
    "RadarConfig",
    "TrendItem",
    "TrendResponse",
    "aggregate",
    "load_config",
    "query_trends",
]
