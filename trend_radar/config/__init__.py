"""Configuration package exports."""

from .loader import CONFIG_PATH_ENV, ENV_OVERRIDES, load_config
from .models import (
    ApifyConfig,
    CacheConfig,
    ExtractionRules,
    FeedConfig,
    HttpConfig,
    RadarConfig,
    ScrapeConfig,
)

__all__ = [
    "ApifyConfig",
    "CONFIG_PATH_ENV",
    "CacheConfig",
    "ENV_OVERRIDES",
    "ExtractionRules",
    "FeedConfig",
    "HttpConfig",
    "RadarConfig",
    "ScrapeConfig",
    "load_config",
]
