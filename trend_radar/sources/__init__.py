"""Source adapters converging on the canonical records."""

from .apify import ApifyHashtagSource, compact_number, to_api_actor_id
from .feed import FeedSource
from .scrape import ScrapedPageSource

__all__ = [
    "ApifyHashtagSource",
    "FeedSource",
    "ScrapedPageSource",
    "compact_number",
    "to_api_actor_id",
]
