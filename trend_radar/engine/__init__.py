"""Engine components: fetch, detect blocks, extract, merge."""

from .antibot import BlockDetector
from .dedup import merge_hashtags, rank_sorted
from .fetcher import FetchRequest, FetchResponse, Fetcher
from .parser import PatternExtractor, extract_anchor_rows, extract_page_text, normalize_spaces

__all__ = [
    "BlockDetector",
    "FetchRequest",
    "FetchResponse",
    "Fetcher",
    "PatternExtractor",
    "extract_anchor_rows",
    "extract_page_text",
    "merge_hashtags",
    "normalize_spaces",
    "rank_sorted",
]
