"""Merge policy collapsing duplicate hashtags within one adapter's output."""

from __future__ import annotations

from typing import Iterable

from ..models import HashtagTrend


def merge_hashtags(candidates: Iterable[HashtagTrend]) -> list[HashtagTrend]:
    """Keep one record per hashtag: the lowest rank, first one on ties.

    Hashtags are compared exactly (case-sensitive). The result follows the
    first-seen order of each hashtag; callers sort by rank themselves.
    """

    best: dict[str, HashtagTrend] = {}
    for item in candidates:
        current = best.get(item.hashtag)
        if current is None or item.rank < current.rank:
            best[item.hashtag] = item
    return list(best.values())


def rank_sorted(items: Iterable[HashtagTrend], limit: int | None = None) -> list[HashtagTrend]:
    ordered = sorted(items, key=lambda item: item.rank)
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


__all__ = ["merge_hashtags", "rank_sorted"]
