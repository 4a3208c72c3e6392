from trend_radar.engine.dedup import merge_hashtags, rank_sorted
from trend_radar.models import HashtagTrend


def _trend(rank, hashtag, source="a"):
    return HashtagTrend(rank=rank, hashtag=hashtag, source_url=source)


def test_merge_keeps_lowest_rank_per_hashtag():
    candidates = [
        _trend(5, "cats"),
        _trend(2, "dogs"),
        _trend(1, "cats"),
        _trend(7, "dogs"),
        _trend(3, "cats"),
    ]
    merged = merge_hashtags(candidates)
    assert sorted((item.hashtag, item.rank) for item in merged) == [("cats", 1), ("dogs", 2)]


def test_merge_tie_keeps_first_encountered():
    first = _trend(4, "tea", source="first")
    second = _trend(4, "tea", source="second")
    merged = merge_hashtags([first, second])
    assert merged == [first]
    assert merged[0].source_url == "first"


def test_merge_is_case_sensitive():
    merged = merge_hashtags([_trend(1, "Tea"), _trend(2, "tea")])
    assert len(merged) == 2


def test_merge_is_deterministic_for_same_input():
    candidates = [_trend(r, f"tag{r % 3}") for r in (9, 4, 6, 1, 8, 2)]
    assert merge_hashtags(candidates) == merge_hashtags(list(candidates))


def test_rank_sorted_truncates():
    items = [_trend(r, f"t{r}") for r in (3, 1, 2)]
    assert [item.rank for item in rank_sorted(items)] == [1, 2, 3]
    assert [item.rank for item in rank_sorted(items, limit=2)] == [1, 2]
