from __future__ import annotations

import pytest

from trend_radar.config import ExtractionRules
from trend_radar.engine import PatternExtractor, extract_anchor_rows, extract_page_text, normalize_spaces

URL = "https://pages.example.com/hashtag"


def test_single_row_is_extracted() -> None:
    items = PatternExtractor().extract("1 # catmeme Comedy 241K Posts", URL)
    assert len(items) == 1
    item = items[0]
    assert (item.rank, item.hashtag, item.posts_text) == (1, "catmeme", "241K")
    assert item.raw_text == "1 # catmeme Comedy 241K Posts"
    assert item.source_url == URL


def test_rank_delta_and_multiple_rows() -> None:
    text = "1 # catmeme Comedy 241K Posts 2 +3 #f1 Sports & Outdoors 6.5K Posts 3 -1 # tea 12 Post"
    matches = PatternExtractor().matches(text)
    assert [(m.rank, m.hashtag, m.posts_text) for m in matches] == [
        (1, "catmeme", "241K"),
        (2, "f1", "6.5K"),
        (3, "tea", "12"),
    ]


def test_text_is_narrowed_to_table_header() -> None:
    text = "Promo 9 # noise banner 1M Posts Rank Hashtags Posts 1 # real News 5K Posts"
    extractor = PatternExtractor()
    assert extractor.narrow(text).startswith("Rank")
    assert [m.hashtag for m in extractor.matches(text)] == ["real"]


def test_gap_is_bounded() -> None:
    filler = "x" * 200
    assert PatternExtractor().matches(f"1 # tag {filler} 10K Posts") == []


def test_rows_without_posts_are_ignored() -> None:
    assert PatternExtractor().matches("1 # catmeme Comedy") == []


def test_invalid_pattern_rejected() -> None:
    with pytest.raises(ValueError):
        ExtractionRules(hashtag_pattern=r"(?P<rank>\d+) #(?P<hashtag>\S+)")


def test_page_text_is_normalised() -> None:
    html = """<html><head><style>.a{}</style></head><body>
      <script>var robot = 1;</script>
      <div>1</div>\n\t<div>#   catmeme</div>
    </body></html>"""
    text = extract_page_text(html)
    assert "robot" not in text
    assert text == "1 # catmeme"


def test_anchor_rows() -> None:
    html = "<body><a href='/a'> 1 <b>#</b>\n tag </a><a href='/b'></a></body>"
    assert extract_anchor_rows(html) == ["1 # tag"]


def test_normalize_spaces() -> None:
    assert normalize_spaces("  a\n\tb   c ") == "a b c"


def test_single_row_keeps_marker_words_in_hashtag() -> None:
    extractor = PatternExtractor()
    row = "2 # TopRanked Gaming 12K Posts"
    assert extractor.matches(row) == []
    items = extractor.extract(row, URL, narrow=False)
    assert [(i.rank, i.hashtag, i.posts_text) for i in items] == [(2, "TopRanked", "12K")]
