"""Page text extraction and positional hashtag pattern matching."""

from __future__ import annotations

import re
from dataclasses import dataclass

from selectolax.parser import HTMLParser

from ..config import ExtractionRules
from ..models import HashtagTrend

_WHITESPACE = re.compile(r"\s+")


def normalize_spaces(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def extract_page_text(html: str) -> str:
    """Return the visible body text of ``html`` collapsed to single spaces."""

    tree = HTMLParser(html or "")
    tree.strip_tags(["script", "style", "template"])
    root = tree.body or tree.root
    if root is None:
        return ""
    return normalize_spaces(root.text(separator=" "))


def extract_anchor_rows(html: str) -> list[str]:
    """Normalised text of every anchor; ranking rows are often single links."""

    tree = HTMLParser(html or "")
    rows: list[str] = []
    for node in tree.css("a"):
        text = normalize_spaces(node.text(separator=" "))
        if text:
            rows.append(text)
    return rows


@dataclass(slots=True)
class PatternMatch:
    rank: int
    hashtag: str
    posts_text: str
    span: str


class PatternExtractor:
    """Turn normalised page text into ranked hashtag candidates."""

    def __init__(self, rules: ExtractionRules | None = None) -> None:
        self.rules = rules or ExtractionRules()
        self._pattern = re.compile(self.rules.hashtag_pattern, re.IGNORECASE)

    def narrow(self, text: str) -> str:
        """Cut ``text`` to start at the earliest table-header marker, if any."""

        positions = [text.find(marker) for marker in self.rules.table_markers if marker]
        positions = [pos for pos in positions if pos >= 0]
        if not positions:
            return text
        return text[min(positions):]

    def matches(self, text: str, narrow: bool = True) -> list[PatternMatch]:
        text = normalize_spaces(text)
        if narrow:
            text = self.narrow(text)
        found: list[PatternMatch] = []
        for match in self._pattern.finditer(text):
            hashtag = match.group("hashtag").lstrip("#").strip()
            if not hashtag:
                continue
            found.append(
                PatternMatch(
                    rank=int(match.group("rank")),
                    hashtag=hashtag,
                    posts_text=match.group("posts").upper(),
                    span=normalize_spaces(match.group(0)),
                )
            )
        return found

    def extract(self, text: str, source_url: str, narrow: bool = True) -> list[HashtagTrend]:
        """Markers only frame whole-page text; pass ``narrow=False`` for single rows."""

        return [
            HashtagTrend(
                rank=item.rank,
                hashtag=item.hashtag,
                posts_text=item.posts_text,
                raw_text=item.span,
                source_url=source_url,
            )
            for item in self.matches(text, narrow=narrow)
        ]


__all__ = [
    "PatternExtractor",
    "PatternMatch",
    "extract_anchor_rows",
    "extract_page_text",
    "normalize_spaces",
]
