"""
Lexical relevance scoring.

A cheap, deterministic heuristic: four weighted signals summed and capped at
1.0. Substring matching runs in both directions ("test" matches "testing"
and "testing" matches "test"), which deliberately over-matches short tokens.
"""

from typing import Iterable, Optional

from .metadata import header_tags
from .types import FactDocument, SearchOptions

TITLE_WEIGHT = 0.4
WORD_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.1
TAG_WEIGHT = 0.1


def _tokens(text: str) -> list[str]:
    return text.lower().split()


def _either_contains(a: str, b: str) -> bool:
    return a in b or b in a


def title_signal(query: str, header: dict[str, str]) -> float:
    title = header.get("title", "").lower()
    if title and query.lower() in title:
        return TITLE_WEIGHT
    return 0.0


def word_signal(query: str, text: str) -> float:
    """Fraction of query tokens found (bidirectionally) among text tokens."""
    query_words = _tokens(query)
    if not query_words:
        return 0.0
    text_words = set(_tokens(text))
    matching = [
        word for word in query_words
        if any(_either_contains(word, tw) for tw in text_words)
    ]
    return len(matching) / len(query_words) * WORD_WEIGHT


def category_signal(query: str, header: dict[str, str]) -> float:
    category = (header.get("category") or "technical").lower()
    if category in query.lower():
        return CATEGORY_WEIGHT
    return 0.0


def tag_signal(query: str, header: dict[str, str]) -> float:
    tags = header_tags(header)
    if not tags:
        return 0.0
    q = query.lower()
    matching = [tag for tag in tags if _either_contains(q, tag.lower())]
    return len(matching) / max(len(tags), 1) * TAG_WEIGHT


def score(query: str, text: str, header: dict[str, str]) -> float:
    """
    Relevance of a document to a query, in [0, 1].

    Args:
        query: Search text
        text: Document body (header already stripped)
        header: Parsed header of the document

    Returns:
        Sum of title, word-overlap, category and tag signals, capped at 1.0
    """
    total = (
        title_signal(query, header)
        + word_signal(query, text)
        + category_signal(query, header)
        + tag_signal(query, header)
    )
    return min(total, 1.0)


def rank(
    results: Iterable[FactDocument],
    options: Optional[SearchOptions] = None,
) -> list[FactDocument]:
    """Drop results under min_relevance, sort by score descending, truncate."""
    options = options or SearchOptions()
    kept = [r for r in results if r.relevance_score >= options.min_relevance]
    kept.sort(key=lambda r: r.relevance_score, reverse=True)
    return kept[:options.max_results]
