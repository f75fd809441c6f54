"""Tests for the lexical relevance scorer and ranking."""

import pytest

from projfacts.scoring import (
    category_signal,
    rank,
    score,
    tag_signal,
    title_signal,
    word_signal,
)
from projfacts.types import FactDocument, SearchOptions


def _result(name: str, relevance: float) -> FactDocument:
    return FactDocument(path=name, title=name, category="technical",
                        relevance_score=relevance, summary="")


class TestSignals:

    def test_title_containment_is_binary(self):
        header = {"title": "Implement Login Flow"}
        assert title_signal("implement login", header) == pytest.approx(0.4)
        assert title_signal("implement logout", header) == 0.0

    def test_missing_title(self):
        assert title_signal("anything", {}) == 0.0

    def test_word_overlap_fraction(self):
        # "redis" matches, "cluster" does not
        assert word_signal("redis cluster", "we use redis here") == pytest.approx(0.2)

    def test_word_overlap_bidirectional(self):
        # query token inside doc token, and doc token inside query token
        assert word_signal("test", "unittest suite") == pytest.approx(0.4)
        assert word_signal("testing", "a test") == pytest.approx(0.4)

    def test_word_overlap_case_insensitive(self):
        assert word_signal("JWT", "uses jwt tokens") == pytest.approx(0.4)

    def test_word_overlap_empty_query(self):
        assert word_signal("", "anything") == 0.0
        assert word_signal("   ", "anything") == 0.0

    def test_category_mention(self):
        assert category_signal("a process question", {"category": "process"}) == pytest.approx(0.1)
        assert category_signal("a process question", {"category": "pattern"}) == 0.0

    def test_category_defaults_to_technical(self):
        assert category_signal("technical debt", {}) == pytest.approx(0.1)

    def test_tag_overlap_fraction(self):
        header = {"tags": "[auth, jwt, redis, docker]"}
        # "jwt" is in the query; "auth" is in "oauth" (query contains tag)
        assert tag_signal("oauth with jwt", header) == pytest.approx(0.05)

    def test_tag_contains_query(self):
        assert tag_signal("auth", {"tags": "authentication"}) == pytest.approx(0.1)

    def test_no_tags(self):
        assert tag_signal("auth", {}) == 0.0


class TestScore:

    def test_all_signals_clamped_to_one(self):
        header = {"title": "technical jwt", "category": "technical", "tags": "technical jwt"}
        value = score("technical jwt", "technical jwt", header)
        assert value == pytest.approx(1.0)
        assert value <= 1.0

    def test_title_equal_to_query_scores_at_least_point_four(self):
        header = {"title": "Database migrations"}
        assert score("database migrations", "", header) >= 0.4

    def test_unrelated_scores_zero(self):
        assert score("kubernetes", "a note about cooking", {"category": "process"}) == 0.0

    def test_no_header_document(self):
        value = score("login", "how the login page works", {"category": "technical"})
        assert value == pytest.approx(0.4)

    @pytest.mark.parametrize("query", ["a", "technical process", "x y z", "JWT", "授权 认证"])
    def test_always_in_unit_interval(self, query):
        header = {"title": query, "category": "technical", "tags": f"[{query}, other]"}
        assert 0.0 <= score(query, f"{query} body text", header) <= 1.0


class TestRank:

    def test_filters_sorts_and_truncates(self):
        results = [_result("a", 0.5), _result("b", 0.9), _result("c", 0.2), _result("d", 0.7)]
        ranked = rank(results, SearchOptions(max_results=2, min_relevance=0.5))
        assert [r.path for r in ranked] == ["b", "d"]

    def test_threshold_is_inclusive(self):
        ranked = rank([_result("a", 0.5)], SearchOptions(min_relevance=0.5))
        assert [r.path for r in ranked] == ["a"]

    def test_defaults(self):
        results = [_result(str(i), 0.6) for i in range(15)]
        ranked = rank(results)
        assert len(ranked) == 10
        # stable for equal scores
        assert [r.path for r in ranked] == [str(i) for i in range(10)]
