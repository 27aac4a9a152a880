"""Tests for the knowledge snippet retriever."""
from __future__ import annotations

from career_spark.knowledge import GENERIC_SNIPPET, KNOWLEDGE_BASE, retrieve_snippets

_BY_ID = {entry.id: entry.content for entry in KNOWLEDGE_BASE}


def test_empty_query_returns_nothing() -> None:
    assert retrieve_snippets("") == []
    assert retrieve_snippets("   ") == []


def test_keyword_match() -> None:
    assert retrieve_snippets("salary negotiation") == [_BY_ID["kb3"]]


def test_first_three_matches_in_table_order() -> None:
    # kb1, kb4 and kb5 all carry an interview keyword; kb7 is cut by the cap.
    assert retrieve_snippets("Interview") == [_BY_ID["kb1"], _BY_ID["kb4"], _BY_ID["kb5"]]


def test_generic_fallback_only_for_longer_queries() -> None:
    assert retrieve_snippets("xyzzy plugh") == [GENERIC_SNIPPET]
    assert retrieve_snippets("qqq") == []


def test_retrieval_is_deterministic() -> None:
    query = "how do I tailor my resume for ATS"
    assert retrieve_snippets(query) == retrieve_snippets(query)
    assert _BY_ID["kb2"] in retrieve_snippets(query)
