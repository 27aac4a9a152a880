"""Tests for the plan → search → rank recommendation pipeline."""
from __future__ import annotations

import pytest

from career_spark.llm import LLMError, LLMOutputError
from career_spark.models import SOURCE_PROVIDED, SOURCE_WEB_SEARCH
from career_spark.recommend import (
    DEFAULT_NO_RESULTS,
    DEFAULT_SEARCH_REASONING,
    fuse_search_query,
    recommend_jobs,
)
from career_spark.sources.serpapi import SerpApiSource
from conftest import RESUME_TEXT, FakeLLM, FakeSource, make_job


def _ranked(identifier: str, score: float, **extra) -> dict:
    entry = {"id": identifier, "summary": f"{identifier} fits your SQL background.",
             "relevance_score": score}
    entry.update(extra)
    return entry


def test_vague_request_without_search_returns_feedback_only() -> None:
    llm = FakeLLM({"search": False, "no_results_feedback": "Which kind of role interests you?"})
    source = FakeSource([make_job("j1")])

    result = recommend_jobs(RESUME_TEXT, "something good", llm=llm, source=source)

    assert result.recommended_jobs == []
    assert result.no_results_feedback == "Which kind of role interests you?"
    assert result.search_query_used is None
    assert result.reasoning_for_search is None
    assert source.calls == []
    assert set(result.to_dict()) == {"recommended_jobs", "no_results_feedback"}


def test_search_then_rank_copies_adapter_fields() -> None:
    jobs = [make_job("j1"), make_job("j2", title="Analytics Engineer"), make_job("j3")]
    source = FakeSource(jobs)
    llm = FakeLLM(
        {"search": True, "query": "data scientist remote python", "location": "Remote",
         "reasoning": "No listings were supplied."},
        {"recommended_jobs": [
            _ranked("j1", 70),
            _ranked("j2", 90, title="CEO", company="Hacked Inc"),
            _ranked("made-up", 99),
        ]},
    )

    result = recommend_jobs(RESUME_TEXT, "remote data jobs", llm=llm, source=source)

    assert [r.id for r in result.recommended_jobs] == ["j2", "j1"]
    top = result.recommended_jobs[0]
    assert top.job == jobs[1]
    assert top.source == SOURCE_WEB_SEARCH
    assert result.search_query_used == "data scientist remote python"
    assert result.reasoning_for_search == "No listings were supplied."
    assert result.no_results_feedback is None
    assert source.calls == [("data scientist remote python", "Remote", 10)]
    assert '"id": "j3"' in llm.prompts[1]


def test_empty_model_query_is_fused_from_resume() -> None:
    source = FakeSource([])
    llm = FakeLLM({"search": True, "query": "  "})

    result = recommend_jobs(RESUME_TEXT, "data analyst jobs", llm=llm, source=source)

    assert source.calls[0][0] == "data analyst jobs Python SQL Tableau"
    assert result.search_query_used == "data analyst jobs Python SQL Tableau"
    assert result.reasoning_for_search == DEFAULT_SEARCH_REASONING


def test_search_with_no_hits_skips_ranking() -> None:
    # Only one scripted reply: a ranking call would exhaust FakeLLM.
    llm = FakeLLM({"search": True, "query": "quantum chef", "reasoning": "Asked for jobs."})

    result = recommend_jobs(RESUME_TEXT, "quantum chef", llm=llm, source=FakeSource([]))

    assert result.recommended_jobs == []
    assert result.no_results_feedback == DEFAULT_NO_RESULTS
    assert result.search_query_used == "quantum chef"
    assert result.reasoning_for_search == "Asked for jobs."


def test_results_are_capped_and_sorted() -> None:
    jobs = [make_job(f"j{i}") for i in range(8)]
    llm = FakeLLM(
        {"search": True, "query": "data"},
        {"recommended_jobs": [_ranked(f"j{i}", 10 * i) for i in range(8)]},
    )

    result = recommend_jobs(RESUME_TEXT, "data", llm=llm, source=FakeSource(jobs))

    assert [r.id for r in result.recommended_jobs] == ["j7", "j6", "j5", "j4", "j3"]


def test_supplied_listings_ranked_without_search() -> None:
    llm = FakeLLM(
        {"search": False, "reasoning": "Listings are relevant."},
        {"recommended_jobs": [
            _ranked("listing-2", 88, title="BI Analyst", company="Initech", location="Boston"),
        ]},
    )
    source = FakeSource([make_job("j1")])
    listings = ["Barista at Cafe", "BI Analyst at Initech, Boston. SQL and Tableau."]

    result = recommend_jobs(RESUME_TEXT, "analyst roles", listings, llm=llm, source=source)

    assert source.calls == []
    assert result.search_query_used is None and result.reasoning_for_search is None
    job = result.recommended_jobs[0]
    assert job.source == SOURCE_PROVIDED
    assert (job.job.title, job.job.company, job.job.location) == ("BI Analyst", "Initech", "Boston")
    assert job.job.description == listings[1]
    assert "[listing-1] Barista at Cafe" in llm.prompts[0]


def test_ranking_feedback_used_when_nothing_fits() -> None:
    llm = FakeLLM(
        {"search": True, "query": "data"},
        {"recommended_jobs": [], "no_results_feedback": "None of these match your level."},
    )

    result = recommend_jobs(RESUME_TEXT, "data", llm=llm, source=FakeSource([make_job("j1")]))

    assert result.recommended_jobs == []
    assert result.no_results_feedback == "None of these match your level."
    assert result.search_query_used == "data"


def test_model_errors_propagate() -> None:
    with pytest.raises(LLMError):
        recommend_jobs(RESUME_TEXT, "data", llm=FakeLLM(LLMError("down")), source=FakeSource())


def test_malformed_ranked_entries_are_dropped_individually() -> None:
    jobs = [make_job("j1"), make_job("j2"), make_job("j3"), make_job("j4")]
    llm = FakeLLM(
        {"search": True, "query": "data"},
        {"recommended_jobs": [
            _ranked("j1", 80),
            {"summary": "No id here.", "relevance_score": 70},
            _ranked("j2", 150),
            {"id": None, "summary": "Null id.", "relevance_score": 60},
            _ranked("   ", 65),
            _ranked("j3", 40),
            "not an object",
            {"id": "j4", "relevance_score": 90},
        ]},
    )

    result = recommend_jobs(RESUME_TEXT, "data", llm=llm, source=FakeSource(jobs))

    assert [r.id for r in result.recommended_jobs] == ["j1", "j3"]
    assert result.no_results_feedback is None


def test_all_ranked_entries_malformed_gives_feedback() -> None:
    llm = FakeLLM(
        {"search": True, "query": "data"},
        {"recommended_jobs": [{"summary": "No id."}, _ranked("j1", -5)]},
    )

    result = recommend_jobs(RESUME_TEXT, "data", llm=llm, source=FakeSource([make_job("j1")]))

    assert result.recommended_jobs == []
    assert result.no_results_feedback == DEFAULT_NO_RESULTS


def test_ranking_reply_without_a_job_list_is_an_output_error() -> None:
    llm = FakeLLM(
        {"search": True, "query": "data"},
        {"recommended_jobs": "j1, j2"},
    )
    with pytest.raises(LLMOutputError):
        recommend_jobs(RESUME_TEXT, "data", llm=llm, source=FakeSource([make_job("j1")]))


def test_mock_jobs_keep_their_ids_through_ranking() -> None:
    source = SerpApiSource(api_key="")
    mock_ids = [j.id for j in source.search("python developer")]
    llm = FakeLLM(
        {"search": True, "query": "python developer"},
        {"recommended_jobs": [_ranked(i, 60) for i in mock_ids]},
    )

    result = recommend_jobs(RESUME_TEXT, "python developer", llm=llm, source=source)

    assert [r.id for r in result.recommended_jobs] == mock_ids


def test_fuse_search_query_skips_known_terms() -> None:
    assert fuse_search_query(RESUME_TEXT, "sql analyst") == "sql analyst Python Tableau"
    assert fuse_search_query("no skills section", "  remote   ux ") == "remote ux"
    assert fuse_search_query("Skills: Not specified. Experience: x.", "") == ""
