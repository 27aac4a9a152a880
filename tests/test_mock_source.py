"""Tests for synthetic job generation."""
from __future__ import annotations

from datetime import date

from career_spark.sources.mock import EMPLOYMENT_TYPES, MockSource
from career_spark.sources.serpapi import MISSING_KEY_REASON, SerpApiSource, is_valid_url


def test_missing_key_returns_three_labelled_mock_jobs() -> None:
    jobs = SerpApiSource(api_key="").search("entry level marketing roles remote")

    assert len(jobs) == 3
    assert {j.employment_type for j in jobs} <= set(EMPLOYMENT_TYPES)
    for job in jobs:
        assert job.description.startswith(f"Could not fetch real jobs: {MISSING_KEY_REASON}.")
        assert "SERPAPI_KEY" in job.description
        assert job.location == "Remote"
        assert is_valid_url(job.url)
    assert len({j.id for j in jobs}) == 3


def test_titles_follow_query_keywords() -> None:
    source = MockSource()
    assert source.search("show me data scientist positions")[0].title == "Lead Data Scientist"
    assert source.search("ux designer")[1].title == "Senior UX Designer"
    assert source.search("data analyst")[0].title == "Lead Business Analyst"
    assert source.search("marketing")[2].title == "Associate Marketing Specialist"


def test_generation_is_deterministic_and_capped() -> None:
    source = MockSource(today=date(2024, 7, 28))
    first = source.search("python developer", max_results=10)
    second = source.search("python developer", max_results=10)

    assert first == second
    assert len(first) == 3
    assert first[0].posted_date == "2024-07-28"
    assert first[2].posted_date == "2024-07-26"
    assert len(source.search("python developer", max_results=1)) == 1


def test_location_and_reason_are_applied() -> None:
    jobs = MockSource(reason="provider returned HTTP 503").search(
        "startup engineer", location="Berlin, Germany"
    )
    assert all(j.location == "Berlin, Germany" for j in jobs)
    assert all(j.company.endswith("Startup") for j in jobs)
    assert jobs[0].description.startswith("Could not fetch real jobs: provider returned HTTP 503.")


def test_plain_mock_has_no_diagnostic_prefix() -> None:
    job = MockSource().search("python developer")[0]
    assert not job.description.startswith("Could not fetch")
    assert job.id.startswith("mock-")
