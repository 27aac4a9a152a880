"""Synthetic job results for demos and for when the live provider is unavailable."""
from __future__ import annotations

import hashlib
from datetime import date, timedelta

from career_spark.log import get_logger
from career_spark.models import JobRecord
from career_spark.sources.base import JobSource

log = get_logger(__name__)

MAX_MOCK_RESULTS = 3

# Later matches win, so "data analyst" becomes a Business Analyst.
_BASE_TITLES: list[tuple[str, str]] = [
    ("manager", "Product Manager"),
    ("data", "Data Scientist"),
    ("ux", "UX Designer"),
    ("ui", "UX Designer"),
    ("designer", "UX Designer"),
    ("analyst", "Business Analyst"),
]
_DEFAULT_TITLE = "Software Engineer"

LOCATIONS: list[str] = [
    "New York, NY", "San Francisco, CA", "Austin, TX", "Chicago, IL",
    "Remote", "London, UK", "Berlin, Germany",
]
COMPANIES: list[str] = [
    "Innovatech", "FutureAI", "CyberSec Corp", "EcoWorld Ltd", "HealthFirst Inc.",
]
EMPLOYMENT_TYPES: list[str] = ["Full-time", "Contract", "Part-time", "Internship"]
_SENIORITY: list[str] = ["Lead", "Senior", "Associate"]

_FILLER_WORDS: set[str] = {
    "a", "an", "and", "at", "for", "in", "near", "of", "on", "the", "to", "with",
    "me", "my", "i", "find", "show", "get", "looking", "want", "need", "some",
    "job", "jobs", "role", "roles", "position", "positions", "opening", "openings",
    "entry", "level", "entry-level", "senior", "junior", "lead", "startup",
    "remote", "full-time", "part-time", "contract", "internship",
}
_LOCATION_WORDS: set[str] = {
    w.strip(",").lower() for loc in LOCATIONS for w in loc.split()
}


def _query_keywords(query: str) -> list[str]:
    return [kw for kw in query.lower().split() if len(kw) > 1]


def _base_title(keywords: list[str]) -> str:
    title = _DEFAULT_TITLE
    for keyword, candidate in _BASE_TITLES:
        if keyword in keywords:
            title = candidate
    return title


def _distinctive_word(keywords: list[str], base_title: str) -> str | None:
    base_words = {w.lower() for w in base_title.split()}
    trigger_words = {k for k, _ in _BASE_TITLES}
    for kw in keywords:
        if kw in _FILLER_WORDS or kw in _LOCATION_WORDS or kw in trigger_words:
            continue
        if kw in base_words or not kw.isalpha():
            continue
        return kw
    return None


class MockSource(JobSource):
    """Deterministic fake listings; *reason* is prefixed onto every description."""

    def __init__(self, reason: str | None = None, today: date | None = None) -> None:
        self.reason = reason
        self.today = today

    def search(
        self, query: str, location: str | None = None, max_results: int = 10
    ) -> list[JobRecord]:
        keywords = _query_keywords(query)
        base_title = _base_title(keywords)
        word = _distinctive_word(keywords, base_title)
        if word:
            # Keep the base role's suffix but lead with what the user asked for.
            suffix = " ".join(base_title.split()[1:]) if base_title != _DEFAULT_TITLE else "Specialist"
            role = f"{word.capitalize()} {suffix}"
        else:
            role = base_title

        org_suffix = "Startup" if "startup" in keywords else "Global"
        query_hash = hashlib.sha256(query.lower().encode()).hexdigest()[:8]
        today = self.today or date.today()
        count = max(0, min(max_results, MAX_MOCK_RESULTS))

        if self.reason:
            log.warning("MockSource standing in for live search: %s", self.reason)
        else:
            log.info("MockSource generating %d sample jobs for %r", count, query)

        jobs: list[JobRecord] = []
        for i in range(count):
            title = f"{_SENIORITY[i % len(_SENIORITY)]} {role}"
            company = f"{COMPANIES[i % len(COMPANIES)]} {org_suffix}"
            if location:
                job_location = location
            elif "remote" in keywords:
                job_location = "Remote"
            else:
                job_location = LOCATIONS[i % len(LOCATIONS)]

            description = (
                f"Seeking a {title} to join {company} in {job_location}. "
                f"Key skills: {query.strip() or 'general'}. This is a mock result."
            )
            if self.reason:
                description = f"Could not fetch real jobs: {self.reason}. {description}"

            slug = "-".join(title.lower().split())
            jobs.append(
                JobRecord(
                    id=f"mock-{query_hash}-{i + 1}",
                    title=title,
                    company=company,
                    location=job_location,
                    url=f"https://mockjobs.dev/posting/{slug}-{i + 1}",
                    description=description,
                    posted_date=(today - timedelta(days=i)).isoformat(),
                    employment_type=EMPLOYMENT_TYPES[i % len(EMPLOYMENT_TYPES)],
                )
            )
        return jobs
