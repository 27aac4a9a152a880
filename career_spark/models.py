"""Value objects passed through the recommendation pipeline.

Optional fields hold ``None`` internally; ``to_dict`` omits them instead of
emitting nulls, which is the shape the UI and any JSON caller rely on.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SOURCE_WEB_SEARCH = "webSearch"
SOURCE_PROVIDED = "providedListings"
NOT_AVAILABLE = "N/A"


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class JobRecord:
    id: str
    title: str = NOT_AVAILABLE
    company: str = NOT_AVAILABLE
    description: str = ""
    location: str | None = None
    url: str | None = None
    posted_date: str | None = None
    employment_type: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("JobRecord.id must be a non-empty string")
        if self.id.strip().lower() == "unknown":
            raise ValueError("JobRecord.id must not be the 'unknown' placeholder")

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "url": self.url,
            "description": self.description,
            "posted_date": self.posted_date,
            "employment_type": self.employment_type,
        })


@dataclass(frozen=True)
class RecommendedJob:
    job: JobRecord
    summary: str
    relevance_score: float
    source: str = SOURCE_WEB_SEARCH

    def __post_init__(self) -> None:
        if not self.summary or not self.summary.strip():
            raise ValueError(f"RecommendedJob {self.job.id!r} needs a non-empty summary")
        if not 0 <= self.relevance_score <= 100:
            raise ValueError(f"relevance_score {self.relevance_score} outside 0-100")
        if self.source not in (SOURCE_WEB_SEARCH, SOURCE_PROVIDED):
            raise ValueError(f"Unknown job source tag: {self.source!r}")

    @property
    def id(self) -> str:
        return self.job.id

    def to_dict(self) -> dict[str, Any]:
        data = self.job.to_dict()
        data.update(
            summary=self.summary,
            relevance_score=self.relevance_score,
            source=self.source,
        )
        return data


@dataclass(frozen=True)
class RecommendationResult:
    recommended_jobs: list[RecommendedJob] = field(default_factory=list)
    search_query_used: str | None = None
    reasoning_for_search: str | None = None
    no_results_feedback: str | None = None

    def __post_init__(self) -> None:
        if len(self.recommended_jobs) > 5:
            raise ValueError("At most 5 recommended jobs may be returned")
        if bool(self.recommended_jobs) == bool(self.no_results_feedback):
            raise ValueError(
                "no_results_feedback must be present exactly when recommended_jobs is empty"
            )
        if (self.search_query_used is None) != (self.reasoning_for_search is None):
            raise ValueError(
                "search_query_used and reasoning_for_search must be set together"
            )

    @property
    def searched(self) -> bool:
        return self.search_query_used is not None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "recommended_jobs": [j.to_dict() for j in self.recommended_jobs],
            "search_query_used": self.search_query_used,
            "reasoning_for_search": self.reasoning_for_search,
            "no_results_feedback": self.no_results_feedback,
        })


@dataclass(frozen=True)
class KnowledgeSnippet:
    id: str
    keywords: frozenset[str]
    content: str


@dataclass(frozen=True)
class Explanation:
    explanation: str
    relevancy_score: float

    def __post_init__(self) -> None:
        if not 0 <= self.relevancy_score <= 100:
            raise ValueError(f"relevancy_score {self.relevancy_score} outside 0-100")

    def to_dict(self) -> dict[str, Any]:
        return {"explanation": self.explanation, "relevancy_score": self.relevancy_score}


@dataclass
class ParsedResume:
    skills: list[str] = field(default_factory=list)
    experience: list[str] = field(default_factory=list)
    education: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.skills or self.experience or self.education)

    def to_resume_text(self) -> str:
        """Plain-text digest handed to the recommendation and Q&A prompts."""
        skills = ", ".join(self.skills) or "Not specified"
        experience = "; ".join(self.experience) or "Not specified"
        education = "; ".join(self.education) or "Not specified"
        return f"Skills: {skills}. Experience: {experience}. Education: {education}."

    def to_dict(self) -> dict[str, Any]:
        return {
            "skills": list(self.skills),
            "experience": list(self.experience),
            "education": list(self.education),
        }


@dataclass(frozen=True)
class Answer:
    answer: str
    retrieved_context: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChatReply:
    intent: str
    text: str
    recommendation: RecommendationResult | None = None
    answer: Answer | None = None
