"""Pydantic schemas the LLM responses are validated against."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from career_spark.log import get_logger

log = get_logger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class IntentOutput(BaseModel):
    intent: Literal["job_search", "general_question"]


class SearchPlan(BaseModel):
    search: bool
    query: Optional[str] = None
    location: Optional[str] = None
    reasoning: Optional[str] = None
    no_results_feedback: Optional[str] = None

    @field_validator("query", "location", "reasoning", "no_results_feedback")
    @classmethod
    def strip_blank(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class RankedJob(BaseModel):
    id: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    relevance_score: float = Field(ge=0, le=100)
    # Only honoured for supplied listings; web-search fields come from the adapter.
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None

    @field_validator("title", "company", "location")
    @classmethod
    def strip_blank(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class RankingOutput(BaseModel):
    recommended_jobs: List[RankedJob] = Field(default_factory=list)
    no_results_feedback: Optional[str] = None

    @field_validator("recommended_jobs", mode="before")
    @classmethod
    def drop_invalid_entries(cls, value: Any) -> Any:
        # Entries are validated one by one; invalid ones are dropped, not fatal.
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        kept = []
        for i, item in enumerate(value):
            try:
                RankedJob.model_validate(item)
            except ValidationError as exc:
                log.warning(
                    "Dropping ranked entry %d (%d validation error(s)): %r",
                    i, exc.error_count(), item,
                )
                continue
            kept.append(item)
        return kept

    @field_validator("no_results_feedback")
    @classmethod
    def strip_blank(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ExplanationOutput(BaseModel):
    explanation: str = Field(min_length=1)
    relevancy_score: float = Field(ge=0, le=100)


class ParsedResumeOutput(BaseModel):
    skills: List[str] = Field(default_factory=list)
    experience: List[str] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)


class AnswerOutput(BaseModel):
    answer: str = Field(min_length=1)
