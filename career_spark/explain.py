"""On-demand "why this match" explanation for a single job."""
from __future__ import annotations

from career_spark.llm import LLMClient
from career_spark.log import get_logger
from career_spark.models import Explanation
from career_spark.schemas import ExplanationOutput

log = get_logger(__name__)

_EXPLAIN_PROMPT = """\
You are an AI career coach specializing in matching candidates to jobs.

Given the user's resume, their preferences and a job description, explain in a short,
personal paragraph why this job is (or is not) a good match for the user, and give a
relevancy score from 0 to 100.

Resume data: {resume_text}
Job description: {job_description}
User preferences: {preferences}

Return ONLY valid JSON:
{{"explanation": "...", "relevancy_score": 0}}
"""


def explain_match(
    resume_text: str, job_description: str, preferences: str, *, llm: LLMClient
) -> Explanation:
    # No fallback: LLMError reaches the caller, who shows an error message.
    result = llm.complete_json(
        _EXPLAIN_PROMPT.format(
            resume_text=resume_text[:6000],
            job_description=job_description[:4000],
            preferences=preferences or "None stated",
        ),
        ExplanationOutput,
        max_tokens=500,
    )
    log.info("Explanation generated (score=%.0f)", result.relevancy_score)
    return Explanation(explanation=result.explanation, relevancy_score=result.relevancy_score)
