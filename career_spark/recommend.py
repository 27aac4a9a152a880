"""Job recommendations: plan a search, run it, then rank what came back.

The model never calls the job source itself. A planning call decides whether
to search and with what query, the host runs the search, and a ranking call
scores the candidates it was shown. Ranked entries are matched back to those
candidates by id, so every id and every web-search field in the result comes
straight from the adapter.
"""
from __future__ import annotations

import dataclasses
import json
import re

from career_spark.config import MAX_RECOMMENDED_JOBS
from career_spark.llm import LLMClient
from career_spark.log import get_logger
from career_spark.models import (
    SOURCE_PROVIDED,
    SOURCE_WEB_SEARCH,
    JobRecord,
    RecommendationResult,
    RecommendedJob,
)
from career_spark.schemas import RankedJob, RankingOutput, SearchPlan
from career_spark.sources.base import JobSource

log = get_logger(__name__)

DEFAULT_SEARCH_REASONING = (
    "Searched the web because no supplied listings matched the stated preferences."
)
DEFAULT_NO_RESULTS = (
    "I couldn't find specific jobs for that request right now. Try rephrasing it, "
    "naming a role or location, or broadening your search."
)

_SKILLS_RE = re.compile(r"skills\s*:\s*(.+?)(?:\.\s|\.$|\n|$)", re.IGNORECASE)
_MAX_FUSED_KEYWORDS = 3

_PLAN_PROMPT = """\
You are an AI job recommendation expert planning a job search for a user.

User resume:
{resume_text}

User preferences / request:
{preferences}

{listings_block}

Decide whether a web job search is needed. Search when no listings were supplied, or
when the supplied listings are insufficient or not relevant to the preferences. Do not
search when the request is too vague to form a sensible query; in that case explain in
"no_results_feedback" what the user should clarify.

If you search, write ONE concise query that fuses the user's stated preferences with the
strongest keywords from the resume (e.g. "software engineer remote typescript",
"product manager fintech"). Put a place name in "location" only if the user asked for one.

Return ONLY valid JSON:
{{"search": true, "query": "...", "location": null, "reasoning": "one sentence on why you searched and how the query was built", "no_results_feedback": null}}
"""

_RANK_PROMPT = """\
You are an AI job recommendation expert. Rank the candidate jobs below for this user.

User resume:
{resume_text}

User preferences / request:
{preferences}

Candidate jobs (JSON):
{candidates}

Instructions:
1. Select up to {max_jobs} of the most relevant jobs. Judge fit on skills, experience
   level, the stated preferences, recency and employment type.
2. Copy each selected job's "id" EXACTLY as given. Never invent an id. Skip any job you
   cannot identify.
3. For each selected job write "summary": 2-3 sentences explaining, personally, why it
   fits this user, and "relevance_score": 0-100.
4. For candidates with source "providedListings" also extract "title", "company" and
   "location" from the listing text when present.
5. If none of the candidates is a reasonable fit, return an empty list and put a short,
   helpful message in "no_results_feedback".

Return ONLY valid JSON:
{{"recommended_jobs": [{{"id": "...", "summary": "...", "relevance_score": 0, "title": null, "company": null, "location": null}}], "no_results_feedback": null}}
"""


def _resume_keywords(resume_text: str) -> list[str]:
    match = _SKILLS_RE.search(resume_text or "")
    if not match:
        return []
    keywords: list[str] = []
    for raw in match.group(1).split(","):
        kw = raw.strip()
        if kw and kw.lower() != "not specified":
            keywords.append(kw)
    return list(dict.fromkeys(keywords))


def fuse_search_query(resume_text: str, preferences: str) -> str:
    """Preference text plus a few resume skills it does not already mention."""
    base = " ".join((preferences or "").split())
    lowered = base.lower()
    extra = [kw for kw in _resume_keywords(resume_text) if kw.lower() not in lowered]
    return " ".join([base, *extra[:_MAX_FUSED_KEYWORDS]]).strip()


def _listings_block(listings: list[str]) -> str:
    if not listings:
        return "No specific job listings were provided."
    lines = [f"- [listing-{i}] {text}" for i, text in enumerate(listings, 1)]
    return "Supplied job listings (source: providedListings):\n" + "\n".join(lines)


def _candidate_payload(candidates: dict[str, tuple[JobRecord, str]]) -> str:
    payload = []
    for job, source in candidates.values():
        entry = job.to_dict()
        entry["description"] = job.description[:600]
        entry.pop("url", None)
        entry["source"] = source
        payload.append(entry)
    return json.dumps(payload, indent=1, ensure_ascii=False)


def _select(
    ranked: list[RankedJob],
    candidates: dict[str, tuple[JobRecord, str]],
    max_jobs: int,
) -> list[RecommendedJob]:
    picked: list[RecommendedJob] = []
    seen: set[str] = set()
    for entry in ranked:
        if entry.id not in candidates:
            log.warning("Discarding ranked job with unknown id %r", entry.id)
            continue
        if entry.id in seen or not entry.summary.strip():
            continue
        seen.add(entry.id)

        job, source = candidates[entry.id]
        if source == SOURCE_PROVIDED:
            job = dataclasses.replace(
                job,
                title=entry.title or job.title,
                company=entry.company or job.company,
                location=entry.location or job.location,
            )
        picked.append(
            RecommendedJob(
                job=job,
                summary=entry.summary.strip(),
                relevance_score=entry.relevance_score,
                source=source,
            )
        )

    picked.sort(key=lambda r: -r.relevance_score)
    return picked[:max_jobs]


def recommend_jobs(
    resume_text: str,
    preferences: str,
    existing_listings: list[str] | None = None,
    *,
    llm: LLMClient,
    source: JobSource,
    location: str | None = None,
    max_results: int = 10,
    max_jobs: int = MAX_RECOMMENDED_JOBS,
) -> RecommendationResult:
    """Recommend up to *max_jobs* jobs; model failures propagate as LLMError."""
    max_jobs = max(1, min(max_jobs, MAX_RECOMMENDED_JOBS))
    listings = [text.strip() for text in existing_listings or [] if text and text.strip()]

    plan = llm.complete_json(
        _PLAN_PROMPT.format(
            resume_text=resume_text[:6000],
            preferences=preferences,
            listings_block=_listings_block(listings),
        ),
        SearchPlan,
        max_tokens=400,
        temperature=0.0,
    )

    candidates: dict[str, tuple[JobRecord, str]] = {}
    for i, text in enumerate(listings, 1):
        job = JobRecord(id=f"listing-{i}", description=text)
        candidates[job.id] = (job, SOURCE_PROVIDED)

    search_query: str | None = None
    reasoning: str | None = None
    if plan.search:
        search_query = plan.query or fuse_search_query(resume_text, preferences) or None
        if search_query:
            reasoning = plan.reasoning or DEFAULT_SEARCH_REASONING
            found = source.search(search_query, plan.location or location, max_results)
            for job in found:
                candidates.setdefault(job.id, (job, SOURCE_WEB_SEARCH))
            log.info("Search %r yielded %d candidate(s)", search_query, len(found))
        else:
            log.warning("Model asked to search but no query could be built")
    else:
        log.info("Model chose not to search (%d supplied listing(s))", len(listings))

    recommended: list[RecommendedJob] = []
    ranking_feedback: str | None = None
    if candidates:
        ranking = llm.complete_json(
            _RANK_PROMPT.format(
                resume_text=resume_text[:6000],
                preferences=preferences,
                candidates=_candidate_payload(candidates),
                max_jobs=max_jobs,
            ),
            RankingOutput,
            max_tokens=1800,
        )
        ranking_feedback = ranking.no_results_feedback
        recommended = _select(ranking.recommended_jobs, candidates, max_jobs)

    feedback = None
    if not recommended:
        feedback = ranking_feedback or plan.no_results_feedback or DEFAULT_NO_RESULTS

    log.info(
        "Recommendation complete: %d job(s), searched=%s",
        len(recommended), search_query is not None,
    )
    return RecommendationResult(
        recommended_jobs=recommended,
        search_query_used=search_query,
        reasoning_for_search=reasoning,
        no_results_feedback=feedback,
    )
