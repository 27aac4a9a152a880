"""Caller-facing entry points, wired to one LLM client and one job source."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from career_spark import advisor, explain, intent, knowledge, recommend, resume_parser
from career_spark.config import get_env, load_settings
from career_spark.llm import LLMClient
from career_spark.log import get_logger
from career_spark.models import (
    Answer,
    ChatReply,
    Explanation,
    ParsedResume,
    RecommendationResult,
)
from career_spark.sources import JobSource, get_source

log = get_logger(__name__)

RECOMMENDATIONS_LEAD_IN = "Here are some job recommendations based on your query and resume:"
NO_RESUME_TEXT = (
    "To get personalized job recommendations, please upload your resume first."
)


class CareerAssistant:
    def __init__(
        self,
        llm: LLMClient,
        source: JobSource,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self.llm = llm
        self.source = source
        self.settings = settings or load_settings()

    def parse_resume(self, path: Path) -> ParsedResume:
        return resume_parser.parse_resume(path, self.llm)

    def classify_intent(self, query: str) -> str:
        return intent.classify_intent(query, self.llm)

    def retrieve_snippets(self, query: str) -> list[str]:
        return knowledge.retrieve_snippets(query)

    def recommend_jobs(
        self,
        resume_text: str,
        preferences: str,
        existing_listings: list[str] | None = None,
    ) -> RecommendationResult:
        search_cfg = self.settings["job_search"]
        return recommend.recommend_jobs(
            resume_text,
            preferences,
            existing_listings,
            llm=self.llm,
            source=self.source,
            location=search_cfg.get("location") or None,
            max_results=search_cfg["max_results"],
            max_jobs=self.settings["recommendations"]["max_jobs"],
        )

    def explain_match(
        self, resume_text: str, job_description: str, preferences: str
    ) -> Explanation:
        return explain.explain_match(
            resume_text, job_description, preferences, llm=self.llm
        )

    def answer_question(self, query: str, resume_text: str | None = None) -> Answer:
        return advisor.answer_question(
            query, resume_text, llm=self.llm, retriever=self.retrieve_snippets
        )

    def handle_message(self, message: str, resume_text: str | None = None) -> ChatReply:
        """Classify one chat message and route it to recommendations or Q&A."""
        message = message.strip()
        if not message:
            raise ValueError("Message is empty")

        label = self.classify_intent(message)
        if label == intent.JOB_SEARCH:
            if not resume_text:
                return ChatReply(intent=label, text=NO_RESUME_TEXT)
            result = self.recommend_jobs(resume_text, message)
            text = RECOMMENDATIONS_LEAD_IN if result.recommended_jobs else result.no_results_feedback
            return ChatReply(intent=label, text=text or "", recommendation=result)

        answer = self.answer_question(message, resume_text)
        return ChatReply(intent=label, text=answer.answer, answer=answer)


def build_assistant(settings: dict[str, Any] | None = None) -> CareerAssistant:
    settings = settings or load_settings()
    llm = LLMClient.from_settings(settings, api_key=get_env("GROQ_API_KEY"))
    if not llm.configured:
        log.warning("GROQ_API_KEY not set: intent falls back to general questions, "
                    "recommendations and explanations will fail")
    return CareerAssistant(llm, get_source(get_env, settings), settings)
