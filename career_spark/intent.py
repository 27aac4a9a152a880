"""Label a chat message as a job search or a general career question."""
from __future__ import annotations

from career_spark.llm import LLMClient, LLMError
from career_spark.log import get_logger
from career_spark.schemas import IntentOutput

log = get_logger(__name__)

JOB_SEARCH = "job_search"
GENERAL_QUESTION = "general_question"

_INTENT_PROMPT = """\
You are an expert query classifier. Determine the primary intent of the user's query
related to job searching and career advice. Classify it as either "job_search" or
"general_question".

- "job_search": the user is primarily looking for job listings, recommendations for
  specific roles, or wants to find open positions.
  Examples:
    - "find software engineer jobs in new york"
    - "entry level marketing roles remote"
    - "show me data scientist positions"
    - "i need a job in finance"
    - "recommend some backend developer jobs"
    - "latest openings for project manager"

- "general_question": the user is asking for information, advice, explanations, roadmaps
  or how-to guides about careers, job-search strategy, skills, interview preparation or
  companies, and is NOT primarily asking for job listings.
  Examples:
    - "what are the best skills for a product manager?"
    - "give me a roadmap for AI engineer"
    - "how to prepare for a behavioral interview?"
    - "tell me about the company culture at Google"
    - "explain the STAR method"
    - "pros and cons of remote work"
    - "what are common interview questions for a data analyst?"

Return ONLY valid JSON of the form {{"intent": "job_search"}} or {{"intent": "general_question"}}.

User query: {query}
"""


def classify_intent(query: str, llm: LLMClient) -> str:
    """Return JOB_SEARCH or GENERAL_QUESTION; any model failure means GENERAL_QUESTION."""
    try:
        result = llm.complete_json(
            _INTENT_PROMPT.format(query=query), IntentOutput, max_tokens=50, temperature=0.0
        )
    except LLMError as exc:
        log.warning("Intent classification failed (%s), defaulting to %s", exc, GENERAL_QUESTION)
        return GENERAL_QUESTION
    log.debug("Classified %r as %s", query, result.intent)
    return result.intent
