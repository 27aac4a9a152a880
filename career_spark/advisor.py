"""Answer general career questions from retrieved snippets and, optionally, the resume."""
from __future__ import annotations

from typing import Callable

from career_spark.knowledge import retrieve_snippets
from career_spark.llm import LLMClient, LLMOutputError
from career_spark.log import get_logger
from career_spark.models import Answer
from career_spark.schemas import AnswerOutput

log = get_logger(__name__)

APOLOGY = "I'm sorry, I encountered an issue and couldn't generate a response."

_RESUME_BLOCK = """\
The user has provided the following resume information:
--- RESUME START ---
{resume_text}
--- RESUME END ---

If the question is specifically about their resume (e.g. "what do you think of my
resume?", "is my resume good for X role?"), use the resume as the PRIMARY basis of your
answer and give constructive feedback.
"""

_ANSWER_PROMPT = """\
You are an expert Career Advisor AI. Give a comprehensive, helpful answer to the user's
question.

{resume_block}
For general career questions, use the context snippets below together with your general
knowledge. Prefer the snippets where they address the question; rely on broader
knowledge where they do not.

Context snippets:
{snippets}

User's question: {query}

Return ONLY valid JSON: {{"answer": "..."}}
"""


def answer_question(
    query: str,
    resume_text: str | None = None,
    *,
    llm: LLMClient,
    retriever: Callable[[str], list[str]] = retrieve_snippets,
) -> Answer:
    snippets = retriever(query)
    if snippets:
        snippet_text = "\n".join(f"- {s}" for s in snippets)
    else:
        snippet_text = "(No specific context snippets were retrieved for this query.)"
    resume_block = _RESUME_BLOCK.format(resume_text=resume_text[:6000]) if resume_text else ""

    try:
        result = llm.complete_json(
            _ANSWER_PROMPT.format(
                resume_block=resume_block, snippets=snippet_text, query=query
            ),
            AnswerOutput,
            max_tokens=1200,
            temperature=0.4,
        )
    except LLMOutputError as exc:
        log.warning("Advisor produced no usable answer: %s", exc)
        return Answer(answer=APOLOGY, retrieved_context=snippets)
    return Answer(answer=result.answer, retrieved_context=snippets)
