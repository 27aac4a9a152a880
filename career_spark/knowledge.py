"""Keyword-overlap lookup over a small fixed table of career advice."""
from __future__ import annotations

from career_spark.log import get_logger
from career_spark.models import KnowledgeSnippet

log = get_logger(__name__)

MAX_SNIPPETS = 3

GENERIC_SNIPPET = (
    "For effective job searching, ensure your resume is up-to-date and tailored to the "
    "roles you're applying for. Networking and preparing for interviews are also key steps."
)

KNOWLEDGE_BASE: tuple[KnowledgeSnippet, ...] = (
    KnowledgeSnippet(
        id="kb1",
        keywords=frozenset({"behavioral", "interview", "star method", "questions"}),
        content=(
            "When answering behavioral interview questions, use the STAR method: Situation, "
            "Task, Action, Result. This provides a structured way to describe your "
            "experiences and their outcomes."
        ),
    ),
    KnowledgeSnippet(
        id="kb2",
        keywords=frozenset({"resume", "skills", "ats", "applicant tracking system", "tailor"}),
        content=(
            "Tailor your resume for each job application. Highlight skills and keywords "
            "mentioned in the job description to improve your chances of passing Applicant "
            "Tracking Systems (ATS)."
        ),
    ),
    KnowledgeSnippet(
        id="kb3",
        keywords=frozenset({"salary", "negotiation", "research", "compensation"}),
        content=(
            "Before negotiating salary, research average compensation for similar roles in "
            "your location and industry. Be prepared to articulate your value and "
            "contributions to the company."
        ),
    ),
    KnowledgeSnippet(
        id="kb4",
        keywords=frozenset(
            {"software engineer", "technical interview", "coding challenge", "system design"}
        ),
        content=(
            "Software engineer technical interviews often involve live coding challenges "
            "(focusing on data structures and algorithms) and system design questions to "
            "assess problem-solving abilities."
        ),
    ),
    KnowledgeSnippet(
        id="kb5",
        keywords=frozenset({"networking", "job search", "linkedin", "informational interview"}),
        content=(
            "Networking is crucial in a job search. Actively engage on platforms like "
            "LinkedIn, attend industry events (even virtual ones), and conduct informational "
            "interviews to learn and make connections."
        ),
    ),
    KnowledgeSnippet(
        id="kb6",
        keywords=frozenset({"cover letter", "purpose", "application"}),
        content=(
            "A cover letter complements your resume by allowing you to express your interest "
            "in a specific role and company, and to highlight how your skills and experiences "
            "align with their needs. Make it concise and targeted."
        ),
    ),
    KnowledgeSnippet(
        id="kb7",
        keywords=frozenset({"follow up", "interview", "thank you note"}),
        content=(
            "Always send a thank-you note or email within 24 hours after an interview. It's a "
            "professional courtesy that reiterates your interest and allows you to mention "
            "anything you might have missed."
        ),
    ),
)


def _match_count(words: list[str], snippet: KnowledgeSnippet) -> int:
    content = snippet.content.lower()
    count = 0
    for word in words:
        if any(word in kw for kw in snippet.keywords) or word in content:
            count += 1
    return count


def retrieve_snippets(
    query: str,
    knowledge_base: tuple[KnowledgeSnippet, ...] = KNOWLEDGE_BASE,
) -> list[str]:
    """Up to three snippets, in table order, that share a word with *query*."""
    words = query.lower().split()
    if not words:
        return []

    snippets: list[str] = []
    seen: set[str] = set()
    for entry in knowledge_base:
        if len(snippets) >= MAX_SNIPPETS:
            break
        if entry.id in seen:
            continue
        if _match_count(words, entry) > 0:
            snippets.append(entry.content)
            seen.add(entry.id)

    if not snippets and len(query) > 5:
        snippets.append(GENERIC_SNIPPET)
    log.debug("Retrieved %d snippet(s) for %r", len(snippets), query)
    return snippets
