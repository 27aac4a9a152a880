"""Streamlit UI for Career Spark: upload a resume, then chat about jobs."""
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from career_spark import session
from career_spark.assistant import CareerAssistant, build_assistant
from career_spark.config import get_env
from career_spark.llm import LLMError
from career_spark.models import ChatReply, RecommendedJob
from career_spark.resume_parser import SUPPORTED_SUFFIXES
from career_spark.log import get_logger

log = get_logger(__name__)

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stSidebar"] {
    background: rgba(255,255,255,0.55);
    backdrop-filter: blur(16px);
}
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.6);
    border-radius: 12px;
}
h1, h2, h3 { color: #1a1a2e; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _assistant() -> CareerAssistant:
    return build_assistant()


def _check(label: str, ok: bool) -> str:
    icon = "✅" if ok else "⬜"
    return f"{icon}  {label}"


def _resume_text() -> str | None:
    return session.resume_text(st.session_state)


def _score_label(score: float) -> str:
    return f"{score:.0f}% match"


# ── Sidebar: status + resume upload ─────────────────────────────────────


def _sidebar() -> None:
    assistant = _assistant()
    with st.sidebar:
        st.header("Career Spark")
        st.markdown("**Status**")
        st.markdown(_check("Groq API key", assistant.llm.configured))
        has_search_key = bool(get_env("SERPAPI_KEY"))
        st.markdown(_check("Job search key (else demo listings)", has_search_key))
        st.markdown(_check("Resume loaded", _resume_text() is not None))

        st.divider()
        uploaded = st.file_uploader(
            "Upload your resume (PDF, DOCX, or TXT)",
            type=[s.lstrip(".") for s in SUPPORTED_SUFFIXES],
        )
        if uploaded is None:
            session.forget_upload(st.session_state)
        else:
            with st.spinner("Analyzing your resume…"):
                fresh = session.ingest_resume(
                    st.session_state, uploaded.name, uploaded.getvalue(), assistant.parse_resume
                )
            if fresh and "upload_error" not in st.session_state:
                st.success("Resume parsed successfully!")
        upload_error = st.session_state.get("upload_error")
        if upload_error:
            st.warning(upload_error)

        parsed = st.session_state.get("parsed")
        if parsed is not None and not parsed.is_empty():
            with st.expander("Parsed resume", expanded=False):
                st.markdown("**Skills:** " + (", ".join(parsed.skills) or "—"))
                st.markdown("**Experience**")
                for item in parsed.experience or ["—"]:
                    st.markdown(f"- {item}")
                st.markdown("**Education**")
                for item in parsed.education or ["—"]:
                    st.markdown(f"- {item}")
            if st.button("Clear resume", use_container_width=True):
                # The file stays in the uploader; uploaded_name keeps it from re-parsing.
                st.session_state.pop("parsed", None)
                st.rerun()


# ── Chat ─────────────────────────────────────────────────────────────────


def _render_job(job: RecommendedJob, preferences: str, key: str) -> None:
    record = job.job
    header = f"{record.title} at {record.company} · {_score_label(job.relevance_score)}"
    with st.expander(header):
        meta = [record.location or "Location not specified"]
        if record.employment_type:
            meta.append(record.employment_type)
        if record.posted_date:
            meta.append(f"Posted {record.posted_date}")
        st.caption(" · ".join(meta))
        st.write(job.summary)
        if record.url:
            st.markdown(f"[Apply / view posting]({record.url})")

        explain_key = f"explain-{key}"
        if st.button("Why this match?", key=f"btn-{explain_key}"):
            resume_text = _resume_text()
            if not resume_text:
                st.warning("Upload your resume to get a personalized explanation.")
            else:
                with st.spinner("Thinking…"):
                    try:
                        st.session_state[explain_key] = _assistant().explain_match(
                            resume_text, record.description, preferences
                        )
                    except LLMError as exc:
                        log.error("Explanation failed: %s", exc)
                        st.error(f"Sorry, I couldn't explain this match: {exc}")
        explanation = st.session_state.get(explain_key)
        if explanation is not None:
            st.info(f"{explanation.explanation}\n\nRelevancy: {explanation.relevancy_score:.0f}/100")


def _render_reply(reply: ChatReply, preferences: str, msg_index: int) -> None:
    result = reply.recommendation
    if result is not None:
        if result.search_query_used:
            st.caption(f"🔎 Searched for: *{result.search_query_used}*")
        for i, job in enumerate(result.recommended_jobs):
            _render_job(job, preferences, key=f"{msg_index}-{i}-{job.id}")
    if reply.answer is not None and reply.answer.retrieved_context:
        with st.expander("Sources used"):
            for snippet in reply.answer.retrieved_context:
                st.markdown(f"- {snippet}")


def _chat() -> None:
    st.title("Career Spark")
    st.caption("Personalized job recommendations and career advice.")

    previous_user_text = ""
    for idx, msg in enumerate(st.session_state["messages"]):
        with st.chat_message(msg["role"]):
            st.markdown(msg["text"])
            if msg["reply"] is not None:
                _render_reply(msg["reply"], previous_user_text, idx)
        if msg["role"] == "user":
            previous_user_text = msg["text"]

    prompt = st.chat_input("Ask for jobs or career advice…")
    if not prompt or not prompt.strip():
        return

    session.add_message(st.session_state, "user", prompt)
    with st.spinner("Working on it…"):
        try:
            reply = _assistant().handle_message(prompt, _resume_text())
        except LLMError as exc:
            log.error("Chat request failed: %s", exc)
            session.add_message(
                st.session_state, "assistant", f"Sorry, I encountered an error: {exc}. Please try again."
            )
        else:
            session.add_message(st.session_state, "assistant", reply.text, reply)
    st.rerun()


st.set_page_config(page_title="Career Spark", page_icon="✨", layout="wide")
st.markdown(_CSS, unsafe_allow_html=True)
session.start_session(st.session_state)
_sidebar()
_chat()
