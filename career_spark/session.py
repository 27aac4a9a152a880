"""Chat state carried across Streamlit reruns.

Every function takes the state mapping explicitly: ``st.session_state`` in the
app, a plain dict in tests.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, MutableMapping

from career_spark.config import UPLOAD_DIR
from career_spark.llm import LLMError
from career_spark.log import get_logger
from career_spark.models import ChatReply, ParsedResume

log = get_logger(__name__)

State = MutableMapping[str, Any]

INITIAL_PROMPT_TEXT = (
    "Hello! Upload your resume in the sidebar so I can give you personalized job "
    "recommendations, or ask me any career question."
)
RESUME_READY_TEXT = "Great! I see your resume. How can I help you with your job search today?"
EMPTY_RESUME_TEXT = "No skills, experience or education found. Try another file."


def start_session(state: State) -> None:
    """Post the greeting once; call before anything else can add a message."""
    if not state.get("messages"):
        state["messages"] = []
        add_message(state, "assistant", INITIAL_PROMPT_TEXT)


def add_message(state: State, role: str, text: str, reply: ChatReply | None = None) -> None:
    state.setdefault("messages", []).append({"role": role, "text": text, "reply": reply})


def resume_text(state: State) -> str | None:
    parsed = state.get("parsed")
    if parsed is None or parsed.is_empty():
        return None
    return parsed.to_resume_text()


def save_upload(filename: str, data: bytes, directory: Path | None = None) -> Path:
    """Write an upload into *directory*, keeping only the base name the client sent."""
    name = Path(filename).name
    if name in ("", ".", ".."):
        raise ValueError(f"Invalid upload file name: {filename!r}")
    directory = directory or UPLOAD_DIR
    directory.mkdir(parents=True, exist_ok=True)
    dest = directory / name
    dest.write_bytes(data)
    return dest


def ingest_resume(
    state: State,
    filename: str,
    data: bytes,
    parse: Callable[[Path], ParsedResume],
    directory: Path | None = None,
) -> bool:
    """Save and parse an upload once per file name.

    Returns False when this file was already handled on an earlier rerun,
    successfully or not. A failure is kept in ``state["upload_error"]``.
    """
    name = Path(filename).name
    if state.get("uploaded_name") == name:
        return False
    state["uploaded_name"] = name
    state.pop("upload_error", None)

    try:
        parsed = parse(save_upload(name, data, directory))
    except (LLMError, ValueError, OSError) as exc:
        log.error("Resume parsing failed for %s: %s", name, exc)
        state["upload_error"] = f"Parsing failed: {exc}"
        return True

    if parsed.is_empty():
        log.warning("Resume %s yielded no skills, experience or education", name)
        state["upload_error"] = EMPTY_RESUME_TEXT
        return True

    state["parsed"] = parsed
    add_message(state, "assistant", RESUME_READY_TEXT)
    return True


def forget_upload(state: State) -> None:
    """The uploader was emptied: the next file, even with the same name, is parsed again."""
    state.pop("uploaded_name", None)
    state.pop("upload_error", None)
