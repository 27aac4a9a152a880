from __future__ import annotations

import json

import pytest

from career_spark.llm import LLMClient
from career_spark.models import JobRecord
from career_spark.sources.base import JobSource


class FakeLLM(LLMClient):
    """Replays scripted replies; dicts are sent as JSON, exceptions are raised."""

    def __init__(self, *responses) -> None:
        super().__init__(api_key="test-key", model="fake-model")
        self.responses = list(responses)
        self.prompts: list[str] = []

    def complete(self, prompt: str, **kwargs) -> str:  # type: ignore[override]
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("FakeLLM ran out of scripted responses")
        reply = self.responses.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply if isinstance(reply, str) else json.dumps(reply)


class FakeSource(JobSource):
    def __init__(self, jobs: list[JobRecord] | None = None) -> None:
        self.jobs = list(jobs or [])
        self.calls: list[tuple[str, str | None, int]] = []

    def search(self, query, location=None, max_results=10):
        self.calls.append((query, location, max_results))
        return list(self.jobs[:max_results])


def make_job(identifier: str, title: str = "Data Scientist", **kwargs) -> JobRecord:
    kwargs.setdefault("company", "ACME")
    kwargs.setdefault("location", "Remote")
    kwargs.setdefault("url", f"https://jobs.example/{identifier}")
    kwargs.setdefault("description", f"{title} working on forecasting models.")
    return JobRecord(id=identifier, title=title, **kwargs)


RESUME_TEXT = (
    "Skills: Python, SQL, Tableau. Experience: Data Analyst at Globex; "
    "Intern at Initech. Education: BSc Statistics, State University."
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for key in ("GROQ_API_KEY", "GROQ_LLM_MODEL", "SERPAPI_KEY"):
        monkeypatch.delenv(key, raising=False)
