"""Tests for match explanations."""
from __future__ import annotations

import pytest

from career_spark.explain import explain_match
from career_spark.llm import LLMError, LLMOutputError
from conftest import RESUME_TEXT, FakeLLM


def test_explanation_and_score_returned() -> None:
    llm = FakeLLM({"explanation": "Your Tableau work maps to their BI stack.", "relevancy_score": 84})

    result = explain_match(RESUME_TEXT, "BI Analyst using Tableau", "remote", llm=llm)

    assert result.explanation == "Your Tableau work maps to their BI stack."
    assert result.relevancy_score == 84
    assert "BI Analyst using Tableau" in llm.prompts[0]


@pytest.mark.parametrize(
    "reply",
    [{"explanation": "ok", "relevancy_score": 140}, {"relevancy_score": 50}, "nope"],
)
def test_invalid_output_raises(reply) -> None:
    with pytest.raises(LLMOutputError):
        explain_match(RESUME_TEXT, "job", "prefs", llm=FakeLLM(reply))


def test_call_failure_propagates() -> None:
    with pytest.raises(LLMError):
        explain_match(RESUME_TEXT, "job", "prefs", llm=FakeLLM(LLMError("rate limited")))
