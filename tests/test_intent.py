"""Tests for intent classification."""
from __future__ import annotations

import pytest

from career_spark.intent import GENERAL_QUESTION, JOB_SEARCH, classify_intent
from career_spark.llm import LLMClient, LLMError
from conftest import FakeLLM


def test_job_search_query() -> None:
    llm = FakeLLM({"intent": "job_search"})
    assert classify_intent("show me data scientist positions", llm) == JOB_SEARCH
    assert "show me data scientist positions" in llm.prompts[0]


def test_general_question() -> None:
    llm = FakeLLM({"intent": "general_question"})
    assert classify_intent("explain the STAR method", llm) == GENERAL_QUESTION


@pytest.mark.parametrize(
    "reply",
    ["", "I think they want jobs", {"intent": "apply_now"}, {}, LLMError("timeout")],
)
def test_bad_model_output_defaults_to_general_question(reply) -> None:
    assert classify_intent("show me data scientist positions", FakeLLM(reply)) == GENERAL_QUESTION


def test_unconfigured_client_defaults_to_general_question() -> None:
    assert classify_intent("find jobs", LLMClient(api_key="")) == GENERAL_QUESTION
