"""Thin wrapper around the Groq chat-completions endpoint (OpenAI-compatible SDK).

Every prompt in Career Spark asks for a JSON object; ``complete_json`` pulls the
object out of the reply and validates it against a pydantic schema before it
reaches any caller.
"""
from __future__ import annotations

import json
from typing import Any, Type, TypeVar

from openai import OpenAIError
from pydantic import BaseModel, ValidationError

from career_spark.config import DEFAULT_MODEL, GROQ_BASE_URL, get_env
from career_spark.log import get_logger

log = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMError(RuntimeError):
    """The model could not be reached, or is not configured."""


class LLMOutputError(LLMError):
    """The model answered, but not with usable structured output."""


def extract_json(raw: str) -> Any:
    raw = (raw or "").strip()
    if not raw:
        raise LLMOutputError("LLM returned an empty response")
    start = raw.find("{")
    end = raw.rfind("}") + 1
    if start == -1 or end <= start:
        raise LLMOutputError("LLM did not return a JSON object")
    try:
        return json.loads(raw[start:end])
    except json.JSONDecodeError as exc:
        raise LLMOutputError(f"LLM returned malformed JSON: {exc}") from exc


class LLMClient:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = GROQ_BASE_URL,
        timeout: float = 60.0,
        temperature: float = 0.2,
        client: Any = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else get_env("GROQ_API_KEY")
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_settings(cls, settings: dict[str, Any], api_key: str | None = None) -> "LLMClient":
        llm_cfg = settings.get("llm", {})
        return cls(
            api_key,
            model=llm_cfg.get("model", DEFAULT_MODEL),
            base_url=llm_cfg.get("base_url", GROQ_BASE_URL),
            timeout=float(llm_cfg.get("timeout", 60.0)),
            temperature=float(llm_cfg.get("temperature", 0.2)),
        )

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise LLMError("GROQ_API_KEY is not configured")
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.api_key, base_url=self.base_url, timeout=self.timeout
            )
        return self._client

    def complete(
        self,
        prompt: str,
        *,
        max_tokens: int = 800,
        temperature: float | None = None,
        json_mode: bool = False,
    ) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            resp = client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            raise LLMError(f"LLM call failed: {exc}") from exc
        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()

    def complete_json(
        self,
        prompt: str,
        schema: Type[SchemaT],
        *,
        max_tokens: int = 800,
        temperature: float | None = None,
    ) -> SchemaT:
        raw = self.complete(
            prompt, max_tokens=max_tokens, temperature=temperature, json_mode=True
        )
        data = extract_json(raw)
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            log.debug("Rejected %s payload: %s", schema.__name__, data)
            raise LLMOutputError(
                f"LLM output failed {schema.__name__} validation: {exc.error_count()} error(s)"
            ) from exc
