from __future__ import annotations

from typing import Any, Callable

from .base import JobSource
from .mock import MockSource
from .serpapi import SerpApiSource

from career_spark.config import DEFAULT_SETTINGS, get_env
from career_spark.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSource", "MockSource", "SerpApiSource", "get_source"]


def get_source(
    env_getter: Callable[[str], str] = get_env,
    settings: dict[str, Any] | None = None,
) -> JobSource:
    cfg = (settings or DEFAULT_SETTINGS).get("job_search", {})
    api_key = env_getter("SERPAPI_KEY")
    if api_key:
        log.info("Registered source: SerpApi (Google Jobs)")
    else:
        log.info("No SERPAPI_KEY found, job search will return mock listings")
    return SerpApiSource(
        api_key,
        timeout=float(cfg.get("timeout", 20.0)),
        detail_workers=int(cfg.get("detail_workers", 8)),
    )
