"""Load env secrets and settings.yaml tunables."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from career_spark.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
UPLOAD_DIR: Path = ROOT / "uploads"

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"

# Provider and ranking caps that no settings file may exceed.
MAX_SEARCH_RESULTS = 15
MAX_RECOMMENDED_JOBS = 5

DEFAULT_SETTINGS: dict[str, Any] = {
    "llm": {
        "model": DEFAULT_MODEL,
        "base_url": GROQ_BASE_URL,
        "timeout": 60.0,
        "temperature": 0.2,
    },
    "job_search": {
        "max_results": 10,
        "timeout": 20.0,
        "detail_workers": 8,
        "location": "",
    },
    "recommendations": {
        "max_jobs": MAX_RECOMMENDED_JOBS,
    },
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults overlaid with settings.yaml; caps are re-applied after the merge."""
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    else:
        log.debug("No settings file at %s, using defaults", path)

    settings = _merge(DEFAULT_SETTINGS, data)

    # Env model override wins over the file (matches how the key itself is configured).
    env_model = get_env("GROQ_LLM_MODEL")
    if env_model:
        settings["llm"]["model"] = env_model

    search = settings["job_search"]
    search["max_results"] = max(1, min(int(search["max_results"]), MAX_SEARCH_RESULTS))
    recs = settings["recommendations"]
    recs["max_jobs"] = max(1, min(int(recs["max_jobs"]), MAX_RECOMMENDED_JOBS))
    return settings


def ensure_dirs() -> None:
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
