"""SerpApi Google Jobs search with per-job apply-link resolution.

The adapter never raises to its caller: a missing key, an HTTP failure or a
provider-reported error all degrade to mock listings that say why, and a failed
detail lookup only costs that one job its precise apply link.
"""
from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from urllib.parse import quote, quote_plus, urlparse

import requests

from career_spark.config import MAX_SEARCH_RESULTS
from career_spark.log import get_logger
from career_spark.models import NOT_AVAILABLE, JobRecord
from career_spark.sources.base import JobSource
from career_spark.sources.mock import MockSource

log = get_logger(__name__)

SEARCH_URL = "https://serpapi.com/search.json"
MISSING_KEY_REASON = "SERPAPI_KEY is not configured"
_NO_RESULTS_MARKER = "hasn't returned any results"
_PREFERRED_APPLY_LABELS = ("company website", "apply direct")


class ProviderError(Exception):
    """SerpApi answered, but with an HTTP failure or an ``error`` field."""


def is_valid_url(url: Any) -> bool:
    if not isinstance(url, str):
        return False
    url = url.strip()
    if not url or any(c.isspace() for c in url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def fallback_job_url(job_id: str, title: str, company: str) -> str:
    """Google Jobs results view pinned to *job_id*."""
    terms = " ".join(p for p in (title, company) if p and p != NOT_AVAILABLE) or "jobs"
    return (
        f"https://www.google.com/search?q={quote_plus(terms)}"
        f"&ibp=htl;jobs#htivrt=jobs&htidocid={quote(job_id, safe='')}"
    )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _links(options: Any) -> list[dict]:
    if not isinstance(options, list):
        return []
    return [o for o in options if isinstance(o, dict) and _text(o.get("link"))]


def _primary_link(hit: dict) -> str | None:
    for opts_key in ("apply_options", "related_links"):
        opts = _links(hit.get(opts_key))
        if opts:
            return _text(opts[0]["link"])
    return _text(hit.get("share_link")) or None


def _preferred_apply_link(options: Any) -> str | None:
    links = _links(options)
    for opt in links:
        label = _text(opt.get("title")).lower()
        if any(wanted in label for wanted in _PREFERRED_APPLY_LABELS):
            return _text(opt["link"])
    return _text(links[0]["link"]) if links else None


class SerpApiSource(JobSource):
    def __init__(
        self,
        api_key: str | None,
        *,
        timeout: float = 20.0,
        detail_workers: int = 8,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self.detail_workers = max(1, detail_workers)

    def _get(self, params: dict[str, Any]) -> dict:
        r = requests.get(
            SEARCH_URL,
            params={**params, "api_key": self.api_key},
            timeout=self.timeout,
        )
        if not r.ok:
            raise ProviderError(f"job search provider returned HTTP {r.status_code}")
        data = r.json()
        if not isinstance(data, dict):
            raise ProviderError("job search provider returned an unexpected payload")
        if data.get("error"):
            raise ProviderError(str(data["error"]))
        return data

    def _mock(self, query: str, location: str | None, max_results: int, reason: str) -> list[JobRecord]:
        log.warning("SerpApi unavailable (%s), returning mock listings", reason)
        return MockSource(reason=reason).search(query, location, max_results)

    def search(
        self, query: str, location: str | None = None, max_results: int = 10
    ) -> list[JobRecord]:
        max_results = max(1, min(int(max_results), MAX_SEARCH_RESULTS))
        if not self.api_key:
            return self._mock(query, location, max_results, MISSING_KEY_REASON)

        params: dict[str, Any] = {"engine": "google_jobs", "q": query}
        if location:
            params["location"] = location

        try:
            data = self._get(params)
        except ProviderError as exc:
            if _NO_RESULTS_MARKER in str(exc).lower():
                log.info("SerpApi found no jobs for %r", query)
                return []
            return self._mock(query, location, max_results, str(exc))
        except (requests.RequestException, ValueError) as exc:
            return self._mock(
                query, location, max_results,
                f"failed to connect to the job search provider ({exc})",
            )

        raw_hits = data.get("jobs_results")
        if raw_hits is None:
            raw_hits = []
        elif not isinstance(raw_hits, list):
            return self._mock(
                query, location, max_results,
                "job search provider returned an unexpected payload",
            )
        hits = [h for h in raw_hits if isinstance(h, dict)][:max_results]
        if not hits:
            log.info("SerpApi found no jobs for %r", query)
            return []

        # map() keeps provider order whatever order the lookups finish in.
        with ThreadPoolExecutor(max_workers=min(self.detail_workers, len(hits))) as pool:
            jobs = list(pool.map(self._to_record, hits))
        log.info("SerpApi query=%r location=%r returned %d jobs", query, location, len(jobs))
        return jobs

    def _resolve_url(self, hit: dict, job_id: str | None) -> str | None:
        primary = _primary_link(hit)
        if not job_id:
            return primary
        try:
            data = self._get({"engine": "google_jobs_listing", "q": job_id})
        except (ProviderError, requests.RequestException, ValueError) as exc:
            log.warning("Detail lookup failed for job %s (%s), using search-result link", job_id, exc)
            return primary
        return _preferred_apply_link(data.get("apply_options")) or primary

    def _to_record(self, hit: dict) -> JobRecord:
        provider_id = _text(hit.get("job_id"))
        has_provider_id = bool(provider_id) and provider_id.lower() != "unknown"
        job_id = provider_id if has_provider_id else str(uuid.uuid4())

        title = _text(hit.get("title")) or NOT_AVAILABLE
        company = _text(hit.get("company_name")) or NOT_AVAILABLE

        url = self._resolve_url(hit, provider_id if has_provider_id else None)
        if not is_valid_url(url):
            url = fallback_job_url(job_id, title, company) if has_provider_id else None
            if not is_valid_url(url):
                url = None

        extensions = hit.get("detected_extensions")
        if not isinstance(extensions, dict):
            extensions = {}
        posted = extensions.get("posted_at")
        schedule = extensions.get("schedule_type")

        return JobRecord(
            id=job_id,
            title=title,
            company=company,
            location=_text(hit.get("location")) or None,
            url=url.strip() if url else None,
            description=_text(hit.get("description")) or f"{title} at {company}.",
            posted_date=posted if isinstance(posted, str) else None,
            employment_type=schedule if isinstance(schedule, str) else None,
        )
