"""
JSearch client for live job search.

Calls the JSearch API on RapidAPI once per request and classifies the
outcome. There are no retries: any failure is handed back to the caller,
which decides how to degrade.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from jobsearch.config import settings
from jobsearch.models import JobRecord, SearchRequest

logger = logging.getLogger(__name__)

SOURCE_TAG = "jsearch"


@dataclass(frozen=True)
class UpstreamSuccess:
    jobs: list[JobRecord] = field(default_factory=list)
    result_count: int = 0
    duration_ms: int | None = None


@dataclass(frozen=True)
class RateLimited:
    retry_after: int | None = None  # seconds, from the Retry-After header


@dataclass(frozen=True)
class Misconfigured:
    pass


@dataclass(frozen=True)
class UpstreamError:
    detail: str = ""


UpstreamOutcome = UpstreamSuccess | RateLimited | Misconfigured | UpstreamError


def build_provider_query(request: SearchRequest, default_query: str) -> str:
    """Combine query, keywords and location into one JSearch query string."""
    text = " ".join(part for part in (request.query.strip(), request.keywords.strip()) if part)
    location = request.location.strip()
    if location:
        text = f"{text} in {location}".strip()
    return text or default_query


def parse_jobs(data: list[Any], max_results: int) -> list[JobRecord]:
    """Validate provider records into JobRecords, skipping malformed ones."""
    jobs: list[JobRecord] = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        try:
            jobs.append(JobRecord.model_validate({**raw, "source": SOURCE_TAG}))
        except ValidationError as e:
            logger.warning(f"Skipping malformed job record {raw.get('job_id')!r}: {e.error_count()} errors")
        if len(jobs) >= max_results:
            break
    return jobs


class JSearchClient:
    """Single-shot client for the JSearch /search endpoint."""

    def __init__(
        self,
        api_key: str,
        key_name: str = "primary",
        url: str = "https://jsearch.p.rapidapi.com/search",
        host: str = "jsearch.p.rapidapi.com",
        timeout: float = 30.0,
        date_posted: str = "week",
        default_query: str = "software engineer",
        max_results: int = 25,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.key_name = key_name
        self.url = url
        self.host = host
        self.timeout = timeout
        self.date_posted = date_posted
        self.default_query = default_query
        self.max_results = max_results
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: httpx.BaseTransport | None = None) -> "JSearchClient":
        return cls(
            api_key=settings.rapidapi_key,
            key_name=settings.rapidapi_key_name,
            url=settings.jsearch_url,
            host=settings.rapidapi_host,
            timeout=settings.search_timeout,
            date_posted=settings.date_posted,
            default_query=settings.default_query,
            max_results=settings.max_results,
            transport=transport,
        )

    def build_params(self, request: SearchRequest) -> dict[str, str]:
        params = {
            "query": build_provider_query(request, self.default_query),
            "page": str(request.page),
            "num_pages": str(request.num_pages),
            "date_posted": self.date_posted,
        }
        if request.remote:
            params["remote_jobs_only"] = "true"
        return params

    def fetch(self, request: SearchRequest) -> UpstreamOutcome:
        """
        Run one live search.

        Returns:
            UpstreamSuccess with validated jobs, RateLimited on HTTP 429,
            Misconfigured when no API key is set, UpstreamError otherwise.
        """
        if not self.api_key:
            logger.error("JSearch unavailable: RAPIDAPI_KEY not set")
            return Misconfigured()

        params = self.build_params(request)
        headers = {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.host,
        }
        logger.info(f"Searching JSearch with query: {params['query']!r}")

        started = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.url, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"JSearch transport error: {e}")
            return UpstreamError(detail=f"transport error: {e}")
        duration_ms = int((time.monotonic() - started) * 1000)

        if response.status_code == 429:
            logger.warning("JSearch rate limit reached (HTTP 429)")
            retry_after = response.headers.get("retry-after", "")
            return RateLimited(retry_after=int(retry_after) if retry_after.isdigit() else None)
        if not response.is_success:
            logger.error(f"JSearch API error: {response.status_code} {response.reason_phrase}")
            return UpstreamError(detail=f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"JSearch returned invalid JSON: {e}")
            return UpstreamError(detail="invalid JSON body")

        status = body.get("status") if isinstance(body, dict) else None
        data = body.get("data") if isinstance(body, dict) else None
        if status != "OK" or not isinstance(data, list):
            logger.error(f"JSearch returned no usable data (status={status!r})")
            return UpstreamError(detail=f"provider status {status!r}")

        jobs = parse_jobs(data, self.max_results)
        logger.info(f"JSearch returned {len(jobs)} jobs in {duration_ms}ms")
        return UpstreamSuccess(jobs=jobs, result_count=len(jobs), duration_ms=duration_ms)
