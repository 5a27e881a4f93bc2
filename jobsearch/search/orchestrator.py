"""
Search orchestrator.

Decides where the results for a search come from:

1. Fresh cache hit for the same search
2. Live fetch from JSearch (persisted to both stores on success)
3. Fallback ladder, only after a failed live fetch:
   a. stale cache for the same search
   b. most recent successful search by anyone
   c. curated static jobs

Every response is tagged with the tier that produced it.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from jobsearch.db.base import utcnow
from jobsearch.db.global_store import GlobalStore
from jobsearch.db.key_health_store import KeyHealthStore
from jobsearch.db.query_store import QueryStore
from jobsearch.models import FallbackLevel, FallbackReason, JobRecord, SearchParameters, SearchRequest, SearchResponse
from jobsearch.search.static_jobs import STATIC_FALLBACK_JOBS
from jobsearch.tools.jsearch import (
    JSearchClient,
    Misconfigured,
    RateLimited,
    UpstreamOutcome,
    UpstreamSuccess,
)
from jobsearch.utils.cache_key import build_identity

logger = logging.getLogger(__name__)

REASON_MESSAGES: dict[str, str] = {
    "rate_limit": "API rate limit reached.",
    "api_key_missing": "Job search API is not configured.",
    "api_error": "Job search API is temporarily unavailable.",
}

Defer = Callable[..., Any]


def _run_now(fn: Callable[..., Any], *args: Any) -> None:
    fn(*args)


def failure_reason(outcome: UpstreamOutcome) -> FallbackReason:
    """Map a failed upstream outcome to the reason reported to callers."""
    if isinstance(outcome, RateLimited):
        return "rate_limit"
    if isinstance(outcome, Misconfigured):
        return "api_key_missing"
    return "api_error"


def age_in_hours(since: datetime, now: datetime) -> int:
    """Whole hours elapsed, floored, never negative."""
    return max(0, int((now - since).total_seconds() // 3600))


def to_records(payload: Sequence[Any]) -> list[JobRecord]:
    """Rebuild JobRecords from a stored payload, dropping anything unreadable."""
    records = []
    for item in payload:
        if isinstance(item, JobRecord):
            records.append(item)
            continue
        try:
            records.append(JobRecord.model_validate(item))
        except ValidationError:
            logger.warning("Dropping unreadable job record from stored payload")
    return records


class SearchOrchestrator:
    """Serve a search from cache, live, or the fallback ladder."""

    def __init__(
        self,
        query_store: QueryStore,
        global_store: GlobalStore,
        client: JSearchClient,
        static_jobs: Sequence[JobRecord] = STATIC_FALLBACK_JOBS,
        clock: Callable[[], datetime] = utcnow,
        key_health: KeyHealthStore | None = None,
    ):
        self.query_store = query_store
        self.global_store = global_store
        self.client = client
        self.key_health = key_health
        self.static_jobs = static_jobs
        self._clock = clock
        # Tried in order after a failed live fetch; first non-None wins
        self.ladder: list[Callable[[SearchRequest, str, FallbackReason], SearchResponse | None]] = [
            self._from_expired_cache,
            self._from_recent_global,
            self._from_static,
        ]

    @classmethod
    def from_settings(cls) -> "SearchOrchestrator":
        return cls(QueryStore(), GlobalStore(), JSearchClient.from_settings(), key_health=KeyHealthStore())

    def search(self, request: SearchRequest, defer: Defer | None = None) -> SearchResponse:
        """
        Resolve a search request to a response.

        Args:
            request: The search to run
            defer: Scheduler for persistence and key-health writes after a
                live fetch, called as defer(fn, *args). Defaults to running
                them inline.

        Returns:
            A SearchResponse tagged with its fallback_level. Only an exhausted
            ladder produces status "error".
        """
        identity = build_identity(request)

        entry = self.query_store.get_fresh(identity)
        if entry is not None:
            logger.info(f"Cache hit for {identity[:12]} ({entry.result_count} jobs)")
            return self._respond(
                request,
                "cache",
                entry.jobs,
                source="cache",
                cached=True,
                cached_at=entry.cached_at,
            )

        schedule = defer or _run_now
        outcome = self.client.fetch(request)
        if isinstance(outcome, UpstreamSuccess):
            schedule(self._persist, identity, request, outcome)
            schedule(self._record_key_health, outcome)
            return self._respond(request, "live", outcome.jobs, source="jsearch", cached=False)

        schedule(self._record_key_health, outcome)
        reason = failure_reason(outcome)
        logger.warning(f"Live search failed ({reason}) for {identity[:12]}, falling back")
        for tier in self.ladder:
            response = tier(request, identity, reason)
            if response is not None:
                logger.info(f"Serving {response.fallback_level} fallback for {identity[:12]}")
                return response

        logger.error(f"All fallback tiers exhausted for {identity[:12]}")
        return SearchResponse(
            status="error",
            request_id=self._request_id(),
            parameters=SearchParameters(**request.snapshot()),
            data=[],
            num_pages=0,
            fallback_level="error",
            fallback_reason=reason,
            message=f"{REASON_MESSAGES[reason]} No fallback results are available.",
        )

    def _persist(self, identity: str, request: SearchRequest, outcome: UpstreamSuccess) -> None:
        payload = [job.model_dump() for job in outcome.jobs]
        self.query_store.upsert(
            identity,
            request,
            payload,
            outcome.result_count,
            duration_ms=outcome.duration_ms,
            api_key_used=self.client.key_name,
        )
        # An empty result is no use as a cross-query fallback
        if payload:
            self.global_store.record_success(request, payload, outcome.result_count)

    def _record_key_health(self, outcome: UpstreamOutcome) -> None:
        if self.key_health is not None:
            self.key_health.record(self.client.key_name, outcome)

    def _from_expired_cache(
        self, request: SearchRequest, identity: str, reason: FallbackReason
    ) -> SearchResponse | None:
        entry = self.query_store.get_any(identity)
        if entry is None or not entry.jobs:
            return None
        age = age_in_hours(entry.cached_at, self._clock())
        return self._respond(
            request,
            "expired_cache",
            entry.jobs,
            source="cache",
            cached=True,
            cached_at=entry.cached_at,
            reason=reason,
            age=age,
            message=f"{REASON_MESSAGES[reason]} Showing cached results from {age} hours ago.",
        )

    def _from_recent_global(
        self, request: SearchRequest, identity: str, reason: FallbackReason
    ) -> SearchResponse | None:
        entry = self.global_store.most_recent()
        if entry is None or not entry.jobs:
            return None
        age = age_in_hours(entry.recorded_at, self._clock()) if entry.recorded_at else None
        when = f" from {age} hours ago" if age is not None else ""
        return self._respond(
            request,
            "recent_global",
            entry.jobs,
            source="recent_global",
            cached=True,
            cached_at=entry.recorded_at,
            reason=reason,
            age=age,
            message=f"{REASON_MESSAGES[reason]} Showing recent jobs{when}.",
        )

    def _from_static(
        self, request: SearchRequest, identity: str, reason: FallbackReason
    ) -> SearchResponse | None:
        if not self.static_jobs:
            return None
        return self._respond(
            request,
            "static",
            self.static_jobs,
            source="static",
            cached=False,
            reason=reason,
            message=f"{REASON_MESSAGES[reason]} Showing curated jobs.",
        )

    def _respond(
        self,
        request: SearchRequest,
        level: FallbackLevel,
        jobs: Sequence[Any],
        *,
        source: str,
        cached: bool,
        cached_at: datetime | None = None,
        reason: FallbackReason | None = None,
        age: int | None = None,
        message: str | None = None,
    ) -> SearchResponse | None:
        records = to_records(jobs)
        if level not in ("live", "cache") and not records:
            return None
        return SearchResponse(
            status="OK",
            request_id=self._request_id(),
            parameters=SearchParameters(**request.snapshot()),
            data=records,
            num_pages=request.num_pages,
            source=source,
            cached=cached,
            cached_at=cached_at,
            fallback_level=level,
            fallback_reason=reason,
            cache_age_hours=age,
            message=message,
        )

    @staticmethod
    def _request_id() -> str:
        return f"search_{uuid.uuid4().hex}"
