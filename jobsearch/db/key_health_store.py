"""
Provider API key health.

Tracks how each configured key has been doing: consecutive failures, when a
rate limit lifts, and today's success rate. Keys are identified by their
label only; the secret itself is never stored. Recording is best-effort and
never affects the search that produced the outcome.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from jobsearch.config import settings
from jobsearch.db.base import as_utc, get_session_factory, utcnow
from jobsearch.db.query_store import STORE_ERRORS
from jobsearch.db.tables import ApiKeyHealth
from jobsearch.tools.jsearch import Misconfigured, RateLimited, UpstreamOutcome, UpstreamSuccess

logger = logging.getLogger(__name__)

# A key past either threshold is reported unhealthy
MAX_CONSECUTIVE_FAILURES = 5
MIN_SUCCESS_RATE = 50.0


def _iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value else None


class KeyHealthStore:
    """Per-key request outcomes, updated after every live fetch."""

    def __init__(
        self,
        session_factory=None,
        cooldown: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self.cooldown = cooldown if cooldown is not None else settings.rate_limit_cooldown
        self._clock = clock

    def _session(self):
        factory = self._session_factory or get_session_factory()
        return factory()

    def record(self, key_name: str, outcome: UpstreamOutcome) -> None:
        """Fold one fetch outcome into the key's health row. Failures are logged, not raised."""
        # No request was made, so there is nothing to say about the key
        if isinstance(outcome, Misconfigured):
            return

        now = self._clock()
        try:
            with self._session() as db:
                row = db.query(ApiKeyHealth).filter(ApiKeyHealth.key_name == key_name).first()
                if row is None:
                    row = ApiKeyHealth(
                        key_name=key_name,
                        consecutive_failures=0,
                        total_requests_today=0,
                        successful_requests_today=0,
                        success_rate=100.0,
                        created_at=now,
                    )
                    db.add(row)

                if row.requests_date != now.date():
                    row.requests_date = now.date()
                    row.total_requests_today = 0
                    row.successful_requests_today = 0
                row.total_requests_today += 1

                if isinstance(outcome, UpstreamSuccess):
                    row.successful_requests_today += 1
                    row.last_success = now
                    row.consecutive_failures = 0
                    row.rate_limited_until = None
                else:
                    row.last_failure = now
                    row.consecutive_failures += 1
                    if isinstance(outcome, RateLimited):
                        wait = timedelta(seconds=outcome.retry_after) if outcome.retry_after else self.cooldown
                        row.rate_limited_until = now + wait

                row.success_rate = round(100.0 * row.successful_requests_today / row.total_requests_today, 1)
                row.updated_at = now
                failures = row.consecutive_failures
                db.commit()
        except STORE_ERRORS as e:
            logger.error(f"Failed to record health for key {key_name!r}: {e}")
            return

        if failures >= MAX_CONSECUTIVE_FAILURES:
            logger.warning(f"Key {key_name!r} has failed {failures} times in a row")

    def summary(self) -> list[dict[str, Any]]:
        """Describe every tracked key. Raises if the store is unavailable."""
        now = self._clock()
        with self._session() as db:
            rows = db.query(ApiKeyHealth).order_by(ApiKeyHealth.key_name).all()
            return [self._describe(row, now) for row in rows]

    @staticmethod
    def _describe(row: ApiKeyHealth, now: datetime) -> dict[str, Any]:
        limited_until = as_utc(row.rate_limited_until) if row.rate_limited_until else None
        rate_limited = limited_until is not None and now < limited_until
        # Counters belong to the day they were collected on
        today = row.requests_date == now.date()
        success_rate = row.success_rate if today else 100.0
        return {
            "key_name": row.key_name,
            "healthy": (
                not rate_limited
                and row.consecutive_failures < MAX_CONSECUTIVE_FAILURES
                and success_rate >= MIN_SUCCESS_RATE
            ),
            "rate_limited_until": limited_until.isoformat() if rate_limited else None,
            "consecutive_failures": row.consecutive_failures,
            "total_requests_today": row.total_requests_today if today else 0,
            "successful_requests_today": row.successful_requests_today if today else 0,
            "success_rate": success_rate,
            "last_success": _iso(row.last_success),
            "last_failure": _iso(row.last_failure),
        }
