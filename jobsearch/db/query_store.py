"""
Per-query result cache.

One row per search identity holding the last live result set and its expiry.
Expired rows are kept so they can serve as a stale fallback; expiry is a
timestamp comparison, not a delete.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from jobsearch.config import settings
from jobsearch.db.base import as_utc, get_session_factory, utcnow
from jobsearch.db.tables import CachedJobSearch, generate_uuid
from jobsearch.models import CacheEntry, SearchRequest

logger = logging.getLogger(__name__)

# Dialects with native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Store unavailable: driver/ORM failure or no database configured
STORE_ERRORS = (SQLAlchemyError, ValueError)


def _to_entry(row: CachedJobSearch) -> CacheEntry:
    return CacheEntry(
        identity=row.search_params_hash,
        request=row.search_params or {},
        jobs=row.results or [],
        result_count=row.result_count or 0,
        cached_at=as_utc(row.cached_at),
        expires_at=as_utc(row.expires_at),
        provenance=row.search_source or "live",
        duration_ms=row.request_duration_ms,
        api_key_used=row.api_key_used,
    )


class QueryStore:
    """Cache of result sets keyed by search identity."""

    def __init__(
        self,
        session_factory=None,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self.ttl = ttl if ttl is not None else settings.cache_ttl
        self._clock = clock

    def _session(self):
        factory = self._session_factory or get_session_factory()
        return factory()

    def _latest(self, identity: str) -> CacheEntry | None:
        with self._session() as db:
            row = (
                db.query(CachedJobSearch)
                .filter(CachedJobSearch.search_params_hash == identity)
                .order_by(CachedJobSearch.cached_at.desc())
                .first()
            )
            return _to_entry(row) if row else None

    def get_fresh(self, identity: str) -> CacheEntry | None:
        """Return the entry for identity only while now < expires_at."""
        try:
            entry = self._latest(identity)
        except STORE_ERRORS as e:
            logger.warning(f"Cache read failed for {identity[:12]}: {e}")
            return None

        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            logger.info(f"Cache expired for {identity[:12]} (expired at {entry.expires_at.isoformat()})")
            return None
        return entry

    def get_any(self, identity: str) -> CacheEntry | None:
        """Return the newest entry for identity, expired or not."""
        try:
            return self._latest(identity)
        except STORE_ERRORS as e:
            logger.warning(f"Stale cache read failed for {identity[:12]}: {e}")
            return None

    def upsert(
        self,
        identity: str,
        request: SearchRequest,
        jobs: list[dict[str, Any]],
        result_count: int,
        ttl: timedelta | None = None,
        duration_ms: int | None = None,
        api_key_used: str | None = None,
    ) -> None:
        """Write or overwrite the entry for identity. Failures are logged, not raised."""
        now = self._clock()
        values = {
            "search_params": request.snapshot(),
            "results": jobs,
            "result_count": result_count,
            "cached_at": now,
            "expires_at": now + (ttl if ttl is not None else self.ttl),
            "search_source": "live",
            "request_duration_ms": duration_ms,
            "api_key_used": api_key_used,
        }

        try:
            with self._session() as db:
                insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
                if insert is not None:
                    stmt = insert(CachedJobSearch).values(
                        id=generate_uuid(), search_params_hash=identity, **values
                    )
                    stmt = stmt.on_conflict_do_update(
                        index_elements=["search_params_hash"],
                        set_={key: stmt.excluded[key] for key in values},
                    )
                    db.execute(stmt)
                else:
                    row = (
                        db.query(CachedJobSearch)
                        .filter(CachedJobSearch.search_params_hash == identity)
                        .first()
                    )
                    if row is None:
                        db.add(CachedJobSearch(search_params_hash=identity, **values))
                    else:
                        for key, value in values.items():
                            setattr(row, key, value)
                db.commit()
            logger.info(f"Cached {result_count} jobs for {identity[:12]}")
        except STORE_ERRORS as e:
            logger.error(f"Cache write failed for {identity[:12]}: {e}")

    def purge_expired(self, older_than: timedelta = timedelta(0)) -> int:
        """Delete entries that expired more than `older_than` ago. Returns rows removed."""
        cutoff = self._clock() - older_than
        try:
            with self._session() as db:
                removed = (
                    db.query(CachedJobSearch)
                    .filter(CachedJobSearch.expires_at < cutoff)
                    .delete(synchronize_session=False)
                )
                db.commit()
        except STORE_ERRORS as e:
            logger.error(f"Cache purge failed: {e}")
            return 0
        logger.info(f"Purged {removed} expired cache entries")
        return removed

    def stats(self) -> dict[str, int]:
        """Count total and still-fresh entries."""
        now = self._clock()
        with self._session() as db:
            total = db.query(CachedJobSearch).count()
            fresh = db.query(CachedJobSearch).filter(CachedJobSearch.expires_at > now).count()
        return {"entries": total, "fresh_entries": fresh}
