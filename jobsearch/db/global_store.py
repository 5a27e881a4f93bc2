"""
Global last-known-good store.

Keeps a short log of the most recent successful searches made by anyone so a
failed search for a never-seen query can still show real, recent jobs.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import and_, or_

from jobsearch.config import settings
from jobsearch.db.base import as_utc, get_session_factory, utcnow
from jobsearch.db.query_store import STORE_ERRORS
from jobsearch.db.tables import LastSuccessfulSearch
from jobsearch.models import GlobalRecentEntry, SearchRequest

logger = logging.getLogger(__name__)


class GlobalStore:
    """Bounded append-only log of successful searches."""

    def __init__(
        self,
        session_factory=None,
        retention: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self.retention = retention if retention is not None else settings.global_retention
        self._clock = clock

    def _session(self):
        factory = self._session_factory or get_session_factory()
        return factory()

    def record_success(self, request: SearchRequest, jobs: list[dict[str, Any]], result_count: int) -> None:
        """Append a successful search, then prune. Failures are logged, not raised."""
        try:
            with self._session() as db:
                db.add(
                    LastSuccessfulSearch(
                        search_params=request.snapshot(),
                        search_results=jobs,
                        result_count=result_count,
                        cached_at=self._clock(),
                    )
                )
                db.commit()
        except STORE_ERRORS as e:
            logger.error(f"Failed to record last successful search: {e}")
            return

        self.prune()

    def most_recent(self) -> GlobalRecentEntry | None:
        """Return the latest recorded search across all queries."""
        try:
            with self._session() as db:
                row = (
                    db.query(LastSuccessfulSearch)
                    .order_by(LastSuccessfulSearch.cached_at.desc(), LastSuccessfulSearch.id.desc())
                    .first()
                )
                if row is None:
                    return None
                return GlobalRecentEntry(
                    jobs=row.search_results or [],
                    request=row.search_params or {},
                    result_count=row.result_count or 0,
                    recorded_at=as_utc(row.cached_at),
                )
        except STORE_ERRORS as e:
            logger.warning(f"Last successful search read failed: {e}")
            return None

    def prune(self) -> int:
        """
        Drop rows older than the newest `retention` rows. Returns rows removed.

        Only rows ordered before the oldest kept row are deleted, so a search
        recorded concurrently by another request always survives.
        """
        try:
            with self._session() as db:
                oldest_kept = (
                    db.query(LastSuccessfulSearch.cached_at, LastSuccessfulSearch.id)
                    .order_by(LastSuccessfulSearch.cached_at.desc(), LastSuccessfulSearch.id.desc())
                    .offset(max(self.retention, 1) - 1)
                    .first()
                )
                if oldest_kept is None:
                    return 0
                removed = (
                    db.query(LastSuccessfulSearch)
                    .filter(
                        or_(
                            LastSuccessfulSearch.cached_at < oldest_kept.cached_at,
                            and_(
                                LastSuccessfulSearch.cached_at == oldest_kept.cached_at,
                                LastSuccessfulSearch.id < oldest_kept.id,
                            ),
                        )
                    )
                    .delete(synchronize_session=False)
                )
                db.commit()
        except STORE_ERRORS as e:
            logger.error(f"Failed to prune last successful searches: {e}")
            return 0

        if removed:
            logger.debug(f"Pruned {removed} old successful searches")
        return removed

    def count(self) -> int:
        with self._session() as db:
            return db.query(LastSuccessfulSearch).count()
