"""Search resolution: cache, live fetch and fallback ladder."""

from jobsearch.search.classifier import SearchResult, StatusAlert, classify, status_alert
from jobsearch.search.orchestrator import SearchOrchestrator
from jobsearch.search.static_jobs import STATIC_FALLBACK_JOBS

__all__ = [
    "SearchOrchestrator",
    "STATIC_FALLBACK_JOBS",
    "SearchResult",
    "StatusAlert",
    "classify",
    "status_alert",
]
