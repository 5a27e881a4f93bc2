"""
Response classifier.

Turns a search response into the flags a client needs to show an honest
status indicator: whether the data came from a cache, whether it is a
degraded fallback, and how old it is.
"""

from dataclasses import dataclass
from typing import Literal

from jobsearch.models import SearchResponse

LIVE_LEVELS = ("live", "cache")


@dataclass
class SearchResult:
    response: SearchResponse
    is_from_cache: bool
    is_fallback: bool
    fallback_level: str
    cache_age_hours: int | None = None
    error_message: str | None = None


@dataclass
class StatusAlert:
    title: str
    message: str
    tone: Literal["info", "warning", "error"] = "info"


def classify(response: SearchResponse) -> SearchResult:
    """Derive cache/fallback/age flags from a response."""
    level = response.fallback_level or "unknown"
    return SearchResult(
        response=response,
        is_from_cache=bool(response.cached) or level == "cache",
        is_fallback=level not in LIVE_LEVELS,
        fallback_level=level,
        cache_age_hours=response.cache_age_hours,
        error_message=response.message,
    )


def status_alert(result: SearchResult) -> StatusAlert | None:
    """Pick the status banner for a classified result, or None for live data."""
    age = result.cache_age_hours if result.cache_age_hours is not None else "several"

    if result.is_fallback:
        if result.fallback_level == "expired_cache":
            return StatusAlert(
                title=f"Showing cached results from {age} hours ago",
                message=result.error_message or "Live search temporarily unavailable.",
            )
        if result.fallback_level == "recent_global":
            return StatusAlert(
                title=f"Showing recent jobs from {age} hours ago",
                message=result.error_message or "Displaying the most recent available results.",
                tone="warning",
            )
        if result.fallback_level == "static":
            return StatusAlert(
                title="Showing curated jobs",
                message=result.error_message or "Live search temporarily unavailable.",
                tone="warning",
            )
        return StatusAlert(
            title="Using backup results",
            message=result.error_message or "Search service temporarily unavailable.",
            tone="error",
        )

    if result.is_from_cache and result.fallback_level == "cache":
        return StatusAlert(
            title="Showing cached results",
            message="Results are refreshed every few hours for faster loading.",
        )

    if result.error_message and not result.is_from_cache:
        return StatusAlert(title="Search issue", message=result.error_message, tone="error")

    return None
