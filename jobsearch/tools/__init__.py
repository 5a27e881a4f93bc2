"""
Tools for the job search service.

- jsearch: Live job search via the JSearch API (RapidAPI)
"""

from jobsearch.tools.jsearch import (
    JSearchClient,
    Misconfigured,
    RateLimited,
    UpstreamError,
    UpstreamOutcome,
    UpstreamSuccess,
)

__all__ = [
    "JSearchClient",
    "UpstreamOutcome",
    "UpstreamSuccess",
    "RateLimited",
    "Misconfigured",
    "UpstreamError",
]
