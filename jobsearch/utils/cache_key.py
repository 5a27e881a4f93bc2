"""
Cache key builder.

Normalizes a search request into a stable identity so that the same search,
typed with different casing, whitespace or pagination, hits the same cache
entry.
"""

import hashlib
import json
from typing import Any

from jobsearch.models import SearchRequest


def _normalize_text(value: str | None) -> str:
    return (value or "").strip().casefold()


def normalize_request(request: SearchRequest) -> dict[str, Any]:
    """
    Reduce a request to the fields that define "the same search".

    Pagination is excluded and empty text fields become "". A missing remote
    flag has already defaulted to True on the request model.
    """
    return {
        "query": _normalize_text(request.query),
        "location": _normalize_text(request.location),
        "keywords": _normalize_text(request.keywords),
        "remote": bool(request.remote),
    }


def build_identity(request: SearchRequest) -> str:
    """Return the hex SHA-256 digest of the normalized request."""
    canonical = json.dumps(normalize_request(request), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
