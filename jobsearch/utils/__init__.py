"""Utility functions."""

from jobsearch.utils.cache_key import build_identity, normalize_request

__all__ = ["build_identity", "normalize_request"]
