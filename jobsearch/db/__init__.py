"""Database package."""

from jobsearch.db.base import Base, get_session_factory, init_db
from jobsearch.db.global_store import GlobalStore
from jobsearch.db.key_health_store import KeyHealthStore
from jobsearch.db.query_store import QueryStore
from jobsearch.db.tables import ApiKeyHealth, CachedJobSearch, LastSuccessfulSearch

__all__ = [
    "Base",
    "get_session_factory",
    "init_db",
    "CachedJobSearch",
    "LastSuccessfulSearch",
    "ApiKeyHealth",
    "QueryStore",
    "GlobalStore",
    "KeyHealthStore",
]
