"""Shared fixtures: in-memory database, controllable clock, stub provider."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobsearch.db import tables  # noqa: F401
from jobsearch.db.base import Base
from jobsearch.db.global_store import GlobalStore
from jobsearch.db.key_health_store import KeyHealthStore
from jobsearch.db.query_store import QueryStore
from jobsearch.models import JobRecord, SearchRequest
from jobsearch.search.orchestrator import SearchOrchestrator


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 2, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StubClient:
    """Stands in for JSearchClient, returning a fixed outcome."""

    def __init__(self, outcome: object, key_name: str = "primary") -> None:
        self.outcome = outcome
        self.key_name = key_name
        self.calls: list[SearchRequest] = []

    def fetch(self, request: SearchRequest) -> object:
        self.calls.append(request)
        return self.outcome


def make_job(job_id: str = "j1", title: str = "Engineer", **kw: object) -> JobRecord:
    return JobRecord(job_id=job_id, job_title=title, employer_name="Acme", **kw)  # type: ignore[arg-type]


@pytest.fixture()
def session_factory():  # type: ignore[no-untyped-def]
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def query_store(session_factory, clock: FakeClock) -> QueryStore:  # type: ignore[no-untyped-def]
    return QueryStore(session_factory, ttl=timedelta(hours=6), clock=clock)


@pytest.fixture()
def global_store(session_factory, clock: FakeClock) -> GlobalStore:  # type: ignore[no-untyped-def]
    return GlobalStore(session_factory, retention=3, clock=clock)


@pytest.fixture()
def key_health(session_factory, clock: FakeClock) -> KeyHealthStore:  # type: ignore[no-untyped-def]
    return KeyHealthStore(session_factory, cooldown=timedelta(minutes=60), clock=clock)


@pytest.fixture()
def make_orchestrator(query_store: QueryStore, global_store: GlobalStore, key_health: KeyHealthStore, clock: FakeClock):  # type: ignore[no-untyped-def]
    """Build an orchestrator over the shared stores with a stub provider."""

    def _make(outcome: object, **kw: object) -> SearchOrchestrator:
        kw.setdefault("key_health", key_health)
        return SearchOrchestrator(query_store, global_store, StubClient(outcome), clock=clock, **kw)  # type: ignore[arg-type]

    return _make
