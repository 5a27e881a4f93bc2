"""End-to-end tests for POST /search-jobs through FastAPI, stores and orchestrator."""

from datetime import timedelta

import pytest
from conftest import StubClient, make_job
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from jobsearch.api.app import app
from jobsearch.api.limiter import limiter
from jobsearch.api.routes.search import get_orchestrator
from jobsearch.db.global_store import GlobalStore
from jobsearch.db.key_health_store import KeyHealthStore
from jobsearch.db.query_store import QueryStore
from jobsearch.models import SearchRequest
from jobsearch.search.orchestrator import SearchOrchestrator
from jobsearch.search.static_jobs import STATIC_FALLBACK_JOBS
from jobsearch.tools.jsearch import RateLimited, UpstreamError, UpstreamSuccess
from jobsearch.utils.cache_key import build_identity

LIVE = UpstreamSuccess(jobs=[make_job("live-1", "AI Product Manager")], result_count=1, duration_ms=80)


def _broken_factory():  # type: ignore[no-untyped-def]
    raise OperationalError("SELECT 1", {}, Exception("db down"))


@pytest.fixture()
def client():  # type: ignore[no-untyped-def]
    limiter.enabled = False
    yield TestClient(app)
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture()
def serve(make_orchestrator):  # type: ignore[no-untyped-def]
    """Route requests to an orchestrator whose provider returns `outcome`."""

    def _serve(outcome: object, **kw: object):  # type: ignore[no-untyped-def]
        orchestrator = make_orchestrator(outcome, **kw)
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return orchestrator

    return _serve


class TestScenarios:
    def test_live_then_cached(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        """Scenario A: healthy provider, then an identical call within the TTL."""
        orchestrator = serve(LIVE)
        body = {"query": "ai product manager", "remote": True}

        first = client.post("/search-jobs", json=body)
        assert first.status_code == 200
        data = first.json()
        assert data["status"] == "OK"
        assert data["fallback_level"] == "live"
        assert data["cached"] is False
        assert len(data["data"]) > 0
        assert data["parameters"] == {"query": "ai product manager", "location": "", "keywords": "", "remote": True}

        second = client.post("/search-jobs", json=body)
        assert second.status_code == 200
        data = second.json()
        assert data["fallback_level"] == "cache"
        assert data["cached"] is True
        assert "cached_at" in data
        assert len(orchestrator.client.calls) == 1

    def test_rate_limited_degrades(self, client, serve, global_store) -> None:  # type: ignore[no-untyped-def]
        """Scenario B: HTTP 429 upstream is never surfaced as an error."""
        global_store.record_success(SearchRequest(query="ml engineer"), [make_job("g1").model_dump()], 1)
        serve(RateLimited())

        response = client.post("/search-jobs", json={"query": "ai product manager"})
        assert response.status_code == 200
        data = response.json()
        assert data["fallback_level"] == "recent_global"
        assert data["fallback_reason"] == "rate_limit"
        assert "rate limit" in data["message"].lower()

    def test_everything_empty_serves_static(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        """Scenario C: empty stores and a failing provider."""
        serve(UpstreamError(detail="HTTP 502"))

        response = client.post("/search-jobs", json={"query": "ai product manager"})
        assert response.status_code == 200
        data = response.json()
        assert data["fallback_level"] == "static"
        assert [j["job_id"] for j in data["data"]] == [j.job_id for j in STATIC_FALLBACK_JOBS]
        assert "cache_age_hours" not in data

    def test_exactly_expired_uses_stale(self, client, serve, query_store, clock) -> None:  # type: ignore[no-untyped-def]
        """Scenario D: now == expires_at counts as expired."""
        request = SearchRequest(query="ai product manager")
        query_store.upsert(build_identity(request), request, [make_job("old-1").model_dump()], 1)
        clock.advance(hours=6)
        serve(UpstreamError())

        data = client.post("/search-jobs", json={"query": "AI Product Manager "}).json()
        assert data["fallback_level"] == "expired_cache"
        assert data["cache_age_hours"] == 6


class TestErrors:
    def test_exhausted_ladder_is_503(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        serve(UpstreamError(), static_jobs=())
        response = client.post("/search-jobs", json={"query": "pm"})
        assert response.status_code == 503
        assert response.json()["status"] == "error"
        assert response.json()["fallback_level"] == "error"

    def test_unexpected_exception_is_500(self, client) -> None:  # type: ignore[no-untyped-def]
        class Exploding:
            def search(self, request, defer=None):  # type: ignore[no-untyped-def]
                raise RuntimeError("boom")

        app.dependency_overrides[get_orchestrator] = lambda: Exploding()
        response = client.post("/search-jobs", json={"query": "pm"})
        assert response.status_code == 500
        assert response.json()["fallback_level"] == "error"

    def test_invalid_page_rejected(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        serve(LIVE)
        assert client.post("/search-jobs", json={"query": "pm", "page": 0}).status_code == 422

    def test_empty_body_uses_defaults(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        orchestrator = serve(LIVE)
        response = client.post("/search-jobs")
        assert response.status_code == 200
        assert orchestrator.client.calls[0] == SearchRequest()


class TestStats:
    def test_counts(self, client, serve) -> None:  # type: ignore[no-untyped-def]
        serve(LIVE)
        client.post("/search-jobs", json={"query": "ai product manager"})
        client.post("/search-jobs", json={"query": "data scientist"})

        stats = client.get("/search-jobs/cache/stats").json()
        assert stats["entries"] == 2
        assert stats["fresh_entries"] == 2
        assert stats["recent_searches"] == 2
        [key] = stats["api_keys"]
        assert key["key_name"] == "primary"
        assert key["healthy"] is True
        assert key["total_requests_today"] == 2

    def test_rate_limited_key_reported(self, client, serve, clock) -> None:  # type: ignore[no-untyped-def]
        serve(RateLimited(retry_after=120))
        client.post("/search-jobs", json={"query": "pm"})

        [key] = client.get("/search-jobs/cache/stats").json()["api_keys"]
        assert key["healthy"] is False
        assert key["consecutive_failures"] == 1
        assert key["rate_limited_until"] == (clock.now + timedelta(seconds=120)).isoformat()

    def test_store_outage_is_503(self, client) -> None:  # type: ignore[no-untyped-def]
        orchestrator = SearchOrchestrator(
            QueryStore(_broken_factory),
            GlobalStore(_broken_factory),
            StubClient(LIVE),  # type: ignore[arg-type]
            key_health=KeyHealthStore(_broken_factory),
        )
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        assert client.get("/search-jobs/cache/stats").status_code == 503


def test_health(client) -> None:  # type: ignore[no-untyped-def]
    assert client.get("/health").json() == {"status": "healthy"}
