"""Tests for the CLI stats command."""

from conftest import StubClient
from sqlalchemy.exc import OperationalError

from jobsearch.db.global_store import GlobalStore
from jobsearch.db.key_health_store import KeyHealthStore
from jobsearch.db.query_store import QueryStore
from jobsearch.models import SearchRequest
from jobsearch.search.orchestrator import SearchOrchestrator
from jobsearch.tools.jsearch import UpstreamSuccess
from main import print_stats


def _broken_factory():  # type: ignore[no-untyped-def]
    raise OperationalError("SELECT 1", {}, Exception("db down"))


class TestPrintStats:
    def test_store_outage_prints_warning(self, capsys) -> None:  # type: ignore[no-untyped-def]
        orch = SearchOrchestrator(
            QueryStore(_broken_factory),
            GlobalStore(_broken_factory),
            StubClient(UpstreamSuccess()),  # type: ignore[arg-type]
            key_health=KeyHealthStore(_broken_factory),
        )
        print_stats(orch)
        assert "Cache stats unavailable" in capsys.readouterr().out

    def test_prints_counts_and_keys(self, make_orchestrator, capsys) -> None:  # type: ignore[no-untyped-def]
        orch = make_orchestrator(UpstreamSuccess(jobs=[], result_count=0))
        orch.search(SearchRequest(query="pm"))

        print_stats(orch)
        out = capsys.readouterr().out
        assert "Cached searches: 1 (1 fresh)" in out
        assert "Recent successful searches: 0" in out
        assert "Key primary: healthy, 1 requests today" in out
