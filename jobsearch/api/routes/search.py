"""Search endpoints."""

import logging
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from jobsearch.api.limiter import limiter
from jobsearch.config import settings
from jobsearch.db.query_store import STORE_ERRORS
from jobsearch.models import SearchRequest
from jobsearch.search.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_orchestrator() -> SearchOrchestrator:
    """FastAPI dependency for the search orchestrator."""
    return SearchOrchestrator.from_settings()


@router.post("")
@limiter.limit(settings.search_rate_limit)
def search_jobs(
    request: Request,
    background_tasks: BackgroundTasks,
    data: SearchRequest | None = None,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Search jobs, degrading through cached and static results when the provider fails."""
    search = data or SearchRequest()
    try:
        response = orchestrator.search(search, defer=background_tasks.add_task)
    except Exception as e:
        logger.exception(f"Unexpected error in search-jobs: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "request_id": f"search_{uuid.uuid4().hex}",
                "parameters": search.snapshot(),
                "data": [],
                "num_pages": 0,
                "fallback_level": "error",
                "message": "Unexpected error while searching jobs.",
            },
        )

    status_code = 503 if response.fallback_level == "error" else 200
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", exclude_none=True),
    )


@router.get("/cache/stats")
def cache_stats(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """Report cache sizes and the health of the provider API keys."""
    try:
        stats: dict = orchestrator.query_store.stats()
        stats["recent_searches"] = orchestrator.global_store.count()
        stats["api_keys"] = orchestrator.key_health.summary() if orchestrator.key_health else []
    except STORE_ERRORS as e:
        logger.error(f"Cache stats unavailable: {e}")
        raise HTTPException(status_code=503, detail="Cache store unavailable")
    return stats
