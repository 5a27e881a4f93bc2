"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from jobsearch.api.limiter import limiter
from jobsearch.config import settings
from jobsearch.db.base import init_db

ALLOWED_ORIGINS = settings.cors_origins.split(",")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create cache tables on startup."""
    logging.basicConfig(level=settings.log_level.upper())
    try:
        init_db()
    except ValueError:
        logger.warning("DATABASE_URL not set, searches will run without a cache")
    yield


app = FastAPI(
    title="Job Search API",
    description="Job search with result caching and graceful fallback",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "apikey", "x-client-info"],
)


# Import and include routers
from jobsearch.api.routes import search  # noqa: E402

app.include_router(search.router, prefix="/search-jobs", tags=["Search"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
