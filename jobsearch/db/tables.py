"""Database table models."""

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from jobsearch.db.base import Base, utcnow


def generate_uuid() -> str:
    return str(uuid.uuid4())


class CachedJobSearch(Base):
    """Cached result set for one normalized search."""

    __tablename__ = "cached_job_searches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    search_params_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    search_params: Mapped[dict] = mapped_column(JSON, default=dict)
    results: Mapped[list] = mapped_column(JSON, default=list)
    result_count: Mapped[int] = mapped_column(Integer, default=0)
    cached_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    search_source: Mapped[str] = mapped_column(String(20), default="live")  # live/cache
    request_duration_ms: Mapped[int | None] = mapped_column(Integer, default=None)
    api_key_used: Mapped[str | None] = mapped_column(String(50), default=None)  # key label, never the key


class LastSuccessfulSearch(Base):
    """Append-only log of recent successful searches across all queries."""

    __tablename__ = "last_successful_search"

    # Integer key breaks ties between rows recorded in the same instant
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    search_params: Mapped[dict] = mapped_column(JSON, default=dict)
    search_results: Mapped[list] = mapped_column(JSON, default=list)
    result_count: Mapped[int] = mapped_column(Integer, default=0)
    cached_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)


class ApiKeyHealth(Base):
    """Request outcomes for one provider API key, identified by its label."""

    __tablename__ = "api_key_health"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    key_name: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    last_success: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    last_failure: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    consecutive_failures: Mapped[int] = mapped_column(Integer, default=0)
    rate_limited_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    requests_date: Mapped[date | None] = mapped_column(Date, default=None)
    total_requests_today: Mapped[int] = mapped_column(Integer, default=0)
    successful_requests_today: Mapped[int] = mapped_column(Integer, default=0)
    success_rate: Mapped[float] = mapped_column(Float, default=100.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
