"""Data models for search requests, job records and search responses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FallbackLevel = Literal["live", "cache", "expired_cache", "recent_global", "static", "error"]
FallbackReason = Literal["rate_limit", "api_key_missing", "api_error"]


class SearchRequest(BaseModel):
    """A job search as submitted by a caller."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    location: str = ""
    keywords: str = ""
    remote: bool = True
    page: int = Field(default=1, ge=1)
    num_pages: int = Field(default=1, ge=1)

    @field_validator("query", "location", "keywords", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("remote", mode="before")
    @classmethod
    def none_to_remote(cls, v: Any) -> Any:
        return True if v is None else v

    def snapshot(self) -> dict[str, Any]:
        """Search parameters echoed back to callers and stored with results."""
        return {
            "query": self.query.strip(),
            "location": self.location.strip(),
            "keywords": self.keywords.strip(),
            "remote": self.remote,
        }


class JobRecord(BaseModel):
    """A single job posting in JSearch shape."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    job_id: str
    job_title: str
    employer_name: str = ""
    job_city: str = ""
    job_state: str = ""
    job_country: str = ""
    job_description: str = ""
    job_employment_type: str = ""
    job_posted_at_datetime_utc: str | None = None
    job_salary_currency: str | None = None
    job_min_salary: float | None = None
    job_max_salary: float | None = None
    job_apply_link: str = ""
    source: str = "jsearch"

    @field_validator(
        "employer_name",
        "job_city",
        "job_state",
        "job_country",
        "job_description",
        "job_employment_type",
        "job_apply_link",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


@dataclass
class CacheEntry:
    """A cached result set for one search identity."""

    identity: str
    request: dict[str, Any]
    jobs: list[dict[str, Any]]
    result_count: int
    cached_at: datetime
    expires_at: datetime
    provenance: str = "live"
    duration_ms: int | None = None
    api_key_used: str | None = None  # label of the provider key that produced it


@dataclass
class GlobalRecentEntry:
    """The most recent successful search, regardless of identity."""

    jobs: list[dict[str, Any]]
    request: dict[str, Any] = field(default_factory=dict)
    result_count: int = 0
    recorded_at: datetime | None = None


class SearchParameters(BaseModel):
    query: str
    location: str
    keywords: str
    remote: bool


class SearchResponse(BaseModel):
    """Response body returned for every tier of the fallback cascade."""

    status: Literal["OK", "error"]
    request_id: str
    parameters: SearchParameters
    data: list[JobRecord] = Field(default_factory=list)
    num_pages: int = 1
    source: str | None = None
    cached: bool | None = None
    cached_at: datetime | None = None
    fallback_level: FallbackLevel
    fallback_reason: FallbackReason | None = None
    cache_age_hours: int | None = None
    message: str | None = None
