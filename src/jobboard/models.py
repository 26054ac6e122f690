"""Pydantic data models for the job board."""

import re
from datetime import datetime
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be empty")
    return value


# --- Job Models ---

class JobCreate(BaseModel):
    """Payload for posting a new job."""
    title: str
    description: str
    location: str

    @field_validator("title", "description", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _require_text(value)


class Job(BaseModel):
    """A job posting as persisted in the relational store."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    location: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class JobSummary(BaseModel):
    """The slice of a job embedded in application listings."""
    id: int
    title: str
    location: str


# --- Application Models ---

class ApplicationCreate(BaseModel):
    """Payload for applying to a job."""
    applicant_name: str
    email: str
    resume_url: str

    @field_validator("applicant_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("resume_url")
    @classmethod
    def absolute_http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Resume URL must start with http:// or https://")
        return value


class Application(BaseModel):
    """A job application as persisted in the relational store."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    job_id: int
    applicant_name: str
    email: str
    resume_url: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    job: JobSummary | None = None


class JobWithApplications(Job):
    """A job together with every application submitted to it."""
    applications: list[Application] = Field(default_factory=list)


# --- Search Models ---

class IndexAvailability(str, Enum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class MirrorOutcome(str, Enum):
    SUCCESS = "success"
    SKIPPED_UNAVAILABLE = "skipped_unavailable"
    FAILED = "failed"


class ReindexReport(BaseModel):
    """Summary of one bulk reindex pass over the jobs table."""
    total: int = 0
    indexed: int = 0
    failed: int = 0
    skipped: bool = False
    refreshed: bool = False


class DateRange(BaseModel):
    """Inclusive creation-date bounds; either side may be open."""
    gte: str | None = None
    lte: str | None = None


class FacetFilters(BaseModel):
    """Non-scoring filters and paging for a faceted search."""
    location: str | None = None
    date_range: DateRange | None = None
    offset: int = 0
    size: int = 20


class FacetBucket(BaseModel):
    value: str
    count: int


class FacetedSearchResult(BaseModel):
    """Stable result contract of a faceted search."""
    jobs: list[dict] = Field(default_factory=list)
    facets: dict[str, list[FacetBucket]] = Field(default_factory=dict)
    total: int = 0


class SearchPagination(BaseModel):
    """Paging block returned alongside faceted results."""
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int = 0
    total_pages: int = Field(default=0, alias="totalPages")
