"""Project catalog models: author overrides and the aggregated metadata record."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    STABLE = "stable"
    EXPERIMENTAL = "experimental"


class ProjectOverride(BaseModel):
    """Locally authored record; any value set here wins over remote data."""

    model_config = ConfigDict(frozen=True)

    repo: str = Field(min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    purpose: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    docs_url: Optional[str] = None
    package_url: Optional[str] = None
    demo_url: Optional[str] = None
    getting_started: Optional[str] = None
    contributing: Optional[str] = None
    license: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False


class ReleaseSummary(BaseModel):
    tag: str
    url: Optional[str] = None
    published_at: Optional[str] = None


class ProjectMetadata(BaseModel):
    """Fully resolved record handed to the presentation layer."""

    repo: str
    slug: str
    name: str
    description: str
    url: str
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    open_issues: int = Field(default=0, ge=0)
    language: str
    created_at: str  # ISO-8601 UTC
    last_updated: str  # ISO-8601 UTC
    latest_release: Optional[ReleaseSummary] = None
    docs_url: Optional[str] = None
    package_url: Optional[str] = None
    demo_url: Optional[str] = None
    status: ProjectStatus
    purpose: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    getting_started: str
    contributing: str
    license: str
    featured: bool = False
    archived: bool = False
    has_docs: bool = False
    has_releases: bool = False


class ProjectList(BaseModel):
    """GET /api/projects response."""

    projects: list[ProjectMetadata]
    total: int = Field(ge=0)
