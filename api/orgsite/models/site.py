"""Static site configuration: organization details plus per-project overrides."""

from __future__ import annotations

from pydantic import BaseModel, Field

from orgsite.models.project import ProjectOverride


class SiteConfig(BaseModel):
    name: str = Field(min_length=1)
    org: str = Field(min_length=1)
    org_url: str
    tagline: str = ""
    description: str = ""
    site_url: str = ""
    default_language: str = Field(default="Rust", min_length=1)
    projects: list[ProjectOverride] = Field(default_factory=list)
