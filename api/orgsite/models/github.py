"""GitHub REST payloads used by the aggregator.

Only the fields the catalog reads are declared; everything else in the
upstream JSON is ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RemoteLicense(BaseModel):
    key: Optional[str] = None
    name: Optional[str] = None
    spdx_id: Optional[str] = None


class RemoteRepoInfo(BaseModel):
    """GET /repos/{org}/{repo}."""

    name: str
    description: Optional[str] = None
    html_url: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    language: Optional[str] = None
    topics: list[str] = Field(default_factory=list)
    license: Optional[RemoteLicense] = None
    created_at: Optional[str] = None
    pushed_at: Optional[str] = None
    updated_at: Optional[str] = None
    archived: bool = False

    @property
    def spdx_id(self) -> Optional[str]:
        if self.license is None:
            return None
        # GitHub reports unrecognised licenses as NOASSERTION
        if not self.license.spdx_id or self.license.spdx_id == "NOASSERTION":
            return None
        return self.license.spdx_id


class RemoteReleaseInfo(BaseModel):
    """GET /repos/{org}/{repo}/releases/latest."""

    tag_name: str
    html_url: Optional[str] = None
    published_at: Optional[str] = None
