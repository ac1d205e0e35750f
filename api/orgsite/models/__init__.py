"""Pydantic models."""

from orgsite.models.error import ErrorDetail
from orgsite.models.github import RemoteLicense, RemoteReleaseInfo, RemoteRepoInfo
from orgsite.models.project import (
    ProjectList,
    ProjectMetadata,
    ProjectOverride,
    ProjectStatus,
    ReleaseSummary,
)
from orgsite.models.site import SiteConfig

__all__ = [
    "ErrorDetail",
    "ProjectList",
    "ProjectMetadata",
    "ProjectOverride",
    "ProjectStatus",
    "ReleaseSummary",
    "RemoteLicense",
    "RemoteReleaseInfo",
    "RemoteRepoInfo",
    "SiteConfig",
]
