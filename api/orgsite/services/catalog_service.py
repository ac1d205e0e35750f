"""Project catalog: the configured projects, aggregated once per process."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from orgsite.models.project import ProjectMetadata
from orgsite.models.site import SiteConfig
from orgsite.services.aggregator_service import MetadataAggregator
from orgsite.services.fetch_cache import FetchCache
from orgsite.services.github_client import GitHubClient
from orgsite.services.registry_client import RegistryClient
from orgsite.services.site_config_service import load_site_config

log = logging.getLogger(__name__)


class ProjectCatalog:
    def __init__(self, site_config: SiteConfig, aggregator: MetadataAggregator) -> None:
        self.site_config = site_config
        self._aggregator = aggregator
        self._projects: Optional[list[ProjectMetadata]] = None
        self._details: dict[str, ProjectMetadata] = {}

    def repos(self) -> list[str]:
        """Configured identifiers in declaration order, duplicates dropped."""
        out: list[str] = []
        for project in self.site_config.projects:
            if project.repo not in out:
                out.append(project.repo)
        return out

    async def get_all_projects(self) -> list[ProjectMetadata]:
        if self._projects is None:
            started = time.perf_counter()
            repos = self.repos()
            # gather preserves argument order, so the result follows the config
            self._projects = list(await asyncio.gather(*(self._aggregator.aggregate(r) for r in repos)))
            log.info(
                "aggregated %d projects in %d ms",
                len(self._projects),
                int(round((time.perf_counter() - started) * 1000)),
            )
        return list(self._projects)

    async def get_project_by_slug(self, slug: str) -> Optional[ProjectMetadata]:
        for project in await self.get_all_projects():
            if project.slug == slug:
                return project
        return None

    async def get_project_detail(self, slug: str) -> Optional[ProjectMetadata]:
        """Detail-mode record for a project page (README sections included)."""
        cached = self._details.get(slug)
        if cached is not None:
            return cached
        summary = await self.get_project_by_slug(slug)
        if summary is None:
            return None
        detail = await self._aggregator.aggregate(summary.repo, detail=True)
        self._details[slug] = detail
        return detail

    async def get_featured_projects(self) -> list[ProjectMetadata]:
        return [p for p in await self.get_all_projects() if p.featured]


def build_catalog(site_config: Optional[SiteConfig] = None, token: Optional[str] = None) -> ProjectCatalog:
    """Wire config, one shared FetchCache, the remote clients and the aggregator."""
    config = site_config or load_site_config()
    cache = FetchCache()
    user_agent = f"{config.name}-website"
    github = GitHubClient(config.org, token=token, user_agent=user_agent, cache=cache)
    registry = RegistryClient(user_agent=user_agent, cache=cache)
    aggregator = MetadataAggregator(config, github, registry)
    return ProjectCatalog(config, aggregator)
