"""Project metadata aggregation.

Merges a project's static override, the GitHub repository and latest-release
lookups, an optional README and a crates.io existence check into one
ProjectMetadata record. Every field resolves in the same order:

    override -> remote value -> computed default -> hardcoded fallback

Remote failures only ever degrade a field to its fallback; aggregate() never
raises and never returns a partial record.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from orgsite.models.github import RemoteReleaseInfo, RemoteRepoInfo
from orgsite.models.project import ProjectMetadata, ProjectOverride, ReleaseSummary
from orgsite.models.site import SiteConfig
from orgsite.services import readme_service, status_service
from orgsite.services.github_client import GitHubClient
from orgsite.services.registry_client import RegistryClient, docs_url_for, package_url_for
from orgsite.services.site_config_service import override_map

T = TypeVar("T")
log = logging.getLogger(__name__)

DEFAULT_GETTING_STARTED = "Installation and usage instructions are available in the {name} repository."
DEFAULT_CONTRIBUTING = "Contributions are welcome. Open an issue or a pull request on GitHub to get involved."
DEFAULT_LICENSE = "See the repository for license details."
LICENSE_WITH_SPDX = "Released under the {spdx} license."
DEFAULT_DESCRIPTION = "A {org} project."

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def first_present(*values: Any) -> Any:
    """First value that is not None, not a blank string and not an empty list."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        return value
    return None


def make_slug(repo: str) -> str:
    slug = _SLUG_RE.sub("-", repo.strip().lower()).strip("-")
    return slug or repo


def resolve_description(
    override: Optional[ProjectOverride], repo_info: Optional[RemoteRepoInfo], org_name: str
) -> str:
    return first_present(
        override.description if override else None,
        repo_info.description if repo_info else None,
        DEFAULT_DESCRIPTION.format(org=org_name),
    )


def resolve_section_text(
    override_value: Optional[str],
    readme: Optional[str],
    headings: Iterable[str],
    default: str,
) -> str:
    """Override text, else the matching README section, else default."""
    from_readme = readme_service.extract_section(readme, headings) if readme else ""
    return first_present(override_value, from_readme, default)


def resolve_license(
    override: Optional[ProjectOverride],
    readme: Optional[str],
    repo_info: Optional[RemoteRepoInfo],
) -> str:
    spdx = repo_info.spdx_id if repo_info else None
    default = LICENSE_WITH_SPDX.format(spdx=spdx) if spdx else DEFAULT_LICENSE
    return resolve_section_text(
        override.license if override else None,
        readme,
        readme_service.LICENSE_HEADINGS,
        default,
    )


def resolve_links(
    repo: str, override: Optional[ProjectOverride], crate_exists: bool
) -> tuple[Optional[str], Optional[str]]:
    """(docs_url, package_url): override, else crates.io/docs.rs convention when the crate exists."""
    docs_url = override.docs_url if override else None
    package_url = override.package_url if override else None
    if crate_exists:
        docs_url = first_present(docs_url, docs_url_for(repo))
        package_url = first_present(package_url, package_url_for(repo))
    return first_present(docs_url), first_present(package_url)


def needs_registry_check(override: Optional[ProjectOverride]) -> bool:
    return override is None or not (override.docs_url and override.package_url)


def build_metadata(
    repo: str,
    site_config: SiteConfig,
    override: Optional[ProjectOverride] = None,
    repo_info: Optional[RemoteRepoInfo] = None,
    release: Optional[RemoteReleaseInfo] = None,
    readme: Optional[str] = None,
    crate_exists: bool = False,
    now: Optional[datetime] = None,
) -> ProjectMetadata:
    """Assemble a ProjectMetadata from already fetched inputs. Pure."""
    now = now or _utcnow()
    remote_updated = first_present(
        repo_info.pushed_at if repo_info else None,
        repo_info.updated_at if repo_info else None,
    )
    status = status_service.derive_status(
        override.status if override else None,
        release,
        remote_updated,
        now=now,
    )
    name = first_present(override.name if override else None, repo_info.name if repo_info else None, repo)
    docs_url, package_url = resolve_links(repo, override, crate_exists)
    latest_release = None
    if release is not None:
        latest_release = ReleaseSummary(tag=release.tag_name, url=release.html_url, published_at=release.published_at)

    return ProjectMetadata(
        repo=repo,
        slug=make_slug(repo),
        name=name,
        description=resolve_description(override, repo_info, site_config.name),
        url=first_present(repo_info.html_url if repo_info else None, f"{site_config.org_url.rstrip('/')}/{repo}"),
        stars=repo_info.stargazers_count if repo_info else 0,
        forks=repo_info.forks_count if repo_info else 0,
        open_issues=repo_info.open_issues_count if repo_info else 0,
        language=first_present(repo_info.language if repo_info else None, site_config.default_language),
        created_at=first_present(repo_info.created_at if repo_info else None, iso_utc(now)),
        last_updated=first_present(remote_updated, iso_utc(now)),
        latest_release=latest_release,
        docs_url=docs_url,
        package_url=package_url,
        demo_url=override.demo_url if override else None,
        status=status,
        purpose=first_present(override.purpose if override else None),
        features=list(override.features) if override else [],
        tags=list(first_present(override.tags if override else None, repo_info.topics if repo_info else None) or []),
        getting_started=resolve_section_text(
            override.getting_started if override else None,
            readme,
            readme_service.GETTING_STARTED_HEADINGS,
            DEFAULT_GETTING_STARTED.format(name=name),
        ),
        contributing=resolve_section_text(
            override.contributing if override else None,
            readme,
            readme_service.CONTRIBUTING_HEADINGS,
            DEFAULT_CONTRIBUTING,
        ),
        license=resolve_license(override, readme, repo_info),
        featured=override.featured if override else False,
        archived=repo_info.archived if repo_info else False,
        has_docs=docs_url is not None,
        has_releases=release is not None,
    )


async def _constant(value: T) -> T:
    return value


async def _settle(label: str, repo: str, lookup: Awaitable[T], fallback: T) -> T:
    try:
        return await lookup
    except Exception as e:
        log.warning("%s lookup for %s failed unexpectedly: %s", label, repo, e)
        return fallback


class MetadataAggregator:
    def __init__(
        self,
        site_config: SiteConfig,
        github: GitHubClient,
        registry: RegistryClient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.site_config = site_config
        self._overrides = override_map(site_config)
        self._github = github
        self._registry = registry
        self._clock = clock

    def override_for(self, repo: str) -> Optional[ProjectOverride]:
        return self._overrides.get(repo)

    async def aggregate(self, repo: str, detail: bool = False) -> ProjectMetadata:
        """Resolve one project. detail=True also fetches the README for section text."""
        override = self.override_for(repo)

        registry_lookup = self._registry.crate_exists(repo) if needs_registry_check(override) else _constant(False)
        readme_lookup = self._github.get_readme(repo) if detail else _constant(None)

        repo_info, release, crate_exists, readme = await asyncio.gather(
            _settle("repo", repo, self._github.get_repo(repo), None),
            _settle("release", repo, self._github.get_latest_release(repo), None),
            _settle("registry", repo, registry_lookup, False),
            _settle("readme", repo, readme_lookup, None),
        )
        if repo_info is None:
            log.info("no repository data for %s; using configured and default values", repo)

        return build_metadata(
            repo,
            self.site_config,
            override=override,
            repo_info=repo_info,
            release=release,
            readme=readme,
            crate_exists=bool(crate_exists),
            now=self._clock(),
        )
