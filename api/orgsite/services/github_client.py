"""GitHub API client for project metadata.

Async REST wrapper with:
- optional token auth (GITHUB_TOKEN / GH_TOKEN)
- per-identifier caching through a shared FetchCache
- best-effort semantics: every failure collapses to None, nothing is raised
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from orgsite.models.github import RemoteReleaseInfo, RemoteRepoInfo
from orgsite.services.fetch_cache import FetchCache
from orgsite.services.readme_service import decode_readme

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_S = 20.0
log = logging.getLogger(__name__)


def default_timeout() -> float:
    raw = os.getenv("GITHUB_TIMEOUT_S", str(DEFAULT_TIMEOUT_S)).strip()
    try:
        return max(1.0, float(raw))
    except ValueError:
        return DEFAULT_TIMEOUT_S


def env_token() -> Optional[str]:
    token = os.getenv("GITHUB_TOKEN")
    if not token:
        token = os.getenv("GH_TOKEN")
    if token:
        token = token.strip() or None
    return token


async def fetch_json(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_S,
    quiet_statuses: frozenset[int] = frozenset(),
) -> Any | None:
    """GET url and return the decoded JSON body, or None on any failure.

    Statuses in quiet_statuses are expected outcomes and only logged at debug.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, headers=headers or {}, follow_redirects=True) as client:
            r = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.warning("GET %s failed: %s", url, e)
        return None

    if not r.is_success:
        if r.status_code in quiet_statuses:
            log.debug("GET %s: %s", url, r.status_code)
        else:
            if r.headers.get("X-RateLimit-Remaining") == "0":
                log.warning("GitHub rate limit exhausted; reset at %s", r.headers.get("X-RateLimit-Reset"))
            log.warning("GET %s returned %s", url, r.status_code)
        return None

    try:
        return r.json()
    except ValueError as e:
        log.warning("GET %s returned malformed JSON: %s", url, e)
        return None


class GitHubClient:
    def __init__(
        self,
        org: str,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: str = "orgsite-catalog/1.0",
        timeout: Optional[float] = None,
        cache: Optional[FetchCache] = None,
    ) -> None:
        self.org = org
        self._token = token or env_token()
        self._base_url = (base_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else default_timeout()
        self._cache = cache if cache is not None else FetchCache()
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"

    def repo_url(self, repo: str, suffix: str = "") -> str:
        return f"{self._base_url}/repos/{self.org}/{quote(repo, safe='')}{suffix}"

    async def get_json(self, path: str, quiet_statuses: frozenset[int] = frozenset()) -> Any | None:
        """GET JSON for a path or full URL."""
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        return await fetch_json(url, self._headers, self._timeout, quiet_statuses)

    async def get_repo(self, repo: str) -> Optional[RemoteRepoInfo]:
        return await self._cache.get_or_fetch("repo", repo, lambda: self._fetch_repo(repo))

    async def get_latest_release(self, repo: str) -> Optional[RemoteReleaseInfo]:
        return await self._cache.get_or_fetch("release", repo, lambda: self._fetch_latest_release(repo))

    async def get_readme(self, repo: str) -> Optional[str]:
        return await self._cache.get_or_fetch("readme", repo, lambda: self._fetch_readme(repo))

    async def _fetch_repo(self, repo: str) -> Optional[RemoteRepoInfo]:
        data = await self.get_json(self.repo_url(repo))
        if not isinstance(data, dict):
            return None
        try:
            return RemoteRepoInfo.model_validate(data)
        except ValidationError as e:
            log.warning("unexpected repo payload for %s: %s", repo, e)
            return None

    async def _fetch_latest_release(self, repo: str) -> Optional[RemoteReleaseInfo]:
        # 404 means the repository has no published release
        data = await self.get_json(self.repo_url(repo, "/releases/latest"), quiet_statuses=frozenset({404}))
        if not isinstance(data, dict):
            return None
        try:
            return RemoteReleaseInfo.model_validate(data)
        except ValidationError as e:
            log.warning("unexpected release payload for %s: %s", repo, e)
            return None

    async def _fetch_readme(self, repo: str) -> Optional[str]:
        data = await self.get_json(self.repo_url(repo, "/readme"), quiet_statuses=frozenset({404}))
        if not isinstance(data, dict):
            return None
        content = data.get("content")
        if not isinstance(content, str):
            return None
        text = decode_readme(content, data.get("encoding"))
        if text is None:
            log.warning("README for %s could not be decoded", repo)
        return text
