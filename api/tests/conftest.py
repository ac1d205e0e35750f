"""Pytest configuration and fixtures.

Async tests run under ``pytest-asyncio`` (asyncio_mode = auto in pyproject.toml).
Remote lookups are replaced with in-memory fakes so no test touches the
network unless it mocks httpx itself.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orgsite.models.github import RemoteReleaseInfo, RemoteRepoInfo  # noqa: E402
from orgsite.models.site import SiteConfig  # noqa: E402


class FakeGitHub:
    """Stands in for GitHubClient; records every lookup."""

    def __init__(
        self,
        repos: Optional[dict[str, RemoteRepoInfo]] = None,
        releases: Optional[dict[str, RemoteReleaseInfo]] = None,
        readmes: Optional[dict[str, str]] = None,
    ) -> None:
        self.repos = repos or {}
        self.releases = releases or {}
        self.readmes = readmes or {}
        self.calls: list[tuple[str, str]] = []

    async def get_repo(self, repo: str) -> Optional[RemoteRepoInfo]:
        self.calls.append(("repo", repo))
        return self.repos.get(repo)

    async def get_latest_release(self, repo: str) -> Optional[RemoteReleaseInfo]:
        self.calls.append(("release", repo))
        return self.releases.get(repo)

    async def get_readme(self, repo: str) -> Optional[str]:
        self.calls.append(("readme", repo))
        return self.readmes.get(repo)


class FakeRegistry:
    def __init__(self, crates: Optional[set[str]] = None) -> None:
        self.crates = crates or set()
        self.calls: list[str] = []

    async def crate_exists(self, name: str) -> bool:
        self.calls.append(name)
        return name in self.crates


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GITHUB_TOKEN", "GH_TOKEN", "GITHUB_API_URL", "CRATES_API_URL", "GITHUB_TIMEOUT_S", "SITE_CONFIG_PATH"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def site_config() -> SiteConfig:
    return SiteConfig(
        name="Acme",
        org="acme",
        org_url="https://github.com/acme",
        default_language="Rust",
        projects=[
            {"repo": "x", "status": "stable"},
            {"repo": "rocket", "name": "Rocket", "featured": True, "tags": ["space"]},
            {"repo": "Widget_Kit"},
        ],
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def make_github():
    return FakeGitHub


@pytest.fixture
def make_registry():
    return FakeRegistry
