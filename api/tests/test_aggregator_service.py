"""Tests for project metadata aggregation: field resolution order and fallbacks."""

from datetime import datetime, timedelta, timezone

import pytest

from orgsite.models.github import RemoteReleaseInfo, RemoteRepoInfo
from orgsite.models.project import ProjectOverride, ProjectStatus
from orgsite.models.site import SiteConfig
from orgsite.services.aggregator_service import (
    DEFAULT_CONTRIBUTING,
    DEFAULT_LICENSE,
    MetadataAggregator,
    build_metadata,
    first_present,
    make_slug,
    needs_registry_check,
    resolve_links,
    resolve_section_text,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _ago(days: int) -> str:
    return (NOW - timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%SZ")


def _aggregator(site_config, github, registry) -> MetadataAggregator:
    return MetadataAggregator(site_config, github, registry, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_override_status_with_no_remote_data(site_config, fake_github, fake_registry):
    """Override {repo: x, status: stable}, nothing remote."""
    meta = await _aggregator(site_config, fake_github, fake_registry).aggregate("x")

    assert meta.status == ProjectStatus.STABLE
    assert meta.stars == 0
    assert meta.forks == 0
    assert meta.description == "A Acme project."
    assert "Acme" in meta.description
    assert meta.url == "https://github.com/acme/x"
    assert meta.language == "Rust"
    assert meta.created_at == "2026-06-01T12:00:00Z"
    assert meta.last_updated == "2026-06-01T12:00:00Z"
    assert meta.latest_release is None
    assert meta.docs_url is None and meta.package_url is None


@pytest.mark.asyncio
async def test_release_and_recent_push_is_active(site_config, make_github, fake_registry):
    github = make_github(
        repos={"newproj": RemoteRepoInfo(name="newproj", stargazers_count=42, forks_count=3, pushed_at=_ago(10))},
        releases={"newproj": RemoteReleaseInfo(tag_name="v1.0")},
    )

    meta = await _aggregator(site_config, github, fake_registry).aggregate("newproj")

    assert meta.status == ProjectStatus.ACTIVE
    assert meta.stars == 42
    assert meta.forks == 3
    assert meta.latest_release is not None and meta.latest_release.tag == "v1.0"
    assert meta.has_releases is True
    assert meta.last_updated == _ago(10)


@pytest.mark.asyncio
async def test_no_release_and_stale_push_stays_experimental(site_config, make_github, fake_registry):
    github = make_github(repos={"oldproj": RemoteRepoInfo(name="oldproj", pushed_at=_ago(400))})

    meta = await _aggregator(site_config, github, fake_registry).aggregate("oldproj")

    assert meta.status == ProjectStatus.EXPERIMENTAL
    assert meta.has_releases is False


@pytest.mark.asyncio
async def test_override_only_record_round_trips(make_github, make_registry):
    override = ProjectOverride(
        repo="rocket",
        name="Rocket",
        description="Launches things.",
        status="active",
        purpose="Because space.",
        features=["fast", "safe"],
        docs_url="https://rocket.example/docs",
        package_url="https://crates.io/crates/rocket-rs",
        demo_url="/demo",
        getting_started="cargo add rocket-rs",
        contributing="Send patches.",
        license="MIT",
        tags=["space"],
        featured=True,
    )
    config = SiteConfig(name="Acme", org="acme", org_url="https://github.com/acme", projects=[override])
    github = make_github()
    registry = make_registry()

    meta = await _aggregator(config, github, registry).aggregate("rocket", detail=True)

    assert meta.name == "Rocket"
    assert meta.description == "Launches things."
    assert meta.status == ProjectStatus.ACTIVE
    assert meta.purpose == "Because space."
    assert meta.features == ["fast", "safe"]
    assert meta.docs_url == "https://rocket.example/docs"
    assert meta.package_url == "https://crates.io/crates/rocket-rs"
    assert meta.demo_url == "/demo"
    assert meta.getting_started == "cargo add rocket-rs"
    assert meta.contributing == "Send patches."
    assert meta.license == "MIT"
    assert meta.tags == ["space"]
    assert meta.featured is True
    assert meta.has_docs is True
    # defaults everywhere no override was supplied
    assert meta.stars == 0 and meta.forks == 0 and meta.open_issues == 0
    assert meta.url == "https://github.com/acme/rocket"
    assert meta.language == "Rust"
    assert meta.latest_release is None
    # both links came from the override, so the registry is never asked
    assert registry.calls == []


@pytest.mark.asyncio
async def test_summary_mode_skips_readme(site_config, make_github, fake_registry):
    github = make_github(readmes={"rocket": "## Usage\nlaunch()\n"})

    meta = await _aggregator(site_config, github, fake_registry).aggregate("rocket")

    assert ("readme", "rocket") not in github.calls
    assert meta.getting_started == "Installation and usage instructions are available in the Rocket repository."
    assert meta.contributing == DEFAULT_CONTRIBUTING
    assert meta.license == DEFAULT_LICENSE


@pytest.mark.asyncio
async def test_detail_mode_uses_readme_sections(site_config, make_github, fake_registry):
    readme = (
        "# Rocket\n\n"
        "## Installation\n```\ncargo add rocket\n```\n\n"
        "## Contribution Guide\nOpen a PR.\n\n"
        "## License\nApache-2.0 or MIT\n"
    )
    github = make_github(
        repos={"rocket": RemoteRepoInfo(name="rocket", license={"spdx_id": "MIT"})},
        readmes={"rocket": readme},
    )

    meta = await _aggregator(site_config, github, fake_registry).aggregate("rocket", detail=True)

    assert meta.getting_started == "```\ncargo add rocket\n```"
    assert meta.contributing == "Open a PR."
    assert meta.license == "Apache-2.0 or MIT"


@pytest.mark.asyncio
async def test_license_default_mentions_remote_spdx(site_config, make_github, fake_registry):
    github = make_github(repos={"rocket": RemoteRepoInfo(name="rocket", license={"spdx_id": "Apache-2.0"})})

    meta = await _aggregator(site_config, github, fake_registry).aggregate("rocket", detail=True)

    assert meta.license == "Released under the Apache-2.0 license."


@pytest.mark.asyncio
async def test_remote_values_fill_fields_without_override(site_config, make_github, fake_registry):
    github = make_github(
        repos={
            "Widget_Kit": RemoteRepoInfo(
                name="Widget_Kit",
                description="Widgets.",
                html_url="https://github.com/acme/Widget_Kit",
                language="Python",
                topics=["widgets"],
                open_issues_count=5,
                created_at=_ago(400),
                updated_at=_ago(3),
                archived=True,
            )
        }
    )

    meta = await _aggregator(site_config, github, fake_registry).aggregate("Widget_Kit")

    assert meta.slug == "widget-kit"
    assert meta.name == "Widget_Kit"
    assert meta.description == "Widgets."
    assert meta.language == "Python"
    assert meta.tags == ["widgets"]
    assert meta.open_issues == 5
    assert meta.created_at == _ago(400)
    assert meta.last_updated == _ago(3)
    assert meta.archived is True


@pytest.mark.asyncio
async def test_crate_on_registry_gets_conventional_links(site_config, fake_github, make_registry):
    registry = make_registry(crates={"rocket"})

    meta = await _aggregator(site_config, fake_github, registry).aggregate("rocket")

    assert registry.calls == ["rocket"]
    assert meta.docs_url == "https://docs.rs/rocket"
    assert meta.package_url == "https://crates.io/crates/rocket"
    assert meta.has_docs is True


@pytest.mark.asyncio
async def test_failing_lookup_degrades_to_fallback(site_config, make_github, fake_registry):
    class BrokenGitHub(make_github):
        async def get_repo(self, repo):
            raise RuntimeError("boom")

    meta = await _aggregator(site_config, BrokenGitHub(), fake_registry).aggregate("x")

    assert meta.stars == 0
    assert meta.status == ProjectStatus.STABLE


def test_first_present_skips_blank_values():
    assert first_present(None, "", "  ", [], "value") == "value"
    assert first_present(0, 5) == 0
    assert first_present(None, None) is None


def test_make_slug():
    assert make_slug("siderust") == "siderust"
    assert make_slug("Widget_Kit") == "widget-kit"
    assert make_slug("a..b") == "a-b"


def test_resolve_section_text_order():
    readme = "## Usage\nfrom readme\n"

    assert resolve_section_text("from override", readme, ["Usage"], "default") == "from override"
    assert resolve_section_text(None, readme, ["Usage"], "default") == "from readme"
    assert resolve_section_text(None, None, ["Usage"], "default") == "default"
    assert resolve_section_text(None, "# Nothing", ["Usage"], "default") == "default"


def test_resolve_links_prefers_override():
    override = ProjectOverride(repo="rocket", docs_url="https://docs.example")

    assert resolve_links("rocket", override, True) == ("https://docs.example", "https://crates.io/crates/rocket")
    assert resolve_links("rocket", override, False) == ("https://docs.example", None)
    assert resolve_links("rocket", None, False) == (None, None)


def test_registry_check_skipped_only_when_both_links_configured():
    assert needs_registry_check(None) is True
    assert needs_registry_check(ProjectOverride(repo="a", docs_url="d")) is True
    assert needs_registry_check(ProjectOverride(repo="a", docs_url="d", package_url="p")) is False


def test_build_metadata_without_any_input(site_config):
    meta = build_metadata("ghost", site_config, now=NOW)

    assert meta.name == "ghost"
    assert meta.status == ProjectStatus.EXPERIMENTAL
    assert meta.features == []
    assert meta.tags == []
    assert meta.getting_started.endswith("ghost repository.")
