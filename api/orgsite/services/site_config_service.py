"""Site configuration: the organization and its ordered list of project overrides.

Loaded once per process. SITE_CONFIG_PATH may point to a JSON file with the
same shape as DEFAULT_SITE_CONFIG; otherwise the built-in config is used.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from pydantic import ValidationError

from orgsite.models.project import ProjectOverride
from orgsite.models.site import SiteConfig

log = logging.getLogger(__name__)

DEFAULT_SITE_CONFIG: dict[str, Any] = {
    "name": "Siderust",
    "org": "Siderust",
    "org_url": "https://github.com/Siderust",
    "tagline": "Building robust Rust libraries for the modern developer",
    "description": (
        "Siderust is an open-source organization dedicated to creating high-quality, "
        "well-documented Rust crates that solve real problems."
    ),
    "site_url": "https://siderust.github.io",
    "default_language": "Rust",
    "projects": [
        {
            "repo": "siderust",
            "name": "Siderust",
            "description": (
                "Reference ephemeris and orbit-analysis library for embedded "
                "flight-software and research-grade pipelines."
            ),
            "status": "active",
            "featured": True,
            "purpose": (
                "Siderust aims to be the reference ephemeris and orbit-analysis library for "
                "embedded flight-software as well as research-grade pipelines. Every algorithm "
                "ships with validation tests against authoritative data (JPL Horizons, IMCCE, SOFA)."
            ),
            "features": [
                "Validated against JPL Horizons, IMCCE, and SOFA standards",
                "Flight-software ready with no unsafe blocks",
                "Zero hidden allocations for embedded use",
                "Research-grade precision for scientific applications",
            ],
            "demo_url": "/demo",
            "getting_started": (
                "# Add to your Cargo.toml\n"
                "[dependencies]\n"
                'siderust = "0.1"'
            ),
            "tags": ["ephemeris", "orbit", "astrodynamics", "rust"],
        },
        {
            "repo": "qtty",
            "name": "qtty",
            "description": "A modern, type-safe terminal UI library for building command-line applications in Rust.",
            "status": "experimental",
            "featured": True,
            "features": [
                "Declarative UI components",
                "Cross-platform support",
                "No-std compatible",
            ],
            "tags": ["tui", "terminal", "ui", "rust"],
        },
        {
            "repo": "affn",
            "name": "affn",
            "description": "Affine transformations and geometric primitives for Rust, optimized for graphics.",
            "status": "stable",
            "featured": True,
            "features": [
                "Const-friendly APIs",
                "Serde support",
                "No-std compatible",
            ],
            "tags": ["math", "geometry", "rust"],
        },
    ],
}


def default_site_config() -> SiteConfig:
    return SiteConfig.model_validate(DEFAULT_SITE_CONFIG)


def _config_path() -> Optional[str]:
    raw = (os.getenv("SITE_CONFIG_PATH") or "").strip()
    return raw or None


def load_site_config(path: Optional[str] = None) -> SiteConfig:
    """Load the site config from path (or SITE_CONFIG_PATH), falling back to the built-in config."""
    path = path or _config_path()
    if not path:
        return default_site_config()
    if not os.path.isfile(path):
        log.warning("site config %s not found; using built-in config", path)
        return default_site_config()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        config = SiteConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        log.warning("site config %s is invalid (%s); using built-in config", path, e)
        return default_site_config()
    _warn_duplicate_repos(config)
    return config


def _warn_duplicate_repos(config: SiteConfig) -> None:
    seen: set[str] = set()
    for project in config.projects:
        if project.repo in seen:
            log.warning("duplicate project override for %s; the first entry wins", project.repo)
        seen.add(project.repo)


def override_map(config: SiteConfig) -> dict[str, ProjectOverride]:
    """repo -> override, keeping the first declaration for duplicated repos."""
    out: dict[str, ProjectOverride] = {}
    for project in config.projects:
        out.setdefault(project.repo, project)
    return out
