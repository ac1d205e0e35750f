#!/usr/bin/env python3
"""Aggregate every configured project and write the catalog as JSON for the static site build.

Usage:
  python scripts/build_catalog.py [--out PATH] [--config site.json] [--summary]
"""

import argparse
import asyncio
import json
import logging
import os
import sys

_api_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _api_dir)

from dotenv import load_dotenv

load_dotenv(os.path.join(_api_dir, ".env"))

from orgsite.services.catalog_service import ProjectCatalog, build_catalog
from orgsite.services.site_config_service import load_site_config

log = logging.getLogger(__name__)


async def collect(catalog: ProjectCatalog, detail: bool) -> list[dict]:
    projects = await catalog.get_all_projects()
    if detail:
        projects = list(await asyncio.gather(*(catalog.get_project_detail(p.slug) for p in projects)))
    return [p.model_dump(mode="json") for p in projects if p is not None]


def main() -> None:
    ap = argparse.ArgumentParser(description="Build the project catalog JSON")
    ap.add_argument(
        "--out",
        default=None,
        help="Output path (default: api/logs/projects.json)",
    )
    ap.add_argument("--config", default=None, help="Site config JSON (default: SITE_CONFIG_PATH or built-in)")
    ap.add_argument(
        "--summary",
        action="store_true",
        help="Skip README fetches (list-view fields only)",
    )
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    catalog = build_catalog(load_site_config(args.config))
    projects = asyncio.run(collect(catalog, detail=not args.summary))

    out = args.out or os.path.join(_api_dir, "logs", "projects.json")
    os.makedirs(os.path.dirname(os.path.abspath(out)), exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump({"site": catalog.site_config.model_dump(mode="json", exclude={"projects"}), "projects": projects}, f, indent=2)
    log.info("Wrote %d projects to %s", len(projects), out)
    print(f"Wrote {len(projects)} projects to {out}")


if __name__ == "__main__":
    main()
