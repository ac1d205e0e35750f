"""crates.io lookups: existence checks and conventional package/docs URLs."""

from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote

from orgsite.services.fetch_cache import FetchCache
from orgsite.services.github_client import default_timeout, fetch_json

CRATES_API = "https://crates.io/api/v1"
CRATES_WEB = "https://crates.io/crates"
DOCS_RS = "https://docs.rs"
log = logging.getLogger(__name__)


def package_url_for(name: str) -> str:
    return f"{CRATES_WEB}/{quote(name, safe='')}"


def docs_url_for(name: str) -> str:
    return f"{DOCS_RS}/{quote(name, safe='')}"


class RegistryClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: str = "orgsite-catalog/1.0",
        timeout: Optional[float] = None,
        cache: Optional[FetchCache] = None,
    ) -> None:
        self._base_url = (base_url or os.getenv("CRATES_API_URL") or CRATES_API).rstrip("/")
        self._timeout = timeout if timeout is not None else default_timeout()
        self._cache = cache if cache is not None else FetchCache()
        # crates.io rejects requests without a User-Agent
        self._headers = {"Accept": "application/json", "User-Agent": user_agent}

    async def crate_exists(self, name: str) -> bool:
        return await self._cache.get_or_fetch("crate", name, lambda: self._fetch_crate_exists(name))

    async def _fetch_crate_exists(self, name: str) -> bool:
        data = await fetch_json(
            f"{self._base_url}/crates/{quote(name, safe='')}",
            self._headers,
            self._timeout,
            quiet_statuses=frozenset({404}),
        )
        if not isinstance(data, dict):
            return False
        crate = data.get("crate")
        return isinstance(crate, dict) and bool(crate.get("name") or crate.get("id"))
