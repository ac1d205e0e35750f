"""Project status heuristic."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional, Union

from orgsite.models.project import ProjectStatus

ACTIVE_WINDOW_DAYS = 180


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (GitHub uses the trailing Z form). Naive values are UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        raw = str(value).strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def days_since(value: Union[str, datetime, None], now: Optional[datetime] = None) -> float:
    """Elapsed days since value; missing or unparseable timestamps are infinitely stale."""
    ts = parse_timestamp(value)
    if ts is None:
        return math.inf
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return (current - ts).total_seconds() / 86400.0


def derive_status(
    override: Optional[ProjectStatus],
    latest_release: Any,
    last_updated: Union[str, datetime, None],
    now: Optional[datetime] = None,
) -> ProjectStatus:
    """Map (override, release presence, last update) to a status label.

    First match wins:
    1. an explicit override is returned as-is
    2. with a release: active when updated within ACTIVE_WINDOW_DAYS, else stable
    3. without a release: experimental, however stale
    """
    if override is not None:
        return ProjectStatus(override)

    if latest_release:
        if days_since(last_updated, now) <= ACTIVE_WINDOW_DAYS:
            return ProjectStatus.ACTIVE
        return ProjectStatus.STABLE

    return ProjectStatus.EXPERIMENTAL
