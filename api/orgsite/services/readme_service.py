"""README helpers: base64 decoding and section extraction.

Everything here is pure; no I/O.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Iterable, Optional

DEFAULT_MAX_LINES = 10
DEFAULT_MAX_CHARS = 700
ELLIPSIS = "…"

GETTING_STARTED_HEADINGS = ("Getting Started", "Quickstart", "Usage", "Installation")
CONTRIBUTING_HEADINGS = ("Contributing", "Contribution Guide")
LICENSE_HEADINGS = ("License",)

_HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_FENCE_RE = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})")


def decode_readme(content: str, encoding: Optional[str]) -> Optional[str]:
    """Decode the `content` field of GET /repos/{org}/{repo}/readme."""
    if encoding != "base64":
        return content
    try:
        raw = base64.b64decode("".join(content.split()), validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return None


def _parse_heading(line: str) -> Optional[tuple[int, str]]:
    m = _HEADING_RE.match(line)
    if not m:
        return None
    return len(m.group(1)), (m.group(2) or "").strip()


def _iter_headings(lines: list[str]) -> Iterable[tuple[int, int, str]]:
    """Yield (index, depth, title) for ATX headings outside fenced code blocks."""
    fence: Optional[str] = None
    for idx, line in enumerate(lines):
        m = _FENCE_RE.match(line)
        if m:
            marker = m.group(1)
            if fence is None:
                fence = marker[0] * len(marker)
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue
        heading = _parse_heading(line)
        if heading is not None:
            yield idx, heading[0], heading[1]


def truncate_section(
    lines: Iterable[str],
    max_lines: int = DEFAULT_MAX_LINES,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    kept = [line for line in lines if line.strip()][:max_lines]
    text = "\n".join(kept)
    if len(text) > max_chars:
        text = text[: max_chars - 1].rstrip() + ELLIPSIS
    return text


def extract_section(
    markdown: str,
    candidate_headings: Iterable[str],
    max_lines: int = DEFAULT_MAX_LINES,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    """Return the truncated body of the first heading matching a candidate.

    Only headings of depth 1-3 are matched, on their trimmed, lower-cased
    title. The body runs until the next heading of equal or shallower depth.
    Returns "" when nothing matches.
    """
    if not markdown:
        return ""
    wanted = {h.strip().lower() for h in candidate_headings if h and h.strip()}
    if not wanted:
        return ""

    lines = markdown.splitlines()
    headings = list(_iter_headings(lines))

    for pos, (idx, depth, title) in enumerate(headings):
        if depth > 3 or title.lower() not in wanted:
            continue
        end = len(lines)
        for next_idx, next_depth, _ in headings[pos + 1 :]:
            if next_depth <= depth:
                end = next_idx
                break
        return truncate_section(lines[idx + 1 : end], max_lines, max_chars)
    return ""
