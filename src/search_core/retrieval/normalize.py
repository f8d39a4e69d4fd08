"""Builders turning raw provider payloads into `SearchHit` objects."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from search_core.types import SearchHit

EXCERPT_CHARS = 200
UNTITLED = "Untitled"

_HTML_TAG = re.compile(r"<[^>]*>")


def from_confluence(result: dict[str, Any], *, domain: str = "") -> SearchHit:
    """Map one Confluence search result (with `content` expanded)."""
    content = result.get("content") or {}
    space_key = (content.get("space") or {}).get("key") or "Unknown"
    body = ((content.get("body") or {}).get("view") or {}).get("value") or ""

    webui = (content.get("_links") or {}).get("webui") or ""
    if webui:
        url = webui if webui.startswith("http") else f"https://{domain}/wiki{webui}"
    elif content.get("id"):
        url = f"https://{domain}/wiki/spaces/{space_key}/pages/{content['id']}"
    else:
        url = ""

    return SearchHit(
        source="Confluence",
        title=content.get("title") or UNTITLED,
        url=url,
        excerpt=_excerpt(_HTML_TAG.sub("", body)),
        metadata=f"Space: {space_key}",
    )


def from_sharepoint(hit: dict[str, Any]) -> SearchHit:
    """Map one Microsoft Graph `driveItem` search hit."""
    resource = hit.get("resource") or {}
    mime_type = (resource.get("file") or {}).get("mimeType") or "Unknown"
    return SearchHit(
        source="SharePoint",
        title=resource.get("name") or UNTITLED,
        url=resource.get("webUrl") or "",
        excerpt=_excerpt(hit.get("summary") or ""),
        metadata=f"Type: {mime_type}",
    )


def from_box(entry: dict[str, Any]) -> SearchHit:
    """Map one Box file search entry."""
    size_kb = (entry.get("size") or 0) / 1024
    return SearchHit(
        source="Box",
        title=entry.get("name") or UNTITLED,
        url=f"https://app.box.com/file/{entry.get('id', '')}",
        excerpt=_excerpt(entry.get("description") or ""),
        metadata=f"Size: {size_kb:.2f} KB",
    )


BUILDERS: dict[str, Callable[..., SearchHit]] = {
    "confluence": from_confluence,
    "sharepoint": from_sharepoint,
    "box": from_box,
}


def _excerpt(text: str) -> str:
    return text[:EXCERPT_CHARS].strip()
