from __future__ import annotations

import json
import re
from typing import Any, List

TAG_RE = re.compile(r"<[^>]*>")

EXCERPT_LENGTH = 150
ELLIPSIS = "..."


def plain_text(html: str) -> str:
    return TAG_RE.sub("", html or "").strip()


def auto_excerpt(content: str, limit: int = EXCERPT_LENGTH) -> str:
    text = plain_text(content)
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def parse_tags(value: Any) -> List[str]:
    """Tags from the backend: a list, a JSON list string or comma-separated text."""
    if value is None:
        return []

    if isinstance(value, str):
        raw = value.strip()
        items: list = []
        if raw.startswith("["):
            try:
                decoded = json.loads(raw)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, list):
                items = decoded
            else:
                items = raw.split(",")
        else:
            items = raw.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]

    tags: List[str] = []
    for item in items:
        s = str(item).strip()
        if s and s not in tags:
            tags.append(s)
    return tags
