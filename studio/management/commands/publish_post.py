"""
publish_post

Send a Markdown file with YAML front matter to the blog backend as a post.

Front matter keys (all optional except title):

    title, tags, post_type, excerpt, featured_image, featured_thumbnail,
    is_public, is_pinned, scheduled_date

The body below the front matter is sent verbatim as `content`. When no
featured_image is given, the first <img> in the body is used.

Usage:
  python manage.py publish_post path/to/post.md
  python manage.py publish_post path/to/post.md --draft --backend http://localhost:8000
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from editor.media import extract_image_urls
from editor.text import parse_tags
from studio.client import BlogApiError, BlogClient
from studio.payloads import STUDIO_POST_TAKEN, PostDraft, PostType, PostValidationError

FRONT_MATTER_RE = re.compile(r"(?s)\A---\s*\n(.*?)\n---\s*\n?")


@dataclass
class SourceFile:
    meta: Dict[str, Any]
    body: str


def parse_source(text: str) -> SourceFile:
    m = FRONT_MATTER_RE.search(text)
    if not m:
        return SourceFile(meta={}, body=text)

    try:
        data = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise CommandError(f"Invalid front matter: {e}")
    if not isinstance(data, dict):
        data = {}
    return SourceFile(meta=data, body=text[m.end():])


def draft_from_source(src: SourceFile) -> PostDraft:
    meta = src.meta

    raw_type = str(meta.get("post_type") or PostType.BLOG.value).upper()
    try:
        post_type = PostType(raw_type)
    except ValueError:
        raise CommandError(f"unknown post_type: {raw_type}")

    featured_image = str(meta.get("featured_image") or "")
    if not featured_image:
        featured_image = extract_image_urls(src.body).first() or ""

    scheduled = meta.get("scheduled_date")

    return PostDraft(
        title=str(meta.get("title") or ""),
        content=src.body,
        excerpt=str(meta.get("excerpt") or ""),
        post_type=post_type,
        tags=parse_tags(meta.get("tags", meta.get("categories"))),
        featured_image=featured_image,
        featured_thumbnail=str(meta.get("featured_thumbnail") or ""),
        is_public=bool(meta.get("is_public", True)),
        is_pinned=bool(meta.get("is_pinned", False)),
        scheduled_date=str(scheduled) if scheduled else None,
    )


class Command(BaseCommand):
    help = "Publish a Markdown file with YAML front matter to the blog backend"

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, help="Path to the Markdown file")
        parser.add_argument("--draft", action="store_true", help="Save as a private, unpublished draft")
        parser.add_argument("--backend", type=str, default="", help="Backend base URL (default: ARTIVE_BACKEND_URL)")
        parser.add_argument("--token", type=str, default="", help="Bearer token for the backend")
        parser.add_argument("--user", type=str, default="", help="Gallery owner slug for the one-studio-post check")

    def handle(self, *args, **opts):
        path = Path(opts["path"]).expanduser().resolve()
        if not path.exists():
            raise CommandError(f"Input file not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CommandError(f"Cannot read {path}: {e}")
        src = parse_source(text)
        draft = draft_from_source(src)

        publish = not opts["draft"]
        if publish:
            draft.is_published = True
        else:
            draft = draft.as_draft()

        try:
            draft.validate(publish=publish)
        except PostValidationError as e:
            raise CommandError(str(e))

        client = BlogClient(
            opts["backend"] or settings.ARTIVE_BACKEND_URL,
            token=opts["token"] or settings.ARTIVE_BACKEND_TOKEN,
            timeout=settings.ARTIVE_BACKEND_TIMEOUT,
        )
        payload = draft.to_payload(settings.ARTIVE_EXCERPT_LENGTH)
        try:
            if draft.post_type is PostType.STUDIO and client.has_published_post(
                PostType.STUDIO.value, user=opts["user"] or None
            ):
                raise CommandError(STUDIO_POST_TAKEN)
            result = client.create_post(payload) or {}
        except BlogApiError as e:
            raise CommandError(f"backend rejected post: {e.detail}")

        self.stdout.write(json.dumps({
            "id": result.get("id"),
            "title": payload["title"],
            "post_type": payload["post_type"],
            "tags": payload["tags"],
            "featured_image": payload["featured_image"],
            "is_published": payload["is_published"],
            "source": str(path),
        }, indent=2, ensure_ascii=False))
