from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from editor.text import EXCERPT_LENGTH, auto_excerpt, parse_tags


class PostType(str, Enum):
    BLOG = "BLOG"
    NOTICE = "NOTICE"
    NEWS = "NEWS"
    EXHIBITION = "EXHIBITION"
    AWARD = "AWARD"
    STUDIO = "STUDIO"


class PostValidationError(ValueError):
    pass


STUDIO_POST_TAKEN = "only one studio post can be published"


@dataclass
class PostDraft:
    title: str = ""
    content: str = ""
    excerpt: str = ""
    post_type: PostType = PostType.BLOG
    tags: List[str] = field(default_factory=list)
    featured_image: str = ""
    featured_thumbnail: str = ""
    is_published: bool = False
    is_public: bool = True
    is_pinned: bool = False
    scheduled_date: Optional[str] = None

    def validate(self, publish: bool = False) -> None:
        if not self.title.strip():
            raise PostValidationError("title is required")
        if publish and not self.content.strip():
            raise PostValidationError("title and content are required to publish")

    def as_draft(self) -> "PostDraft":
        """Copy saved as an unpublished, private, unpinned draft."""
        return replace(self, is_published=False, is_public=False, is_pinned=False)

    def to_payload(self, excerpt_length: int = EXCERPT_LENGTH) -> dict:
        content = self.content.strip()
        featured_image = (self.featured_image or "").strip()
        payload = {
            "title": self.title.strip(),
            "content": content,
            "excerpt": self.excerpt.strip() or auto_excerpt(content, excerpt_length),
            "post_type": PostType(self.post_type).value,
            "tags": list(self.tags),
            "featured_image": featured_image,
            "featured_thumbnail": (self.featured_thumbnail or "").strip() or featured_image,
            "is_published": self.is_published,
            "is_public": self.is_public,
            "is_pinned": self.is_pinned and PostType(self.post_type) is PostType.NOTICE,
        }
        if self.scheduled_date:
            payload["scheduled_date"] = self.scheduled_date
        return payload

    @classmethod
    def from_backend(cls, data: dict) -> "PostDraft":
        try:
            post_type = PostType(data.get("post_type") or PostType.BLOG.value)
        except ValueError:
            post_type = PostType.BLOG
        return cls(
            title=data.get("title") or "",
            content=data.get("content") or "",
            excerpt=data.get("excerpt") or "",
            post_type=post_type,
            tags=parse_tags(data.get("tags")),
            featured_image=data.get("featured_image") or "",
            featured_thumbnail=data.get("featured_thumbnail") or "",
            is_published=bool(data.get("is_published") or False),
            is_public=True if data.get("is_public") is None else bool(data["is_public"]),
            is_pinned=bool(data.get("is_pinned") or False),
            scheduled_date=data.get("scheduled_date") or None,
        )
