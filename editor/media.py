from __future__ import annotations

import re
from typing import Iterator, Optional

IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"')

YOUTUBE_ID_RE = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^\"&?/#\s]{11})"
)

THUMBNAIL_QUALITY = "maxresdefault"
FALLBACK_THUMBNAIL_QUALITY = "hqdefault"


class ImageUrls:
    """
    Image sources of an HTML string, in document order, duplicates kept.

    Iteration scans the string lazily and starts over every time.
    """

    def __init__(self, html: Optional[str]):
        self.html = html or ""

    def __iter__(self) -> Iterator[str]:
        for m in IMG_SRC_RE.finditer(self.html):
            yield m.group(1)

    def __bool__(self) -> bool:
        return IMG_SRC_RE.search(self.html) is not None

    def first(self) -> Optional[str]:
        return next(iter(self), None)

    def __repr__(self) -> str:
        return f"ImageUrls({list(self)!r})"


def extract_image_urls(html: Optional[str]) -> ImageUrls:
    return ImageUrls(html if isinstance(html, str) else None)


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    if not isinstance(url, str) or not url:
        return None
    m = YOUTUBE_ID_RE.search(url)
    return m.group(1) if m else None


def youtube_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"


def youtube_thumbnail_url(video_id: str, quality: str = THUMBNAIL_QUALITY) -> str:
    return f"https://img.youtube.com/vi/{video_id}/{quality}.jpg"
