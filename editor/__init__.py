from .blocks import Block, BlockKind, Document
from .media import extract_image_urls, extract_youtube_id
from .serializer import serialize

__all__ = [
    "Block",
    "BlockKind",
    "Document",
    "extract_image_urls",
    "extract_youtube_id",
    "serialize",
]
