"""
Flatten an ordered block sequence into the Markdown-like string stored as a
post's `content`.

One line per block, joined by newlines. Numbered items count every earlier
numbered item in the document, so interleaved blocks do not restart a list.
Kinds this module does not know are written as plain paragraphs.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .blocks import Block, BlockKind

CODE_FENCE = "```"
DIVIDER = "---"

PREFIXES = {
    BlockKind.HEADING1: "# ",
    BlockKind.HEADING2: "## ",
    BlockKind.HEADING3: "### ",
    BlockKind.BULLET_ITEM: "- ",
    BlockKind.QUOTE: "> ",
}


def render_line(block: Block, number: Optional[int] = None) -> str:
    """Render a single block. `number` is its position among numbered items."""
    kind = BlockKind.parse(block.kind)
    text = block.text or ""

    if kind in PREFIXES:
        return PREFIXES[kind] + text
    if kind is BlockKind.NUMBERED_ITEM:
        return f"{number or 1}. {text}"
    if kind is BlockKind.CODE:
        return f"{CODE_FENCE}\n{text}\n{CODE_FENCE}"
    if kind is BlockKind.DIVIDER:
        return DIVIDER
    return text


def serialize(blocks: Iterable[Block]) -> str:
    lines = []
    numbered = 0
    for block in blocks:
        if BlockKind.parse(block.kind) is BlockKind.NUMBERED_ITEM:
            numbered += 1
            lines.append(render_line(block, numbered))
        else:
            lines.append(render_line(block))
    return "\n".join(lines)
