from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union


class BlockKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    BULLET_ITEM = "bulletItem"
    NUMBERED_ITEM = "numberedItem"
    QUOTE = "quote"
    CODE = "code"
    DIVIDER = "divider"

    @classmethod
    def parse(cls, value) -> Optional["BlockKind"]:
        """Known kind for `value`, or None. Accepts the legacy list names."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        value = LEGACY_KINDS.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return None


# Names written by older drafts.
LEGACY_KINDS = {
    "bulletList": BlockKind.BULLET_ITEM.value,
    "numberedList": BlockKind.NUMBERED_ITEM.value,
}


def new_block_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Block:
    id: str
    # Unknown kinds read from stored data stay as the raw string.
    kind: Union[BlockKind, str] = BlockKind.PARAGRAPH
    text: str = ""

    @classmethod
    def create(cls, kind=BlockKind.PARAGRAPH, text: str = "") -> "Block":
        return cls(id=new_block_id(), kind=coerce_kind(kind), text=text)

    @property
    def kind_name(self) -> str:
        return self.kind.value if isinstance(self.kind, BlockKind) else str(self.kind)

    def to_dict(self) -> dict:
        return {"id": self.id, "kind": self.kind_name, "text": self.text}


def coerce_kind(value) -> Union[BlockKind, str]:
    kind = BlockKind.parse(value)
    if kind is not None:
        return kind
    return str(value) if value is not None else BlockKind.PARAGRAPH


@dataclass
class Document:
    """
    Ordered, never-empty sequence of blocks plus the block that has focus.

    Mutations addressed to an unknown block id are ignored; an edit can
    arrive for a block the writer already removed.
    """

    blocks: list[Block] = field(default_factory=list)
    active_block_id: Optional[str] = None

    def __post_init__(self):
        if not self.blocks:
            self.blocks = [Block.create()]
        if self.index_of(self.active_block_id) is None:
            self.active_block_id = self.blocks[0].id

    @classmethod
    def from_blocks(cls, blocks: Iterable[Block], active_block_id: Optional[str] = None) -> "Document":
        return cls(blocks=list(blocks), active_block_id=active_block_id)

    @classmethod
    def from_content(cls, content: str) -> "Document":
        # Stored content is never re-parsed; a paragraph serializes back verbatim.
        return cls(blocks=[Block.create(BlockKind.PARAGRAPH, content or "")])

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)

    def index_of(self, block_id: Optional[str]) -> Optional[int]:
        if block_id is None:
            return None
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        return None

    def get(self, block_id: str) -> Optional[Block]:
        i = self.index_of(block_id)
        return self.blocks[i] if i is not None else None

    @property
    def active_block(self) -> Block:
        return self.blocks[self.index_of(self.active_block_id) or 0]

    def insert_after(self, block_id: str, kind=BlockKind.PARAGRAPH) -> Optional[str]:
        i = self.index_of(block_id)
        if i is None:
            return None
        block = Block.create(kind)
        self.blocks.insert(i + 1, block)
        self.active_block_id = block.id
        return block.id

    def append(self, kind=BlockKind.PARAGRAPH) -> str:
        return self.insert_after(self.blocks[-1].id, kind)

    def update_text(self, block_id: str, text: str) -> bool:
        block = self.get(block_id)
        if block is None:
            return False
        block.text = text
        return True

    def change_kind(self, block_id: str, kind) -> bool:
        block = self.get(block_id)
        if block is None:
            return False
        block.kind = coerce_kind(kind)
        return True

    def remove_block(self, block_id: str) -> bool:
        i = self.index_of(block_id)
        if i is None or len(self.blocks) == 1:
            return False
        del self.blocks[i]
        if block_id == self.active_block_id:
            self.active_block_id = self.blocks[max(i - 1, 0)].id
        return True

    def focus(self, block_id: str) -> bool:
        if self.index_of(block_id) is None:
            return False
        self.active_block_id = block_id
        return True

    def to_dict(self) -> dict:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "active_block_id": self.active_block_id,
        }
