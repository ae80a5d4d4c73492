from __future__ import annotations

from rest_framework import serializers

from editor.blocks import Block, BlockKind, Document, coerce_kind, new_block_id
from editor.serializer import serialize
from editor.text import parse_tags

from .payloads import PostDraft, PostType

OPERATIONS = ("insert_after", "append", "update_text", "change_kind", "remove", "focus")


class BlockSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    # Free text: unknown kinds are rendered as paragraphs, not rejected.
    kind = serializers.CharField(required=False, default=BlockKind.PARAGRAPH.value)
    text = serializers.CharField(required=False, default="", allow_blank=True, trim_whitespace=False)

    def to_block(self, data: dict) -> Block:
        return Block(
            id=data.get("id") or new_block_id(),
            kind=coerce_kind(data.get("kind")),
            text=data.get("text", ""),
        )


def blocks_from(validated: list) -> list[Block]:
    s = BlockSerializer()
    return [s.to_block(d) for d in validated]


class PreviewSerializer(serializers.Serializer):
    blocks = BlockSerializer(many=True)


class BlockOperationSerializer(serializers.Serializer):
    blocks = BlockSerializer(many=True, required=False, default=list)
    active_block_id = serializers.CharField(required=False, allow_null=True, default=None)
    op = serializers.ChoiceField(choices=OPERATIONS)
    block_id = serializers.CharField(required=False, allow_null=True, default=None)
    kind = serializers.CharField(required=False, allow_null=True, default=None)
    text = serializers.CharField(required=False, allow_null=True, default=None, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        if attrs["op"] == "change_kind" and not attrs.get("kind"):
            raise serializers.ValidationError({"kind": "required for change_kind"})
        if attrs["op"] == "update_text" and attrs.get("text") is None:
            raise serializers.ValidationError({"text": "required for update_text"})
        return attrs

    def document(self) -> Document:
        data = self.validated_data
        return Document.from_blocks(blocks_from(data["blocks"]), data["active_block_id"])

    def apply(self, doc: Document) -> None:
        data = self.validated_data
        op = data["op"]
        block_id = data["block_id"]
        kind = data["kind"] or BlockKind.PARAGRAPH

        if op == "insert_after":
            doc.insert_after(block_id, kind)
        elif op == "append":
            doc.append(kind)
        elif op == "update_text":
            doc.update_text(block_id, data["text"])
        elif op == "change_kind":
            doc.change_kind(block_id, kind)
        elif op == "remove":
            doc.remove_block(block_id)
        elif op == "focus":
            doc.focus(block_id)


class TagsField(serializers.Field):
    def to_internal_value(self, data):
        return parse_tags(data)

    def to_representation(self, value):
        return list(value)


class PostSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, default="", allow_blank=True)
    blocks = BlockSerializer(many=True, required=False)
    content = serializers.CharField(required=False, default="", allow_blank=True, trim_whitespace=False)
    excerpt = serializers.CharField(required=False, default="", allow_blank=True)
    post_type = serializers.ChoiceField(choices=[t.value for t in PostType], required=False, default=PostType.BLOG.value)
    tags = TagsField(required=False, default=list)
    featured_image = serializers.CharField(required=False, default="", allow_blank=True)
    featured_thumbnail = serializers.CharField(required=False, default="", allow_blank=True)
    is_published = serializers.BooleanField(required=False, default=False)
    is_public = serializers.BooleanField(required=False, default=True)
    is_pinned = serializers.BooleanField(required=False, default=False)
    scheduled_date = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    publish = serializers.BooleanField(required=False, default=False)
    # Gallery owner slug, used for the one-studio-post check.
    user = serializers.CharField(required=False, allow_null=True, default=None)

    def to_draft(self) -> PostDraft:
        data = self.validated_data
        if data.get("blocks") is not None:
            content = serialize(blocks_from(data["blocks"]))
        else:
            content = data["content"]

        return PostDraft(
            title=data["title"],
            content=content,
            excerpt=data["excerpt"],
            post_type=PostType(data["post_type"]),
            tags=data["tags"],
            featured_image=data["featured_image"],
            featured_thumbnail=data["featured_thumbnail"],
            is_published=data["is_published"],
            is_public=data["is_public"],
            is_pinned=data["is_pinned"],
            scheduled_date=data["scheduled_date"] or None,
        )
