from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from editor.blocks import Document
from editor.media import (
    FALLBACK_THUMBNAIL_QUALITY,
    extract_image_urls,
    extract_youtube_id,
    youtube_embed_url,
    youtube_thumbnail_url,
)
from editor.serializer import serialize

from .client import BlogApiError, BlogClient
from .payloads import STUDIO_POST_TAKEN, PostDraft, PostType, PostValidationError
from .serializers import BlockOperationSerializer, PostSerializer, PreviewSerializer, blocks_from

log = logging.getLogger(__name__)


def _client(request) -> BlogClient:
    # The caller's Authorization header goes to the backend unchanged.
    return BlogClient.from_settings(token=request.META.get("HTTP_AUTHORIZATION"))


def _invalid(errors) -> Response:
    return Response({"error": errors}, status=status.HTTP_400_BAD_REQUEST)


def _backend_failed(e: BlogApiError) -> Response:
    code = status.HTTP_404_NOT_FOUND if e.status == 404 else status.HTTP_502_BAD_GATEWAY
    return Response({"error": e.detail}, status=code)


def _document_response(doc: Document) -> dict:
    content = serialize(doc)
    return {
        **doc.to_dict(),
        "content": content,
        "images": list(extract_image_urls(content)),
    }


@api_view(["POST"])
def block_operation(request):
    s = BlockOperationSerializer(data=request.data)
    if not s.is_valid():
        return _invalid(s.errors)

    doc = s.document()
    s.apply(doc)
    return Response(_document_response(doc))


@api_view(["POST"])
def preview(request):
    s = PreviewSerializer(data=request.data)
    if not s.is_valid():
        return _invalid(s.errors)

    content = serialize(blocks_from(s.validated_data["blocks"]))
    return Response({"content": content, "images": list(extract_image_urls(content))})


@api_view(["POST"])
def youtube(request):
    url = request.data.get("url")
    if url is not None and not isinstance(url, str):
        return _invalid({"url": "must be a string"})

    video_id = extract_youtube_id(url)
    if video_id is None:
        return Response({
            "video_id": None,
            "embed_url": None,
            "thumbnail_url": None,
            "fallback_thumbnail_url": None,
        })
    return Response({
        "video_id": video_id,
        "embed_url": youtube_embed_url(video_id),
        "thumbnail_url": youtube_thumbnail_url(video_id),
        "fallback_thumbnail_url": youtube_thumbnail_url(video_id, FALLBACK_THUMBNAIL_QUALITY),
    })


@api_view(["POST"])
def create_post(request):
    s = PostSerializer(data=request.data)
    if not s.is_valid():
        return _invalid(s.errors)

    publish = s.validated_data["publish"]
    draft = s.to_draft()
    if publish:
        draft.is_published = True
    else:
        draft = draft.as_draft()

    try:
        draft.validate(publish=publish)
    except PostValidationError as e:
        return _invalid(str(e))

    client = _client(request)
    payload = draft.to_payload(settings.ARTIVE_EXCERPT_LENGTH)
    try:
        if draft.post_type is PostType.STUDIO and client.has_published_post(
            PostType.STUDIO.value, user=s.validated_data["user"]
        ):
            return _invalid(STUDIO_POST_TAKEN)
        result = client.create_post(payload) or {}
    except BlogApiError as e:
        return _backend_failed(e)

    log.info("created post %s (published=%s)", result.get("id"), publish)
    return Response(
        {"id": result.get("id"), "status": "published" if publish else "draft"},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET", "PUT"])
def post_detail(request, post_id: str):
    if request.method == "PUT":
        return _update_post(request, post_id)

    try:
        data = _client(request).get_post(post_id) or {}
    except BlogApiError as e:
        return _backend_failed(e)

    draft = PostDraft.from_backend(data)
    doc = Document.from_content(draft.content)
    return Response({
        "id": data.get("id", post_id),
        "title": draft.title,
        "content": draft.content,
        "excerpt": draft.excerpt,
        "post_type": draft.post_type.value,
        "tags": draft.tags,
        "featured_image": draft.featured_image,
        "featured_thumbnail": draft.featured_thumbnail,
        "is_published": draft.is_published,
        "is_public": draft.is_public,
        "is_pinned": draft.is_pinned,
        "images": list(extract_image_urls(draft.content)),
        **doc.to_dict(),
    })


def _update_post(request, post_id: str) -> Response:
    s = PostSerializer(data=request.data)
    if not s.is_valid():
        return _invalid(s.errors)

    publish = s.validated_data["publish"]
    draft = s.to_draft()
    if publish:
        draft.is_published = True

    try:
        draft.validate()
    except PostValidationError as e:
        return _invalid(str(e))

    payload = draft.to_payload(settings.ARTIVE_EXCERPT_LENGTH)
    try:
        _client(request).update_post(post_id, payload)
    except BlogApiError as e:
        return _backend_failed(e)

    log.info("updated post %s (published=%s)", post_id, draft.is_published)
    return Response({"id": post_id, "status": "published" if publish else "saved"})
