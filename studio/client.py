from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from typing import Any, Optional
from urllib.error import HTTPError, URLError

from django.conf import settings

log = logging.getLogger(__name__)

POSTS_PATH = "/api/blog/posts"


class BlogApiError(Exception):
    def __init__(self, detail: str, status: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status = status


def _error_detail(body: str) -> str:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body.strip() or "unknown error"
    if isinstance(data, dict):
        return str(data.get("detail") or data.get("error") or "unknown error")
    return "unknown error"


class BlogClient:
    """JSON client for the blog backend's post endpoints."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_settings(cls, token: Optional[str] = None) -> "BlogClient":
        return cls(
            settings.ARTIVE_BACKEND_URL,
            token=token or settings.ARTIVE_BACKEND_TOKEN,
            timeout=settings.ARTIVE_BACKEND_TIMEOUT,
        )

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        url = self.base_url + path
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Content-Type", "application/json")
        req.add_header("Accept", "application/json")
        if self.token:
            if " " in self.token:
                req.add_header("Authorization", self.token)
            else:
                req.add_header("Authorization", f"Bearer {self.token}")

        log.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as r:
                body = r.read().decode("utf-8")
        except HTTPError as e:
            detail = _error_detail(e.read().decode("utf-8", errors="replace"))
            log.warning("%s %s failed: %s %s", method, url, e.code, detail)
            raise BlogApiError(detail, status=e.code) from e
        except URLError as e:
            log.warning("%s %s unreachable: %s", method, url, e.reason)
            raise BlogApiError(f"backend unreachable: {e.reason}") from e
        except (TimeoutError, OSError) as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise BlogApiError(f"backend unreachable: {e}") from e

        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise BlogApiError("backend returned invalid JSON") from e

    def list_posts(self, user=None, post_type=None, is_published=None, limit=None) -> list:
        params = {}
        if user is not None:
            params["user"] = user
        if post_type is not None:
            params["post_type"] = post_type
        if is_published is not None:
            params["is_published"] = "true" if is_published else "false"
        if limit is not None:
            params["limit"] = int(limit)
        path = POSTS_PATH
        if params:
            path += "?" + urllib.parse.urlencode(params)
        data = self._request("GET", path) or []
        if isinstance(data, dict):
            return data.get("posts") or []
        return data

    def has_published_post(self, post_type, user=None) -> bool:
        return bool(self.list_posts(user=user, post_type=post_type, is_published=True, limit=1))

    def get_post(self, post_id) -> dict:
        return self._request("GET", f"{POSTS_PATH}/{post_id}")

    def create_post(self, payload: dict) -> dict:
        return self._request("POST", POSTS_PATH, payload)

    def update_post(self, post_id, payload: dict) -> dict:
        return self._request("PUT", f"{POSTS_PATH}/{post_id}", payload)
