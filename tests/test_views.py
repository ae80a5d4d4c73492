"""
Tests for the studio editing API. The blog backend client is patched.
"""

import unittest
from unittest.mock import patch

from rest_framework.test import APIRequestFactory

from studio import views
from studio.client import BlogApiError


class TestBlockViews(unittest.TestCase):

    def setUp(self):
        self.factory = APIRequestFactory()
        self.blocks = [
            {"id": "a", "kind": "heading1", "text": "Title"},
            {"id": "b", "kind": "paragraph", "text": "Intro"},
        ]

    def op(self, **data):
        request = self.factory.post("/studio/blocks", {"blocks": self.blocks, **data}, format="json")
        return views.block_operation(request)

    def test_insert_after(self):
        resp = self.op(op="insert_after", block_id="a", kind="bulletItem")
        self.assertEqual(resp.status_code, 200)
        kinds = [b["kind"] for b in resp.data["blocks"]]
        self.assertEqual(kinds, ["heading1", "bulletItem", "paragraph"])
        self.assertEqual(resp.data["active_block_id"], resp.data["blocks"][1]["id"])
        self.assertEqual(resp.data["content"], "# Title\n- \nIntro")

    def test_update_text_keeps_whitespace(self):
        resp = self.op(op="update_text", block_id="b", text="  spaced  ")
        self.assertEqual(resp.data["blocks"][1]["text"], "  spaced  ")
        self.assertEqual(resp.data["content"], "# Title\n  spaced  ")

    def test_change_kind(self):
        resp = self.op(op="change_kind", block_id="b", kind="quote")
        self.assertEqual(resp.data["content"], "# Title\n> Intro")

    def test_remove_and_focus(self):
        resp = self.op(op="remove", block_id="a", active_block_id="a")
        self.assertEqual([b["id"] for b in resp.data["blocks"]], ["b"])
        self.assertEqual(resp.data["active_block_id"], "b")

        resp = self.op(op="focus", block_id="b")
        self.assertEqual(resp.data["active_block_id"], "b")

    def test_append(self):
        resp = self.op(op="append", kind="divider")
        self.assertEqual(resp.data["content"], "# Title\nIntro\n---")

    def test_unknown_block_is_noop(self):
        resp = self.op(op="update_text", block_id="zzz", text="x")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["content"], "# Title\nIntro")

    def test_empty_blocks_start_fresh_document(self):
        self.blocks = []
        resp = self.op(op="focus", block_id="missing")
        self.assertEqual(len(resp.data["blocks"]), 1)
        self.assertEqual(resp.data["blocks"][0]["kind"], "paragraph")
        self.assertEqual(resp.data["content"], "")

    def test_invalid_operation(self):
        resp = self.op(op="explode", block_id="a")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("op", resp.data["error"])

    def test_change_kind_requires_kind(self):
        resp = self.op(op="change_kind", block_id="a")
        self.assertEqual(resp.status_code, 400)

    def test_images_follow_content(self):
        self.blocks = [{"id": "a", "text": '<img src="x.png">'}]
        resp = self.op(op="append")
        self.assertEqual(resp.data["images"], ["x.png"])

    def test_preview(self):
        request = self.factory.post("/studio/preview", {"blocks": [
            {"kind": "numberedItem", "text": "one"},
            {"kind": "mystery", "text": "plain"},
            {"kind": "numberedItem", "text": "two"},
        ]}, format="json")
        resp = views.preview(request)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["content"], "1. one\nplain\n2. two")
        self.assertEqual(resp.data["images"], [])

    def test_youtube(self):
        request = self.factory.post("/studio/youtube", {"url": "https://youtu.be/dQw4w9WgXcQ"}, format="json")
        resp = views.youtube(request)
        self.assertEqual(resp.data["video_id"], "dQw4w9WgXcQ")
        self.assertEqual(resp.data["embed_url"], "https://www.youtube.com/embed/dQw4w9WgXcQ")
        self.assertTrue(resp.data["fallback_thumbnail_url"].endswith("/hqdefault.jpg"))

        request = self.factory.post("/studio/youtube", {"url": "https://example.com/video"}, format="json")
        resp = views.youtube(request)
        self.assertIsNone(resp.data["video_id"])
        self.assertIsNone(resp.data["thumbnail_url"])


@patch("studio.views.BlogClient")
class TestPostViews(unittest.TestCase):

    def setUp(self):
        self.factory = APIRequestFactory()

    def test_save_draft_is_private(self, client_cls):
        client = client_cls.from_settings.return_value
        client.create_post.return_value = {"id": 12}

        request = self.factory.post("/studio/posts", {
            "title": "Studio diary",
            "blocks": [{"kind": "heading2", "text": "Week 1"}, {"kind": "paragraph", "text": "Sketches."}],
            "is_public": True,
            "tags": "sketch, diary",
        }, format="json", HTTP_AUTHORIZATION="Bearer tok")
        resp = views.create_post(request)

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data, {"id": 12, "status": "draft"})
        client_cls.from_settings.assert_called_once_with(token="Bearer tok")
        payload = client.create_post.call_args[0][0]
        self.assertEqual(payload["content"], "## Week 1\nSketches.")
        self.assertEqual(payload["excerpt"], "## Week 1\nSketches.")
        self.assertEqual(payload["tags"], ["sketch", "diary"])
        self.assertFalse(payload["is_published"])
        self.assertFalse(payload["is_public"])
        self.assertFalse(payload["is_pinned"])

    def test_publish_notice(self, client_cls):
        client = client_cls.from_settings.return_value
        client.create_post.return_value = {"id": 3}

        request = self.factory.post("/studio/posts", {
            "title": "Closed Monday",
            "content": "<p>The studio is closed.</p>",
            "post_type": "NOTICE",
            "is_pinned": True,
            "featured_image": "cover.jpg",
            "publish": True,
        }, format="json")
        resp = views.create_post(request)

        self.assertEqual(resp.data["status"], "published")
        payload = client.create_post.call_args[0][0]
        self.assertTrue(payload["is_published"])
        self.assertTrue(payload["is_public"])
        self.assertTrue(payload["is_pinned"])
        self.assertEqual(payload["featured_thumbnail"], "cover.jpg")

    def test_publish_requires_content(self, client_cls):
        request = self.factory.post("/studio/posts", {"title": "Empty", "publish": True}, format="json")
        resp = views.create_post(request)
        self.assertEqual(resp.status_code, 400)
        client_cls.from_settings.return_value.create_post.assert_not_called()

    def test_title_required(self, client_cls):
        request = self.factory.post("/studio/posts", {"content": "x"}, format="json")
        self.assertEqual(views.create_post(request).status_code, 400)

    def test_invalid_post_type(self, client_cls):
        request = self.factory.post("/studio/posts", {"title": "t", "post_type": "PODCAST"}, format="json")
        resp = views.create_post(request)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("post_type", resp.data["error"])

    def test_backend_failure_is_502(self, client_cls):
        client_cls.from_settings.return_value.create_post.side_effect = BlogApiError("db down", status=500)
        request = self.factory.post("/studio/posts", {"title": "t"}, format="json")
        resp = views.create_post(request)
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.data, {"error": "db down"})

    def test_load_post(self, client_cls):
        client_cls.from_settings.return_value.get_post.return_value = {
            "id": 5,
            "title": "Series",
            "content": '<p>New work</p><img src="1.jpg"><img src="2.jpg">',
            "tags": '["oil"]',
            "featured_image": "1.jpg",
        }
        request = self.factory.get("/studio/posts/5")
        resp = views.post_detail(request, post_id="5")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["id"], 5)
        self.assertEqual(resp.data["images"], ["1.jpg", "2.jpg"])
        self.assertEqual(resp.data["tags"], ["oil"])
        self.assertEqual(resp.data["post_type"], "BLOG")
        self.assertTrue(resp.data["is_public"])
        self.assertEqual(len(resp.data["blocks"]), 1)
        self.assertEqual(resp.data["blocks"][0]["text"], resp.data["content"])

    def test_load_missing_post(self, client_cls):
        client_cls.from_settings.return_value.get_post.side_effect = BlogApiError("Not found", status=404)
        resp = views.post_detail(self.factory.get("/studio/posts/9"), post_id="9")
        self.assertEqual(resp.status_code, 404)

    def test_update_post(self, client_cls):
        client = client_cls.from_settings.return_value
        request = self.factory.put("/studio/posts/5", {
            "title": "Series",
            "content": "<p>" + "word " * 40 + "</p>",
            "is_published": True,
            "is_pinned": True,
        }, format="json")
        resp = views.post_detail(request, post_id="5")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, {"id": "5", "status": "saved"})
        post_id, payload = client.update_post.call_args[0]
        self.assertEqual(post_id, "5")
        self.assertTrue(payload["is_published"])
        self.assertFalse(payload["is_pinned"])
        self.assertTrue(payload["excerpt"].endswith("..."))
        self.assertEqual(len(payload["excerpt"]), 153)

    def test_update_publish(self, client_cls):
        request = self.factory.put("/studio/posts/5", {"title": "t", "content": "c", "publish": True}, format="json")
        resp = views.post_detail(request, post_id="5")
        self.assertEqual(resp.data["status"], "published")
        payload = client_cls.from_settings.return_value.update_post.call_args[0][1]
        self.assertTrue(payload["is_published"])

    def test_second_studio_post_refused(self, client_cls):
        client = client_cls.from_settings.return_value
        client.has_published_post.return_value = True
        request = self.factory.post("/studio/posts", {
            "title": "My studio",
            "content": "<p>Where I work.</p>",
            "post_type": "STUDIO",
            "user": "mina",
            "publish": True,
        }, format="json")
        resp = views.create_post(request)

        self.assertEqual(resp.status_code, 400)
        client.has_published_post.assert_called_once_with("STUDIO", user="mina")
        client.create_post.assert_not_called()

    def test_first_studio_post_created(self, client_cls):
        client = client_cls.from_settings.return_value
        client.has_published_post.return_value = False
        client.create_post.return_value = {"id": 8}
        request = self.factory.post("/studio/posts", {"title": "My studio", "post_type": "STUDIO"}, format="json")
        resp = views.create_post(request)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(client.create_post.call_args[0][0]["post_type"], "STUDIO")

    def test_other_types_skip_studio_check(self, client_cls):
        client = client_cls.from_settings.return_value
        client.create_post.return_value = {"id": 1}
        views.create_post(self.factory.post("/studio/posts", {"title": "t"}, format="json"))
        client.has_published_post.assert_not_called()

    def test_update_publish_needs_only_title(self, client_cls):
        request = self.factory.put("/studio/posts/5", {"title": "t", "publish": True}, format="json")
        resp = views.post_detail(request, post_id="5")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["status"], "published")

        request = self.factory.put("/studio/posts/5", {"content": "c"}, format="json")
        self.assertEqual(views.post_detail(request, post_id="5").status_code, 400)


class TestBackendTimeout(unittest.TestCase):

    @patch("studio.client.urllib.request.urlopen", side_effect=TimeoutError("timed out"))
    def test_timeouts_become_502(self, urlopen):
        factory = APIRequestFactory()

        resp = views.post_detail(factory.get("/studio/posts/1"), post_id="1")
        self.assertEqual(resp.status_code, 502)
        self.assertIn("timed out", resp.data["error"])

        resp = views.create_post(factory.post("/studio/posts", {"title": "t"}, format="json"))
        self.assertEqual(resp.status_code, 502)

        request = factory.put("/studio/posts/1", {"title": "t"}, format="json")
        self.assertEqual(views.post_detail(request, post_id="1").status_code, 502)


if __name__ == "__main__":
    unittest.main()
