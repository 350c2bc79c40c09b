"""HTTP tests: auth gate, role policy, error envelope and public reads via TestClient."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from builders import BASE_TIME, bearer, make_post, make_settings, make_user

API = "/api/v1"

MUTATIONS = [
    ("post", f"{API}/posts", {"title": "T"}),
    ("put", f"{API}/posts/1", {"title": "T"}),
    ("delete", f"{API}/posts/1", None),
    ("patch", f"{API}/posts/1/publish", None),
    ("patch", f"{API}/posts/1/unpublish", None),
]


def _fill_on_refresh(obj: object) -> None:
    if getattr(obj, "id", None) is None:
        obj.id = 42
    if getattr(obj, "created_at", None) is None:
        obj.created_at = BASE_TIME


class ApiTestCase(unittest.TestCase):
    """Routes run against a mocked session and isolated settings."""

    def setUp(self) -> None:
        self.db = MagicMock()
        self.db.refresh.side_effect = _fill_on_refresh
        self.settings = make_settings()
        app.dependency_overrides[get_db] = lambda: self.db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _send(self, method: str, url: str, body: object = None, headers: dict | None = None):
        kwargs: dict = {"headers": headers or {}}
        if body is not None:
            kwargs["json"] = body
        return self.client.request(method.upper(), url, **kwargs)

    def as_writer(self) -> dict[str, str]:
        return bearer(self.settings, user_id=9, username="writer9", role="writer")

    def as_editor(self) -> dict[str, str]:
        return bearer(self.settings, user_id=5, username="editor5", role="editor")


class TestAuthGate(ApiTestCase):
    """Mutations without a valid credential are 401 and touch nothing."""

    def test_missing_credential_on_every_mutation(self) -> None:
        for method, url, body in MUTATIONS:
            with self.subTest(method=method, url=url):
                resp = self._send(method, url, body)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json(), {"error": "Missing Authorization header"})
                self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")
        self.db.add.assert_not_called()
        self.db.commit.assert_not_called()
        self.db.query.assert_not_called()
        self.db.get.assert_not_called()

    def test_malformed_header(self) -> None:
        resp = self._send("post", f"{API}/posts", {"title": "T"}, {"Authorization": "Bearer"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid Authorization header"})

    def test_invalid_token(self) -> None:
        resp = self._send(
            "post", f"{API}/posts", {"title": "T"}, {"Authorization": "Bearer abc.def.ghi"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid or expired token"})
        self.db.commit.assert_not_called()

    def test_listing_requires_credential(self) -> None:
        self.assertEqual(self._send("get", f"{API}/posts").status_code, 401)


class TestPostRoutes(ApiTestCase):
    """Authenticated lifecycle routes."""

    def test_create_sets_author_from_token(self) -> None:
        resp = self._send(
            "post",
            f"{API}/posts",
            {"title": "Hello", "author_id": 999, "category": ["cuisine"]},
            self.as_writer(),
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["author_id"], 9)
        self.assertEqual(body["status"], "draft")
        self.assertEqual(body["category"], ["cuisine"])
        self.db.commit.assert_called_once()

    def test_create_emagazine_requires_page(self) -> None:
        resp = self._send(
            "post", f"{API}/posts", {"title": "Mag", "type": "emagazine"}, self.as_writer()
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())
        self.db.add.assert_not_called()

    def test_create_rejects_unknown_status(self) -> None:
        resp = self._send(
            "post", f"{API}/posts", {"title": "T", "status": "archived"}, self.as_writer()
        )
        self.assertEqual(resp.status_code, 400)

    def test_get_missing_is_404(self) -> None:
        self.db.get.return_value = None
        resp = self._send("get", f"{API}/posts/5", headers=self.as_writer())
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Post not found"})

    def test_post_id_out_of_integer_range_is_400(self) -> None:
        resp = self._send("get", f"{API}/posts/99999999999", headers=self.as_writer())
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())
        resp = self._send("delete", f"{API}/posts/2147483648", headers=self.as_editor())
        self.assertEqual(resp.status_code, 400)
        self.db.get.assert_not_called()
        self.db.query.assert_not_called()

    def test_update_missing_is_404(self) -> None:
        self.db.get.return_value = None
        resp = self._send("put", f"{API}/posts/5", {"title": "New"}, self.as_writer())
        self.assertEqual(resp.status_code, 404)

    def test_update_by_writer(self) -> None:
        post = make_post(5, title="Old", status="draft")
        self.db.get.return_value = post
        resp = self._send("put", f"{API}/posts/5", {"title": "New"}, self.as_writer())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "New")

    def test_writer_cannot_publish_or_delete(self) -> None:
        for method, url in (
            ("patch", f"{API}/posts/1/publish"),
            ("patch", f"{API}/posts/1/unpublish"),
            ("delete", f"{API}/posts/1"),
        ):
            with self.subTest(url=url):
                resp = self._send(method, url, headers=self.as_writer())
                self.assertEqual(resp.status_code, 403)
                self.assertEqual(resp.json(), {"error": "Forbidden"})
        self.db.commit.assert_not_called()

    def test_editor_publishes(self) -> None:
        post = make_post(1, status="draft")
        self.db.get.return_value = post
        resp = self._send("patch", f"{API}/posts/1/publish", headers=self.as_editor())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "published")

    def test_editor_deletes_missing_id(self) -> None:
        self.db.query.return_value.filter.return_value.delete.return_value = 0
        resp = self._send("delete", f"{API}/posts/77", headers=self.as_editor())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Deleted"})


class TestAuthRoutes(ApiTestCase):
    """Register, login and the admin-only user list."""

    def test_register_returns_user_and_token(self) -> None:
        self.db.query.return_value.filter.return_value.first.return_value = None
        resp = self._send("post", f"{API}/auth/register", {"username": "alice", "password": "s3cret-pass"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "User created")
        self.assertEqual(body["user"]["username"], "alice")
        self.assertEqual(body["user"]["role"], "writer")
        self.assertNotIn("password_hash", body["user"])
        self.assertTrue(body["token"])

    def test_register_duplicate(self) -> None:
        self.db.query.return_value.filter.return_value.first.return_value = make_user(username="alice")
        resp = self._send("post", f"{API}/auth/register", {"username": "alice", "password": "s3cret-pass"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "username already exists"})

    def test_register_missing_password(self) -> None:
        resp = self._send("post", f"{API}/auth/register", {"username": "alice"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_login_wrong_password(self) -> None:
        user = make_user(username="bob", password_hash=hash_password("correct-horse"))
        self.db.query.return_value.filter.return_value.first.return_value = user
        resp = self._send("post", f"{API}/auth/login", {"username": "bob", "password": "wrong-horse"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid username or password."})

    def test_user_list_is_admin_only(self) -> None:
        self.assertEqual(self._send("get", f"{API}/auth/users", headers=self.as_editor()).status_code, 403)
        self.db.query.return_value.order_by.return_value.all.return_value = [make_user()]
        resp = self._send("get", f"{API}/auth/users", headers=bearer(self.settings, role="admin"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["users"][0]["username"], "writer1")


class TestPublicRoutes(ApiTestCase):
    """Public reads need no credential and never leak internal errors."""

    def _published(self, rows: list) -> None:
        self.db.query.return_value.filter.return_value.order_by.return_value.all.return_value = rows

    def test_home_empty(self) -> None:
        self._published([])
        resp = self._send("get", f"{API}/home")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "highlight": None,
                "recent": [],
                "news": [],
                "experience": [],
                "profiles": [],
                "academic": [],
                "multimedia": [],
            },
        )

    def test_home_payload(self) -> None:
        p1 = make_post(1, category=["domestic-news"])
        p2 = make_post(2, age_minutes=1, category=["cuisine"])
        p3 = make_post(3, age_minutes=2, category=["domestic-news", "photo"])
        self._published([p1, p2, p3])
        body = self._send("get", f"{API}/home").json()
        self.assertEqual(body["highlight"]["id"], 1)
        self.assertEqual([p["id"] for p in body["recent"]], [2, 3])
        self.assertEqual([p["id"] for p in body["news"]], [1, 3])
        self.assertEqual([p["id"] for p in body["multimedia"]], [3])

    def test_public_post_draft_is_404(self) -> None:
        self.db.get.return_value = make_post(1, status="draft")
        resp = self._send("get", f"{API}/public/posts/1")
        self.assertEqual(resp.status_code, 404)

    def test_public_post_bad_id_is_400(self) -> None:
        resp = self._send("get", f"{API}/public/posts/not-an-id")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_public_post_id_out_of_integer_range_is_400(self) -> None:
        for post_id in ("99999999999", "0", "-3"):
            resp = self._send("get", f"{API}/public/posts/{post_id}")
            self.assertEqual(resp.status_code, 400, post_id)
            self.assertIn("error", resp.json())
        self.db.get.assert_not_called()

    def test_internal_error_is_generic(self) -> None:
        self.db.get.side_effect = RuntimeError("password=hunter2 at db-host-7")
        resp = self._send("get", f"{API}/public/posts/1")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Server error"})

    def test_search_and_category(self) -> None:
        post = make_post(4, tags="green, travel", category=["cuisine"])
        self.db.query.return_value.filter.return_value.filter.return_value.order_by.return_value.all.return_value = [post]
        self._published([post])
        self.assertEqual([p["id"] for p in self._send("get", f"{API}/public/search?q=green").json()], [4])
        self.assertEqual([p["id"] for p in self._send("get", f"{API}/public/category/cuisine").json()], [4])

    def test_unknown_route_uses_envelope(self) -> None:
        resp = self._send("get", f"{API}/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("error", resp.json())


class TestUploadRoute(ApiTestCase):
    """Upload requires a credential and a file."""

    def test_requires_credential(self) -> None:
        resp = self.client.post(f"{API}/upload", files={"image": ("a.png", b"data", "image/png")})
        self.assertEqual(resp.status_code, 401)

    def test_missing_file(self) -> None:
        resp = self.client.post(
            f"{API}/upload",
            files={"other": ("a.txt", b"x", "text/plain")},
            headers=self.as_writer(),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "No file uploaded"})

    @patch("app.api.v1.upload.upload_image", new_callable=AsyncMock)
    def test_returns_url(self, mock_upload: AsyncMock) -> None:
        mock_upload.return_value = "https://res.cloudinary.com/demo/image/upload/a.png"
        resp = self.client.post(
            f"{API}/upload",
            files={"image": ("a.png", b"\x89PNG data", "image/png")},
            headers=self.as_writer(),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"url": "https://res.cloudinary.com/demo/image/upload/a.png"})
        args = mock_upload.await_args.args
        self.assertEqual(args[0], b"\x89PNG data")
        self.assertEqual(args[1], "a.png")


class TestHealth(ApiTestCase):
    def test_reports_database_and_storage(self) -> None:
        resp = self._send("get", f"{API}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"status": "ok", "environment": "dev", "database": "connected", "storage": "not_configured"},
        )


if __name__ == "__main__":
    unittest.main()
