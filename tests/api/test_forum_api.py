"""
HTTP surface tests.

Each test app wires the real routers to in-memory rows, a temporary
local object store and a mocked catalog transport.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.catalog_http import ModrinthCatalogClient
from src.adapters.local_storage import LocalObjectStore
from src.adapters.memory_auth import InMemoryAuthProvider
from src.adapters.memory_rows import InMemoryRowStore
from src.api import deps
from src.api.routes import assets, auth, content, forums, media, resources
from src.core.ports.rows import RowStoreError

AUTH = {"Authorization": "Bearer tok"}


class FailingRowStore(InMemoryRowStore):
    async def insert_row(self, table, fields):
        raise RowStoreError("insert rejected")


def _catalog(responses: dict[str, httpx.Response]) -> ModrinthCatalogClient:
    def handler(request: httpx.Request) -> httpx.Response:
        for path, response in responses.items():
            if request.url.path.endswith(path):
                return response
        return httpx.Response(404)

    return ModrinthCatalogClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def rows() -> InMemoryRowStore:
    return InMemoryRowStore(deps.FORUM_TABLES)


@pytest.fixture
def store(tmp_path: Path) -> LocalObjectStore:
    return LocalObjectStore(tmp_path, "http://testserver/media")


@pytest.fixture
def catalog() -> ModrinthCatalogClient:
    return _catalog({"/search": httpx.Response(200, json={"hits": [{"slug": "sodium", "title": "Sodium"}]})})


@pytest.fixture
def app(rules, user, rows, store, catalog) -> FastAPI:
    """Test FastAPI app with every router mounted."""
    app = FastAPI()
    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(content.router, prefix="/api/content")
    app.include_router(assets.router, prefix="/api/assets")
    app.include_router(forums.router, prefix="/api")
    app.include_router(resources.router, prefix="/api/resources")
    app.include_router(media.router, prefix="/media")

    sessions = InMemoryAuthProvider()
    sessions.sign_in("tok", user)

    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_row_store] = lambda: rows
    app.dependency_overrides[deps.get_object_store] = lambda: store
    app.dependency_overrides[deps.get_auth_provider] = lambda: sessions
    app.dependency_overrides[deps.get_catalog] = lambda: catalog

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def _create_forum(client: TestClient, title: str = "General Chat") -> dict:
    response = client.post("/api/forums", json={"title": title, "body": "Welcome"}, headers=AUTH)
    assert response.status_code == 201
    return response.json()


def _create_thread(client: TestClient, slug: str, **fields) -> dict:
    body = {"title": "First", "body": "Hello @bob", **fields}
    response = client.post(f"/api/forums/{slug}/threads", json=body, headers=AUTH)
    assert response.status_code == 201
    return response.json()


# --- Auth ---


class TestAuth:
    def test_me(self, client: TestClient) -> None:
        response = client.get("/api/auth/me", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_cookie_session(self, client: TestClient) -> None:
        client.cookies.set("access_token", "Bearer tok")

        assert client.get("/api/auth/me").status_code == 200

    def test_unauthenticated_points_to_sign_in(self, client: TestClient) -> None:
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "not_authenticated"
        assert response.json()["detail"]["sign_in"] == "/auth"

    def test_logout_ends_session(self, client: TestClient) -> None:
        assert client.post("/api/auth/logout", headers=AUTH).status_code == 200

        assert client.get("/api/auth/me", headers=AUTH).status_code == 401


# --- Preview ---


class TestPreview:
    def test_preview(self, client: TestClient) -> None:
        response = client.post(
            "/api/content/preview",
            json={"body": "**hi** ![x](http://x/a.png)"},
        )

        assert response.status_code == 200
        data = response.json()
        assert "<strong>hi</strong>" in data["html"]
        assert data["images"] == ["http://x/a.png"]


# --- Assets ---


class TestImageUpload:
    def test_upload_and_serve(self, client: TestClient) -> None:
        response = client.post(
            "/api/assets/images",
            files={"file": ("cat.png", b"\x89PNG", "image/png")},
            headers=AUTH,
        )

        assert response.status_code == 200
        image = response.json()
        assert image["id"].startswith("user-1/")
        assert image["id"].endswith(".png")
        assert image["url"] == f"http://testserver/media/content-images/{image['id']}"

        served = client.get(f"/media/content-images/{image['id']}")
        assert served.status_code == 200
        assert served.content == b"\x89PNG"
        assert served.headers["content-type"] == "image/png"

    def test_upload_requires_sign_in(self, client: TestClient) -> None:
        response = client.post(
            "/api/assets/images",
            files={"file": ("cat.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 401

    def test_non_image_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/assets/images",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=AUTH,
        )

        assert response.status_code == 415
        assert response.json()["detail"][0]["code"] == "invalid_file_type"

    def test_avatar_limit(self, client: TestClient) -> None:
        response = client.post(
            "/api/assets/images?mode=avatar",
            files={"file": ("me.png", b"x" * (6 * 1024 * 1024), "image/png")},
            headers=AUTH,
        )

        assert response.status_code == 413
        assert response.json()["detail"][0]["message"] == "Image size cannot exceed 5MB"

    def test_batch_upload(self, client: TestClient) -> None:
        response = client.post(
            "/api/assets/images/batch",
            files=[
                ("files", ("a.png", b"a", "image/png")),
                ("files", ("b.png", b"b", "image/png")),
            ],
            headers=AUTH,
        )

        assert response.status_code == 200
        assert [image["display_name"] for image in response.json()] == ["a.png", "b.png"]

    def test_delete_own_image(self, client: TestClient) -> None:
        image = client.post(
            "/api/assets/images",
            files={"file": ("cat.png", b"x", "image/png")},
            headers=AUTH,
        ).json()

        response = client.delete(f"/api/assets/images/{image['id']}", headers=AUTH)

        assert response.status_code == 204
        assert client.get(f"/media/content-images/{image['id']}").status_code == 404

    def test_delete_directory_key_still_succeeds(self, client: TestClient) -> None:
        client.post(
            "/api/assets/images",
            files={"file": ("cat.png", b"x", "image/png")},
            headers=AUTH,
        )

        response = client.delete("/api/assets/images/user-1/", headers=AUTH)

        assert response.status_code == 204

    def test_metadata_sidecar_not_served(self, client: TestClient) -> None:
        image = client.post(
            "/api/assets/images",
            files={"file": ("cat.png", b"x", "image/png")},
            headers=AUTH,
        ).json()

        response = client.get(f"/media/content-images/{image['id']}.meta.json")

        assert response.status_code == 404

    def test_delete_missing_image_still_succeeds(self, client: TestClient) -> None:
        response = client.delete("/api/assets/images/user-1/none.png", headers=AUTH)

        assert response.status_code == 204

    def test_delete_other_users_image(self, client: TestClient) -> None:
        response = client.delete("/api/assets/images/user-2/x.png", headers=AUTH)

        assert response.status_code == 403


# --- Forums ---


class TestForums:
    def test_create_forum(self, client: TestClient) -> None:
        forum = _create_forum(client)

        assert forum["slug"] == "general-chat"
        assert forum["title"] == "General Chat"
        assert forum["author_id"] == "user-1"
        assert client.get("/api/forums").json() == [forum]

    def test_duplicate_forum(self, client: TestClient) -> None:
        _create_forum(client)

        response = client.post(
            "/api/forums", json={"title": "General  Chat!", "body": "x"}, headers=AUTH
        )

        assert response.status_code == 409

    def test_validation_errors(self, client: TestClient) -> None:
        response = client.post("/api/forums", json={"title": " ", "body": ""}, headers=AUTH)

        assert response.status_code == 422
        codes = [error["code"] for error in response.json()["detail"]]
        assert codes == ["content_required", "title_required"]

    def test_requires_sign_in(self, client: TestClient) -> None:
        response = client.post("/api/forums", json={"title": "T", "body": "B"})

        assert response.status_code == 401

    def test_row_store_failure_is_verbatim(self, app: FastAPI, client: TestClient) -> None:
        app.dependency_overrides[deps.get_row_store] = lambda: FailingRowStore()

        response = client.post("/api/forums", json={"title": "T", "body": "B"}, headers=AUTH)

        assert response.status_code == 502
        assert response.json()["detail"][0] == {
            "code": "publish_failed",
            "message": "insert rejected",
            "field": None,
        }


class TestThreads:
    def test_create_thread_in_missing_forum(self, client: TestClient) -> None:
        response = client.post(
            "/api/forums/nope/threads", json={"title": "T", "body": "B"}, headers=AUTH
        )

        assert response.status_code == 404

    def test_thread_payload(self, client: TestClient) -> None:
        forum = _create_forum(client)

        thread = _create_thread(client, forum["slug"], tags=["intro"], category="general")

        assert thread["forum_id"] == forum["id"]
        assert thread["mentions"] == ["bob"]
        assert thread["tags"] == ["intro"]
        assert thread["flags"] == {"pinned": False, "locked": False}
        assert thread["publish_type"] == "publish"

    def test_pinned_threads_listed_first(self, client: TestClient) -> None:
        forum = _create_forum(client)
        pinned = _create_thread(client, forum["slug"], title="Rules", flags={"pinned": True})
        _create_thread(client, forum["slug"], title="Later")

        listed = client.get(f"/api/forums/{forum['slug']}/threads").json()

        assert listed[0]["id"] == pinned["id"]
        assert len(listed) == 2

    def test_saved_draft_is_not_listed(self, client: TestClient) -> None:
        forum = _create_forum(client)

        response = client.post(
            f"/api/forums/{forum['slug']}/threads?draft=true", json={"title": ""}, headers=AUTH
        )

        assert response.status_code == 201
        assert response.json()["publish_type"] == "draft"
        assert client.get(f"/api/forums/{forum['slug']}/threads").json() == []

    def test_get_thread_with_replies(self, client: TestClient) -> None:
        forum = _create_forum(client)
        thread = _create_thread(client, forum["slug"])
        reply = client.post(
            f"/api/threads/{thread['id']}/replies", json={"body": "*agreed*"}, headers=AUTH
        )
        assert reply.status_code == 201
        assert "title" not in reply.json()

        data = client.get(f"/api/threads/{thread['id']}").json()

        assert data["thread"]["id"] == thread["id"]
        assert "@bob" in data["content"]["html"]
        assert len(data["replies"]) == 1
        assert "<em>agreed</em>" in data["replies"][0]["content"]["html"]

    def test_reply_to_locked_thread(self, client: TestClient) -> None:
        forum = _create_forum(client)
        thread = _create_thread(client, forum["slug"], flags={"locked": True})

        response = client.post(
            f"/api/threads/{thread['id']}/replies", json={"body": "hi"}, headers=AUTH
        )

        assert response.status_code == 403

    def test_reply_with_flags_rejected(self, client: TestClient) -> None:
        forum = _create_forum(client)
        thread = _create_thread(client, forum["slug"])

        response = client.post(
            f"/api/threads/{thread['id']}/replies",
            json={"body": "hi", "flags": {"pinned": True}},
            headers=AUTH,
        )

        assert response.status_code == 422
        assert response.json()["detail"][0]["code"] == "flags_not_allowed"


# --- Resources ---


class TestResources:
    def test_search(self, client: TestClient) -> None:
        response = client.get("/api/resources?query=sodium&project_type=mod")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()] == ["sodium"]

    def test_categories(self, client: TestClient) -> None:
        response = client.get("/api/resources/categories")

        assert "mod" in response.json()

    def test_unavailable(self, app: FastAPI, client: TestClient) -> None:
        failing = _catalog({"/search": httpx.Response(500), "/projects/random": httpx.Response(500)})
        app.dependency_overrides[deps.get_catalog] = lambda: failing

        response = client.get("/api/resources")

        assert response.status_code == 503
