import pytest
from fastapi.testclient import TestClient

from main import app
from app.models.post import PostStatus
from app.service.base_post_svc import ENCRYPTED_TIP
from app.storage.database import get_db


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_post(client, url, **fields):
    payload = {"title": url.title(), "url": url, "status": PostStatus.PUBLISHED.value}
    payload.update(fields)
    resp = client.post("/posts/", json=payload)
    assert resp.status_code == 200, resp.json()
    return resp.json()["data"]


def test_create_post(client):
    data = create_post(client, "hello", original_content="**bold**")

    assert data["id"] is not None
    assert "<strong>bold</strong>" in data["format_content"]
    assert data["edit_time"] is None
    assert data["encrypted"] is False
    assert "password" not in data


def test_create_post_with_taken_url(client):
    create_post(client, "hello")

    resp = client.post("/posts/", json={"title": "Again", "url": "hello"})

    assert resp.status_code == 400
    assert resp.json()["code"] == 400
    assert resp.json()["data"] is None


def test_create_post_rejects_unknown_fields(client):
    resp = client.post("/posts/", json={"title": "A", "url": "a", "visits": 100})

    assert resp.status_code == 422


def test_get_published_post_counts_visits(client):
    create_post(client, "hello")

    first = client.get("/posts/url/hello").json()["data"]
    second = client.get("/posts/url/hello").json()["data"]

    assert first["visits"] == 1
    assert second["visits"] == 2


def test_get_draft_post_by_url_is_not_found(client):
    create_post(client, "draft", status=PostStatus.DRAFT.value)

    resp = client.get("/posts/url/draft")

    assert resp.status_code == 404
    assert resp.json()["code"] == 404


def test_encrypted_post_is_redacted_until_unlocked(client):
    create_post(client, "secret", original_content="hidden body", summary="hidden", password="pa55")

    data = client.get("/posts/url/secret").json()["data"]
    assert data["encrypted"] is True
    assert data["original_content"] == ENCRYPTED_TIP
    assert data["format_content"] == ENCRYPTED_TIP
    assert data["summary"] == ENCRYPTED_TIP

    wrong = client.post("/posts/url/secret/unlock", json={"password": "nope"})
    assert wrong.status_code == 403

    unlocked = client.post("/posts/url/secret/unlock", json={"password": "pa55"})
    assert unlocked.status_code == 200
    assert unlocked.json()["data"]["original_content"] == "hidden body"


def test_update_post_sets_edit_time(client):
    created = create_post(client, "hello", original_content="before", create_time="2024-01-01T08:00:00")

    resp = client.put(
        f"/posts/{created['id']}",
        json={"title": "Edited", "url": "hello", "status": 0, "original_content": "after"},
    )

    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["title"] == "Edited"
    assert data["edit_time"] is not None
    assert data["create_time"].startswith("2024-01-01T08:00:00")
    assert "after" in data["format_content"]


def test_update_post_rejects_create_time(client):
    created = create_post(client, "hello", create_time="2024-01-01T08:00:00")

    resp = client.put(
        f"/posts/{created['id']}",
        json={"title": "Edited", "url": "hello", "create_time": "2030-01-01T00:00:00"},
    )

    assert resp.status_code == 400
    stored = client.get(f"/posts/id/{created['id']}").json()["data"]
    assert stored["title"] == "Hello"
    assert stored["create_time"].startswith("2024-01-01T08:00:00")


def test_update_missing_post(client):
    resp = client.put("/posts/404", json={"title": "Ghost", "url": "ghost"})

    assert resp.status_code == 404


def test_like_post(client):
    created = create_post(client, "hello")

    assert client.post(f"/posts/{created['id']}/likes", params={"likes": 3}).json()["data"] is True
    assert client.get(f"/posts/id/{created['id']}").json()["data"]["likes"] == 3


def test_like_missing_post(client):
    resp = client.post("/posts/404/likes")

    assert resp.status_code == 400
    assert resp.json()["data"] is False


def test_like_rejects_non_positive_amount(client):
    created = create_post(client, "hello")

    resp = client.post(f"/posts/{created['id']}/likes", params={"likes": 0})

    assert resp.status_code == 400


def test_latest_rejects_non_positive_top(client):
    assert client.get("/posts/latest", params={"top": 0}).status_code == 400


def test_list_posts_pages(client):
    for i in range(3):
        create_post(client, f"p{i}")

    data = client.get("/posts/", params={"page": 0, "page_size": 2}).json()["data"]

    assert data["total"] == 3
    assert data["count"] == 2


def test_list_posts_unknown_sort_field(client):
    resp = client.get("/posts/", params={"sort": "nope"})

    assert resp.status_code == 400


def test_post_neighbors(client):
    create_post(client, "p1", create_time="2024-01-01T00:00:00")
    create_post(client, "p2", create_time="2024-01-02T00:00:00")
    create_post(client, "p3", create_time="2024-01-03T00:00:00")

    data = client.get("/posts/url/p2/neighbors").json()["data"]

    assert data["pre"]["url"] == "p3"
    assert data["next"]["url"] == "p1"


def test_counts(client):
    created = create_post(client, "hello")
    create_post(client, "draft", status=PostStatus.DRAFT.value)
    client.post(f"/posts/{created['id']}/likes")

    data = client.get("/posts/counts").json()["data"]

    assert data["likes"] == 1
    assert data["visits"] == 0
    assert data["by_status"]["PUBLISHED"] == 1
    assert data["by_status"]["DRAFT"] == 1


def test_delete_post(client):
    created = create_post(client, "hello")

    assert client.delete(f"/posts/{created['id']}").json()["data"] is True
    assert client.delete(f"/posts/{created['id']}").status_code == 404


def test_sheets_are_separate_from_posts(client):
    create_post(client, "about")

    resp = client.post("/sheets/", json={"title": "About", "url": "about", "status": 0})
    assert resp.status_code == 200

    sheet = client.get("/sheets/url/about").json()["data"]
    assert sheet["visits"] == 1
    assert client.get("/sheets/").json()["data"]["total"] == 1
