import asyncio

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

import core.articles as articles
import core.categories as categories
from core.auth.deps import get_current_actor
from web import app


API = "/api/v1"


class Session:
    """切换当前请求使用的 Actor"""

    def __init__(self):
        self.actor = None

    def __call__(self):
        if self.actor is None:
            raise HTTPException(status_code=401, detail="未提供认证令牌")
        return self.actor


@pytest.fixture
def session(monkeypatch, memory_client, storage):
    monkeypatch.setattr(articles.article_repo, "client", memory_client)
    monkeypatch.setattr(categories.category_registry, "client", memory_client)
    monkeypatch.setattr(articles.article_editor, "storage", storage)
    asyncio.run(categories.category_registry.create("Tech"))
    asyncio.run(categories.category_registry.create("Sports"))

    current = Session()
    app.dependency_overrides[get_current_actor] = current
    yield current
    app.dependency_overrides.clear()


@pytest.fixture
def client(session):
    return TestClient(app)


def _create(client, session, actor, **fields):
    session.actor = actor
    form = {"title": "A", "subtitle": "B", "body": "C", "category": "Tech", **fields}
    resp = client.post(f"{API}/articles", data=form)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def _transition(client, article_id, status):
    return client.post(f"{API}/articles/{article_id}/transition", json={"status": status})


def test_end_to_end_publication(client, session, reporter, editor):
    article = _create(client, session, reporter)
    assert article["status"] == "Draft"
    assert article["authorId"] == reporter.id
    assert article["allowedTransitions"] == ["Ready"]

    session.actor = reporter
    resp = _transition(client, article["id"], "Ready")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "Ready"

    resp = _transition(client, article["id"], "Published")
    assert resp.status_code == 403
    assert resp.json()["data"]["error"] == "FORBIDDEN"

    session.actor = editor
    resp = _transition(client, article["id"], "Published")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "Published"

    session.actor = None
    public = client.get(f"{API}/public/articles").json()["data"]["list"]
    assert [a["id"] for a in public] == [article["id"]]
    sports = client.get(f"{API}/public/articles", params={"category": "Sports"}).json()["data"]
    assert sports == {"list": [], "total": 0}


def test_invalid_transition_maps_to_409(client, session, reporter):
    article = _create(client, session, reporter)

    resp = _transition(client, article["id"], "Published")
    assert resp.status_code == 409
    assert resp.json()["data"]["error"] == "INVALID_TRANSITION"


def test_transition_on_missing_article(client, session, editor):
    session.actor = editor
    resp = _transition(client, "missing", "Published")
    assert resp.status_code == 404


def test_public_detail_of_draft_is_404(client, session, reporter):
    article = _create(client, session, reporter)

    session.actor = None
    assert client.get(f"{API}/public/articles/{article['id']}").status_code == 404


def test_dashboard_lists_follow_role(client, session, reporter, other_reporter, editor):
    _create(client, session, reporter)
    _create(client, session, other_reporter)

    session.actor = reporter
    assert client.get(f"{API}/articles").json()["data"]["total"] == 1

    session.actor = editor
    assert client.get(f"{API}/articles").json()["data"]["total"] == 2

    session.actor = None
    assert client.get(f"{API}/articles").status_code == 401


def test_reporter_cannot_read_other_reporters_article(client, session, reporter, other_reporter):
    article = _create(client, session, reporter)

    session.actor = other_reporter
    assert client.get(f"{API}/articles/{article['id']}").status_code == 404


def test_create_with_image(client, session, storage, reporter):
    session.actor = reporter
    resp = client.post(
        f"{API}/articles",
        data={"title": "A", "subtitle": "B", "body": "C", "category": "Tech"},
        files={"image": ("cover.png", b"png-bytes", "image/png")},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["imageUrl"] == "https://cdn.example.com/images/cover.jpg"
    storage.upload_image.assert_awaited_once()


def test_create_validation_error(client, session, reporter):
    session.actor = reporter
    resp = client.post(
        f"{API}/articles",
        data={"title": "", "subtitle": "B", "body": "C", "category": "Tech"},
    )
    assert resp.status_code == 422
    assert resp.json()["data"]["field"] == "title"


def test_update_rejects_status_field(client, session, reporter):
    article = _create(client, session, reporter)

    resp = client.put(f"{API}/articles/{article['id']}", json={"status": "Published"})
    assert resp.status_code == 422

    resp = client.put(f"{API}/articles/{article['id']}", json={"title": "A2"})
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "A2"
    assert resp.json()["data"]["status"] == "Draft"


def test_delete_article(client, session, reporter):
    article = _create(client, session, reporter)

    assert client.delete(f"{API}/articles/{article['id']}").status_code == 200
    assert client.delete(f"{API}/articles/{article['id']}").status_code == 200
    assert client.get(f"{API}/articles").json()["data"]["total"] == 0


def test_category_management_requires_editor(client, session, reporter, editor):
    session.actor = None
    names = [c["name"] for c in client.get(f"{API}/categories").json()["data"]["list"]]
    assert names == ["Sports", "Tech"]

    session.actor = reporter
    assert client.post(f"{API}/categories", json={"name": "Opinion"}).status_code == 403

    session.actor = editor
    resp = client.post(f"{API}/categories", json={"name": "Opinion", "description": "Columns"})
    assert resp.status_code == 200
    created = resp.json()["data"]
    assert created["createdAt"]

    resp = client.put(f"{API}/categories/{created['id']}", json={"description": "Op-eds"})
    assert resp.json()["data"]["description"] == "Op-eds"

    assert client.post(f"{API}/categories", json={"name": "opinion"}).status_code == 422
    assert client.delete(f"{API}/categories/{created['id']}").status_code == 200
    assert client.delete(f"{API}/categories/{created['id']}").status_code == 404

    resp = client.post(f"{API}/categories/bootstrap")
    assert resp.json()["data"] == {"inserted": 0}
