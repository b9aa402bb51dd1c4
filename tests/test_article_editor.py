import asyncio

import pytest

from core.articles.editor import ImageUpload
from core.articles.model import ArticleStatus
from core.common.errors import Forbidden, NotFound, UpstreamFailure, ValidationError


@pytest.fixture(autouse=True)
def categories(registry):
    asyncio.run(registry.create("Tech"))
    asyncio.run(registry.create("Sports"))


def test_create_uploads_image_then_writes(article_editor, storage, draft, reporter):
    image = ImageUpload(data=b"png-bytes", filename="cover.png", content_type="image/png")
    article = asyncio.run(article_editor.create_article(reporter, draft, image))

    storage.upload_image.assert_awaited_once_with(
        b"png-bytes", filename="cover.png", content_type="image/png"
    )
    assert article.image_url == "https://cdn.example.com/images/cover.jpg"
    assert article.status is ArticleStatus.DRAFT
    assert article.author_name == reporter.display_name


def test_failed_upload_writes_nothing(article_editor, article_repo, storage, draft, reporter):
    storage.upload_image.side_effect = UpstreamFailure("storage down")

    with pytest.raises(UpstreamFailure):
        asyncio.run(article_editor.create_article(reporter, draft, ImageUpload(data=b"x")))

    assert asyncio.run(article_repo.list_all()) == []


@pytest.mark.parametrize("field", ["title", "subtitle", "body", "category"])
def test_required_fields(article_editor, draft, reporter, field):
    with pytest.raises(ValidationError):
        asyncio.run(article_editor.create_article(reporter, {**draft, field: "  "}))


def test_category_must_exist(article_editor, draft, reporter):
    with pytest.raises(ValidationError):
        asyncio.run(article_editor.create_article(reporter, {**draft, "category": "Weather"}))


def test_actor_without_role_cannot_write(article_editor, draft, roleless):
    with pytest.raises(Forbidden):
        asyncio.run(article_editor.create_article(roleless, draft))
    with pytest.raises(Forbidden):
        asyncio.run(article_editor.create_article(None, draft))


def test_reporter_edits_only_own(article_editor, draft, reporter, other_reporter, editor):
    article = asyncio.run(article_editor.create_article(reporter, draft))

    updated = asyncio.run(article_editor.update_article(reporter, article.id, {"title": "A2"}))
    assert updated.title == "A2"

    with pytest.raises(Forbidden):
        asyncio.run(article_editor.update_article(other_reporter, article.id, {"title": "A3"}))

    by_editor = asyncio.run(article_editor.update_article(editor, article.id, {"category": "Sports"}))
    assert by_editor.category == "Sports"


def test_edit_allowed_in_any_status(article_editor, engine, draft, reporter, editor):
    article = asyncio.run(article_editor.create_article(reporter, draft))
    asyncio.run(engine.transition(article.id, reporter, ArticleStatus.READY))
    asyncio.run(engine.transition(article.id, editor, ArticleStatus.PUBLISHED))

    updated = asyncio.run(article_editor.update_article(reporter, article.id, {"body": "fixed typo"}))
    assert updated.body == "fixed typo"
    assert updated.status is ArticleStatus.PUBLISHED


def test_update_cannot_change_status(article_editor, draft, reporter):
    article = asyncio.run(article_editor.create_article(reporter, draft))

    with pytest.raises(ValidationError):
        asyncio.run(article_editor.update_article(reporter, article.id, {"status": "Published"}))


def test_update_validates_supplied_fields(article_editor, draft, reporter):
    article = asyncio.run(article_editor.create_article(reporter, draft))

    with pytest.raises(ValidationError):
        asyncio.run(article_editor.update_article(reporter, article.id, {"title": ""}))
    with pytest.raises(ValidationError):
        asyncio.run(article_editor.update_article(reporter, article.id, {"category": "Weather"}))
    with pytest.raises(NotFound):
        asyncio.run(article_editor.update_article(reporter, "missing", {"title": "x"}))


def test_replacing_image_keeps_old_url_on_failure(article_editor, article_repo, storage, draft, reporter):
    article = asyncio.run(article_editor.create_article(reporter, draft, ImageUpload(data=b"v1")))
    storage.upload_image.side_effect = UpstreamFailure("storage down")

    with pytest.raises(UpstreamFailure):
        asyncio.run(
            article_editor.update_article(reporter, article.id, {"title": "A2"}, ImageUpload(data=b"v2"))
        )

    stored = asyncio.run(article_repo.get_by_id(article.id))
    assert stored.image_url == article.image_url
    assert stored.title == "A"


def test_delete_permissions(article_editor, article_repo, draft, reporter, other_reporter, editor):
    first = asyncio.run(article_editor.create_article(reporter, draft))
    second = asyncio.run(article_editor.create_article(reporter, draft))

    with pytest.raises(Forbidden):
        asyncio.run(article_editor.delete_article(other_reporter, first.id))

    asyncio.run(article_editor.delete_article(reporter, first.id))
    asyncio.run(article_editor.delete_article(editor, second.id))
    asyncio.run(article_editor.delete_article(editor, "missing"))

    assert asyncio.run(article_repo.list_all()) == []
