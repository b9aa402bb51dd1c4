from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from core.articles.model import Article, ArticleDraft, CONTENT_FIELDS, REQUIRED_FIELDS
from core.auth.model import Actor
from core.common.app_settings import settings
from core.common.errors import Forbidden, NotFound, ValidationError
from core.common.log import logger


@dataclass
class ImageUpload:
    data: bytes
    filename: str = ""
    content_type: str = "image/jpeg"


def _require_role(actor: Optional[Actor]) -> Actor:
    if actor is None or not actor.has_role:
        raise Forbidden("需要记者或编辑角色")
    return actor


def _check_owner(actor: Actor, article: Article) -> None:
    if actor.is_editor:
        return
    if article.author_id != actor.id:
        raise Forbidden("记者只能修改自己的文章")


class ArticleEditor:
    """文章内容编辑: 创建 / 修改 / 删除

    负责必填校验、分类校验和配图上传; 状态字段不在这里处理。
    配图上传失败时不会写入文章。
    """

    def __init__(self, repo: Any, categories: Any, storage: Any):
        self.repo = repo
        self.categories = categories
        self.storage = storage

    async def _validate_fields(self, fields: Dict[str, Any], required: bool) -> None:
        for name in REQUIRED_FIELDS:
            if name not in fields:
                if required:
                    raise ValidationError(f"缺少必填字段: {name}", {"field": name})
                continue
            if not str(fields[name] or "").strip():
                raise ValidationError(f"字段不能为空: {name}", {"field": name})

        if "category" in fields:
            names = await self.categories.names()
            if fields["category"] not in names:
                raise ValidationError(
                    f"分类不存在: {fields['category']}", {"field": "category"}
                )

    async def _upload(self, image: Optional[ImageUpload]) -> Optional[str]:
        if image is None:
            return None
        if len(image.data) > settings.image_max_bytes:
            raise ValidationError(
                f"图片大小超过限制 {settings.image_max_bytes} bytes", {"field": "image"}
            )
        return await self.storage.upload_image(
            image.data, filename=image.filename, content_type=image.content_type
        )

    async def create_article(
        self,
        actor: Optional[Actor],
        draft: Union[ArticleDraft, Dict[str, Any]],
        image: Optional[ImageUpload] = None,
    ) -> Article:
        actor = _require_role(actor)
        if not isinstance(draft, ArticleDraft):
            draft = ArticleDraft.model_validate(draft)

        fields = draft.model_dump()
        await self._validate_fields(fields, required=True)

        image_url = await self._upload(image)
        if image_url:
            draft = draft.model_copy(update={"image_url": image_url})

        article = await self.repo.create(draft, actor.id, actor.display_name)
        logger.info(f"{actor.id} 创建文章 {article.id}")
        return article

    async def update_article(
        self,
        actor: Optional[Actor],
        article_id: str,
        fields: Dict[str, Any],
        image: Optional[ImageUpload] = None,
    ) -> Article:
        actor = _require_role(actor)
        if "status" in fields:
            raise ValidationError("状态只能通过流程操作修改", {"field": "status"})
        rejected = set(fields) - CONTENT_FIELDS
        if rejected:
            raise ValidationError(
                f"不允许修改的字段: {', '.join(sorted(rejected))}",
                {"fields": sorted(rejected)},
            )

        article = await self.repo.get_by_id(article_id)
        if article is None:
            raise NotFound(f"文章不存在: {article_id}")
        _check_owner(actor, article)

        await self._validate_fields(fields, required=False)

        update_data = dict(fields)
        image_url = await self._upload(image)
        if image_url:
            update_data["image_url"] = image_url

        if not update_data:
            return article

        updated = await self.repo.update(article_id, update_data)
        logger.info(f"{actor.id} 修改文章 {article_id}: {', '.join(sorted(update_data))}")
        return updated

    async def delete_article(self, actor: Optional[Actor], article_id: str) -> None:
        actor = _require_role(actor)
        article = await self.repo.get_by_id(article_id)
        if article is None:
            return
        _check_owner(actor, article)
        await self.repo.delete(article_id)
        logger.info(f"{actor.id} 删除文章 {article_id}")
