import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Union

from core.articles.model import Article, ArticleDraft, ArticleStatus, CONTENT_FIELDS
from core.common.errors import ConflictError, NotFound, ValidationError


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ArticleRepository:
    """articles 表仓储类

    只负责数据形状与排序, 不做角色判断。
    update 只接受内容字段, 状态变更必须通过流程引擎调用 set_status。
    """

    ARTICLE_TABLE = "articles"

    def __init__(self, client: Any):
        self.client = client

    async def create(
        self,
        draft: Union[ArticleDraft, Dict[str, Any]],
        author_id: str,
        author_name: str,
    ) -> Article:
        """创建文章, 状态固定为 Draft"""
        if not isinstance(draft, ArticleDraft):
            draft = ArticleDraft.model_validate(draft)

        now = utc_now()
        article_data = {
            **draft.model_dump(),
            "id": str(uuid.uuid4()),
            "author_id": author_id,
            "author_name": author_name,
            "status": ArticleStatus.DRAFT.value,
            "created_at": now,
            "updated_at": now,
        }
        row = await self.client.insert(self.ARTICLE_TABLE, article_data)
        return Article.model_validate(row or article_data)

    async def update(self, article_id: str, fields: Dict[str, Any]) -> Article:
        """更新内容字段并刷新 updated_at"""
        rejected = set(fields) - CONTENT_FIELDS
        if rejected:
            raise ValidationError(
                f"不允许通过编辑修改的字段: {', '.join(sorted(rejected))}",
                {"fields": sorted(rejected)},
            )

        update_data = {**fields, "updated_at": utc_now()}
        rows = await self.client.update(
            self.ARTICLE_TABLE, update_data, filters={"id": article_id}
        )
        if not rows:
            raise NotFound(f"文章不存在: {article_id}")
        return Article.model_validate(rows[0])

    async def set_status(
        self,
        article_id: str,
        status: ArticleStatus,
        expected_status: ArticleStatus,
        expected_updated_at: str,
    ) -> Article:
        """条件写入状态: 仅当记录仍是读取时的版本才生效"""
        rows = await self.client.update(
            self.ARTICLE_TABLE,
            {"status": status.value, "updated_at": utc_now()},
            filters={
                "id": article_id,
                "status": {"in": [expected_status.value, expected_status.label]},
                "updated_at": expected_updated_at,
            },
        )
        if not rows:
            raise ConflictError(
                f"文章 {article_id} 已被其他操作修改, 请刷新后重试",
                {"article_id": article_id},
            )
        return Article.model_validate(rows[0])

    async def delete(self, article_id: str) -> None:
        """删除文章, 不存在时视为成功"""
        await self.client.delete(self.ARTICLE_TABLE, filters={"id": article_id})

    async def get_by_id(self, article_id: str) -> Optional[Article]:
        rows = await self.client.select(
            self.ARTICLE_TABLE, filters={"id": article_id}, limit=1
        )
        return Article.model_validate(rows[0]) if rows else None

    async def list_all(self) -> List[Article]:
        rows = await self.client.select(self.ARTICLE_TABLE, order="created_at.desc")
        return [Article.model_validate(row) for row in rows]

    async def list_by_author(self, author_id: str) -> List[Article]:
        rows = await self.client.select(
            self.ARTICLE_TABLE,
            filters={"author_id": author_id},
            order="created_at.desc",
        )
        return [Article.model_validate(row) for row in rows]

    async def list_published(self, category: Optional[str] = None) -> List[Article]:
        """已发布文章, 按最近更新排序（重新上线的文章会排到前面）"""
        published = ArticleStatus.PUBLISHED
        filters: Dict[str, Any] = {"status": {"in": [published.value, published.label]}}
        if category:
            filters["category"] = category
        rows = await self.client.select(
            self.ARTICLE_TABLE, filters=filters, order="updated_at.desc"
        )
        return [Article.model_validate(row) for row in rows]
