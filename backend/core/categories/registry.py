import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from core.categories.model import Category
from core.common.errors import NotFound, ValidationError
from core.common.log import logger


DEFAULT_CATEGORIES = [
    {"name": "Informativo", "description": "Noticias y comunicados informativos"},
    {"name": "Nacional", "description": "Noticias a nivel nacional"},
    {"name": "Entretenimiento", "description": "Noticias de entretenimiento y cultura"},
    {"name": "Deportes", "description": "Noticias deportivas"},
    {"name": "Tecnología", "description": "Noticias de tecnología e innovación"},
    {"name": "Negocios", "description": "Noticias de negocios y economía"},
]

_UPDATABLE_FIELDS = {"name", "description"}


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("分类名称不能为空", {"field": "name"})
    return cleaned


class CategoryRegistry:
    """分类注册表

    维护分类的增删改查, 并向文章校验提供合法分类名集合。
    名称唯一性在写入前由这里检查, 存储层不做约束。
    删除分类不会处理引用它的文章。
    """

    CATEGORY_TABLE = "categories"
    ARTICLE_TABLE = "articles"

    def __init__(self, client: Any):
        self.client = client

    async def list(self) -> List[Category]:
        """按名称升序返回全部分类"""
        rows = await self.client.select(self.CATEGORY_TABLE, order="name.asc")
        return [Category.model_validate(row) for row in rows]

    async def names(self) -> Set[str]:
        return {category.name for category in await self.list()}

    async def count(self) -> int:
        return await self.client.count(self.CATEGORY_TABLE)

    async def get(self, category_id: str) -> Optional[Category]:
        rows = await self.client.select(
            self.CATEGORY_TABLE, filters={"id": category_id}, limit=1
        )
        return Category.model_validate(rows[0]) if rows else None

    async def _ensure_unique(self, name: str, exclude_id: Optional[str] = None) -> None:
        for category in await self.list():
            if category.id == exclude_id:
                continue
            if category.name.casefold() == name.casefold():
                raise ValidationError(f"分类已存在: {name}", {"field": "name"})

    async def create(self, name: str, description: Optional[str] = None) -> Category:
        """创建分类"""
        name = _clean_name(name)
        await self._ensure_unique(name)

        category_data = {
            "id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        row = await self.client.insert(self.CATEGORY_TABLE, category_data)
        logger.info(f"创建分类: {name}")
        return Category.model_validate(row or category_data)

    async def update(self, category_id: str, fields: Dict[str, Any]) -> Category:
        """更新分类名称或描述"""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"不允许修改的字段: {', '.join(sorted(unknown))}",
                {"fields": sorted(unknown)},
            )

        existing = await self.get(category_id)
        if existing is None:
            raise NotFound(f"分类不存在: {category_id}")

        update_data = dict(fields)
        if "name" in update_data:
            update_data["name"] = _clean_name(update_data["name"])
            await self._ensure_unique(update_data["name"], exclude_id=category_id)

        if not update_data:
            return existing

        rows = await self.client.update(
            self.CATEGORY_TABLE, update_data, filters={"id": category_id}
        )
        if not rows:
            raise NotFound(f"分类不存在: {category_id}")
        return Category.model_validate(rows[0])

    async def delete(self, category_id: str) -> None:
        """删除分类, 引用该分类名的文章保持不变"""
        existing = await self.get(category_id)
        if existing is None:
            raise NotFound(f"分类不存在: {category_id}")

        await self.client.delete(self.CATEGORY_TABLE, filters={"id": category_id})

        referenced = await self.client.count(
            self.ARTICLE_TABLE, filters={"category": existing.name}
        )
        if referenced:
            logger.warning(
                f"分类 {existing.name} 已删除, 仍有 {referenced} 篇文章引用该名称"
            )
        else:
            logger.info(f"删除分类: {existing.name}")

    async def bootstrap(self) -> int:
        """分类表为空时写入默认分类, 返回写入数量

        只在数量恰好为 0 时写入, 重复调用不会产生第二套默认分类。
        """
        if await self.count() != 0:
            logger.info("分类已存在, 跳过初始化")
            return 0

        now = datetime.now(timezone.utc).isoformat()
        for default in DEFAULT_CATEGORIES:
            await self.client.insert(
                self.CATEGORY_TABLE,
                {"id": str(uuid.uuid4()), "created_at": now, **default},
            )
        logger.info(f"已写入 {len(DEFAULT_CATEGORIES)} 个默认分类")
        return len(DEFAULT_CATEGORIES)
