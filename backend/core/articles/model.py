from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class ArticleStatus(str, Enum):
    """文章生命周期状态, 持久化值固定为英文标签"""

    DRAFT = "Draft"
    READY = "Ready"
    PUBLISHED = "Published"
    RETIRED = "Retired"

    @property
    def label(self) -> str:
        """旧版前端使用的本地化标签"""
        return _LEGACY_LABELS[self]

    @classmethod
    def parse(cls, value: "str | ArticleStatus") -> "ArticleStatus":
        if isinstance(value, ArticleStatus):
            return value
        text = str(value).strip()
        for status in cls:
            if text == status.value or text == _LEGACY_LABELS[status]:
                return status
        raise ValueError(f"Unknown article status: {value!r}")


_LEGACY_LABELS = {
    ArticleStatus.DRAFT: "Edición",
    ArticleStatus.READY: "Terminado",
    ArticleStatus.PUBLISHED: "Publicado",
    ArticleStatus.RETIRED: "Desactivado",
}

# 可通过普通编辑修改的字段, status 只能走流程引擎
CONTENT_FIELDS = frozenset({"title", "subtitle", "body", "category", "image_url"})
REQUIRED_FIELDS = ("title", "subtitle", "body", "category")


class ArticleDraft(BaseModel):
    """创建文章时调用方提供的内容字段; 其余字段（包括 status）一律忽略"""

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    title: str = ""
    subtitle: str = ""
    body: str = ""
    category: str = ""
    image_url: Optional[str] = None


class Article(ArticleDraft):
    model_config = ConfigDict(
        from_attributes=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    author_id: str
    author_name: str = ""
    status: ArticleStatus = ArticleStatus.DRAFT
    created_at: str
    updated_at: str

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return ArticleStatus.parse(value)

    def content(self) -> dict:
        """只取内容字段, 用于比较与回显"""
        return self.model_dump(include=set(CONTENT_FIELDS))
