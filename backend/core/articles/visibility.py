from typing import Any, Iterable, List, Optional

from core.articles.model import Article, ArticleStatus
from core.auth.model import Actor


def can_view(actor: Optional[Actor], article: Article) -> bool:
    """编辑可见全部; 记者可见自己的文章; 其他人只能看已发布文章"""
    if actor is not None and actor.is_editor:
        return True
    if actor is not None and actor.is_reporter and article.author_id == actor.id:
        return True
    return article.status is ArticleStatus.PUBLISHED


def visible_articles(
    actor: Optional[Actor],
    articles: Iterable[Article],
    category: Optional[str] = None,
) -> List[Article]:
    """从完整结果集中过滤出操作者可见的文章, 保持原有顺序"""
    if actor is not None and actor.is_editor:
        return list(articles)
    if actor is not None and actor.is_reporter:
        return [a for a in articles if a.author_id == actor.id]
    return [
        a
        for a in articles
        if a.status is ArticleStatus.PUBLISHED and (not category or a.category == category)
    ]


class VisibilityFilter:
    """读路径的可见性策略, 空结果是合法结果而不是错误"""

    def __init__(self, repo: Any):
        self.repo = repo

    async def list_for(
        self, actor: Optional[Actor], category: Optional[str] = None
    ) -> List[Article]:
        """工作台列表: 编辑看全部, 记者看自己的, 其余走公开列表"""
        if actor is not None and actor.is_editor:
            return await self.repo.list_all()
        if actor is not None and actor.is_reporter:
            return await self.repo.list_by_author(actor.id)
        return await self.repo.list_published(category)

    async def list_public(self, category: Optional[str] = None) -> List[Article]:
        return await self.repo.list_published(category)

    async def get_public(self, article_id: str) -> Optional[Article]:
        """公开详情: 即使知道 id, 未发布的文章也返回 None"""
        article = await self.repo.get_by_id(article_id)
        if article is None or article.status is not ArticleStatus.PUBLISHED:
            return None
        return article

    async def get_for_actor(
        self, actor: Optional[Actor], article_id: str
    ) -> Optional[Article]:
        article = await self.repo.get_by_id(article_id)
        if article is None or not can_view(actor, article):
            return None
        return article
