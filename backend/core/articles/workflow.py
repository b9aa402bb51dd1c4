"""
文章发布流程状态机。

    Draft → Ready → Published ⇄ Retired

状态表是唯一的权限依据: 前端隐藏按钮只是提示, 每个请求都在这里重新校验。
Ready / Published 之后不能回到 Draft, 需要修改时由编辑直接改内容。

用法:
    engine = WorkflowEngine(article_repo)
    article = await engine.transition(article_id, actor, ArticleStatus.READY)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from core.articles.model import Article, ArticleStatus
from core.auth.model import Actor, Role
from core.common.errors import Forbidden, InvalidTransition, NotFound, ValidationError
from core.common.log import logger


@dataclass(frozen=True)
class TransitionRule:
    role: Role
    author_only: bool = False


TRANSITIONS: Dict[Tuple[ArticleStatus, ArticleStatus], TransitionRule] = {
    (ArticleStatus.DRAFT, ArticleStatus.READY): TransitionRule(Role.REPORTER, author_only=True),
    (ArticleStatus.READY, ArticleStatus.PUBLISHED): TransitionRule(Role.EDITOR),
    (ArticleStatus.PUBLISHED, ArticleStatus.RETIRED): TransitionRule(Role.EDITOR),
    (ArticleStatus.RETIRED, ArticleStatus.PUBLISHED): TransitionRule(Role.EDITOR),
}


def _coerce_status(value: Union[ArticleStatus, str]) -> ArticleStatus:
    try:
        return ArticleStatus.parse(value)
    except ValueError as e:
        raise ValidationError(str(e), {"field": "status"}) from e


def check_transition(
    article: Article, actor: Optional[Actor], target: ArticleStatus
) -> TransitionRule:
    """校验一次状态变更, 不合法时抛出 InvalidTransition / Forbidden"""
    rule = TRANSITIONS.get((article.status, target))
    if rule is None:
        raise InvalidTransition(
            f"不允许的状态变更: {article.status.value} → {target.value}",
            {"from": article.status.value, "to": target.value},
        )

    if actor is None or actor.role is not rule.role:
        raise Forbidden(
            f"{article.status.value} → {target.value} 需要 {rule.role.value} 角色"
        )

    if rule.author_only and actor.id != article.author_id:
        raise Forbidden("只有作者本人可以提交这篇文章")

    return rule


class WorkflowEngine:
    """文章状态机, 所有状态写入的唯一入口"""

    def __init__(self, repo: Any):
        self.repo = repo

    def allowed_targets(
        self, article: Article, actor: Optional[Actor]
    ) -> List[ArticleStatus]:
        """当前操作者可以请求的目标状态（供界面展示按钮）"""
        targets = []
        for (current, target), _rule in TRANSITIONS.items():
            if current is not article.status:
                continue
            try:
                check_transition(article, actor, target)
            except (InvalidTransition, Forbidden):
                continue
            targets.append(target)
        return targets

    async def transition(
        self,
        article_id: str,
        actor: Optional[Actor],
        target: Union[ArticleStatus, str],
    ) -> Article:
        target = _coerce_status(target)

        article = await self.repo.get_by_id(article_id)
        if article is None:
            raise NotFound(f"文章不存在: {article_id}")

        try:
            check_transition(article, actor, target)
        except (InvalidTransition, Forbidden) as e:
            logger.warning(
                f"拒绝状态变更 article={article_id} "
                f"actor={actor.id if actor else None}: {e.message}"
            )
            raise

        updated = await self.repo.set_status(
            article_id,
            target,
            expected_status=article.status,
            expected_updated_at=article.updated_at,
        )
        logger.info(
            f"Article {article_id} transitioned: "
            f"{article.status.value} → {target.value} by {actor.id}"
        )
        return updated
