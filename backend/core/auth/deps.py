from typing import Any, Dict, Optional

from fastapi import Depends

from core.auth import session_resolver
from core.auth.model import Actor, AuthEvent
from core.common.errors import Forbidden
from core.integrations.supabase.auth import get_current_user, get_current_user_optional


async def get_current_actor(
    user: Dict[str, Any] = Depends(get_current_user),
) -> Actor:
    """已登录请求的 Actor（可能没有角色）"""
    return await session_resolver.resolve(AuthEvent(uid=user["uid"], email=user.get("email")))


async def get_current_actor_optional(
    user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
) -> Optional[Actor]:
    """匿名访问时返回 None"""
    if not user:
        return None
    return await session_resolver.resolve(AuthEvent(uid=user["uid"], email=user.get("email")))


async def require_editor(actor: Actor = Depends(get_current_actor)) -> Actor:
    """分类管理等编辑专属操作的入口检查"""
    if not actor.is_editor:
        raise Forbidden("该操作仅限编辑")
