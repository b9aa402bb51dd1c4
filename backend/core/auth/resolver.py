from typing import Any, Optional

from core.auth.model import Actor, AuthEvent, Role
from core.common.errors import ValidationError
from core.common.log import logger


class SessionResolver:
    """把身份事件解析为 Actor, 是系统中唯一确定角色的地方"""

    def __init__(self, profiles: Any):
        self.profiles = profiles

    async def resolve(self, event: Optional[AuthEvent]) -> Optional[Actor]:
        if event is None or not event.signed_in:
            return None

        profile = await self.profiles.get_profile(event.uid)
        if not profile:
            # 没有 profile 的用户没有角色, 所有需要角色的操作都会被拒绝
            logger.warning(f"用户 {event.uid} 没有 profile 记录, 角色未定义")
            return Actor(id=event.uid, display_name=event.email or "", role=None)

        role = Role.parse(profile.get("role"))
        if role is None:
            logger.warning(f"用户 {event.uid} 的角色无法识别: {profile.get('role')!r}")

        return Actor(
            id=event.uid,
            display_name=profile.get("display_name") or event.email or "",
            role=role,
        )


async def register_user(
    auth: Any,
    profiles: Any,
    email: str,
    password: str,
    display_name: str,
    role: str,
) -> Actor:
    """注册: 先创建认证用户, 再写入 profile（显示名 + 角色）"""
    parsed = Role.parse(role)
    if parsed is None:
        raise ValidationError(f"未知角色: {role}", {"field": "role"})
    if not (display_name or "").strip():
        raise ValidationError("显示名不能为空", {"field": "display_name"})

    identity = await auth.sign_up(email, password)
    await profiles.create_profile(identity["uid"], display_name.strip(), parsed.value)
    logger.info(f"用户 {identity['uid']} 注册为 {parsed.value}")
    return Actor(id=identity["uid"], display_name=display_name.strip(), role=parsed)
