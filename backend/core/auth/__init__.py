"""会话解析领域模块。"""

from core.profiles import profile_repo
from core.auth.model import Actor, AuthEvent, Role
from core.auth.resolver import SessionResolver, register_user


session_resolver = SessionResolver(profile_repo)

__all__ = [
    "session_resolver",
    "SessionResolver",
    "register_user",
    "Actor",
    "AuthEvent",
    "Role",
]
