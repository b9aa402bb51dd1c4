from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """编辑部角色"""

    REPORTER = "Reporter"
    EDITOR = "Editor"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """把 profile 中的角色字符串转成枚举, 无法识别时返回 None"""
        if value is None:
            return None
        text = str(value).strip()
        for role in cls:
            if text == role.value:
                return role
        return _LEGACY_ROLE_LABELS.get(text)


# 旧版前端写入的本地化角色名
_LEGACY_ROLE_LABELS = {
    "Reportero": Role.REPORTER,
}


class Actor(BaseModel):
    """当前会话的操作者, 每次会话解析一次, 之后不可变"""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str = ""
    role: Optional[Role] = None

    @property
    def is_editor(self) -> bool:
        return self.role is Role.EDITOR

    @property
    def is_reporter(self) -> bool:
        return self.role is Role.REPORTER

    @property
    def has_role(self) -> bool:
        return self.role is not None


class AuthEvent(BaseModel):
    """身份提供方的登录状态变更通知; uid 为空表示已登出"""

    uid: Optional[str] = None
    email: Optional[str] = None

    @property
    def signed_in(self) -> bool:
        return bool(self.uid)

    @classmethod
    def signed_out(cls) -> "AuthEvent":
        return cls()
