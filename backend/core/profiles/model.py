from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    """用户扩展资料: 显示名与角色, 注册时写入一次"""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., description="Supabase Auth 用户 ID")
    display_name: str = Field("", description="显示名")
    role: Optional[str] = Field(None, description="角色: Reporter / Editor")
    created_at: Optional[str] = Field(None, description="创建时间 ISO-8601")
