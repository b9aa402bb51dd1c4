from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ProfilesRepository:
    """profiles 表仓储类"""

    TABLE_NAME = "profiles"

    def __init__(self, client: Any) -> None:
        self.client = client

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """根据 Supabase Auth 的 user_id 获取 profile 记录"""
        rows = await self.client.select(
            self.TABLE_NAME,
            filters={"user_id": user_id},
            limit=1,
        )
        return rows[0] if rows else None

    async def create_profile(
        self, user_id: str, display_name: str, role: str
    ) -> Dict[str, Any]:
        """注册时写入 profile, user_id 冲突时覆盖"""
        payload: Dict[str, Any] = {
            "user_id": user_id,
            "display_name": display_name,
            "role": role,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        rows = await self.client.upsert(
            self.TABLE_NAME,
            payload,
            on_conflict="user_id",
        )
        return rows[0] if rows else payload
