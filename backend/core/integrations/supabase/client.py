from typing import Optional, Dict, List, Any, cast
from supabase import create_client, Client

from core.integrations.supabase.settings import settings
from core.common.errors import UpstreamFailure
from core.common.log import logger


_FILTER_OPS = ("gt", "gte", "lt", "lte", "neq", "like", "ilike", "in")


def apply_filters(query, filters: Optional[Dict]):
    """把 {"col": value} / {"col": {"op": value}} 形式的过滤条件挂到查询上"""
    if not filters:
        return query
    for key, value in filters.items():
        if isinstance(value, dict):
            for op, val in value.items():
                if op not in _FILTER_OPS:
                    raise ValueError(f"不支持的过滤操作: {op}")
                method = "in_" if op == "in" else op
                query = getattr(query, method)(key, val)
        else:
            query = query.eq(key, value)
    return query


def parse_order(order: str) -> tuple[str, bool]:
    """解析 "created_at.desc" 形式的排序参数"""
    column, _, direction = order.partition(".")
    return column, direction.lower() == "desc"


class SupabaseClient:
    """Supabase 表操作客户端

    所有方法都是协程, 失败时记录日志并统一抛出 UpstreamFailure,
    由上层决定如何响应。
    """

    def __init__(self):
        self.url = settings.url
        self.key = settings.service_key
        self.client: Optional[Client] = None
        self._initialized = False

    def init(self):
        """初始化 Supabase 客户端"""
        if not self.url or not self.key:
            raise UpstreamFailure("SUPABASE_URL 和 SUPABASE_SERVICE_KEY 环境变量必须设置")

        if self._initialized:
            return

        try:
            # 使用服务角色密钥, 权限判断由流程引擎完成
            self.client = create_client(self.url, self.key)
            self._initialized = True
            logger.info("Supabase客户端初始化成功")
        except Exception as e:
            logger.error(f"Supabase客户端初始化失败: {e}")
            raise UpstreamFailure(f"Supabase客户端初始化失败: {e}") from e

    def get_client(self) -> Client:
        if not self._initialized or not self.client:
            self.init()

        if not self.client:
            raise UpstreamFailure("Supabase客户端尚未成功初始化")

        return self.client

    def from_table(self, table_name: str):
        return self.get_client().table(table_name)

    async def select(
        self,
        table: str,
        filters: Optional[Dict] = None,
        columns: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """查询数据"""
        try:
            query = apply_filters(self.from_table(table).select(columns), filters)

            if order:
                column, desc = parse_order(order)
                query = query.order(column, desc=desc)

            if limit:
                query = query.limit(limit)
            if offset:
                query = query.offset(offset)

            response = query.execute()
            return response.data if response.data else []

        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"查询表 {table} 失败: {e}")
            raise UpstreamFailure(f"查询表 {table} 失败: {e}") from e

    async def count(self, table: str, filters: Optional[Dict] = None) -> int:
        """统计记录数量"""
        try:
            query = self.from_table(table).select("id", count=cast(Any, "exact"))
            query = apply_filters(query, filters)
            response = query.execute()
            if getattr(response, "count", None) is not None:
                return int(response.count)
            return len(response.data or [])

        except UpstreamFailure:
            raise
        except Exception as e:
            # 计数失败不能当作 0, 否则初始化分类会重复写入
            logger.error(f"统计表 {table} 记录数量失败: {e}")
            raise UpstreamFailure(f"统计表 {table} 记录数量失败: {e}") from e

    async def insert(self, table: str, data: Dict) -> Dict[str, Any]:
        """插入数据, 返回写入后的行"""
        try:
            response = self.from_table(table).insert(data).execute()
            return response.data[0] if response.data else {}
        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"插入数据到表 {table} 失败: {e}")
            raise UpstreamFailure(f"插入数据到表 {table} 失败: {e}") from e

    async def update(self, table: str, data: Dict, filters: Dict) -> List[Dict[str, Any]]:
        """按条件更新数据, 返回被更新的行; 条件未命中时返回空列表"""
        try:
            query = apply_filters(self.from_table(table).update(data), filters)
            response = query.execute()
            return response.data if response.data else []

        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"更新表 {table} 失败: {e}")
            raise UpstreamFailure(f"更新表 {table} 失败: {e}") from e

    async def delete(self, table: str, filters: Dict) -> List[Dict[str, Any]]:
        """删除数据"""
        try:
            query = apply_filters(self.from_table(table).delete(), filters)
            response = query.execute()
            return response.data if response.data else []

        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"删除表 {table} 数据失败: {e}")
            raise UpstreamFailure(f"删除表 {table} 数据失败: {e}") from e

    async def upsert(
        self,
        table: str,
        data: Dict,
        on_conflict: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """插入或更新数据"""
        try:
            if on_conflict:
                query = self.from_table(table).upsert(data, on_conflict=on_conflict)
            else:
                query = self.from_table(table).upsert(data)
            response = query.execute()
            return response.data or []

        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"Upsert数据到表 {table} 失败: {e}")
            raise UpstreamFailure(f"Upsert数据到表 {table} 失败: {e}") from e


supabase_client = SupabaseClient()
