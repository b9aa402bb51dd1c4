from typing import Optional, Dict, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from supabase import create_client, Client

from core.integrations.supabase.settings import settings
from core.common.errors import UpstreamFailure, ValidationError
from core.common.log import logger

# OAuth2 配置（/api/v1/auth/token 密码登录模式）
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class SupabaseAuthManager:
    """Supabase 认证管理器

    只负责身份认证: 注册/登录/校验 token, 返回稳定的 uid 与 email。
    角色不在这里判断, 由会话解析器读取 profiles 表得到。
    """

    def __init__(self) -> None:
        self.url: str = settings.url
        self.anon_key: str = settings.anon_key
        self.client: Optional[Client] = None

    def get_client(self) -> Client:
        if self.client is not None:
            return self.client

        if not self.url or not self.anon_key:
            raise UpstreamFailure("SUPABASE_URL 和 SUPABASE_ANON_KEY 环境变量必须设置")

        try:
            self.client = create_client(self.url, self.anon_key)
            logger.info("Supabase 认证客户端初始化成功")
        except Exception as e:
            logger.error(f"Supabase 认证客户端初始化失败: {e}")
            raise UpstreamFailure(f"Supabase 认证客户端初始化失败: {e}") from e

        return self.client

    async def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        """注册认证用户, 返回 {"uid", "email"}"""
        if not email or not password:
            raise ValidationError("邮箱和密码不能为空")

        try:
            auth_response = self.get_client().auth.sign_up(
                {"email": email, "password": password}
            )
        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"用户注册失败: {e}")
            raise UpstreamFailure(f"用户注册失败: {e}") from e

        if not auth_response.user:
            raise UpstreamFailure("用户注册失败")

        logger.info(f"用户注册成功: {email}")
        return {"uid": str(auth_response.user.id), "email": auth_response.user.email}

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """邮箱 + 密码登录, 返回 access token 与身份信息"""
        try:
            auth_response = self.get_client().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except UpstreamFailure:
            raise
        except Exception as e:
            logger.warning(f"用户登录失败: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"登录失败: {str(e)}",
            )

        if not (auth_response.user and auth_response.session):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="邮箱或密码错误",
            )

        logger.info(f"用户登录成功: {email}")
        return {
            "access_token": auth_response.session.access_token,
            "token_type": "bearer",
            "expires_in": auth_response.session.expires_in,
            "user": {
                "uid": str(auth_response.user.id),
                "email": auth_response.user.email,
            },
        }

    async def get_user_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        """根据 Access Token 获取身份 {"uid", "email"}, 无效 token 返回 None"""
        try:
            # 每次使用独立客户端, 避免并发请求共享会话
            client = create_client(self.url, self.anon_key)
            response = client.auth.get_user(token)
        except Exception as e:
            logger.warning(f"校验 token 失败: {e}")
            return None

        user = getattr(response, "user", None) if response else None
        if not user:
            return None

        return {"uid": str(user.id), "email": user.email}


# 全局认证管理器实例
auth_manager = SupabaseAuthManager()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
) -> Dict[str, Any]:
    """获取当前身份（必须登录）"""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="未提供认证令牌",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await auth_manager.get_user_by_token(token)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="无效的认证令牌",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_current_user_optional(
    token: str = Depends(oauth2_scheme),
) -> Optional[Dict[str, Any]]:
    """可选地获取当前身份（未登录时返回 None）"""
    if not token:
        return None
    return await auth_manager.get_user_by_token(token)
