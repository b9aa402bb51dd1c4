import os
import uuid
import httpx

from core.integrations.supabase.settings import settings
from core.common.errors import UpstreamFailure, ValidationError
from core.common.log import logger


class SupabaseStorage:
    """Supabase Storage 的 HTTP 封装, 只负责上传并返回可访问 URL"""

    def __init__(self, bucket_key: str = "articles"):
        self.url = settings.url
        self.key = settings.service_key

        bucket_conf = settings.buckets.get(bucket_key)
        if bucket_conf is None:
            raise ValueError(
                f"Bucket configuration '{bucket_key}' not found in settings.buckets"
            )

        self.bucket = bucket_conf.name
        self.path = bucket_conf.path
        self.expires = bucket_conf.expires
        self._client = httpx.AsyncClient(timeout=30.0)

    def valid(self) -> bool:
        return bool(self.url and self.key and self.bucket)

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        h = {"Authorization": f"Bearer {self.key}", "apikey": self.key}
        if content_type:
            h["Content-Type"] = content_type
        return h

    async def upload_bytes(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        if not self.valid():
            raise UpstreamFailure("存储服务未配置")

        url = f"{self.url}/storage/v1/object/{self.bucket}/{path}"
        try:
            resp = await self._client.post(
                url,
                headers=self._headers(content_type),
                content=data,
            )
        except httpx.HTTPError as e:
            logger.error(f"上传文件失败 {path}: {e}")
            raise UpstreamFailure(f"上传文件失败: {e}") from e

        if resp.status_code not in (200, 201):
            logger.error(f"上传文件失败 {path}: {resp.status_code} {resp.text}")
            raise UpstreamFailure(f"上传文件失败: {resp.text}")

        if self.expires and self.expires > 0:
            return await self.sign_url(path, self.expires)
        return self.public_url(path)

    async def sign_url(self, path: str, expires: int | None = None) -> str:
        ex = expires or self.expires
        url = f"{self.url}/storage/v1/object/sign/{self.bucket}/{path}"
        try:
            resp = await self._client.post(
                url,
                headers=self._headers("application/json"),
                json={"expiresIn": ex},
            )
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"生成签名地址失败: {e}") from e
        if resp.status_code != 200:
            raise UpstreamFailure(f"生成签名地址失败: {resp.text}")
        data = resp.json()
        signed = data.get("signedURL") or data.get("signedUrl") or ""
        if signed.startswith("/"):
            return f"{self.url}/storage/v1{signed}"
        return signed

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload_image(
        self,
        data: bytes,
        filename: str = "",
        content_type: str = "image/jpeg",
    ) -> str:
        """上传文章配图, 返回公开 URL"""
        if not data:
            raise ValidationError("图片内容为空")
        _, ext = os.path.splitext(filename or "")
        path = self.path.format(uuid=str(uuid.uuid4()), ext=ext or ".jpg")
        image_url = await self.upload_bytes(path, data, content_type or "image/jpeg")
        logger.info(f"文章配图上传成功: {path}")
        return image_url


supabase_storage_articles = SupabaseStorage("articles")
