import os
from typing import Dict
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class BucketConfig:
    name: str
    path: str
    expires: int


@dataclass(frozen=True)
class SupabaseSettings:
    url: str
    anon_key: str
    service_key: str
    buckets: Dict[str, BucketConfig]


def _load_settings() -> SupabaseSettings:
    buckets = {
        "articles": BucketConfig(
            name=os.getenv("STORAGE_ARTICLE_BUCKET", "articles"),
            path=os.getenv("SUPABASE_ARTICLE_IMAGE_PATH", "images/{uuid}{ext}"),
            expires=int(os.getenv("SUPABASE_ARTICLE_SIGN_EXPIRES", "0")),
        ),
    }

    return SupabaseSettings(
        url=os.getenv("SUPABASE_URL", "").rstrip("/"),
        anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        service_key=os.getenv("SUPABASE_SERVICE_KEY", ""),
        buckets=buckets,
    )


settings = _load_settings()
