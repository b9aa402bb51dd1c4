from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


@dataclass(frozen=True)
class AppSettings:
    app_name: str
    web_name: str
    api_base: str
    auto_reload: bool
    threads: int
    port: int
    debug: bool
    log_level: str
    log_file: str
    image_max_bytes: int


def load_app_settings() -> AppSettings:
    return AppSettings(
        app_name=os.getenv("APP_NAME", "newsroom"),
        web_name=os.getenv("WEB_NAME", "Newsroom 编辑部"),
        api_base=os.getenv("API_BASE", "/api/v1").rstrip("/"),
        auto_reload=_as_bool(os.getenv("AUTO_RELOAD"), False),
        threads=max(1, _as_int(os.getenv("THREADS"), 1)),
        port=_as_int(os.getenv("PORT"), 38001),
        debug=_as_bool(os.getenv("DEBUG"), False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE", "./data/logs/newsroom.log"),
        image_max_bytes=_as_int(os.getenv("IMAGE_MAX_BYTES"), 5 * 1024 * 1024),
    )


settings = load_app_settings()
