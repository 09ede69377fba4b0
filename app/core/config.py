from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # optional key=value file with secrets, loaded into the environment
    api_txt_path: str = Field(default="", alias="API_TXT_PATH")

    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta", alias="GEMINI_BASE_URL"
    )
    analyze_model: str = Field(default="gemini-2.5-flash", alias="ANALYZE_MODEL")
    image_model: str = Field(default="gemini-2.5-flash-image", alias="IMAGE_MODEL")

    default_aspect_ratio: str = Field(default="9:16", alias="DEFAULT_ASPECT_RATIO")
    default_language: str = Field(default="ru", alias="DEFAULT_LANGUAGE")
    refusal_excerpt_chars: int = Field(default=300, alias="REFUSAL_EXCERPT_CHARS")
    max_upload_mb: int = Field(default=20, alias="MAX_UPLOAD_MB")
    session_ttl_minutes: int = Field(default=60, alias="SESSION_TTL_MINUTES")
    max_sessions: int = Field(default=100, alias="MAX_SESSIONS")

    proxy_url: str = Field(default="", alias="PROXY_URL")
    http_read_timeout: float = Field(default=600.0, alias="HTTP_READ_TIMEOUT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_keys_from_txt(path: str) -> None:
    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"api.txt not found at: {path}")

    for raw in p.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and value:
            os.environ[key] = value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    temp = Settings()
    if temp.api_txt_path:
        load_keys_from_txt(temp.api_txt_path)
    settings = Settings()

    if not settings.gemini_api_key.strip():
        raise RuntimeError("GEMINI_API_KEY is missing in configured api.txt/.env")

    return settings
