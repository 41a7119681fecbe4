"""Runtime configuration for the gallery API."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

UPLOAD_SUBDIR = Path("uploads") / "images"
UPLOAD_URL_PREFIX = "/uploads/images"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GALLERY_", env_file=".env", extra="ignore")

    public_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "public",
        description="Directory whose uploads/images subfolder receives uploaded files",
    )
    cors_origins: str = Field(default="*", description="Comma separated list of allowed origins")
    log_level: str = Field(default="INFO")
    seed_users: bool = Field(default=True, description="Start with the demo user in the store")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    @property
    def upload_dir(self) -> Path:
        return Path(self.public_dir) / UPLOAD_SUBDIR

    @property
    def upload_url_prefix(self) -> str:
        return UPLOAD_URL_PREFIX

    @property
    def allowed_origins(self) -> List[str]:
        configured = self.cors_origins.strip()
        if configured == "*":
            return ["*"]
        return [origin.strip() for origin in configured.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "UPLOAD_URL_PREFIX", "get_settings"]
