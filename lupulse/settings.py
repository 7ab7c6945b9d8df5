from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Every value can be overridden via `APP_*` env vars or a local `.env` file.
    - Secrets (signing key, Cloudinary credentials) are read once at startup and never mutated.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    db_url: str | None = None
    security_config_path: str | None = None
    log_level: str = "INFO"

    environment: Literal["development", "production"] = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    jwt_secret: str = ""
    token_ttl_seconds: int = 3600

    cloud_name: str | None = None
    cloud_api_key: str | None = None
    cloud_api_secret: str | None = None
    media_folder: str = "LuPulse"
    media_timeout_seconds: int = 30

    bootstrap_superadmin: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def resolved_db_url(self) -> str:
        if self.db_url:
            return self.db_url

        repo_root = Path(__file__).resolve().parents[1]
        db_path = repo_root / "lupulse.db"
        return f"sqlite:///{db_path}"

    def resolved_security_config_path(self) -> Path:
        if self.security_config_path:
            return Path(self.security_config_path)

        return Path(__file__).resolve().parent / "config" / "security_config.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()
