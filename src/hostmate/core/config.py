from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = PROJECT_ROOT / ".env"

# Load environment variables as early as possible so Settings picks them up.
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Hostmate API"
    app_version: str = "0.1.0"
    docs_url: str = "/docs"
    environment: str = "development"
    database_url: str = f"sqlite:///{(PROJECT_ROOT / 'hostmate.db').as_posix()}"
    database_echo: bool = False
    log_level: str = "INFO"

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "hostmate"
    access_token_expiry_seconds: int = 60 * 60
    refresh_token_expiry_seconds: int = 60 * 24 * 60 * 60

    cors_origins: List[str] = ["http://localhost:5173"]

    @property
    def is_prod(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
