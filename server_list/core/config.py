"""Application configuration."""

from pathlib import Path
from typing import Literal, Self

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "minecraft-server-list"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Catalog (menu side)
    CATALOG_URL: str = "http://localhost:3000"
    CATALOG_REFRESH_INTERVAL_SEC: float = 600  # 10 minutes
    CATALOG_FETCH_TIMEOUT_SEC: float = 10.0
    CATALOG_USER_AGENT: str = "minecraft-server-list/0.1"

    # Status backend (catalog producer)
    API_HOST: str = "localhost"
    SERVER_PORT: int = 3000
    SERVERS_FILE: Path = Path("servers.toml")
    STATUS_POLL_INTERVAL_SEC: float = 10
    STATUS_RETRY_DELAY_SEC: float = 10  # 配置文件不可读时的重试间隔
    STATUS_CONNECT_TIMEOUT_SEC: float = 3.0
    STATUS_IO_TIMEOUT_SEC: float = 5.0
    MC_FORCE_IPV4: bool = False

    @field_validator("CATALOG_URL")
    @classmethod
    def _require_catalog_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("CATALOG_URL must not be empty")
        return value.rstrip("/")

    @model_validator(mode="after")
    def _check_intervals(self) -> Self:
        for name in (
            "CATALOG_REFRESH_INTERVAL_SEC",
            "CATALOG_FETCH_TIMEOUT_SEC",
            "STATUS_POLL_INTERVAL_SEC",
            "STATUS_RETRY_DELAY_SEC",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        return self


settings = Settings()
