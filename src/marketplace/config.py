from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the JSON documents live; all the offline admin tools need."""

    model_config = SettingsConfigDict(
        env_prefix="MARKETPLACE_", env_file=".env", extra="ignore"
    )

    data_dir: Path = Path("data")


class Settings(StorageSettings):
    """Runtime configuration, read from ``MARKETPLACE_*`` environment variables."""

    # secrets: no defaults, startup fails without them
    jwt_secret: SecretStr
    admin_username_hash: str
    admin_password_hash: str
    token_ttl_seconds: int = Field(default=2 * 60 * 60, gt=0)

    rate_limit_window_seconds: float = Field(default=60, gt=0)
    rate_limit_max_requests: int = Field(default=240, gt=0)
    login_rate_limit_window_seconds: float = Field(default=15 * 60, gt=0)
    login_rate_limit_max_requests: int = Field(default=25, gt=0)
    max_body_bytes: int = Field(default=1024 * 1024, gt=0)

    public_dir: Path | None = None
    admin_dir: Path | None = None
    seed_demo_products: bool = True

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
