"""
Configuration management for the xTrade bot registry.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# Load environment variables from .env without overriding exported ones
env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file, override=False)
else:
    load_dotenv(PROJECT_ROOT / ".env", override=False)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_ignore_empty=True,
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = Field(default="xTrade Registry", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")

    # Registry state (server and offline CLI)
    state_file: str = Field(default="state.json", validation_alias="STATE_FILE")

    # API server
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=7762, ge=1, le=65535, validation_alias="API_PORT")

    # Remote server (online CLI)
    api_url: str = Field(default="http://localhost:7762", validation_alias="API_URL")
    request_timeout: float = Field(default=30.0, gt=0, validation_alias="REQUEST_TIMEOUT")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")

    @property
    def state_path(self) -> Path:
        return Path(self.state_file)


# Global settings instance
settings = Settings()
