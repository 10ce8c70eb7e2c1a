"""Configuration for the Form Builder service.

All values are read from the environment once, at process start. A ``.env``
file in the working directory is honoured.
"""

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from form_builder.core.environment import Environment

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    return float(raw) if raw else None


class Settings(BaseModel):
    """Process-scoped settings handed to request handlers via dependencies."""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_request_body_size: int = 50 * 1024 * 1024  # 50MB

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # Object storage (S3-compatible, MinIO by default)
    storage_endpoint: str = "localhost"
    storage_port: int = 9000
    storage_use_ssl: bool = False
    storage_access_key: str = "minioadmin"
    storage_secret_key: str = "minioadmin"
    storage_bucket: str = "forms"
    storage_region: str = "us-east-1"

    # LLM (None means "use llm.yaml")
    anthropic_api_key: Optional[str] = None
    llm_model: Optional[str] = None
    llm_temperature: Optional[float] = None
    llm_max_tokens: Optional[int] = None

    # Rate limiting
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max: int = 100
    llm_rate_limit_window_seconds: int = 60
    llm_rate_limit_max: int = 10
    trust_proxy: bool = False

    @property
    def storage_url(self) -> str:
        scheme = "https" if self.storage_use_ssl else "http"
        return f"{scheme}://{self.storage_endpoint}:{self.storage_port}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS", "*")
        max_tokens = os.getenv("LLM_MAX_TOKENS")
        return cls(
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", _env_int("PORT", 4000)),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            max_request_body_size=_env_int("MAX_REQUEST_BODY_SIZE", 50 * 1024 * 1024),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT") or Environment.default_log_format(),
            storage_endpoint=os.getenv("MINIO_ENDPOINT", "localhost"),
            storage_port=_env_int("MINIO_PORT", 9000),
            storage_use_ssl=_env_bool("MINIO_USE_SSL"),
            storage_access_key=os.getenv("MINIO_ACCESS_KEY", "minioadmin"),
            storage_secret_key=os.getenv("MINIO_SECRET_KEY", "minioadmin"),
            storage_bucket=os.getenv("MINIO_BUCKET", "forms"),
            storage_region=os.getenv("MINIO_REGION", "us-east-1"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            llm_model=os.getenv("LLM_MODEL") or None,
            llm_temperature=_env_float("LLM_TEMPERATURE"),
            llm_max_tokens=int(max_tokens) if max_tokens else None,
            rate_limit_window_seconds=_env_int("RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
            rate_limit_max=_env_int("RATE_LIMIT_MAX", 100),
            llm_rate_limit_window_seconds=_env_int("LLM_RATE_LIMIT_WINDOW_SECONDS", 60),
            llm_rate_limit_max=_env_int("LLM_RATE_LIMIT_MAX", 10),
            trust_proxy=_env_bool("TRUST_PROXY"),
        )


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear cached settings (for testing)."""
    get_settings.cache_clear()
