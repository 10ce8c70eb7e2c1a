"""Deployment environment detection and startup checks."""

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


REQUIRED_VARS: Dict[EnvironmentType, List[str]] = {
    EnvironmentType.STAGING: ["ANTHROPIC_API_KEY"],
    EnvironmentType.PRODUCTION: ["ANTHROPIC_API_KEY", "MINIO_ACCESS_KEY", "MINIO_SECRET_KEY"],
}

SECRET_VARS = ("ANTHROPIC_API_KEY", "MINIO_ACCESS_KEY", "MINIO_SECRET_KEY")

# (summary key, variable, default)
SUMMARY_VARS = (
    ("log_level", "LOG_LEVEL", "INFO"),
    ("api_host", "API_HOST", "0.0.0.0"),
    ("api_port", "API_PORT", "4000"),
    ("minio_endpoint", "MINIO_ENDPOINT", "localhost"),
    ("minio_bucket", "MINIO_BUCKET", "forms"),
    ("llm_model", "LLM_MODEL", None),
)


def mask_secret(value: str) -> str:
    """Keep four characters at each end of a long secret; hide short ones entirely."""
    if len(value) > 12:
        return f"{value[:4]}...{value[-4:]}"
    return "****"


@dataclass
class ValidationResult:
    missing_vars: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing_vars

    def raise_if_invalid(self) -> None:
        if self.missing_vars:
            raise EnvironmentError(
                f"Missing required environment variables: {', '.join(self.missing_vars)}"
            )


class Environment:
    """Reads the ``ENVIRONMENT`` variable; under pytest the default is ``test``."""

    @classmethod
    def current(cls) -> EnvironmentType:
        raw = os.getenv("ENVIRONMENT", "").strip().lower()
        if not raw:
            return EnvironmentType.TEST if "pytest" in sys.modules else EnvironmentType.DEVELOPMENT
        try:
            return EnvironmentType(raw)
        except ValueError:
            allowed = ", ".join(e.value for e in EnvironmentType)
            raise ValueError(f"Invalid ENVIRONMENT value: '{raw}'. Must be one of: {allowed}") from None

    @classmethod
    def is_production(cls) -> bool:
        return cls.current() is EnvironmentType.PRODUCTION

    @classmethod
    def default_log_format(cls) -> str:
        """``json`` for staging and production, ``text`` elsewhere."""
        if cls.current() in (EnvironmentType.STAGING, EnvironmentType.PRODUCTION):
            return "json"
        return "text"

    @classmethod
    def validate(cls, environment: Optional[EnvironmentType] = None) -> ValidationResult:
        environment = environment or cls.current()
        result = ValidationResult(
            missing_vars=[var for var in REQUIRED_VARS.get(environment, []) if not os.getenv(var)]
        )
        if environment is EnvironmentType.DEVELOPMENT and not os.getenv("ANTHROPIC_API_KEY"):
            result.warnings.append("ANTHROPIC_API_KEY not set, rating endpoints will fail")
        if not os.getenv("LOG_LEVEL"):
            result.warnings.append("LOG_LEVEL not set, defaulting to INFO")
        return result

    @classmethod
    def get_config_summary(cls, sanitize: bool = True) -> Dict[str, Any]:
        """Settings worth logging at startup, secrets masked unless ``sanitize`` is off."""
        summary: Dict[str, Any] = {"environment": cls.current().value}
        summary.update((key, os.getenv(var, default)) for key, var, default in SUMMARY_VARS)
        summary["log_format"] = os.getenv("LOG_FORMAT") or cls.default_log_format()
        for var in SECRET_VARS:
            value = os.getenv(var)
            summary[var.lower()] = mask_secret(value) if value and sanitize else value
        return summary


def validate_on_startup() -> None:
    """
    Log the environment and its configuration, then check required variables.

    Missing variables only warn in development and are not checked at all
    under test; anywhere else they raise ``EnvironmentError``.
    """
    env = Environment.current()
    logger.info(f"Starting in {env.value} environment")
    if env is EnvironmentType.TEST:
        return

    result = Environment.validate(env)
    for warning in result.warnings:
        logger.warning(warning)
    logger.info(f"Configuration: {Environment.get_config_summary()}")

    if env is EnvironmentType.DEVELOPMENT:
        if result.missing_vars:
            logger.warning(f"Missing recommended vars: {result.missing_vars}")
        return
    result.raise_if_invalid()
