"""Configuration contract for rolecore.

This module provides Pydantic-validated configuration for the resolution
engine and the collaborators that feed it (the Keto-style oracle adapter
and the logging setup).

Environment variables are read in exactly one place,
:func:`load_config_from_env`. Everything else receives a
:class:`RoleCoreConfig` instance.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RoleCoreConfig(BaseModel):
    """Settings shared by every rolecore consumer.

    ``allow_default_catalog`` controls what happens when the metadata
    source returns no resources: fall back to the built-in
    users/products/categories/roles catalog (default), or refuse with
    :class:`~rolecore.exceptions.CatalogError`.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the package logger name override",
    )

    # Authorization oracle
    keto_namespace: str = Field(
        default="simple-rbac",
        description="Relation tuple namespace holding role permissions",
    )
    keto_read_url: Optional[str] = Field(
        default=None,
        description="Read API base URL of the authorization service (e.g., http://localhost:4466)",
    )

    # Catalog
    allow_default_catalog: bool = Field(
        default=True,
        description="Fall back to the built-in resource catalog when metadata is empty",
    )

    @field_validator("keto_read_url")
    @classmethod
    def validate_keto_read_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate oracle URL format."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("Keto read URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("keto_namespace")
    @classmethod
    def validate_keto_namespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Keto namespace must not be empty")
        return v.strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def _env_flag(raw: str) -> bool:
    return raw.strip().lower() in ("true", "1", "yes", "on")


def load_config_from_env() -> RoleCoreConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for logger identification
    - KETO_NAMESPACE: Relation tuple namespace (default: simple-rbac)
    - KETO_READ_URL: Read API base URL of the authorization service
    - ALLOW_DEFAULT_CATALOG: Fall back to the built-in catalog (default: true)

    Returns:
        RoleCoreConfig instance with values from environment or defaults.
    """
    import os

    return RoleCoreConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=_env_flag(os.getenv("LOG_JSON", "false")),
        service_name=os.getenv("SERVICE_NAME"),
        keto_namespace=os.getenv("KETO_NAMESPACE", "simple-rbac"),
        keto_read_url=os.getenv("KETO_READ_URL"),
        allow_default_catalog=_env_flag(os.getenv("ALLOW_DEFAULT_CATALOG", "true")),
    )


__all__ = [
    "LogLevel",
    "RoleCoreConfig",
    "load_config_from_env",
]
