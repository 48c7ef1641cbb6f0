"""Logging utilities for rolecore.

This module provides:
- Logging configuration from RoleCoreConfig
- ``safe_log_value``: bounded, credential-free rendering of role payloads
- A logger adapter that tags records with role and edit session ids
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from pydantic import BaseModel

from .config import LogLevel, RoleCoreConfig


# Oracle read URLs and the headers sent to them are the only place
# credentials can reach a log line.
_CREDENTIAL_PATTERNS = [
    re.compile(r"(?<=://)[^/\s:@]+:[^/\s@]+(?=@)"),
    re.compile(r"(?i)(?<=bearer )[a-z0-9+/=._-]+"),
    re.compile(r"(?i)(?<=basic )[a-z0-9+/=._-]+"),
    re.compile(r"(?i)(?<=x-api-key: )\S+"),
]

_STANDARD_RECORD_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "role_name", "session_id",
}


def _redact(text: str) -> str:
    for pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub("[REDACTED]", text)
    return text


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Render a role record, relation tuple or other payload for a log line.

    Models and containers are serialized as compact JSON, whitespace is
    collapsed to single spaces and the result is cut to ``limit``
    characters. With ``redact``, URL credentials and auth header values
    are masked.

    Example::

        >>> safe_log_value({"name": "admin", "inheritsFrom": ["moderator"]})
        '{"name": "admin", "inheritsFrom": ["moderator"]}'
    """
    if value is None:
        return ""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (dict, list, tuple)):
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            text = str(value)
    else:
        text = str(value)

    text = " ".join(text.split())
    if redact:
        text = _redact(text)
    if len(text) > limit:
        text = text[: limit - 1] + "…"
    return text


class RoleCoreFormatter(logging.Formatter):
    """Formatter emitting JSON or plain text with role/session context.

    Extra fields attached to a record are rendered through
    :func:`safe_log_value`, so role payloads logged on validation failure
    never blow up a log line.
    """

    def __init__(
        self,
        json_format: bool = True,
        redact: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:
        role_name = getattr(record, "role_name", None)
        session_id = getattr(record, "session_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if role_name:
            log_data["role_name"] = role_name
        if session_id:
            log_data["session_id"] = session_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                log_data[key] = safe_log_value(value, redact=self.redact)

        if self.redact:
            log_data["message"] = _redact(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if role_name:
            parts.append(f"role={role_name}")
        if session_id:
            parts.append(f"session={session_id}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class RoleLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds ``role_name`` and ``session_id`` to records.

    Usage:
        logger = get_role_logger(__name__, session_id=session.session_id)
        logger.info("Toggled cell", role_name="admin")
    """

    def __init__(
        self,
        logger: logging.Logger,
        role_name: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.role_name = role_name
        self.session_id = session_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        role_name = kwargs.pop("role_name", self.role_name)
        session_id = kwargs.pop("session_id", self.session_id)

        extra = kwargs.get("extra", {})
        if role_name:
            extra["role_name"] = role_name
        if session_id:
            extra["session_id"] = session_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[RoleCoreConfig] = None,
    json_format: Optional[bool] = None,
    redact: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output. ``SERVICE_NAME``, when configured, names a logger
    that is set to the same level.

    Args:
        config: RoleCoreConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact: Mask oracle credentials in log output (default: True)
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level = logging.getLevelName(LogLevel(config.log_level).value)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        RoleCoreFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact=redact,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(level)


def get_role_logger(
    name: str,
    role_name: Optional[str] = None,
    session_id: Optional[str] = None,
) -> RoleLoggerAdapter:
    """Get a logger adapter carrying role/session context.

    Example:
        logger = get_role_logger(__name__, session_id="3f2a")
        logger.warning("Toggle rejected", role_name="admin")
    """
    logger = logging.getLogger(name)
    return RoleLoggerAdapter(logger, role_name=role_name, session_id=session_id)


__all__ = [
    "safe_log_value",
    "RoleCoreFormatter",
    "RoleLoggerAdapter",
    "setup_logging",
    "get_role_logger",
]
