"""Unified exception hierarchy for rolecore.

All errors raised by the engine inherit from RoleCoreError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception classes

Recoverable conditions (inheritance cycles, missing parent roles, an empty
catalog) are never raised; they are logged where they are detected.
Only caller contract violations surface as exceptions.

Usage:
    from rolecore.exceptions import InvalidToggleTarget, NotEditable

    try:
        session.toggle("admin", "products", "delete", True)
    except NotEditable:
        ...
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "RoleCoreError",
    "ConfigurationError",
    "CatalogError",
    "RoleDataError",
    "OracleError",
    "EditSessionError",
    "NotEditable",
    "InvalidToggleTarget",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class RoleCoreError(Exception):
    """Base exception for rolecore.

    Attributes:
        code: Stable error code string (e.g. "INVALID_TOGGLE_TARGET").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(RoleCoreError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid configuration"


class CatalogError(RoleCoreError):
    """Resource catalog could not be used."""

    code: str = "CATALOG_ERROR"
    message: str = "Resource catalog is unusable"


class RoleDataError(RoleCoreError):
    """A role record is malformed."""

    code: str = "ROLE_DATA_ERROR"
    message: str = "Malformed role data"


class OracleError(RoleCoreError):
    """The live authorization oracle could not answer."""

    code: str = "ORACLE_ERROR"
    message: str = "Authorization oracle query failed"


class EditSessionError(RoleCoreError):
    """Base for edit session contract violations."""

    code: str = "EDIT_SESSION_ERROR"
    message: str = "Edit session operation rejected"


class NotEditable(EditSessionError):
    """Toggle attempted on a session that is not in editable mode."""

    code: str = "NOT_EDITABLE"
    message: str = "Edit session is not editable"


class InvalidToggleTarget(EditSessionError):
    """Toggle attempted on a cell that is not part of the matrix."""

    code: str = "INVALID_TOGGLE_TARGET"
    message: str = "Toggle target is not present in the permission matrix"


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[RoleCoreError])


class ErrorRegistry:
    """Registry for mapping stable error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[RoleCoreError]] = {}

    def register(self, code: str, error_cls: type[RoleCoreError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[RoleCoreError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[RoleCoreError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("TENANT_MISMATCH")
        class TenantMismatch(RoleCoreError):
            code = "TENANT_MISMATCH"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", RoleCoreError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("CATALOG_ERROR", CatalogError)
error_registry.register("ROLE_DATA_ERROR", RoleDataError)
error_registry.register("ORACLE_ERROR", OracleError)
error_registry.register("EDIT_SESSION_ERROR", EditSessionError)
error_registry.register("NOT_EDITABLE", NotEditable)
error_registry.register("INVALID_TOGGLE_TARGET", InvalidToggleTarget)
