"""Role and permission models.

Provides:
- ``Permission``: a (resource, action) pair.
- ``Role``: direct grants plus an ordered list of parent role names.
- ``ResolvedPermission``: one resolved cell with its provenance.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Permission(BaseModel):
    """A single (resource, action) grant.

    Equality and hashing are structural, so permissions can be placed in
    sets and used as dict keys.
    """

    model_config = ConfigDict(frozen=True)

    resource: str = Field(min_length=1)
    action: str = Field(min_length=1)

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource, self.action)

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


class Role(BaseModel):
    """A named role with direct grants and parent roles.

    ``inherits_from`` may be empty and may name roles that do not exist;
    both are tolerated by the resolver. The camelCase ``inheritsFrom`` key
    used by the role storage API is accepted as an alias.

    Example::

        Role(
            name="moderator",
            permissions=[{"resource": "products", "action": "create"}],
            inheritsFrom=["customer"],
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = ""
    permissions: tuple[Permission, ...] = ()
    inherits_from: tuple[str, ...] = Field(default=(), alias="inheritsFrom")

    @field_validator("permissions", mode="before")
    @classmethod
    def reject_scalar_permissions(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, (str, bytes, dict)):
            raise ValueError("permissions must be a collection of {resource, action} entries")
        return v

    @field_validator("permissions")
    @classmethod
    def keep_first_occurrence(cls, v: tuple[Permission, ...]) -> tuple[Permission, ...]:
        return tuple(dict.fromkeys(v))

    @field_validator("inherits_from", mode="before")
    @classmethod
    def coerce_parents(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            raise ValueError("inheritsFrom must be a list of role names")
        return v

    def grants(self, resource: str, action: str) -> bool:
        """Whether the role directly grants ``(resource, action)``."""
        return any(p.resource == resource and p.action == action for p in self.permissions)


class ResolvedPermission(BaseModel):
    """One resolved (resource, action) cell with provenance.

    Invariants:
    - a cell that is not granted is never inherited and names no source;
    - an inherited cell always names the ancestor it came from;
    - an explicit (non-inherited) cell names no source.
    """

    model_config = ConfigDict(frozen=True)

    resource: str
    action: str
    granted: bool = False
    inherited: bool = False
    inherited_from: Optional[str] = None

    @model_validator(mode="after")
    def check_provenance(self) -> "ResolvedPermission":
        if not self.granted and (self.inherited or self.inherited_from is not None):
            raise ValueError("a permission that is not granted cannot be inherited")
        if self.inherited and not self.inherited_from:
            raise ValueError("an inherited permission must name the role it is inherited from")
        if not self.inherited and self.inherited_from is not None:
            raise ValueError("only inherited permissions carry inherited_from")
        return self

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource, self.action)

    @classmethod
    def direct(cls, permission: Permission) -> "ResolvedPermission":
        return cls(resource=permission.resource, action=permission.action, granted=True)

    @classmethod
    def via(cls, permission: Permission, source: str) -> "ResolvedPermission":
        return cls(
            resource=permission.resource,
            action=permission.action,
            granted=True,
            inherited=True,
            inherited_from=source,
        )

    @classmethod
    def denied(cls, resource: str, action: str) -> "ResolvedPermission":
        return cls(resource=resource, action=action)

    @classmethod
    def explicit(cls, resource: str, action: str, granted: bool) -> "ResolvedPermission":
        return cls(resource=resource, action=action, granted=granted)


__all__ = [
    "Permission",
    "ResolvedPermission",
    "Role",
]
