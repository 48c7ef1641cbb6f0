"""Resource catalog: the universe of (resource, action) pairs.

The catalog comes from the metadata service
(``{"resources": [{"resource": ..., "permissions": [...]}, ...]}``) and is
validated once here. When the metadata is empty the built-in
users/products/categories/roles × view/create/update/delete catalog is used
instead, flagged with ``fallback=True`` so consumers can tell.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_RESOURCES: tuple[str, ...] = ("users", "products", "categories", "roles")
DEFAULT_ACTIONS: tuple[str, ...] = ("view", "create", "update", "delete")


class ResourceEntry(BaseModel):
    """One resource and the actions defined on it, in display order."""

    model_config = ConfigDict(frozen=True)

    resource: str = Field(min_length=1)
    permissions: tuple[str, ...] = ()

    @field_validator("permissions", mode="before")
    @classmethod
    def reject_bare_string(cls, v: Any) -> Any:
        if isinstance(v, str):
            raise ValueError("permissions must be a list of action names")
        return () if v is None else v

    @field_validator("permissions")
    @classmethod
    def drop_duplicate_actions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(a for a in v if a))


class Catalog(BaseModel):
    """Ordered resource catalog.

    Resources listed more than once are folded into their first entry,
    keeping first-seen action order.
    """

    model_config = ConfigDict(frozen=True)

    resources: tuple[ResourceEntry, ...] = ()
    fallback: bool = False

    @field_validator("resources")
    @classmethod
    def fold_repeated_resources(cls, v: tuple[ResourceEntry, ...]) -> tuple[ResourceEntry, ...]:
        merged: dict[str, list[str]] = {}
        for entry in v:
            actions = merged.setdefault(entry.resource, [])
            actions.extend(a for a in entry.permissions if a not in actions)
        return tuple(ResourceEntry(resource=r, permissions=tuple(a)) for r, a in merged.items())

    @classmethod
    def default(cls) -> "Catalog":
        return cls(
            resources=tuple(ResourceEntry(resource=r, permissions=DEFAULT_ACTIONS) for r in DEFAULT_RESOURCES),
            fallback=True,
        )

    @classmethod
    def from_metadata(cls, payload: Any) -> "Catalog":
        """Validate a metadata service payload into a catalog.

        Accepts ``{"resources": [...]}``, a bare list of entries, or ``None``
        (an empty catalog).

        Raises:
            CatalogError: The payload does not have the expected shape.
        """
        if payload is None:
            return cls()
        if isinstance(payload, dict):
            payload = payload.get("resources") or ()
        if isinstance(payload, (str, bytes)):
            raise CatalogError("Catalog payload must be a list of resource entries")
        try:
            return cls(resources=tuple(ResourceEntry.model_validate(e) for e in payload))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid catalog payload: {e}", payload=payload) from e

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Yield ``(resource, action)`` in catalog order."""
        for entry in self.resources:
            for action in entry.permissions:
                yield entry.resource, action

    def total_pairs(self) -> int:
        return sum(len(entry.permissions) for entry in self.resources)

    def __contains__(self, pair: object) -> bool:
        return pair in set(self.pairs())


def effective_catalog(catalog: Optional[Catalog], *, allow_default: bool = True) -> Catalog:
    """Return ``catalog``, or the default catalog when it has no pairs.

    Falling back is a recoverable condition: it is logged, and the returned
    catalog carries ``fallback=True``.

    Raises:
        CatalogError: The catalog is empty and ``allow_default`` is False.
    """
    if catalog is not None and catalog.total_pairs() > 0:
        return catalog
    if not allow_default:
        raise CatalogError("Resource catalog is empty and the default catalog is disabled")
    logger.warning("Resource catalog is empty or unavailable; using default resources and actions")
    return Catalog.default()


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_RESOURCES",
    "Catalog",
    "ResourceEntry",
    "effective_catalog",
]
