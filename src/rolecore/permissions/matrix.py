"""Dense role × (resource, action) permission matrix.

Every role gets exactly one cell per catalog pair, in catalog order,
including explicit "not granted" cells. A role whose record cannot be
validated still gets a full row of denied cells, so one bad record never
removes a row or aborts the other roles.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from ..exceptions import RoleDataError
from ..logging import safe_log_value
from .catalog import Catalog, effective_catalog
from .inheritance import RoleSet, index_roles
from .merge import merge_role_permissions
from .models import Permission, ResolvedPermission, Role

logger = logging.getLogger(__name__)

RoleInput = Union[Role, Mapping[str, Any]]
LiveTruth = Mapping[str, Iterable[Union[Permission, Mapping[str, Any]]]]
Matrix = dict[str, list[ResolvedPermission]]


def denied_row(catalog: Catalog) -> list[ResolvedPermission]:
    """A row with every catalog pair denied."""
    return [ResolvedPermission.denied(resource, action) for resource, action in catalog.pairs()]


def _live_permissions(role_name: str, live_truth: Optional[LiveTruth]) -> Optional[list[Permission]]:
    if not live_truth or role_name not in live_truth:
        return None
    try:
        return [Permission.model_validate(p) for p in live_truth[role_name]]
    except (TypeError, ValidationError) as e:
        logger.warning("Ignoring malformed live permissions for role '%s': %s", role_name, e)
        return None


def build_role_row(
    role: Role,
    all_roles: RoleSet,
    catalog: Catalog,
    live_truth: Optional[LiveTruth] = None,
) -> list[ResolvedPermission]:
    """Build one dense, catalog-ordered row for ``role``.

    ``catalog`` is used as given; callers wanting the empty-catalog
    fallback pass it through :func:`effective_catalog` first.
    """
    merged = {
        perm.key: perm
        for perm in merge_role_permissions(role, all_roles, _live_permissions(role.name, live_truth))
    }
    return [
        merged.get((resource, action)) or ResolvedPermission.denied(resource, action)
        for resource, action in catalog.pairs()
    ]


def coerce_role(entry: RoleInput) -> Role:
    """Validate a raw role record.

    Raises:
        RoleDataError: The record is not a valid role.
    """
    if isinstance(entry, Role):
        return entry
    try:
        return Role.model_validate(entry)
    except (TypeError, ValidationError) as e:
        name = entry.get("name") if isinstance(entry, Mapping) else None
        raise RoleDataError(
            f"Malformed role record {safe_log_value(entry, limit=120)}: {e}",
            role_name=name if isinstance(name, str) and name else None,
        ) from e


def _validate_roles(roles: Iterable[RoleInput]) -> list[tuple[str, Optional[Role]]]:
    entries: list[tuple[str, Optional[Role]]] = []
    for entry in roles:
        try:
            role = coerce_role(entry)
        except RoleDataError as e:
            logger.error("%s", e.message)
            if e.details.get("role_name"):
                entries.append((e.details["role_name"], None))
            continue
        entries.append((role.name, role))
    return entries


def build_matrix(
    roles: Iterable[RoleInput],
    catalog: Optional[Catalog],
    live_truth: Optional[LiveTruth] = None,
    *,
    allow_default_catalog: bool = True,
) -> Matrix:
    """Resolve every role over every catalog pair.

    Args:
        roles: Role snapshot, as ``Role`` instances or raw role records.
        catalog: Resource catalog. Empty or ``None`` falls back to the
            default catalog (logged; the fallback catalog has ``fallback=True``).
        live_truth: Optional ``role name → permissions`` confirmed by the
            authorization oracle.
        allow_default_catalog: Raise instead of falling back on an empty catalog.

    Returns:
        ``role name → list of ResolvedPermission``, one entry per catalog
        pair, in catalog order. Rows follow the order of ``roles``.

    Raises:
        CatalogError: Empty catalog with ``allow_default_catalog=False``.

    Example::

        matrix = build_matrix(roles, Catalog.from_metadata(metadata))
        for cell in matrix["admin"]:
            print(cell.resource, cell.action, cell.granted, cell.inherited_from)
    """
    catalog = effective_catalog(catalog, allow_default=allow_default_catalog)
    entries = _validate_roles(roles)
    index = index_roles(role for _, role in entries if role is not None)

    matrix: Matrix = {}
    for name, role in entries:
        if name in matrix:
            continue
        if role is None:
            matrix[name] = denied_row(catalog)
        else:
            matrix[name] = build_role_row(role, index, catalog, live_truth)
    return matrix


__all__ = [
    "LiveTruth",
    "Matrix",
    "RoleInput",
    "build_matrix",
    "build_role_row",
    "coerce_role",
    "denied_row",
]
