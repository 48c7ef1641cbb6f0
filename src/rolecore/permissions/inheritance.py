"""Role inheritance resolution.

Provides:
- ``index_roles()``: name → Role lookup for a role snapshot.
- ``resolve_inherited()``: every permission a role acquires from its
  ancestors, each attributed to exactly one ancestor.
- ``validate_inheritance()``: checks a proposed parent list before it is saved.

Inheritance is a general directed graph over role names: a role may list
several parents, parents may be missing, and edited data may contain
cycles. Cycles and missing roles are logged and skipped, never raised.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from .models import Permission, ResolvedPermission, Role

logger = logging.getLogger(__name__)

RoleSet = Union[Mapping[str, Role], Iterable[Role]]

# More direct parents than this is allowed but reported.
MAX_PARENTS = 3


def index_roles(roles: RoleSet) -> dict[str, Role]:
    """Build a name → Role mapping. The first definition of a name wins."""
    if isinstance(roles, Mapping):
        return dict(roles)

    index: dict[str, Role] = {}
    for role in roles:
        if role.name in index:
            logger.warning("Duplicate role definition for '%s' ignored", role.name)
            continue
        index[role.name] = role
    return index


def _attribute(
    acc: dict[tuple[str, str], ResolvedPermission],
    permissions: Iterable[Permission],
    source: str,
) -> None:
    for perm in permissions:
        if perm.key not in acc:
            acc[perm.key] = ResolvedPermission.via(perm, source)


# Linked (name, previous) chain of the names on one walk path.
Trail = Optional[tuple[str, "Trail"]]


def _on_trail(name: str, trail: Trail) -> bool:
    while trail is not None:
        if trail[0] == name:
            return True
        trail = trail[1]
    return False


def resolve_inherited(
    role_name: str,
    all_roles: RoleSet,
    visited: Optional[set[str]] = None,
) -> list[ResolvedPermission]:
    """Resolve all permissions ``role_name`` inherits from its ancestors.

    Ancestors are expanded level by level: every parent is attributed
    before any grandparent, every grandparent before any
    great-grandparent, and so on. A grant held by a closer ancestor is
    therefore never shadowed by a farther one, whichever branch the
    farther one sits in. Within one level the first-declared parent wins.

    Each role is expanded at most once. A parent met again is checked
    against the path that led to it: on the path it closes a cycle
    (logged; its direct grants still count), otherwise it is the far
    side of a diamond and adds nothing new.

    The walk uses an explicit frontier, so chain depth is not limited by
    the interpreter's recursion limit.

    Args:
        role_name: Role whose ancestry is expanded.
        all_roles: Every role in the snapshot (sequence or name-keyed mapping).
        visited: Names treated as already on the path. Not modified.

    Returns:
        Inherited permissions, each with ``inherited=True`` and
        ``inherited_from`` set to the ancestor that directly holds it.

    Example::

        >>> roles = [
        ...     Role(name="admin", inheritsFrom=["moderator"]),
        ...     Role(name="moderator", permissions=[{"resource": "products", "action": "create"}]),
        ... ]
        >>> [(p.resource, p.action, p.inherited_from) for p in resolve_inherited("admin", roles)]
        [('products', 'create', 'moderator')]
    """
    roles = all_roles if isinstance(all_roles, dict) else index_roles(all_roles)
    outer = frozenset(visited or ())

    if role_name in outer:
        logger.warning("Circular inheritance detected for role '%s'; skipping cycle edge", role_name)
        return []

    role = roles.get(role_name)
    if role is None:
        logger.warning("Role '%s' not found; no permissions inherited through it", role_name)
        return []

    acc: dict[tuple[str, str], ResolvedPermission] = {}
    expanded = set(outer) | {role_name}
    frontier: list[tuple[Role, Trail]] = [(role, (role_name, None))]

    while frontier:
        next_level: list[tuple[Role, Trail]] = []
        for current, trail in frontier:
            for parent_name in current.inherits_from:
                parent = roles.get(parent_name)
                if parent is None:
                    logger.warning("Parent role '%s' of '%s' not found; skipped", parent_name, current.name)
                    continue
                _attribute(acc, parent.permissions, parent_name)
                if parent_name not in expanded:
                    expanded.add(parent_name)
                    next_level.append((parent, (parent_name, trail)))
                elif parent_name in outer or _on_trail(parent_name, trail):
                    logger.warning(
                        "Circular inheritance detected for role '%s'; skipping cycle edge", parent_name
                    )
        frontier = next_level

    return list(acc.values())


class InheritanceCheck(BaseModel):
    """Outcome of :func:`validate_inheritance`."""

    model_config = ConfigDict(frozen=True)

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _reaches(start: str, target: str, roles: Mapping[str, Role]) -> bool:
    seen = {start}
    stack = [start]
    while stack:
        name = stack.pop()
        if name == target:
            return True
        role = roles.get(name)
        if role is None:
            continue
        for parent in role.inherits_from:
            if parent not in seen:
                seen.add(parent)
                stack.append(parent)
    return False


def validate_inheritance(role_name: str, parents: Sequence[str], all_roles: RoleSet) -> InheritanceCheck:
    """Check a proposed ``inherits_from`` list for ``role_name``.

    Errors (the list should not be saved):
    - the role names itself as a parent;
    - a parent does not exist;
    - a parent already inherits, directly or transitively, from the role.

    Warnings (allowed, but worth showing):
    - a parent is listed more than once;
    - more than ``MAX_PARENTS`` distinct parents.

    Resolution tolerates all of these; this check is for editors that
    want to stop bad data before it reaches storage.
    """
    roles = index_roles(all_roles)
    roles.pop(role_name, None)
    errors: list[str] = []
    warnings: list[str] = []

    unique = list(dict.fromkeys(parents))
    if len(unique) != len(parents):
        warnings.append("Some parent roles are listed more than once")

    for parent in unique:
        if parent == role_name:
            errors.append("A role cannot inherit from itself")
        elif parent not in roles:
            errors.append(f"Role '{parent}' does not exist")
        elif _reaches(parent, role_name, roles):
            errors.append(f"Circular dependency detected with role '{parent}'")

    if len(unique) > MAX_PARENTS:
        warnings.append(f"Inheriting from more than {MAX_PARENTS} roles makes permissions hard to follow")

    return InheritanceCheck(errors=tuple(errors), warnings=tuple(warnings))


__all__ = [
    "InheritanceCheck",
    "MAX_PARENTS",
    "RoleSet",
    "index_roles",
    "resolve_inherited",
    "validate_inheritance",
]
