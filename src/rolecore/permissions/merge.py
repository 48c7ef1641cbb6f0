"""Merge direct, inherited and live oracle permissions for one role."""

from __future__ import annotations

from typing import Iterable, Optional

from .inheritance import RoleSet, index_roles, resolve_inherited
from .models import Permission, ResolvedPermission, Role


def merge_role_permissions(
    role: Role,
    all_roles: RoleSet,
    live_truth: Optional[Iterable[Permission]] = None,
) -> list[ResolvedPermission]:
    """Combine a role's grants into one de-duplicated, provenance-tagged list.

    Only pairs the role actually holds are returned; enumerating the full
    catalog is :func:`~rolecore.permissions.matrix.build_matrix`'s job.

    Merge rules:
    1. Direct grants are emitted first, as explicit (``inherited=False``).
    2. Inherited grants not covered by a direct grant keep their
       ``inherited_from``.
    3. Pairs confirmed by the live oracle but unknown locally are added as
       explicit grants. The oracle only adds presence: it never removes a
       local grant and never rewrites local provenance.

    Args:
        role: Role to resolve.
        all_roles: Every role in the snapshot.
        live_truth: Permissions the authorization oracle confirms for this role.

    Returns:
        Granted permissions in the order direct, inherited, oracle-only.
    """
    roles = {**index_roles(all_roles), role.name: role}
    merged: dict[tuple[str, str], ResolvedPermission] = {}

    for perm in role.permissions:
        merged.setdefault(perm.key, ResolvedPermission.direct(perm))

    for perm in resolve_inherited(role.name, roles):
        merged.setdefault(perm.key, perm)

    for perm in live_truth or ():
        merged.setdefault(perm.key, ResolvedPermission.direct(perm))

    return list(merged.values())


__all__ = ["merge_role_permissions"]
