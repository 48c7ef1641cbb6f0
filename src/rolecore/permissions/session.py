"""Interactive editing on top of a resolved permission matrix.

An :class:`EditSession` owns a mutable copy of a matrix built from one
snapshot (roles, catalog, optional live oracle data) copied at construction,
so later changes to the caller's records do not leak in. Toggling a
cell turns it into an explicit grant or denial; :meth:`EditSession.discard`
rebuilds the matrix from the snapshot.

Persisting edits is left to the caller: :meth:`EditSession.changes` lists
the cells that differ from the baseline. A session is not thread-safe;
use one session per editing surface.
"""

from __future__ import annotations

import copy
import secrets
from typing import Iterable, Optional

from ..exceptions import InvalidToggleTarget, NotEditable
from ..logging import get_role_logger
from .catalog import Catalog, effective_catalog
from .matrix import LiveTruth, Matrix, RoleInput, build_matrix
from .models import ResolvedPermission


class EditSession:
    """Editable view of a permission matrix.

    Args:
        roles: Role snapshot.
        catalog: Resource catalog (empty falls back to the default catalog).
        live_truth: Optional ``role name → permissions`` from the oracle.
        editable: Whether :meth:`toggle` is allowed.
        allow_default_catalog: Raise :class:`~rolecore.exceptions.CatalogError`
            instead of falling back when the catalog is empty.

    Example::

        session = EditSession(roles, catalog)
        session.toggle("moderator", "products", "delete", True)
        session.dirty          # True
        session.changes()      # [("moderator", ResolvedPermission(...))]
        session.discard()
        session.dirty          # False
    """

    def __init__(
        self,
        roles: Iterable[RoleInput],
        catalog: Optional[Catalog],
        live_truth: Optional[LiveTruth] = None,
        *,
        editable: bool = True,
        allow_default_catalog: bool = True,
    ) -> None:
        self.session_id = secrets.token_hex(4)
        self._roles = copy.deepcopy(tuple(roles))
        self._catalog = effective_catalog(catalog, allow_default=allow_default_catalog)
        self._live_truth = {name: copy.deepcopy(tuple(perms)) for name, perms in (live_truth or {}).items()}
        self._editable = editable
        self._logger = get_role_logger(__name__, session_id=self.session_id)
        self._baseline = self._build()
        self._matrix = self._copy(self._baseline)
        self._dirty = False

    def _build(self) -> Matrix:
        return build_matrix(self._roles, self._catalog, self._live_truth or None)

    @staticmethod
    def _copy(matrix: Matrix) -> Matrix:
        return {name: list(row) for name, row in matrix.items()}

    @property
    def matrix(self) -> Matrix:
        """Current (possibly edited) matrix. Mutating the result has no effect."""
        return self._copy(self._matrix)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def editable(self) -> bool:
        return self._editable

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def using_default_catalog(self) -> bool:
        """True when the session runs on the built-in fallback catalog."""
        return self._catalog.fallback

    def set_editable(self, editable: bool) -> None:
        self._editable = editable

    def _locate(self, role_name: str, resource: str, action: str) -> int:
        row = self._matrix.get(role_name)
        if row is not None:
            for i, cell in enumerate(row):
                if cell.resource == resource and cell.action == action:
                    return i
        raise InvalidToggleTarget(
            f"No cell ({resource}, {action}) for role '{role_name}'",
            role_name=role_name,
            resource=resource,
            action=action,
        )

    def cell(self, role_name: str, resource: str, action: str) -> ResolvedPermission:
        """Return the current cell.

        Raises:
            InvalidToggleTarget: The role or pair is not in the matrix.
        """
        return self._matrix[role_name][self._locate(role_name, resource, action)]

    def toggle(self, role_name: str, resource: str, action: str, granted: bool) -> ResolvedPermission:
        """Set a cell to an explicit grant or denial.

        The cell always becomes non-inherited, even when it was inherited
        and ``granted`` does not change, since a user edit is an explicit
        override.

        Raises:
            NotEditable: The session is read-only.
            InvalidToggleTarget: The role or pair is not in the matrix.
        """
        if not self._editable:
            self._logger.warning("Toggle rejected on read-only session", role_name=role_name)
            raise NotEditable(role_name=role_name, resource=resource, action=action)

        index = self._locate(role_name, resource, action)
        updated = ResolvedPermission.explicit(resource, action, granted)
        self._matrix[role_name][index] = updated
        self._dirty = True
        self._logger.debug(
            "Toggled %s:%s to %s",
            resource,
            action,
            "granted" if granted else "denied",
            role_name=role_name,
        )
        return updated

    def discard(self) -> Matrix:
        """Drop all edits and recompute from the original snapshot."""
        self._baseline = self._build()
        self._matrix = self._copy(self._baseline)
        self._dirty = False
        return self.matrix

    def changes(self) -> list[tuple[str, ResolvedPermission]]:
        """Cells that differ from the baseline, as ``(role name, cell)``."""
        diff: list[tuple[str, ResolvedPermission]] = []
        for name, row in self._matrix.items():
            for before, after in zip(self._baseline[name], row):
                if before != after:
                    diff.append((name, after))
        return diff


__all__ = ["EditSession"]
