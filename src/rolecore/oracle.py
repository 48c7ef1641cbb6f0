"""Adapter for a Zanzibar-style authorization oracle (e.g. Ory Keto).

Role grants live in the oracle as relation tuples::

    simple-rbac:products#create@(simple-rbac:role:moderator#member)

i.e. ``namespace:object#relation@subject_set``, where the object is the
resource, the relation is the action, and the subject set is the role's
member set. This module turns such tuples into :class:`Permission` values
and gathers them per role *before* resolution, so the resolution engine
itself never performs I/O.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import OracleError
from .permissions.models import Permission

logger = logging.getLogger(__name__)

MEMBER_RELATION = "member"
ROLE_PREFIX = "role:"


class SubjectSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: str
    object: str
    relation: str


class RelationTuple(BaseModel):
    """One relation tuple as returned by the oracle's read API."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    object: str
    relation: str
    subject_id: Optional[str] = None
    subject_set: Optional[SubjectSet] = None


def role_subject(role_name: str) -> str:
    """Object id of a role's subject set, e.g. ``role:admin``."""
    return f"{ROLE_PREFIX}{role_name}"


def _is_role_member_set(subject: Optional[SubjectSet], role_name: str, namespace: Optional[str]) -> bool:
    if subject is None:
        return False
    if subject.object != role_subject(role_name) or subject.relation != MEMBER_RELATION:
        return False
    return namespace is None or subject.namespace == namespace


def permissions_from_tuples(
    tuples: Iterable[RelationTuple | Mapping[str, Any]],
    role_name: str,
    namespace: Optional[str] = None,
) -> list[Permission]:
    """Extract the permissions granted to ``role_name`` from relation tuples.

    Only tuples whose subject is the role's ``member`` subject set count;
    tuples granting individual subjects are ignored. With ``namespace``
    set, tuples from other namespaces are ignored too. Malformed tuples
    are logged and skipped.

    Returns:
        De-duplicated permissions in tuple order.
    """
    found: dict[tuple[str, str], Permission] = {}
    for raw in tuples:
        try:
            rt = raw if isinstance(raw, RelationTuple) else RelationTuple.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping malformed relation tuple: %s", e)
            continue
        if namespace is not None and rt.namespace != namespace:
            continue
        if not _is_role_member_set(rt.subject_set, role_name, namespace):
            continue
        perm = Permission(resource=rt.object, action=rt.relation)
        found.setdefault(perm.key, perm)
    return list(found.values())


class PermissionOracle(ABC):
    """Read-only source of authoritative role permissions."""

    @abstractmethod
    def list_permissions(self, role_name: str) -> list[Permission]:
        """Permissions the oracle confirms for ``role_name``.

        Raises:
            OracleError: The oracle could not be queried.
        """
        raise NotImplementedError


class StaticOracle(PermissionOracle):
    """Oracle backed by an in-memory list of relation tuples.

    Useful for tests and for replaying a tuple dump exported from the
    authorization service.
    """

    def __init__(self, tuples: Iterable[RelationTuple | Mapping[str, Any]] = (), namespace: Optional[str] = None):
        self._tuples = list(tuples)
        self._namespace = namespace

    def list_permissions(self, role_name: str) -> list[Permission]:
        return permissions_from_tuples(self._tuples, role_name, self._namespace)


def collect_live_truth(oracle: PermissionOracle, role_names: Iterable[str]) -> dict[str, list[Permission]]:
    """Query the oracle for each role, ahead of resolution.

    A role whose query fails is logged and left out of the result; its
    permissions then resolve from local data alone.
    """
    live: dict[str, list[Permission]] = {}
    for name in dict.fromkeys(role_names):
        try:
            live[name] = oracle.list_permissions(name)
        except OracleError as e:
            logger.warning("Live permissions unavailable for role '%s': %s", name, e.message)
    return live


__all__ = [
    "MEMBER_RELATION",
    "PermissionOracle",
    "RelationTuple",
    "StaticOracle",
    "SubjectSet",
    "collect_live_truth",
    "permissions_from_tuples",
    "role_subject",
]
