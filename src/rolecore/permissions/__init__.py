"""Role permission resolution.

Defines:
- Permission / Role / ResolvedPermission: the data model
- Catalog: the (resource, action) universe, with a built-in fallback
- resolve_inherited(): cycle-safe walk of the role inheritance graph
- validate_inheritance(): checks a proposed parent list before saving
- merge_role_permissions(): direct + inherited + live oracle grants
- build_matrix(): dense role × (resource, action) table
- EditSession: toggle / discard editing on top of a matrix
- build_hierarchy(): role inheritance forest for display
"""

from .catalog import DEFAULT_ACTIONS, DEFAULT_RESOURCES, Catalog, ResourceEntry, effective_catalog
from .hierarchy import HierarchyNode, build_hierarchy
from .inheritance import InheritanceCheck, index_roles, resolve_inherited, validate_inheritance
from .matrix import build_matrix, build_role_row, coerce_role, denied_row
from .merge import merge_role_permissions
from .models import Permission, ResolvedPermission, Role
from .session import EditSession

__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_RESOURCES",
    "Catalog",
    "EditSession",
    "HierarchyNode",
    "InheritanceCheck",
    "Permission",
    "ResolvedPermission",
    "ResourceEntry",
    "Role",
    "build_hierarchy",
    "build_matrix",
    "build_role_row",
    "coerce_role",
    "denied_row",
    "effective_catalog",
    "index_roles",
    "merge_role_permissions",
    "resolve_inherited",
    "validate_inheritance",
]
