from .config import LogLevel, RoleCoreConfig, load_config_from_env
from .exceptions import (
    CatalogError,
    ConfigurationError,
    EditSessionError,
    InvalidToggleTarget,
    NotEditable,
    OracleError,
    RoleCoreError,
    RoleDataError,
)
from .logging import (
    RoleCoreFormatter,
    RoleLoggerAdapter,
    get_role_logger,
    safe_log_value,
    setup_logging,
)
from .oracle import (
    PermissionOracle,
    RelationTuple,
    StaticOracle,
    collect_live_truth,
    permissions_from_tuples,
)
from .permissions import (
    Catalog,
    EditSession,
    HierarchyNode,
    InheritanceCheck,
    Permission,
    ResolvedPermission,
    ResourceEntry,
    Role,
    build_hierarchy,
    build_matrix,
    effective_catalog,
    merge_role_permissions,
    resolve_inherited,
    validate_inheritance,
)

__all__ = [
    'LogLevel',
    'RoleCoreConfig',
    'load_config_from_env',
    'CatalogError',
    'ConfigurationError',
    'EditSessionError',
    'InvalidToggleTarget',
    'NotEditable',
    'OracleError',
    'RoleCoreError',
    'RoleDataError',
    'RoleCoreFormatter',
    'RoleLoggerAdapter',
    'get_role_logger',
    'safe_log_value',
    'setup_logging',
    'PermissionOracle',
    'RelationTuple',
    'StaticOracle',
    'collect_live_truth',
    'permissions_from_tuples',
    'Catalog',
    'EditSession',
    'HierarchyNode',
    'InheritanceCheck',
    'Permission',
    'ResolvedPermission',
    'ResourceEntry',
    'Role',
    'build_hierarchy',
    'build_matrix',
    'effective_catalog',
    'merge_role_permissions',
    'resolve_inherited',
    'validate_inheritance',
]
