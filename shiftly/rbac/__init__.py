from .permissions import Permission, DEFAULT_CATALOG, SECTION_ALIASES, normalize_section
from .roles import (
    PredefinedRole,
    ROLE_PERMISSIONS,
    permissions_for,
    is_predefined_role,
    has_permission,
    role_label,
)
from .blobs import parse_permission_blob, canonicalize
from .catalog import PermissionCatalog
from .resolver import PermissionResolver, Requirement, resolve_business_id
from .decorators import require_access, require_permissions, require_roles

__all__ = [
    "Permission",
    "DEFAULT_CATALOG",
    "SECTION_ALIASES",
    "normalize_section",
    "PredefinedRole",
    "ROLE_PERMISSIONS",
    "permissions_for",
    "is_predefined_role",
    "has_permission",
    "role_label",
    "parse_permission_blob",
    "canonicalize",
    "PermissionCatalog",
    "PermissionResolver",
    "Requirement",
    "resolve_business_id",
    "require_access",
    "require_permissions",
    "require_roles",
]
