# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Static role definitions.

Roles are a fixed lookup table from role name to permission set and scope.
The table is built once at import time and never modified.
"""

from dataclasses import dataclass
from types import MappingProxyType

from tenant_admin.models.enums import RoleName

from .permissions import AccessScope, Permission

P = Permission


@dataclass(frozen=True)
class RoleDefinition:
    """A role with its granted permissions and the scope they apply to."""

    name: RoleName
    permissions: frozenset[Permission]
    scope: AccessScope
    description: str

    def has_permission(self, permission: Permission) -> bool:
        return permission in self.permissions


SELF_SERVICE_PERMISSIONS = frozenset(
    {
        P.READ_USER,
        P.UPDATE_USER,
        P.READ_COMPANY,
        P.READ_EDITION,
        P.READ_TAG,
        P.READ_CUSTOM_FIELD,
        P.READ_COBRANDING,
    }
)

_DEFINITIONS = [
    RoleDefinition(
        name=RoleName.SUPER_ADMIN,
        permissions=frozenset(Permission),
        scope=AccessScope.GLOBAL,
        description="Full access to every system edition, company and user.",
    ),
    RoleDefinition(
        name=RoleName.EDITION_ADMIN,
        permissions=frozenset(
            {
                P.READ_USER,
                P.UPDATE_USER,
                P.CREATE_COMPANY,
                P.READ_COMPANY,
                P.UPDATE_COMPANY,
                P.DELETE_COMPANY,
                P.READ_EDITION,
                P.UPDATE_EDITION,
                P.CREATE_TAG,
                P.READ_TAG,
                P.UPDATE_TAG,
                P.DELETE_TAG,
                P.CREATE_CUSTOM_FIELD,
                P.READ_CUSTOM_FIELD,
                P.UPDATE_CUSTOM_FIELD,
                P.DELETE_CUSTOM_FIELD,
                P.CREATE_DELEGATE,
                P.READ_DELEGATE,
                P.UPDATE_DELEGATE,
                P.DELETE_DELEGATE,
                P.READ_SEAT_MANAGEMENT,
                P.UPDATE_SEAT_MANAGEMENT,
                P.READ_COBRANDING,
                P.UPDATE_COBRANDING,
                P.READ_AUDIT_LOGS,
            }
        ),
        scope=AccessScope.EDITION,
        description="Manages the companies, tags and delegates of one system edition.",
    ),
    RoleDefinition(
        name=RoleName.COMPANY_ADMIN,
        permissions=frozenset(
            {
                P.READ_USER,
                P.UPDATE_USER,
                P.READ_COMPANY,
                P.UPDATE_COMPANY,
                P.READ_EDITION,
                P.READ_TAG,
                P.READ_CUSTOM_FIELD,
                P.CREATE_DELEGATE,
                P.READ_DELEGATE,
                P.UPDATE_DELEGATE,
                P.DELETE_DELEGATE,
                P.READ_SEAT_MANAGEMENT,
                P.READ_COBRANDING,
            }
        ),
        scope=AccessScope.COMPANY,
        description="Manages the users and settings of one company.",
    ),
    RoleDefinition(
        name=RoleName.USER,
        permissions=SELF_SERVICE_PERMISSIONS,
        scope=AccessScope.SELF,
        description="Regular user with access to their own data.",
    ),
    RoleDefinition(
        name=RoleName.DELEGATE,
        permissions=SELF_SERVICE_PERMISSIONS,
        scope=AccessScope.SELF,
        description="Acts on behalf of another user within granted delegate permissions.",
    ),
]

ROLE_DEFINITIONS: MappingProxyType[RoleName, RoleDefinition] = MappingProxyType(
    {definition.name: definition for definition in _DEFINITIONS}
)

ALL_ROLES: tuple[RoleName, ...] = tuple(RoleName)


def get_role_definition(role: RoleName | str) -> RoleDefinition | None:
    """Look up a role definition by name. Returns None for unknown roles."""
    try:
        return ROLE_DEFINITIONS[RoleName(role)]
    except ValueError:
        return None


def role_has_permission(role: RoleName | str, permission: Permission) -> bool:
    """Check whether a role grants a permission."""
    definition = get_role_definition(role)
    return definition is not None and definition.has_permission(permission)


def get_role_permissions(role: RoleName | str) -> frozenset[Permission]:
    definition = get_role_definition(role)
    return definition.permissions if definition else frozenset()
