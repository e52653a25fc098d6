# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Module-specific policy predicates.

Each policy is a pure function of the resolved request context. Routes
apply them after the role gate, for checks that depend on both the role
and the resolved scope.
"""

import uuid
from collections.abc import Callable

from tenant_admin.models.enums import RoleName

from .context import ResolvedContext

Policy = Callable[[ResolvedContext], bool]

TAG_MANAGER_ROLES = frozenset({RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN})
PIN_MANAGER_ROLES = frozenset(
    {RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN, RoleName.COMPANY_ADMIN}
)


# Tags


def can_create_tag(ctx: ResolvedContext) -> bool:
    return ctx.role_name in TAG_MANAGER_ROLES


def can_update_tag(ctx: ResolvedContext) -> bool:
    return ctx.role_name in TAG_MANAGER_ROLES


def can_delete_tag(ctx: ResolvedContext) -> bool:
    return ctx.role_name in TAG_MANAGER_ROLES


def can_manage_tag_order(ctx: ResolvedContext) -> bool:
    return ctx.role_name in TAG_MANAGER_ROLES


def can_merge_tags(ctx: ResolvedContext) -> bool:
    return ctx.role_name in TAG_MANAGER_ROLES


def can_read_tag(ctx: ResolvedContext) -> bool:
    """Tags are edition-owned, so reading needs a resolved edition."""
    return ctx.system_edition_id is not None


def can_access_tag_stats(ctx: ResolvedContext) -> bool:
    return ctx.system_edition_id is not None


# Companies


def can_manage_pin(ctx: ResolvedContext) -> bool:
    return ctx.role_name in PIN_MANAGER_ROLES and ctx.company_id is not None


def can_view_pin_configuration(ctx: ResolvedContext) -> bool:
    return ctx.company_id is not None


# Audit logs


def can_read_audit_logs(ctx: ResolvedContext) -> bool:
    return ctx.role_name != RoleName.DELEGATE


def audit_scope_user_id(
    ctx: ResolvedContext, requested_user_id: uuid.UUID | None
) -> uuid.UUID | None:
    """Regular users only ever see their own audit trail."""
    if ctx.role_name == RoleName.USER:
        return ctx.user_id
    return requested_user_id
