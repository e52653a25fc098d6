# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission checks combining role permissions with access scope."""

import logging
import uuid
from enum import Enum

from sqlalchemy import false, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from tenant_admin.models import Company, DelegateAccess, SystemEdition, Tag, User
from tenant_admin.models.base import utcnow
from tenant_admin.models.enums import DelegatePermission
from tenant_admin.rbac.context import PermissionContext, PermissionResult, ResolvedContext
from tenant_admin.rbac.permissions import AccessScope, Permission
from tenant_admin.rbac.roles import get_role_definition

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    """Resources whose list queries are narrowed by scope."""

    USER = "user"
    COMPANY = "company"
    EDITION = "edition"
    TAG = "tag"
    DELEGATE = "delegate"


def check_permission(
    db: Session, ctx: PermissionContext, permission: Permission
) -> PermissionResult:
    """Check a permission for the caller, then the scope of the targets.

    Role permissions are checked first. The scope check then requires every
    target in the context to lie inside the caller's edition, company or
    own account, depending on the role's scope.
    """
    definition = get_role_definition(ctx.user_role)
    if definition is None:
        return PermissionResult.deny(f"Unknown role: {ctx.user_role}")

    if not definition.has_permission(permission):
        logger.debug(f"User {ctx.user_id} lacks {permission.value}")
        return PermissionResult.deny(
            f"Role {definition.name.value} does not have permission {permission.value}"
        )

    if definition.scope == AccessScope.GLOBAL:
        return PermissionResult.allow()
    if definition.scope == AccessScope.EDITION:
        return _check_edition_scope(db, ctx)
    if definition.scope == AccessScope.COMPANY:
        return _check_company_scope(db, ctx)
    return _check_self_scope(ctx)


def _check_edition_scope(db: Session, ctx: PermissionContext) -> PermissionResult:
    if ctx.system_edition_id is None:
        return PermissionResult.deny("User is not assigned to a system edition")

    if (
        ctx.target_system_edition_id is not None
        and ctx.target_system_edition_id != ctx.system_edition_id
    ):
        return PermissionResult.deny("Access denied: different system edition")

    if ctx.target_company_id is not None:
        company = db.get(Company, ctx.target_company_id)
        if company is None or company.system_edition_id != ctx.system_edition_id:
            return PermissionResult.deny(
                "Access denied: company not in your system edition"
            )

    if ctx.target_user_id is not None:
        target = db.get(User, ctx.target_user_id)
        if target is None or target.system_edition_id != ctx.system_edition_id:
            return PermissionResult.deny("Access denied: user not in your system edition")

    return PermissionResult.allow()


def _check_company_scope(db: Session, ctx: PermissionContext) -> PermissionResult:
    if ctx.company_id is None:
        return PermissionResult.deny("User is not assigned to a company")

    if ctx.target_company_id is not None and ctx.target_company_id != ctx.company_id:
        return PermissionResult.deny("Access denied: different company")

    if ctx.target_user_id is not None:
        target = db.get(User, ctx.target_user_id)
        if target is None or target.company_id != ctx.company_id:
            return PermissionResult.deny("Access denied: user not in your company")

    return PermissionResult.allow()


def _check_self_scope(ctx: PermissionContext) -> PermissionResult:
    if ctx.target_user_id is not None and ctx.target_user_id != ctx.user_id:
        return PermissionResult.deny("Access denied: can only access own resources")
    return PermissionResult.allow()


def check_delegate_access(
    db: Session,
    delegate_id: uuid.UUID,
    delegator_id: uuid.UUID,
    permission: DelegatePermission | str,
) -> PermissionResult:
    """Check that a delegate may act for a delegator with a given permission."""
    record = (
        db.query(DelegateAccess)
        .filter(
            DelegateAccess.delegate_id == delegate_id,
            DelegateAccess.delegator_id == delegator_id,
            DelegateAccess.is_active.is_(True),
            DelegateAccess.deleted_at.is_(None),
        )
        .first()
    )
    if record is None:
        return PermissionResult.deny("No active delegate access found")

    value = DelegatePermission(permission).value
    granted = record.permissions or []
    if value not in granted and DelegatePermission.FULL_ACCESS.value not in granted:
        return PermissionResult.deny("Permission not granted in delegate access")

    if record.expiration_date is not None and record.expiration_date < utcnow():
        return PermissionResult.deny("Delegate access has expired")

    return PermissionResult.allow()


def get_resource_filter(
    ctx: ResolvedContext, resource: ResourceType
) -> list[ColumnElement[bool]]:
    """Return query criteria limiting a resource to the caller's scope.

    An empty list means no restriction. A scope whose identifier is missing
    yields a criterion that matches nothing.
    """
    definition = get_role_definition(ctx.role_name)
    if definition is None:
        return [false()]
    if definition.scope == AccessScope.GLOBAL:
        return []

    edition_id = ctx.system_edition_id
    company_id = ctx.company_id

    if resource == ResourceType.DELEGATE:
        if definition.scope == AccessScope.EDITION:
            return [_equals(DelegateAccess.system_edition_id, edition_id)]
        return [
            or_(
                DelegateAccess.delegator_id == ctx.user_id,
                DelegateAccess.delegate_id == ctx.user_id,
            )
        ]

    if resource == ResourceType.TAG:
        return [_equals(Tag.system_edition_id, edition_id)]

    if resource == ResourceType.EDITION:
        return [_equals(SystemEdition.id, edition_id)]

    if resource == ResourceType.COMPANY:
        if definition.scope == AccessScope.EDITION:
            return [_equals(Company.system_edition_id, edition_id)]
        return [_equals(Company.id, company_id)]

    # Users
    if definition.scope == AccessScope.EDITION:
        return [_equals(User.system_edition_id, edition_id)]
    if definition.scope == AccessScope.COMPANY:
        return [_equals(User.company_id, company_id)]
    return [User.id == ctx.user_id]


def _equals(column, value: uuid.UUID | None) -> ColumnElement[bool]:
    if value is None:
        return false()
    return column == value
