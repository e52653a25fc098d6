# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Delegate access service."""

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, aliased, joinedload

from tenant_admin.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from tenant_admin.models import DelegateAccess, SystemEdition, User
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.delegate_access import DelegateAccessUpdate, DelegateInvite
from tenant_admin.security import generate_password, get_password_hash
from tenant_admin.services import audit_log_service
from tenant_admin.services.permission_service import ResourceType, get_resource_filter

logger = logging.getLogger(__name__)

# Existing accounts that may receive a delegate grant
INVITABLE_ROLES = frozenset({RoleName.USER, RoleName.DELEGATE})


def _scoped_access(db: Session, ctx: ResolvedContext) -> Query:
    return (
        db.query(DelegateAccess)
        .options(
            joinedload(DelegateAccess.delegator), joinedload(DelegateAccess.delegate)
        )
        .filter(
            DelegateAccess.deleted_at.is_(None),
            *get_resource_filter(ctx, ResourceType.DELEGATE),
        )
    )


def get_delegate_access_list(
    db: Session, ctx: ResolvedContext, params: PaginationParams
) -> tuple[list[DelegateAccess], int]:
    """Get a page of delegate access records, searchable by delegate."""
    query = _scoped_access(db, ctx)
    if ctx.is_super_admin and ctx.system_edition_id is not None:
        query = query.filter(DelegateAccess.system_edition_id == ctx.system_edition_id)
    if params.search:
        delegate = aliased(User)
        pattern = f"%{params.search}%"
        query = query.join(delegate, DelegateAccess.delegate_id == delegate.id).filter(
            or_(
                delegate.first_name.ilike(pattern),
                delegate.last_name.ilike(pattern),
                delegate.email.ilike(pattern),
            )
        )

    total = query.count()
    records = (
        query.order_by(DelegateAccess.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return records, total


def get_delegate_access(
    db: Session, ctx: ResolvedContext, access_id: uuid.UUID
) -> DelegateAccess | None:
    """Get a delegate access record inside the caller's scope."""
    return _scoped_access(db, ctx).filter(DelegateAccess.id == access_id).first()


def update_delegate_access(
    db: Session, ctx: ResolvedContext, record: DelegateAccess, data: DelegateAccessUpdate
) -> DelegateAccess:
    """Update permissions, activity or expiry of a delegate access record."""
    if data.permissions is not None:
        record.permissions = [permission.value for permission in data.permissions]
    if data.is_active is not None:
        record.is_active = data.is_active
    if "expiration_date" in data.model_fields_set:
        record.expiration_date = data.expiration_date

    audit_log_service.record(
        db,
        ctx,
        action="delegate_access_updated",
        module=AuditModule.PERMISSIONS,
        description=f"Updated delegate access {record.id}",
        metadata={"permissions": list(record.permissions)},
        system_edition_id=record.system_edition_id,
    )
    db.commit()
    db.refresh(record)
    return record


def delete_delegate_access(
    db: Session, ctx: ResolvedContext, record: DelegateAccess
) -> None:
    """Soft delete a delegate access record."""
    record.soft_delete()
    record.is_active = False
    audit_log_service.record(
        db,
        ctx,
        action="delegate_access_deleted",
        module=AuditModule.PERMISSIONS,
        description=f"Revoked delegate access {record.id}",
        system_edition_id=record.system_edition_id,
    )
    db.commit()


def invite_delegate(
    db: Session, ctx: ResolvedContext, data: DelegateInvite
) -> tuple[DelegateAccess, bool]:
    """Grant delegate access from the caller to the invited user.

    The delegate account is created with a random password when no user
    with that email exists. Returns the record and whether a user was
    created.

    Raises:
        BadRequestError: If no system edition can be determined, the
            caller invites themselves or the account is not a user or
            delegate.
        ForbiddenError: If the account belongs to another system edition.
        ConflictError: If an active grant already exists.
    """
    system_edition_id = ctx.system_edition_id
    if ctx.is_super_admin and data.system_edition_id is not None:
        system_edition_id = data.system_edition_id
    if system_edition_id is None:
        raise BadRequestError("System edition ID is required")
    if db.get(SystemEdition, system_edition_id) is None:
        raise NotFoundError("System edition not found")

    email = data.email.lower()
    user = db.query(User).filter(User.email == email).first()
    created = user is None
    if user is None:
        user = User(
            email=email,
            hashed_password=get_password_hash(generate_password()),
            first_name=data.first_name,
            last_name=data.last_name,
            role=RoleName.DELEGATE,
            system_edition_id=system_edition_id,
            is_active=True,
            email_verified=False,
            created_by_id=ctx.user_id,
        )
        db.add(user)
        db.flush()
    elif user.id == ctx.user_id:
        raise BadRequestError("You cannot delegate access to yourself")
    elif user.role not in INVITABLE_ROLES:
        raise BadRequestError(f"A {user.role.value} account cannot be invited as a delegate")
    elif user.system_edition_id != system_edition_id:
        logger.warning(
            f"User {ctx.user_id} tried to invite {user.id} from another system edition"
        )
        raise ForbiddenError("User does not belong to this system edition")

    record = (
        db.query(DelegateAccess)
        .filter(
            DelegateAccess.system_edition_id == system_edition_id,
            DelegateAccess.delegator_id == ctx.user_id,
            DelegateAccess.delegate_id == user.id,
        )
        .first()
    )
    permissions = [permission.value for permission in data.permissions]
    if record is not None and not record.is_deleted:
        raise ConflictError("Delegate access already exists for this user")
    if record is not None:
        # Revive the revoked grant, the unique key covers soft deleted rows
        record.deleted_at = None
        record.is_active = True
        record.permissions = permissions
        record.expiration_date = data.expiration_date
    else:
        record = DelegateAccess(
            system_edition_id=system_edition_id,
            delegator_id=ctx.user_id,
            delegate_id=user.id,
            permissions=permissions,
            is_active=True,
            expiration_date=data.expiration_date,
        )
        db.add(record)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="delegate_invited",
        module=AuditModule.PERMISSIONS,
        description=f"Invited delegate: {user.email}",
        metadata={"delegate_id": str(user.id), "permissions": permissions},
        system_edition_id=system_edition_id,
    )
    db.commit()
    db.refresh(record)
    logger.info(
        f"User {ctx.user_id} invited delegate {user.id} in system edition {system_edition_id}"
    )
    return record, created
