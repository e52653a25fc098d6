# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User management service."""

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from tenant_admin.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from tenant_admin.models import Company, DelegateAccess, SystemEdition, User
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.user import (
    PasswordChange,
    UserCreate,
    UserProfileUpdate,
    UserUpdate,
)
from tenant_admin.security import generate_password, get_password_hash, verify_password
from tenant_admin.services import audit_log_service
from tenant_admin.services.context_service import validate_company_access
from tenant_admin.services.permission_service import ResourceType, get_resource_filter

logger = logging.getLogger(__name__)

# Roles each creator may not hand out
FORBIDDEN_ROLES_BY_CREATOR: dict[RoleName, tuple[frozenset[RoleName], str]] = {
    RoleName.COMPANY_ADMIN: (
        frozenset({RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN}),
        "Company admins can not create super admins and edition admins",
    ),
    RoleName.EDITION_ADMIN: (
        frozenset({RoleName.SUPER_ADMIN}),
        "Edition admins cannot create super admins",
    ),
}


def _search(query: Query, search: str | None) -> Query:
    if not search:
        return query
    pattern = f"%{search}%"
    return query.filter(
        or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
        )
    )


def _scoped_users(db: Session, ctx: ResolvedContext) -> Query:
    return db.query(User).filter(*get_resource_filter(ctx, ResourceType.USER))


def get_users(
    db: Session,
    ctx: ResolvedContext,
    params: PaginationParams,
    role: RoleName | None = None,
    is_active: bool | None = None,
) -> tuple[list[User], int]:
    """Get a page of the users visible to the caller."""
    query = _search(_scoped_users(db, ctx), params.search)
    if ctx.is_super_admin:
        # An explicitly selected scope narrows the global view
        if ctx.company_id is not None:
            query = query.filter(User.company_id == ctx.company_id)
        elif ctx.system_edition_id is not None:
            query = query.filter(User.system_edition_id == ctx.system_edition_id)
    if role is not None:
        query = query.filter(User.role == role)
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))

    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return users, total


def get_user(db: Session, ctx: ResolvedContext, user_id: uuid.UUID) -> User | None:
    """Get a user by ID if it lies inside the caller's scope."""
    return _scoped_users(db, ctx).filter(User.id == user_id).first()


def get_users_by_system_edition(
    db: Session,
    system_edition_id: uuid.UUID,
    params: PaginationParams,
    role: RoleName | None = None,
) -> tuple[list[User], int]:
    """Get a page of the users assigned to a system edition."""
    query = _search(
        db.query(User).filter(User.system_edition_id == system_edition_id),
        params.search,
    )
    if role is not None:
        query = query.filter(User.role == role)

    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return users, total


def _check_role_allowed(ctx: ResolvedContext, role: RoleName) -> None:
    forbidden = FORBIDDEN_ROLES_BY_CREATOR.get(ctx.role_name)
    if forbidden and role in forbidden[0]:
        raise ForbiddenError(forbidden[1])


def _check_target_allowed(ctx: ResolvedContext, user: User) -> None:
    """Callers may only manage accounts of roles they could create."""
    forbidden = FORBIDDEN_ROLES_BY_CREATOR.get(ctx.role_name)
    if forbidden and user.role in forbidden[0]:
        logger.warning(
            f"User {ctx.user_id} with role {ctx.role_name.value} tried to manage "
            f"{user.role.value} {user.id}"
        )
        raise ForbiddenError(f"You cannot manage {user.role.value} accounts")


def _resolve_company(
    db: Session, ctx: ResolvedContext, company_id: uuid.UUID | None
) -> Company | None:
    if company_id is None:
        return None
    if not validate_company_access(db, ctx, company_id):
        raise ForbiddenError("Access denied to this company")
    company = db.get(Company, company_id)
    if company is None:
        raise NotFoundError("Company not found")
    return company


def _take_seat(company: Company) -> None:
    if company.available_seats <= 0:
        raise BadRequestError(f"No available seats in company {company.name}")
    company.used_seats = (company.used_seats or 0) + 1


def _release_seat(company: Company | None) -> None:
    if company is not None:
        company.used_seats = max(0, (company.used_seats or 0) - 1)


def create_user(db: Session, ctx: ResolvedContext, data: UserCreate) -> User:
    """Create a user inside the caller's scope.

    Company admins create users in their own company, edition admins in
    their own edition. Assigning a seat takes one from the company.

    Raises:
        ConflictError: If the email is already in use.
        ForbiddenError: If the caller may not grant the role or company.
    """
    _check_role_allowed(ctx, data.role)

    email = data.email.lower()
    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError("User already exists with this email")

    if ctx.role_name == RoleName.COMPANY_ADMIN:
        company_id = ctx.company_id
    elif ctx.is_super_admin:
        company_id = data.company_id or ctx.company_id
    else:
        company_id = data.company_id
    company = _resolve_company(db, ctx, company_id)

    if company is not None:
        system_edition_id = company.system_edition_id
    elif ctx.is_super_admin:
        system_edition_id = data.system_edition_id or ctx.system_edition_id
        if system_edition_id is not None and db.get(SystemEdition, system_edition_id) is None:
            raise NotFoundError("System edition not found")
    else:
        system_edition_id = ctx.system_edition_id

    seat_assigned = data.seat_assigned and company is not None
    if seat_assigned:
        _take_seat(company)

    user = User(
        email=email,
        hashed_password=get_password_hash(data.password or generate_password()),
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        role=data.role,
        system_edition_id=system_edition_id,
        company_id=company.id if company else None,
        is_active=data.is_active,
        email_verified=data.email_verified,
        seat_assigned=seat_assigned,
        license_type=data.license_type,
        expiration_date=data.expiration_date,
        created_by_id=ctx.user_id,
    )
    db.add(user)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="user_created",
        module=AuditModule.USERS,
        description=f"Created {user.role.value} user: {user.email}",
        metadata={"target_user_id": str(user.id)},
        system_edition_id=system_edition_id,
        company_id=user.company_id,
    )
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session, ctx: ResolvedContext, user: User, data: UserUpdate
) -> User:
    """Update a user, moving seats between companies when needed.

    Raises:
        ForbiddenError: If the caller may not manage the user's role.
    """
    _check_target_allowed(ctx, user)
    if data.is_active is False and user.id == ctx.user_id:
        raise BadRequestError("You cannot deactivate your own account")

    if data.email is not None and data.email.lower() != user.email:
        email = data.email.lower()
        existing = db.query(User).filter(User.email == email, User.id != user.id).first()
        if existing:
            raise ConflictError("Email already in use")
        user.email = email

    old_company = db.get(Company, user.company_id) if user.company_id else None
    new_company = old_company
    if data.company_id is not None and data.company_id != user.company_id:
        if ctx.role_name == RoleName.COMPANY_ADMIN:
            raise ForbiddenError("Company admins cannot move users to another company")
        new_company = _resolve_company(db, ctx, data.company_id)

    old_seat = user.seat_assigned
    new_seat = old_seat if data.seat_assigned is None else data.seat_assigned
    new_seat = new_seat and new_company is not None

    if old_seat and (not new_seat or new_company is not old_company):
        _release_seat(old_company)
    if new_seat and (not old_seat or new_company is not old_company):
        _take_seat(new_company)

    if new_company is not old_company:
        user.company_id = new_company.id
        user.system_edition_id = new_company.system_edition_id
    user.seat_assigned = new_seat

    if data.password is not None:
        user.hashed_password = get_password_hash(data.password)
    if data.first_name is not None:
        user.first_name = data.first_name
    if data.last_name is not None:
        user.last_name = data.last_name
    if data.phone_number is not None:
        user.phone_number = data.phone_number
    if data.is_active is not None:
        user.is_active = data.is_active
    if data.email_verified is not None:
        user.email_verified = data.email_verified
    if data.license_type is not None:
        user.license_type = data.license_type
    if data.expiration_date is not None:
        user.expiration_date = data.expiration_date

    audit_log_service.record(
        db,
        ctx,
        action="user_updated",
        module=AuditModule.USERS,
        description=f"Updated user: {user.email}",
        metadata={"target_user_id": str(user.id)},
        system_edition_id=user.system_edition_id,
        company_id=user.company_id,
    )
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, ctx: ResolvedContext, user: User) -> None:
    """Delete a user, release their seat and remove their delegate grants."""
    if user.id == ctx.user_id:
        raise BadRequestError("You cannot delete your own account")
    _check_target_allowed(ctx, user)

    if user.seat_assigned and user.company_id:
        _release_seat(db.get(Company, user.company_id))

    db.query(DelegateAccess).filter(
        or_(DelegateAccess.delegator_id == user.id, DelegateAccess.delegate_id == user.id)
    ).delete(synchronize_session=False)

    audit_log_service.record(
        db,
        ctx,
        action="user_deleted",
        module=AuditModule.USERS,
        description=f"Deleted user: {user.email}",
        metadata={"target_user_id": str(user.id)},
        system_edition_id=user.system_edition_id,
        company_id=user.company_id,
    )
    db.delete(user)
    db.commit()


def update_profile(db: Session, user: User, data: UserProfileUpdate) -> User:
    """Update the caller's own name and phone number."""
    if data.first_name is not None:
        user.first_name = data.first_name
    if data.last_name is not None:
        user.last_name = data.last_name
    if data.phone_number is not None:
        user.phone_number = data.phone_number
    db.commit()
    db.refresh(user)
    return user


def change_password(
    db: Session, ctx: ResolvedContext, user: User, data: PasswordChange
) -> None:
    """Change the caller's password after verifying the current one."""
    if not verify_password(data.current_password, user.hashed_password):
        raise BadRequestError("Current password is incorrect")
    if verify_password(data.new_password, user.hashed_password):
        raise BadRequestError("New password must be different from current password")

    user.hashed_password = get_password_hash(data.new_password)
    audit_log_service.record(
        db,
        ctx,
        action="password_changed",
        module=AuditModule.AUTHENTICATION,
        description=f"Password changed: {user.email}",
    )
    db.commit()
    logger.info(f"User {user.id} changed their password")
