# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Company service for company management and PIN configuration."""

import hmac
import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from tenant_admin.encryption import decrypt_value, encrypt_value
from tenant_admin.errors import BadRequestError, NotFoundError
from tenant_admin.models import Company, SystemEdition, User
from tenant_admin.models.company import default_pin_options, default_pin_settings
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    PinConfiguration,
    PinManagementUpdate,
)
from tenant_admin.services import audit_log_service
from tenant_admin.services.permission_service import ResourceType, get_resource_filter

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = frozenset({"name", "total_seats", "status"})


def _scoped_companies(db: Session, ctx: ResolvedContext) -> Query:
    return db.query(Company).filter(*get_resource_filter(ctx, ResourceType.COMPANY))


def get_companies(
    db: Session, ctx: ResolvedContext, params: PaginationParams
) -> tuple[list[Company], int]:
    """Get a page of the companies visible to the caller."""
    query = _scoped_companies(db, ctx)
    if ctx.is_super_admin and ctx.system_edition_id is not None:
        query = query.filter(Company.system_edition_id == ctx.system_edition_id)
    if params.search:
        query = query.filter(Company.name.ilike(f"%{params.search}%"))

    total = query.count()
    companies = (
        query.order_by(Company.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return companies, total


def get_company(
    db: Session, ctx: ResolvedContext, company_id: uuid.UUID
) -> Company | None:
    """Get a company by ID if it lies inside the caller's scope."""
    return _scoped_companies(db, ctx).filter(Company.id == company_id).first()


def create_company(db: Session, ctx: ResolvedContext, data: CompanyCreate) -> Company:
    """Create a company in the caller's system edition.

    Super admins may pick the edition in the request body.
    """
    system_edition_id = ctx.system_edition_id
    if ctx.is_super_admin and data.system_edition_id is not None:
        system_edition_id = data.system_edition_id
    if system_edition_id is None:
        raise BadRequestError("System edition ID is required")
    if db.get(SystemEdition, system_edition_id) is None:
        raise NotFoundError("System edition not found")

    company = Company(
        name=data.name,
        system_edition_id=system_edition_id,
        company_admin_id=data.company_admin_id,
        total_seats=data.total_seats,
        used_seats=0,
        status=data.status,
        type=data.type,
        address=data.address,
        title=data.title,
        channel_partner_split=data.channel_partner_split,
        commission=data.commission,
        payment_method=data.payment_method,
        pin_options=default_pin_options(),
        pin_settings=default_pin_settings(),
    )
    db.add(company)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="company_created",
        module=AuditModule.SYSTEM,
        description=f"Created company: {company.name}",
        metadata={"company_id": str(company.id)},
        system_edition_id=system_edition_id,
        company_id=company.id,
    )
    db.commit()
    db.refresh(company)
    return company


def update_company(
    db: Session, ctx: ResolvedContext, company: Company, data: CompanyUpdate
) -> Company:
    """Update a company.

    Raises:
        BadRequestError: If total seats would drop below the seats in use.
    """
    if data.total_seats is not None and data.total_seats < company.used_seats:
        raise BadRequestError(
            f"Total seats cannot be lower than used seats ({company.used_seats})"
        )

    update_data = data.model_dump(exclude_unset=True)
    changed = []
    for field, value in update_data.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(company, field, value)
        changed.append(field)

    audit_log_service.record(
        db,
        ctx,
        action="company_updated",
        module=AuditModule.SYSTEM,
        description=f"Updated company: {company.name}",
        metadata={"company_id": str(company.id), "fields": changed},
        system_edition_id=company.system_edition_id,
        company_id=company.id,
    )
    db.commit()
    db.refresh(company)
    return company


def delete_company(db: Session, ctx: ResolvedContext, company: Company) -> None:
    """Delete a company and detach its users."""
    db.query(User).filter(User.company_id == company.id).update(
        {User.company_id: None, User.seat_assigned: False},
        synchronize_session=False,
    )
    audit_log_service.record(
        db,
        ctx,
        action="company_deleted",
        module=AuditModule.SYSTEM,
        description=f"Deleted company: {company.name}",
        metadata={"company_id": str(company.id)},
        system_edition_id=company.system_edition_id,
        company_id=company.id,
    )
    db.delete(company)
    db.commit()


def get_company_users(
    db: Session,
    company_id: uuid.UUID,
    params: PaginationParams,
    role: RoleName | None = None,
) -> tuple[list[User], int]:
    """Get a page of the users of a company."""
    query = db.query(User).filter(User.company_id == company_id)
    if params.search:
        pattern = f"%{params.search}%"
        query = query.filter(
            or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
            )
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


# PIN management


def get_pin_configuration(company: Company) -> PinConfiguration:
    """Return the PIN configuration with defaults filled in."""
    return PinConfiguration(
        has_master_pin=company.has_master_pin,
        pin_options={**default_pin_options(), **(company.pin_options or {})},
        pin_settings={**default_pin_settings(), **(company.pin_settings or {})},
    )


def update_pin_management(
    db: Session, ctx: ResolvedContext, company: Company, data: PinManagementUpdate
) -> PinConfiguration:
    """Set the master PIN and merge PIN options and settings.

    The PIN is stored encrypted. Options and settings keys that are not in
    the request keep their stored values.
    """
    changed = []
    if data.master_pin:
        company.encrypted_master_pin = encrypt_value(data.master_pin)
        changed.append("master_pin")

    if data.pin_options is not None:
        # JSON columns only track reassignment
        company.pin_options = {
            **default_pin_options(),
            **(company.pin_options or {}),
            **data.pin_options.model_dump(exclude_none=True),
        }
        changed.append("pin_options")

    if data.pin_settings is not None:
        company.pin_settings = {
            **default_pin_settings(),
            **(company.pin_settings or {}),
            **data.pin_settings.model_dump(exclude_none=True),
        }
        changed.append("pin_settings")

    audit_log_service.record(
        db,
        ctx,
        action="pin_management_updated",
        module=AuditModule.SETTINGS,
        description=f"Updated PIN management for company: {company.name}",
        metadata={"company_id": str(company.id), "fields": changed},
        system_edition_id=company.system_edition_id,
        company_id=company.id,
    )
    db.commit()
    db.refresh(company)
    logger.info(f"PIN management updated for company {company.id}: {changed}")
    return get_pin_configuration(company)


def validate_pin(company: Company, pin: str) -> bool:
    """Compare a PIN against the stored master PIN."""
    if not company.encrypted_master_pin:
        return False
    try:
        stored = decrypt_value(company.encrypted_master_pin)
    except ValueError:
        logger.warning(f"Stored master PIN of company {company.id} cannot be decrypted")
        return False
    return hmac.compare_digest(stored.encode(), pin.encode())
