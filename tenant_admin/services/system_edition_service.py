# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""System edition service."""

import logging
import uuid

from sqlalchemy.orm import Session

from tenant_admin.errors import ConflictError
from tenant_admin.models import Company, DelegateAccess, SystemEdition, User
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.system_edition import (
    CoBranding,
    CoBrandingUpdate,
    SystemEditionCreate,
    SystemEditionOverview,
    SystemEditionUpdate,
)
from tenant_admin.services import audit_log_service
from tenant_admin.services.permission_service import ResourceType, get_resource_filter

logger = logging.getLogger(__name__)


def get_system_editions(
    db: Session,
    ctx: ResolvedContext,
    params: PaginationParams,
    archived: bool | None = None,
) -> tuple[list[SystemEdition], int]:
    """Get a page of the system editions visible to the caller."""
    query = db.query(SystemEdition).filter(
        *get_resource_filter(ctx, ResourceType.EDITION)
    )
    if params.search:
        query = query.filter(SystemEdition.name.ilike(f"%{params.search}%"))
    if archived is not None:
        query = query.filter(SystemEdition.archived.is_(archived))

    total = query.count()
    editions = (
        query.order_by(SystemEdition.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return editions, total


def get_system_edition(db: Session, system_edition_id: uuid.UUID) -> SystemEdition | None:
    """Get a system edition by ID."""
    return db.get(SystemEdition, system_edition_id)


def _ensure_unique_name(
    db: Session, name: str, exclude_id: uuid.UUID | None = None
) -> None:
    query = db.query(SystemEdition).filter(SystemEdition.name == name)
    if exclude_id is not None:
        query = query.filter(SystemEdition.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("System edition with this name already exists")


def create_system_edition(
    db: Session, ctx: ResolvedContext, data: SystemEditionCreate
) -> SystemEdition:
    """Create a system edition."""
    _ensure_unique_name(db, data.name)

    edition = SystemEdition(
        name=data.name,
        modules=dict(data.modules),
        archived=data.archived,
        created_by_id=ctx.user_id,
        last_updated_by_id=ctx.user_id,
    )
    db.add(edition)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="create",
        module=AuditModule.SYSTEM,
        description=f"Created system edition: {edition.name}",
        system_edition_id=edition.id,
    )
    db.commit()
    db.refresh(edition)
    return edition


def update_system_edition(
    db: Session, ctx: ResolvedContext, edition: SystemEdition, data: SystemEditionUpdate
) -> SystemEdition:
    """Update a system edition."""
    if data.name is not None and data.name != edition.name:
        _ensure_unique_name(db, data.name, exclude_id=edition.id)
        edition.name = data.name
    if data.modules is not None:
        edition.modules = {**(edition.modules or {}), **data.modules}
    if data.archived is not None:
        edition.archived = data.archived
    edition.last_updated_by_id = ctx.user_id

    audit_log_service.record(
        db,
        ctx,
        action="update",
        module=AuditModule.SYSTEM,
        description=f"Updated system edition: {edition.name}",
        system_edition_id=edition.id,
    )
    db.commit()
    db.refresh(edition)
    return edition


def delete_system_edition(db: Session, ctx: ResolvedContext, edition: SystemEdition) -> None:
    """Delete a system edition with its companies, tags and custom fields.

    Users of the edition stay, detached from the edition and its companies.
    """
    edition_id = edition.id
    company_ids = [company.id for company in edition.companies]
    detach = User.system_edition_id == edition.id
    if company_ids:
        detach = detach | User.company_id.in_(company_ids)
    db.query(User).filter(detach).update(
        {User.system_edition_id: None, User.company_id: None, User.seat_assigned: False},
        synchronize_session=False,
    )
    db.query(DelegateAccess).filter(
        DelegateAccess.system_edition_id == edition.id
    ).delete(synchronize_session=False)

    audit_log_service.record(
        db,
        ctx,
        action="delete",
        module=AuditModule.SYSTEM,
        description=f"Deleted system edition: {edition.name}",
        system_edition_id=edition.id,
    )
    db.delete(edition)
    db.commit()
    logger.info(f"Deleted system edition {edition_id} with {len(company_ids)} companies")


def get_overview(db: Session, edition: SystemEdition) -> SystemEditionOverview:
    """Summarize admins, companies, active users and enabled modules."""
    users = db.query(User).filter(User.system_edition_id == edition.id)
    edition_admins = users.filter(User.role == RoleName.EDITION_ADMIN).count()
    active_users = users.filter(User.is_active.is_(True)).count()
    companies = db.query(Company).filter(Company.system_edition_id == edition.id).count()

    creator = db.get(User, edition.created_by_id) if edition.created_by_id else None

    return SystemEditionOverview(
        date_created=edition.created_at,
        created_by=creator.full_name if creator else None,
        last_update=edition.updated_at,
        edition_name=edition.name,
        edition_admins=edition_admins,
        companies=companies,
        active_users=active_users,
        features_enabled=edition.enabled_modules,
    )


def get_companies(
    db: Session, system_edition_id: uuid.UUID, params: PaginationParams
) -> tuple[list[Company], int]:
    """Get a page of the companies of a system edition."""
    query = db.query(Company).filter(Company.system_edition_id == system_edition_id)
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


def get_co_branding(edition: SystemEdition) -> CoBranding:
    return CoBranding.model_validate(edition)


def update_co_branding(
    db: Session, ctx: ResolvedContext, edition: SystemEdition, data: CoBrandingUpdate
) -> CoBranding:
    """Update the co-branding fields that are given."""
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(edition, field, value)
    edition.last_updated_by_id = ctx.user_id

    audit_log_service.record(
        db,
        ctx,
        action="update",
        module=AuditModule.SETTINGS,
        description="Updated co-branding configuration",
        metadata=changes,
        system_edition_id=edition.id,
    )
    db.commit()
    db.refresh(edition)
    return get_co_branding(edition)
