# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Custom field service for managing system edition user attributes."""

import logging
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from tenant_admin.errors import BadRequestError, NotFoundError
from tenant_admin.models import CustomField
from tenant_admin.models.enums import AuditModule, CustomFieldType
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.custom_field import (
    CustomFieldCreate,
    CustomFieldOrderItem,
    CustomFieldStats,
    CustomFieldUpdate,
)
from tenant_admin.services import audit_log_service

logger = logging.getLogger(__name__)


def _edition_fields(db: Session, system_edition_id: uuid.UUID) -> Query:
    return db.query(CustomField).filter(
        CustomField.system_edition_id == system_edition_id,
        CustomField.deleted_at.is_(None),
    )


def _validate_options(field_type: CustomFieldType, options: list[str] | None) -> None:
    if field_type == CustomFieldType.DROPDOWN:
        if not options:
            raise BadRequestError("Dropdown field type must have at least one option")
    elif options:
        raise BadRequestError("Dropdown options can only be set for dropdown fields")


def get_custom_fields(
    db: Session,
    system_edition_id: uuid.UUID,
    params: PaginationParams,
    field_type: CustomFieldType | None = None,
    is_active: bool | None = None,
) -> tuple[list[CustomField], int]:
    """Get a page of custom fields of a system edition, in field order."""
    query = _edition_fields(db, system_edition_id)
    if params.search:
        query = query.filter(CustomField.field_name.ilike(f"%{params.search}%"))
    if field_type is not None:
        query = query.filter(CustomField.field_type == field_type)
    if is_active is not None:
        query = query.filter(CustomField.is_active.is_(is_active))

    total = query.count()
    fields = (
        query.order_by(CustomField.field_order.asc(), CustomField.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return fields, total


def get_custom_field(
    db: Session, system_edition_id: uuid.UUID, field_id: uuid.UUID
) -> CustomField | None:
    return _edition_fields(db, system_edition_id).filter(CustomField.id == field_id).first()


def get_custom_field_stats(db: Session, system_edition_id: uuid.UUID) -> CustomFieldStats:
    """Count active fields, mandatory ones and fields per type."""
    active = _edition_fields(db, system_edition_id).filter(CustomField.is_active.is_(True))
    breakdown = {field_type.value: 0 for field_type in CustomFieldType}
    for field in active.all():
        breakdown[field.field_type.value] += 1
    return CustomFieldStats(
        total_fields=sum(breakdown.values()),
        mandatory_fields=active.filter(CustomField.is_mandatory.is_(True)).count(),
        field_type_breakdown=breakdown,
    )


def create_custom_field(
    db: Session,
    ctx: ResolvedContext,
    system_edition_id: uuid.UUID,
    data: CustomFieldCreate,
) -> CustomField:
    """Create a custom field in a system edition.

    Raises:
        BadRequestError: If the dropdown options do not fit the field type.
    """
    _validate_options(data.field_type, data.dropdown_options)

    field_order = data.field_order
    if field_order is None:
        highest = (
            _edition_fields(db, system_edition_id)
            .with_entities(func.max(CustomField.field_order))
            .scalar()
        )
        field_order = 0 if highest is None else highest + 1

    field = CustomField(
        system_edition_id=system_edition_id,
        field_name=data.field_name,
        field_type=data.field_type,
        help_text=data.help_text,
        is_mandatory=data.is_mandatory,
        use_decimals=data.use_decimals and data.field_type == CustomFieldType.NUMBER,
        dropdown_options=data.dropdown_options,
        field_order=field_order,
        is_active=data.is_active,
        created_by_id=ctx.user_id,
    )
    db.add(field)
    db.flush()

    audit_log_service.record(
        db,
        ctx,
        action="custom_field_created",
        module=AuditModule.SETTINGS,
        description=f"Created {field.field_type.value} field '{field.field_name}'",
        metadata={"custom_field_id": str(field.id)},
        system_edition_id=system_edition_id,
    )
    db.commit()
    db.refresh(field)
    return field


def update_custom_field(
    db: Session, ctx: ResolvedContext, field: CustomField, data: CustomFieldUpdate
) -> CustomField:
    """Update a custom field.

    Type and options are validated together, as they are after the update.

    Raises:
        BadRequestError: If the resulting options do not fit the field type.
    """
    field_type = data.field_type or field.field_type
    options = field.dropdown_options
    if "dropdown_options" in data.model_fields_set:
        options = data.dropdown_options
    elif field_type != CustomFieldType.DROPDOWN:
        options = None
    _validate_options(field_type, options)

    if data.field_name is not None:
        field.field_name = data.field_name
    if "help_text" in data.model_fields_set:
        field.help_text = data.help_text
    if data.is_mandatory is not None:
        field.is_mandatory = data.is_mandatory
    if data.use_decimals is not None:
        field.use_decimals = data.use_decimals
    if data.field_order is not None:
        field.field_order = data.field_order
    if data.is_active is not None:
        field.is_active = data.is_active
    field.field_type = field_type
    field.dropdown_options = options
    if field_type != CustomFieldType.NUMBER:
        field.use_decimals = False

    audit_log_service.record(
        db,
        ctx,
        action="custom_field_updated",
        module=AuditModule.SETTINGS,
        description=f"Updated custom field '{field.field_name}'",
        metadata={"custom_field_id": str(field.id)},
        system_edition_id=field.system_edition_id,
    )
    db.commit()
    db.refresh(field)
    return field


def delete_custom_field(db: Session, ctx: ResolvedContext, field: CustomField) -> None:
    """Soft delete a custom field."""
    field.soft_delete()
    audit_log_service.record(
        db,
        ctx,
        action="custom_field_deleted",
        module=AuditModule.SETTINGS,
        description=f"Deleted custom field '{field.field_name}'",
        metadata={"custom_field_id": str(field.id)},
        system_edition_id=field.system_edition_id,
    )
    db.commit()


def update_custom_field_order(
    db: Session,
    ctx: ResolvedContext,
    system_edition_id: uuid.UUID,
    updates: list[CustomFieldOrderItem],
) -> None:
    """Apply new positions to several custom fields in one transaction.

    Raises:
        NotFoundError: If any field does not belong to the system edition.
    """
    ids = {item.id for item in updates}
    fields = {
        field.id: field
        for field in _edition_fields(db, system_edition_id)
        .filter(CustomField.id.in_(ids))
        .all()
    }
    missing = ids - fields.keys()
    if missing:
        raise NotFoundError(
            f"Custom field with ID {sorted(str(i) for i in missing)[0]} not found"
        )

    try:
        for item in updates:
            fields[item.id].field_order = item.field_order
        audit_log_service.record(
            db,
            ctx,
            action="custom_field_order_updated",
            module=AuditModule.SETTINGS,
            description=f"Reordered {len(updates)} custom fields",
            system_edition_id=system_edition_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(
            f"Failed to reorder custom fields in system edition {system_edition_id}"
        )
        raise

    logger.info(
        f"Reordered {len(updates)} custom fields in system edition {system_edition_id}"
    )
