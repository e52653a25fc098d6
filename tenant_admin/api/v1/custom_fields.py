# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Custom field API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_db,
    get_pagination,
    get_request_context,
    require_permission,
)
from tenant_admin.errors import BadRequestError
from tenant_admin.models import CustomField
from tenant_admin.models.enums import CustomFieldType, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.rbac.permissions import Permission
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.custom_field import (
    CustomFieldCreate,
    CustomFieldOrderUpdate,
    CustomFieldResponse,
    CustomFieldStats,
    CustomFieldUpdate,
)
from tenant_admin.services import custom_field_service

READ_ROLES = (
    RoleName.SUPER_ADMIN,
    RoleName.EDITION_ADMIN,
    RoleName.COMPANY_ADMIN,
    RoleName.USER,
)
WRITE_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN)

router = APIRouter()


def _edition_id(ctx: ResolvedContext) -> uuid.UUID:
    if ctx.system_edition_id is None:
        raise BadRequestError("System edition ID is required")
    return ctx.system_edition_id


def _get_field_or_404(
    db: Session, ctx: ResolvedContext, field_id: uuid.UUID
) -> CustomField:
    field = custom_field_service.get_custom_field(db, _edition_id(ctx), field_id)
    if not field:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Custom field not found",
        )
    return field


@router.get(
    "",
    response_model=PaginatedResponse[CustomFieldResponse],
    dependencies=[
        Depends(authorize(*READ_ROLES)),
        Depends(require_permission(Permission.READ_CUSTOM_FIELD)),
    ],
)
def list_custom_fields(
    field_type: CustomFieldType | None = Query(None),
    is_active: bool | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[CustomFieldResponse]:
    """List custom fields of the caller's system edition in field order."""
    fields, total = custom_field_service.get_custom_fields(
        db, _edition_id(ctx), pagination, field_type=field_type, is_active=is_active
    )
    return PaginatedResponse[CustomFieldResponse].build(
        [CustomFieldResponse.model_validate(f) for f in fields],
        pagination,
        total,
        message="Custom fields retrieved successfully",
    )


@router.get(
    "/stats",
    response_model=ApiResponse[CustomFieldStats],
    dependencies=[
        Depends(authorize(*READ_ROLES)),
        Depends(require_permission(Permission.READ_CUSTOM_FIELD)),
    ],
)
def get_custom_field_stats(
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CustomFieldStats]:
    return ApiResponse(
        message="Custom field statistics retrieved successfully",
        data=custom_field_service.get_custom_field_stats(db, _edition_id(ctx)),
    )


@router.put(
    "/order",
    response_model=ApiResponse[None],
    dependencies=[
        Depends(authorize(*WRITE_ROLES)),
        Depends(require_permission(Permission.UPDATE_CUSTOM_FIELD)),
    ],
)
def update_custom_field_order(
    data: CustomFieldOrderUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Apply new positions to several custom fields at once."""
    custom_field_service.update_custom_field_order(
        db, ctx, _edition_id(ctx), data.field_updates
    )
    return ApiResponse(message="Custom field order updated successfully")


@router.get(
    "/{field_id}",
    response_model=ApiResponse[CustomFieldResponse],
    dependencies=[
        Depends(authorize(*READ_ROLES)),
        Depends(require_permission(Permission.READ_CUSTOM_FIELD)),
    ],
)
def get_custom_field(
    field_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CustomFieldResponse]:
    field = _get_field_or_404(db, ctx, field_id)
    return ApiResponse(
        message="Custom field retrieved successfully",
        data=CustomFieldResponse.model_validate(field),
    )


@router.post(
    "",
    response_model=ApiResponse[CustomFieldResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(authorize(*WRITE_ROLES)),
        Depends(require_permission(Permission.CREATE_CUSTOM_FIELD)),
    ],
)
def create_custom_field(
    data: CustomFieldCreate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CustomFieldResponse]:
    """Create a custom field in the caller's system edition."""
    field = custom_field_service.create_custom_field(db, ctx, _edition_id(ctx), data)
    return ApiResponse(
        message="Custom field created successfully",
        data=CustomFieldResponse.model_validate(field),
    )


@router.put(
    "/{field_id}",
    response_model=ApiResponse[CustomFieldResponse],
    dependencies=[
        Depends(authorize(*WRITE_ROLES)),
        Depends(require_permission(Permission.UPDATE_CUSTOM_FIELD)),
    ],
)
def update_custom_field(
    field_id: uuid.UUID,
    data: CustomFieldUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CustomFieldResponse]:
    field = _get_field_or_404(db, ctx, field_id)
    field = custom_field_service.update_custom_field(db, ctx, field, data)
    return ApiResponse(
        message="Custom field updated successfully",
        data=CustomFieldResponse.model_validate(field),
    )


@router.delete(
    "/{field_id}",
    response_model=ApiResponse[None],
    dependencies=[
        Depends(authorize(*WRITE_ROLES)),
        Depends(require_permission(Permission.DELETE_CUSTOM_FIELD)),
    ],
)
def delete_custom_field(
    field_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Soft delete a custom field."""
    field = _get_field_or_404(db, ctx, field_id)
    custom_field_service.delete_custom_field(db, ctx, field)
    return ApiResponse(message="Custom field deleted successfully")
