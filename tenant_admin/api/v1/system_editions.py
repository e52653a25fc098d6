# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""System edition API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_db,
    get_pagination,
    get_request_context,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from tenant_admin.models import SystemEdition
from tenant_admin.models.enums import RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.rbac.permissions import Permission
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.company import CompanyResponse
from tenant_admin.schemas.system_edition import (
    CoBranding,
    CoBrandingUpdate,
    SystemEditionCreate,
    SystemEditionOverview,
    SystemEditionResponse,
    SystemEditionUpdate,
)
from tenant_admin.schemas.user import UserResponse
from tenant_admin.services import context_service, system_edition_service, user_service

ADMIN_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN)

router = APIRouter()


def _get_edition_or_404(
    db: Session, ctx: ResolvedContext, system_edition_id: uuid.UUID
) -> SystemEdition:
    """Load an edition the caller may access.

    Edition admins only see their own edition.
    """
    if not context_service.validate_system_edition_access(ctx, system_edition_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this system edition",
        )
    edition = system_edition_service.get_system_edition(db, system_edition_id)
    if not edition:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="System edition not found",
        )
    return edition


@router.get(
    "",
    response_model=PaginatedResponse[SystemEditionResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def list_system_editions(
    archived: bool | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[SystemEditionResponse]:
    """List system editions."""
    editions, total = system_edition_service.get_system_editions(
        db, ctx, pagination, archived=archived
    )
    return PaginatedResponse[SystemEditionResponse].build(
        [SystemEditionResponse.model_validate(e) for e in editions],
        pagination,
        total,
        message="System editions retrieved successfully",
    )


@router.post(
    "",
    response_model=ApiResponse[SystemEditionResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(RoleName.SUPER_ADMIN))],
)
def create_system_edition(
    data: SystemEditionCreate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[SystemEditionResponse]:
    """Create a system edition."""
    edition = system_edition_service.create_system_edition(db, ctx, data)
    return ApiResponse(
        message="System edition created successfully",
        data=SystemEditionResponse.model_validate(edition),
    )


@router.get(
    "/{system_edition_id}",
    response_model=ApiResponse[SystemEditionResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def get_system_edition(
    system_edition_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[SystemEditionResponse]:
    """Get a system edition by ID."""
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    return ApiResponse(
        message="System edition retrieved successfully",
        data=SystemEditionResponse.model_validate(edition),
    )


@router.put(
    "/{system_edition_id}",
    response_model=ApiResponse[SystemEditionResponse],
    dependencies=[
        Depends(authorize(*ADMIN_ROLES)),
        Depends(require_permission(Permission.UPDATE_EDITION)),
    ],
)
def update_system_edition(
    system_edition_id: uuid.UUID,
    data: SystemEditionUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[SystemEditionResponse]:
    """Update a system edition."""
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    edition = system_edition_service.update_system_edition(db, ctx, edition, data)
    return ApiResponse(
        message="System edition updated successfully",
        data=SystemEditionResponse.model_validate(edition),
    )


@router.delete(
    "/{system_edition_id}",
    response_model=ApiResponse[None],
    dependencies=[
        Depends(authorize(RoleName.SUPER_ADMIN)),
        # Deleting an edition also removes its companies and tags
        Depends(
            require_all_permissions(
                Permission.DELETE_EDITION, Permission.DELETE_COMPANY, Permission.DELETE_TAG
            )
        ),
    ],
)
def delete_system_edition(
    system_edition_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Delete a system edition with its companies and tags."""
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    system_edition_service.delete_system_edition(db, ctx, edition)
    return ApiResponse(message="System edition deleted successfully")


@router.get(
    "/{system_edition_id}/overview",
    response_model=ApiResponse[SystemEditionOverview],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def get_system_edition_overview(
    system_edition_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[SystemEditionOverview]:
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    return ApiResponse(
        message="System edition overview retrieved successfully",
        data=system_edition_service.get_overview(db, edition),
    )


@router.get(
    "/{system_edition_id}/companies",
    response_model=PaginatedResponse[CompanyResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def list_system_edition_companies(
    system_edition_id: uuid.UUID,
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[CompanyResponse]:
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    companies, total = system_edition_service.get_companies(db, edition.id, pagination)
    return PaginatedResponse[CompanyResponse].build(
        [CompanyResponse.model_validate(c) for c in companies],
        pagination,
        total,
        message="Companies retrieved successfully",
    )


@router.get(
    "/{system_edition_id}/users",
    response_model=PaginatedResponse[UserResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def list_system_edition_users(
    system_edition_id: uuid.UUID,
    role: RoleName | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[UserResponse]:
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    users, total = user_service.get_users_by_system_edition(
        db, edition.id, pagination, role=role
    )
    return PaginatedResponse[UserResponse].build(
        [UserResponse.model_validate(u) for u in users],
        pagination,
        total,
        message="Users retrieved successfully",
    )


@router.get(
    "/{system_edition_id}/co-branding",
    response_model=ApiResponse[CoBranding],
    dependencies=[
        Depends(authorize(*ADMIN_ROLES)),
        Depends(
            require_any_permission(Permission.READ_COBRANDING, Permission.UPDATE_COBRANDING)
        ),
    ],
)
def get_co_branding(
    system_edition_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CoBranding]:
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    return ApiResponse(
        message="Co-branding configuration retrieved successfully",
        data=system_edition_service.get_co_branding(edition),
    )


@router.put(
    "/{system_edition_id}/co-branding",
    response_model=ApiResponse[CoBranding],
    dependencies=[
        Depends(authorize(*ADMIN_ROLES)),
        Depends(require_permission(Permission.UPDATE_COBRANDING)),
    ],
)
def update_co_branding(
    system_edition_id: uuid.UUID,
    data: CoBrandingUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CoBranding]:
    """Update organization name, slogan, logo and brand colors."""
    edition = _get_edition_or_404(db, ctx, system_edition_id)
    return ApiResponse(
        message="Co-branding configuration updated successfully",
        data=system_edition_service.update_co_branding(db, ctx, edition, data),
    )
