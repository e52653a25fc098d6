# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Company API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_db,
    get_pagination,
    get_request_context,
    require_permission,
    require_policy,
)
from tenant_admin.models import Company
from tenant_admin.models.enums import RoleName
from tenant_admin.rbac import policies
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.rbac.permissions import Permission
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.company import (
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    PinConfiguration,
    PinManagementUpdate,
    PinValidationRequest,
    PinValidationResult,
)
from tenant_admin.schemas.user import UserResponse
from tenant_admin.services import company_service, context_service

EDITION_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN)
MANAGER_ROLES = (*EDITION_ROLES, RoleName.COMPANY_ADMIN)
MEMBER_ROLES = (*MANAGER_ROLES, RoleName.USER)

router = APIRouter()


def _get_company_or_404(
    db: Session, ctx: ResolvedContext, company_id: uuid.UUID
) -> Company:
    """Load a company the caller may access."""
    if not context_service.validate_company_access(db, ctx, company_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this company",
        )
    company = company_service.get_company(db, ctx, company_id)
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found",
        )
    return company


@router.get(
    "",
    response_model=PaginatedResponse[CompanyResponse],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def list_companies(
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[CompanyResponse]:
    """List the companies inside the caller's scope."""
    companies, total = company_service.get_companies(db, ctx, pagination)
    return PaginatedResponse[CompanyResponse].build(
        [CompanyResponse.model_validate(c) for c in companies],
        pagination,
        total,
        message="Companies retrieved successfully",
    )


@router.post(
    "",
    response_model=ApiResponse[CompanyResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(*EDITION_ROLES))],
)
def create_company(
    data: CompanyCreate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CompanyResponse]:
    """Create a company."""
    company = company_service.create_company(db, ctx, data)
    return ApiResponse(
        message="Company created successfully",
        data=CompanyResponse.model_validate(company),
    )


@router.get(
    "/me",
    response_model=ApiResponse[CompanyResponse],
    dependencies=[Depends(authorize(*MEMBER_ROLES))],
)
def get_my_company(
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CompanyResponse]:
    """Get the company the caller is assigned to."""
    company = (
        company_service.get_company(db, ctx, ctx.company_id)
        if ctx.company_id is not None
        else None
    )
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No company assigned to your account",
        )
    return ApiResponse(
        message="Company retrieved successfully",
        data=CompanyResponse.model_validate(company),
    )


@router.get(
    "/{company_id}",
    response_model=ApiResponse[CompanyResponse],
    dependencies=[Depends(authorize(*EDITION_ROLES))],
)
def get_company(
    company_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CompanyResponse]:
    """Get a company by ID."""
    company = _get_company_or_404(db, ctx, company_id)
    return ApiResponse(
        message="Company retrieved successfully",
        data=CompanyResponse.model_validate(company),
    )


@router.put(
    "/{company_id}",
    response_model=ApiResponse[CompanyResponse],
    dependencies=[
        Depends(authorize(*MANAGER_ROLES)),
        Depends(require_permission(Permission.UPDATE_COMPANY)),
    ],
)
def update_company(
    company_id: uuid.UUID,
    data: CompanyUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[CompanyResponse]:
    """Update a company."""
    company = _get_company_or_404(db, ctx, company_id)
    company = company_service.update_company(db, ctx, company, data)
    return ApiResponse(
        message="Company updated successfully",
        data=CompanyResponse.model_validate(company),
    )


@router.delete(
    "/{company_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(authorize(*EDITION_ROLES))],
)
def delete_company(
    company_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Delete a company."""
    company = _get_company_or_404(db, ctx, company_id)
    company_service.delete_company(db, ctx, company)
    return ApiResponse(message="Company deleted successfully")


@router.get(
    "/{company_id}/users",
    response_model=PaginatedResponse[UserResponse],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def list_company_users(
    company_id: uuid.UUID,
    role: RoleName | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[UserResponse]:
    """List the users of a company."""
    company = _get_company_or_404(db, ctx, company_id)
    users, total = company_service.get_company_users(db, company.id, pagination, role=role)
    return PaginatedResponse[UserResponse].build(
        [UserResponse.model_validate(u) for u in users],
        pagination,
        total,
        message="Company users retrieved successfully",
    )


@router.put(
    "/{company_id}/pin-management",
    response_model=ApiResponse[PinConfiguration],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def update_pin_management(
    company_id: uuid.UUID,
    data: PinManagementUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_manage_pin, "You cannot manage PIN settings")
    ),
) -> ApiResponse[PinConfiguration]:
    """Set the master PIN and PIN options of a company."""
    company = _get_company_or_404(db, ctx, company_id)
    return ApiResponse(
        message="PIN management updated successfully",
        data=company_service.update_pin_management(db, ctx, company, data),
    )


@router.post(
    "/{company_id}/validate-pin",
    response_model=ApiResponse[PinValidationResult],
    dependencies=[Depends(authorize(*MEMBER_ROLES))],
)
def validate_pin(
    company_id: uuid.UUID,
    data: PinValidationRequest,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_view_pin_configuration, "Company ID is required")
    ),
) -> ApiResponse[PinValidationResult]:
    """Check a PIN against the company's master PIN."""
    company = _get_company_or_404(db, ctx, company_id)
    if not company.has_master_pin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No master PIN configured for this company",
        )
    is_valid = company_service.validate_pin(company, data.pin)
    return ApiResponse(
        message="PIN is valid" if is_valid else "PIN is invalid",
        data=PinValidationResult(is_valid=is_valid),
    )


@router.get(
    "/{company_id}/pin-configuration",
    response_model=ApiResponse[PinConfiguration],
    dependencies=[Depends(authorize(*MEMBER_ROLES))],
)
def get_pin_configuration(
    company_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(
        require_policy(policies.can_view_pin_configuration, "Company ID is required")
    ),
) -> ApiResponse[PinConfiguration]:
    """Get PIN options and settings without the PIN itself."""
    company = _get_company_or_404(db, ctx, company_id)
    return ApiResponse(
        message="PIN configuration retrieved successfully",
        data=company_service.get_pin_configuration(company),
    )
