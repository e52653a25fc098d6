# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Delegate access API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_db,
    get_pagination,
    get_request_context,
    require_delegate_access,
)
from tenant_admin.models import DelegateAccess
from tenant_admin.models.enums import DelegatePermission, RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.delegate_access import (
    DelegateAccessResponse,
    DelegateAccessUpdate,
    DelegateInvite,
    DelegateInviteResult,
)
from tenant_admin.schemas.user import UserResponse
from tenant_admin.services import auth_service, delegate_service

ADMIN_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN)

router = APIRouter()


def _get_access_or_404(
    db: Session, ctx: ResolvedContext, access_id: uuid.UUID
) -> DelegateAccess:
    record = delegate_service.get_delegate_access(db, ctx, access_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Delegate access not found",
        )
    return record


@router.get(
    "",
    response_model=PaginatedResponse[DelegateAccessResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def list_delegate_access(
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[DelegateAccessResponse]:
    """List delegate access records, searchable by delegate name or email."""
    records, total = delegate_service.get_delegate_access_list(db, ctx, pagination)
    return PaginatedResponse[DelegateAccessResponse].build(
        [DelegateAccessResponse.model_validate(r) for r in records],
        pagination,
        total,
        message="Delegate access retrieved successfully",
    )


@router.post(
    "/invite",
    response_model=ApiResponse[DelegateInviteResult],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def invite_delegate(
    data: DelegateInvite,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[DelegateInviteResult]:
    """Grant the caller's access to a delegate, creating the account if needed."""
    record, created = delegate_service.invite_delegate(db, ctx, data)
    return ApiResponse(
        message="Delegate invited successfully",
        data=DelegateInviteResult(
            user_created=created,
            delegate_access=DelegateAccessResponse.model_validate(record),
        ),
    )


@router.get(
    "/delegators/{user_id}",
    response_model=ApiResponse[UserResponse],
    dependencies=[
        Depends(authorize(RoleName.DELEGATE)),
        Depends(require_delegate_access(DelegatePermission.VIEW_USERS)),
    ],
)
def get_delegator(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """Get the account a delegate acts for."""
    delegator = auth_service.get_user_by_id(db, user_id)
    if not delegator:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return ApiResponse(
        message="Delegator retrieved successfully",
        data=UserResponse.model_validate(delegator),
    )


@router.get(
    "/{access_id}",
    response_model=ApiResponse[DelegateAccessResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES, RoleName.DELEGATE))],
)
def get_delegate_access(
    access_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[DelegateAccessResponse]:
    """Get a delegate access record. Delegates only see their own."""
    record = _get_access_or_404(db, ctx, access_id)
    return ApiResponse(
        message="Delegate access retrieved successfully",
        data=DelegateAccessResponse.model_validate(record),
    )


@router.put(
    "/{access_id}",
    response_model=ApiResponse[DelegateAccessResponse],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def update_delegate_access(
    access_id: uuid.UUID,
    data: DelegateAccessUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[DelegateAccessResponse]:
    record = _get_access_or_404(db, ctx, access_id)
    record = delegate_service.update_delegate_access(db, ctx, record, data)
    return ApiResponse(
        message="Delegate access updated successfully",
        data=DelegateAccessResponse.model_validate(record),
    )


@router.delete(
    "/{access_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(authorize(*ADMIN_ROLES))],
)
def delete_delegate_access(
    access_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Revoke a delegate access record."""
    record = _get_access_or_404(db, ctx, access_id)
    delegate_service.delete_delegate_access(db, ctx, record)
    return ApiResponse(message="Delegate access deleted successfully")
