# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User management and authentication API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from tenant_admin.api.deps import (
    authorize,
    get_current_user,
    get_db,
    get_own_context,
    get_pagination,
    get_request_context,
)
from tenant_admin.models import User
from tenant_admin.models.enums import RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.rbac.roles import get_role_definition, get_role_permissions
from tenant_admin.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from tenant_admin.schemas.common import ApiResponse, PaginatedResponse, PaginationParams
from tenant_admin.schemas.user import (
    PasswordChange,
    RolePermissions,
    UserCreate,
    UserProfileUpdate,
    UserResponse,
    UserUpdate,
)
from tenant_admin.services import auth_service, context_service, user_service

MANAGER_ROLES = (RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN, RoleName.COMPANY_ADMIN)

router = APIRouter()


def _client(request: Request) -> tuple[str | None, str | None]:
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")


def _get_user_or_404(db: Session, ctx: ResolvedContext, user_id: uuid.UUID) -> User:
    user = user_service.get_user(db, ctx, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.post("/login", response_model=ApiResponse[TokenResponse])
def login(
    data: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> ApiResponse[TokenResponse]:
    """Exchange email and password for a bearer token."""
    user, token = auth_service.login(db, data.email, data.password, *_client(request))
    return ApiResponse(
        message="Login successful",
        data=TokenResponse(access_token=token, user=UserResponse.model_validate(user)),
    )


@router.post(
    "/register",
    response_model=ApiResponse[TokenResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> ApiResponse[TokenResponse]:
    """Register a new regular user and log them in."""
    user = auth_service.register_user(db, data, *_client(request))
    return ApiResponse(
        message="User registered successfully",
        data=TokenResponse(
            access_token=auth_service.issue_token(user),
            user=UserResponse.model_validate(user),
        ),
    )


@router.get("/profile", response_model=ApiResponse[UserResponse])
def get_profile(
    current_user: User = Depends(get_current_user),
) -> ApiResponse[UserResponse]:
    """Get the caller's profile."""
    return ApiResponse(
        message="Profile retrieved successfully",
        data=UserResponse.model_validate(current_user),
    )


@router.put("/profile", response_model=ApiResponse[UserResponse])
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[UserResponse]:
    """Update the caller's name and phone number."""
    user = user_service.update_profile(db, current_user, data)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.get("/profile/permissions", response_model=ApiResponse[RolePermissions])
def get_profile_permissions(
    current_user: User = Depends(get_current_user),
) -> ApiResponse[RolePermissions]:
    """Get the permissions and scope granted by the caller's role."""
    definition = get_role_definition(current_user.role)
    return ApiResponse(
        message="Permissions retrieved successfully",
        data=RolePermissions(
            role=definition.name,
            scope=definition.scope,
            permissions=sorted(p.value for p in get_role_permissions(current_user.role)),
        ),
    )


@router.put("/profile/password", response_model=ApiResponse[None])
def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ctx: ResolvedContext = Depends(get_own_context),
) -> ApiResponse[None]:
    """Change the caller's password."""
    user_service.change_password(db, ctx, current_user, data)
    return ApiResponse(message="Password changed successfully")


@router.get(
    "/system-edition/{system_edition_id}",
    response_model=PaginatedResponse[UserResponse],
    dependencies=[Depends(authorize(RoleName.SUPER_ADMIN, RoleName.EDITION_ADMIN))],
)
def list_users_by_system_edition(
    system_edition_id: uuid.UUID,
    role: RoleName | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[UserResponse]:
    """List the users assigned to a system edition."""
    if not context_service.validate_system_edition_access(ctx, system_edition_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this system edition",
        )
    users, total = user_service.get_users_by_system_edition(
        db, system_edition_id, pagination, role=role
    )
    return PaginatedResponse[UserResponse].build(
        [UserResponse.model_validate(u) for u in users],
        pagination,
        total,
        message="Users retrieved successfully",
    )


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def list_users(
    role: RoleName | None = Query(None),
    is_active: bool | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> PaginatedResponse[UserResponse]:
    """List the users inside the caller's scope."""
    users, total = user_service.get_users(
        db, ctx, pagination, role=role, is_active=is_active
    )
    return PaginatedResponse[UserResponse].build(
        [UserResponse.model_validate(u) for u in users],
        pagination,
        total,
        message="Users retrieved successfully",
    )


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[UserResponse]:
    """Create a user."""
    user = user_service.create_user(db, ctx, data)
    return ApiResponse(
        message="User created successfully",
        data=UserResponse.model_validate(user),
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[UserResponse]:
    """Get a user by ID."""
    user = _get_user_or_404(db, ctx, user_id)
    return ApiResponse(
        message="User retrieved successfully",
        data=UserResponse.model_validate(user),
    )


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def update_user(
    user_id: uuid.UUID,
    data: UserUpdate,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[UserResponse]:
    """Update a user."""
    user = _get_user_or_404(db, ctx, user_id)
    user = user_service.update_user(db, ctx, user, data)
    return ApiResponse(
        message="User updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(authorize(*MANAGER_ROLES))],
)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: ResolvedContext = Depends(get_request_context),
) -> ApiResponse[None]:
    """Delete a user."""
    user = _get_user_or_404(db, ctx, user_id)
    user_service.delete_user(db, ctx, user)
    return ApiResponse(message="User deleted successfully")
