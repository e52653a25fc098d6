# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import logging
import uuid
from collections.abc import Callable

import jwt
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tenant_admin.database import get_db
from tenant_admin.models import User
from tenant_admin.models.enums import DelegatePermission, RoleName
from tenant_admin.rbac.context import PermissionContext, ResolvedContext
from tenant_admin.rbac.permissions import Permission
from tenant_admin.rbac.policies import Policy
from tenant_admin.rbac.roles import role_has_permission
from tenant_admin.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PaginationParams
from tenant_admin.security import decode_access_token
from tenant_admin.services import auth_service, context_service, permission_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

__all__ = [
    "authorize",
    "get_current_user",
    "get_db",
    "get_own_context",
    "get_pagination",
    "get_request_context",
    "require_all_permissions",
    "require_any_permission",
    "require_delegate_access",
    "require_permission",
    "require_policy",
]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Get current authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Access token required")

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = uuid.UUID(str(payload["sub"]))
    except (jwt.PyJWTError, KeyError, ValueError):
        raise _unauthorized("Invalid or expired token") from None

    user = auth_service.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise _unauthorized("User not found or inactive")

    return user


def authorize(*roles: RoleName) -> Callable[..., User]:
    """Dependency factory admitting only the given roles.

    Use it in a route's ``dependencies`` so it runs before the context is
    resolved.
    """
    allowed = frozenset(roles)

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"User {current_user.id} with role {current_user.role.value} denied, "
                f"requires one of {sorted(role.value for role in allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return dependency


def get_request_context(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResolvedContext:
    """Resolve the caller's scope for this request."""
    return context_service.resolve_context(
        db,
        current_user,
        path_params=request.path_params,
        query_params=request.query_params,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_own_context(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> ResolvedContext:
    """Context for self-service routes, without requiring a scope."""
    return context_service.own_context(
        current_user,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _permission_context(request: Request, ctx: ResolvedContext) -> PermissionContext:
    """Caller scope plus the targets named by the route's path parameters."""
    params = request.path_params
    return ctx.to_permission_context(
        target_user_id=context_service.parse_uuid(params.get("user_id")),
        target_company_id=context_service.parse_uuid(params.get("company_id")),
        target_system_edition_id=context_service.parse_uuid(params.get("system_edition_id")),
    )


def _denial(db: Session, pctx: PermissionContext, permission: Permission) -> str | None:
    if not role_has_permission(pctx.user_role, permission):
        return f"Permission denied: {permission.value}"
    result = permission_service.check_permission(db, pctx, permission)
    if result:
        return None
    logger.warning(f"User {pctx.user_id} denied {permission.value}: {result.reason}")
    return result.reason


def require_permission(permission: Permission) -> Callable[..., ResolvedContext]:
    """Dependency for permission-based authorization.

    The role must grant the permission and every target in the path must
    lie inside the caller's scope.
    """

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        ctx: ResolvedContext = Depends(get_request_context),
    ) -> ResolvedContext:
        denial = _denial(db, _permission_context(request, ctx), permission)
        if denial:
            raise _forbidden(denial)
        return ctx

    return dependency


def require_all_permissions(*permissions: Permission) -> Callable[..., ResolvedContext]:
    """Dependency requiring every listed permission."""

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        ctx: ResolvedContext = Depends(get_request_context),
    ) -> ResolvedContext:
        pctx = _permission_context(request, ctx)
        for permission in permissions:
            denial = _denial(db, pctx, permission)
            if denial:
                raise _forbidden(denial)
        return ctx

    return dependency


def require_any_permission(*permissions: Permission) -> Callable[..., ResolvedContext]:
    """Dependency requiring at least one of the listed permissions."""

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        ctx: ResolvedContext = Depends(get_request_context),
    ) -> ResolvedContext:
        granted = [p for p in permissions if role_has_permission(ctx.role_name, p)]
        if not granted:
            raise _forbidden(f"Permission denied: {', '.join(p.value for p in permissions)}")

        pctx = _permission_context(request, ctx)
        denials = [_denial(db, pctx, permission) for permission in granted]
        if all(denials):
            raise _forbidden(denials[0])
        return ctx

    return dependency


def require_delegate_access(permission: DelegatePermission) -> Callable[..., User]:
    """Dependency for delegates acting on behalf of the user in ``user_id``."""

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ) -> User:
        if current_user.role != RoleName.DELEGATE:
            raise _forbidden("Delegate access required")

        delegator_id = context_service.parse_uuid(request.path_params.get("user_id"))
        if delegator_id is None:
            raise _forbidden("Target user ID required for delegate access")

        result = permission_service.check_delegate_access(
            db, current_user.id, delegator_id, permission
        )
        if not result:
            logger.warning(
                f"Delegate {current_user.id} denied {permission.value} "
                f"for {delegator_id}: {result.reason}"
            )
            raise _forbidden(result.reason)
        return current_user

    return dependency


def require_policy(policy: Policy, message: str) -> Callable[..., ResolvedContext]:
    """Dependency applying a policy predicate to the resolved context."""

    def dependency(ctx: ResolvedContext = Depends(get_request_context)) -> ResolvedContext:
        if not policy(ctx):
            raise _forbidden(message)
        return ctx

    return dependency


def get_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(None),
) -> PaginationParams:
    """Page, limit and search query parameters."""
    return PaginationParams(page=page, limit=limit, search=search or None)
