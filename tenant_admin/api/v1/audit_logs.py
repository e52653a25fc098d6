# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Audit log API endpoints."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from tenant_admin.api.deps import authorize, get_db, get_pagination, require_policy
from tenant_admin.errors import BadRequestError
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.rbac import policies
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.audit_log import AuditLogFilters, AuditLogResponse, AuditLogUser
from tenant_admin.schemas.common import PaginatedResponse, PaginationParams, utc_now
from tenant_admin.services import audit_log_service

READ_ROLES = (
    RoleName.SUPER_ADMIN,
    RoleName.EDITION_ADMIN,
    RoleName.COMPANY_ADMIN,
    RoleName.USER,
)

router = APIRouter()

read_context = require_policy(
    policies.can_read_audit_logs, "You cannot access audit logs"
)


def get_audit_filters(
    search: str | None = Query(None),
    module: AuditModule | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    user_id: uuid.UUID | None = Query(None),
    ctx: ResolvedContext = Depends(read_context),
) -> AuditLogFilters:
    """Combine the query filters with the caller's scope.

    Edition and company come from the resolved context, so only super
    admins can widen them. Regular users are limited to their own entries.
    """
    if ctx.system_edition_id is None and not ctx.is_super_admin:
        raise BadRequestError("System edition ID is required")
    return AuditLogFilters(
        search=search or None,
        module=module,
        date_from=date_from,
        date_to=date_to,
        system_edition_id=ctx.system_edition_id,
        company_id=ctx.company_id,
        user_id=policies.audit_scope_user_id(ctx, user_id),
    )


def _to_response(log, user) -> AuditLogResponse:
    response = AuditLogResponse.model_validate(log)
    if user is not None:
        response.user = AuditLogUser.model_validate(user)
    return response


@router.get(
    "",
    response_model=PaginatedResponse[AuditLogResponse],
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def list_audit_logs(
    filters: AuditLogFilters = Depends(get_audit_filters),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> PaginatedResponse[AuditLogResponse]:
    """List audit entries, newest first."""
    rows, total = audit_log_service.get_audit_logs(
        db, filters, offset=pagination.offset, limit=pagination.limit
    )
    return PaginatedResponse[AuditLogResponse].build(
        [_to_response(log, user) for log, user in rows],
        pagination,
        total,
        message="Audit logs retrieved successfully",
    )


@router.get(
    "/export",
    response_class=Response,
    dependencies=[Depends(authorize(*READ_ROLES))],
)
def export_audit_logs(
    filters: AuditLogFilters = Depends(get_audit_filters),
    db: Session = Depends(get_db),
) -> Response:
    """Download the matching audit entries as CSV."""
    content = audit_log_service.export_audit_logs_csv(db, filters)
    filename = f"audit-logs-{utc_now().date().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
