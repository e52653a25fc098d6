# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Resolution of the scope a caller acts within for one request."""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from tenant_admin.errors import ForbiddenError
from tenant_admin.models import Company, User
from tenant_admin.models.enums import RoleName
from tenant_admin.rbac.context import ResolvedContext

logger = logging.getLogger(__name__)

EDITION_PARAM = "system_edition_id"
COMPANY_PARAM = "company_id"


def parse_uuid(value: Any) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _requested(
    name: str, path_params: Mapping[str, Any], query_params: Mapping[str, Any]
) -> uuid.UUID | None:
    return parse_uuid(path_params.get(name)) or parse_uuid(query_params.get(name))


def resolve_context(
    db: Session,
    user: User,
    path_params: Mapping[str, Any] | None = None,
    query_params: Mapping[str, Any] | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ResolvedContext:
    """Compute the caller's scope identifiers from their assignment.

    Super admins may select any edition or company through the
    ``system_edition_id`` / ``company_id`` path or query parameters. Edition
    admins may narrow to a company of their own edition. Roles whose scope
    needs an identifier that is not assigned are rejected.

    Raises:
        ForbiddenError: If a required scope identifier cannot be resolved or
            a requested company lies outside the caller's edition.
    """
    path_params = path_params or {}
    query_params = query_params or {}

    system_edition_id = user.system_edition_id
    company_id = user.company_id

    if company_id is not None and system_edition_id is None:
        company = db.get(Company, company_id)
        if company is not None:
            system_edition_id = company.system_edition_id

    requested_edition_id = _requested(EDITION_PARAM, path_params, query_params)
    requested_company_id = _requested(COMPANY_PARAM, path_params, query_params)

    if user.role == RoleName.SUPER_ADMIN:
        if requested_edition_id is not None:
            system_edition_id = requested_edition_id
        if requested_company_id is not None:
            company_id = requested_company_id
            if requested_edition_id is None:
                company = db.get(Company, requested_company_id)
                if company is not None:
                    system_edition_id = company.system_edition_id

    elif user.role == RoleName.EDITION_ADMIN:
        if system_edition_id is None:
            raise ForbiddenError("No system edition assigned to your account")
        if requested_company_id is not None:
            company = db.get(Company, requested_company_id)
            if company is None or company.system_edition_id != system_edition_id:
                logger.warning(
                    f"Edition admin {user.id} requested company {requested_company_id} "
                    "outside their edition"
                )
                raise ForbiddenError("Company does not belong to your system edition")
            company_id = requested_company_id

    elif user.role == RoleName.COMPANY_ADMIN:
        if company_id is None:
            raise ForbiddenError("No company assigned to your account")

    return ResolvedContext(
        user_id=user.id,
        role_name=user.role,
        company_id=company_id,
        system_edition_id=system_edition_id,
        ip_address=ip_address,
        user_agent=user_agent,
    )


def own_context(
    user: User, ip_address: str | None = None, user_agent: str | None = None
) -> ResolvedContext:
    """Context for acting on the caller's own account.

    Nothing is required of the scope, so accounts with an incomplete
    assignment can still log in and change their password.
    """
    return ResolvedContext(
        user_id=user.id,
        role_name=user.role,
        company_id=user.company_id,
        system_edition_id=user.system_edition_id,
        ip_address=ip_address,
        user_agent=user_agent,
    )


def validate_company_access(
    db: Session, ctx: ResolvedContext, company_id: uuid.UUID | None
) -> bool:
    """Check whether the resolved context may access a company."""
    if company_id is None:
        return False
    if ctx.role_name == RoleName.SUPER_ADMIN:
        return True
    if ctx.role_name == RoleName.EDITION_ADMIN:
        if ctx.system_edition_id is None:
            return False
        company = db.get(Company, company_id)
        return company is not None and company.system_edition_id == ctx.system_edition_id
    return ctx.company_id == company_id


def validate_system_edition_access(
    ctx: ResolvedContext, system_edition_id: uuid.UUID | None
) -> bool:
    """Check whether the resolved context may access a system edition."""
    if system_edition_id is None:
        return False
    if ctx.role_name == RoleName.SUPER_ADMIN:
        return True
    return ctx.system_edition_id == system_edition_id
