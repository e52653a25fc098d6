# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from tenant_admin.api.v1 import (
    audit_logs,
    companies,
    custom_fields,
    delegate_access,
    super_admin,
    system_editions,
    tags,
    users,
)

api_router = APIRouter()

# User and authentication routes
api_router.include_router(users.router, prefix="/users", tags=["users"])

# System edition routes
api_router.include_router(
    system_editions.router, prefix="/system-editions", tags=["system-editions"]
)

# Company routes
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])

# Tag routes
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])

# Custom field routes
api_router.include_router(
    custom_fields.router, prefix="/custom-fields", tags=["custom-fields"]
)

# Delegate access routes
api_router.include_router(
    delegate_access.router, prefix="/delegate-access", tags=["delegate-access"]
)

# Audit log routes
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])

# Super admin routes
api_router.include_router(super_admin.router, prefix="/super-admin", tags=["super-admin"])
