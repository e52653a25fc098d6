# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Super admin dashboard API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenant_admin.api.deps import authorize, get_db
from tenant_admin.models.enums import RoleName
from tenant_admin.schemas.common import ApiResponse
from tenant_admin.schemas.super_admin import DashboardResponse
from tenant_admin.services import super_admin_service

router = APIRouter()


@router.get(
    "/dashboard-metrics",
    response_model=ApiResponse[DashboardResponse],
    dependencies=[Depends(authorize(RoleName.SUPER_ADMIN))],
)
def get_dashboard_metrics(db: Session = Depends(get_db)) -> ApiResponse[DashboardResponse]:
    """Platform metrics, statistics and recent activity."""
    return ApiResponse(
        message="Dashboard metrics retrieved successfully",
        data=super_admin_service.get_dashboard(db),
    )
