# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Super admin dashboard schemas."""
import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

ChangeType = Literal["increase", "decrease", "neutral", "new"]


class MetricData(BaseModel):
    value: float
    change_indicator: str
    change_type: ChangeType
    change_value: float
    change_period: Literal["month", "week", "day"] = "month"


class RevenueMetricData(MetricData):
    currency: str = "USD"


class DashboardMetrics(BaseModel):
    total_users: MetricData
    active_editions: MetricData
    safety_ids_created: MetricData
    monthly_revenue: RevenueMetricData


class PlatformStats(BaseModel):
    total_companies: int
    total_system_editions: int
    active_users_this_month: int
    inactive_users: int
    pending_approvals: int
    system_health: Literal["healthy", "warning", "critical"]


class RecentActivity(BaseModel):
    id: uuid.UUID
    type: str
    description: str
    timestamp: datetime
    severity: Literal["info", "warning", "error"] = "info"
    user_id: Optional[uuid.UUID] = None


class DashboardResponse(BaseModel):
    """Everything the super admin dashboard shows."""

    dashboard_metrics: DashboardMetrics
    platform_stats: PlatformStats
    recent_activity: list[RecentActivity]
