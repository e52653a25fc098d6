# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Platform-wide figures for the super admin dashboard."""

from datetime import datetime

from sqlalchemy.orm import Session

from tenant_admin.models import Company, SystemEdition, User
from tenant_admin.models.base import utcnow
from tenant_admin.models.enums import CompanyStatus
from tenant_admin.schemas.super_admin import (
    DashboardMetrics,
    DashboardResponse,
    MetricData,
    PlatformStats,
    RecentActivity,
    RevenueMetricData,
)
from tenant_admin.services import audit_log_service

RECENT_ACTIVITY_LIMIT = 5
# Inactive users per active company above which health degrades
WARNING_INACTIVE_RATIO = 10
CRITICAL_INACTIVE_RATIO = 20


def _month_start(now: datetime | None = None) -> datetime:
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def get_dashboard_metrics(db: Session, now: datetime | None = None) -> DashboardMetrics:
    """User growth against last month and the number of active editions."""
    month_start = _month_start(now)

    active_users = db.query(User).filter(User.is_active.is_(True))
    total_users = active_users.count()
    previous_month_users = active_users.filter(User.created_at < month_start).count()
    growth_percent = (
        round((total_users - previous_month_users) / previous_month_users * 100)
        if previous_month_users > 0
        else 0
    )
    if growth_percent > 0:
        growth_type = "increase"
    elif growth_percent < 0:
        growth_type = "decrease"
    else:
        growth_type = "neutral"

    editions = db.query(SystemEdition).filter(SystemEdition.archived.is_(False))
    active_editions = editions.count()
    new_editions = editions.filter(SystemEdition.created_at >= month_start).count()

    # Safety IDs and payments are not tracked on this platform
    return DashboardMetrics(
        total_users=MetricData(
            value=total_users,
            change_indicator=f"{'+' if growth_percent >= 0 else ''}{growth_percent}% this month",
            change_type=growth_type,
            change_value=abs(growth_percent),
        ),
        active_editions=MetricData(
            value=active_editions,
            change_indicator=f"{new_editions} new this month",
            change_type="new" if new_editions > 0 else "neutral",
            change_value=new_editions,
        ),
        safety_ids_created=MetricData(
            value=0,
            change_indicator="+0% this month",
            change_type="neutral",
            change_value=0,
        ),
        monthly_revenue=RevenueMetricData(
            value=0.0,
            currency="USD",
            change_indicator="+0% this month",
            change_type="neutral",
            change_value=0,
        ),
    )


def system_health(inactive_users: int, active_companies: int) -> str:
    """Grade health by inactive users relative to active companies."""
    if inactive_users > active_companies * CRITICAL_INACTIVE_RATIO:
        return "critical"
    if inactive_users > active_companies * WARNING_INACTIVE_RATIO:
        return "warning"
    return "healthy"


def get_platform_stats(db: Session, now: datetime | None = None) -> PlatformStats:
    month_start = _month_start(now)

    total_companies = (
        db.query(Company).filter(Company.status == CompanyStatus.ACTIVE).count()
    )
    total_editions = (
        db.query(SystemEdition).filter(SystemEdition.archived.is_(False)).count()
    )
    active_this_month = (
        db.query(User)
        .filter(User.is_active.is_(True), User.last_login_at >= month_start)
        .count()
    )
    inactive_users = db.query(User).filter(User.is_active.is_(False)).count()

    return PlatformStats(
        total_companies=total_companies,
        total_system_editions=total_editions,
        active_users_this_month=active_this_month,
        inactive_users=inactive_users,
        pending_approvals=0,
        system_health=system_health(inactive_users, total_companies),
    )


def get_recent_activity(db: Session, limit: int = RECENT_ACTIVITY_LIMIT) -> list[RecentActivity]:
    return [
        RecentActivity(
            id=log.id,
            type=log.action,
            description=log.description,
            timestamp=log.created_at,
            severity="info",
            user_id=log.user_id,
        )
        for log in audit_log_service.get_recent_audit_logs(db, limit)
    ]


def get_dashboard(db: Session) -> DashboardResponse:
    return DashboardResponse(
        dashboard_metrics=get_dashboard_metrics(db),
        platform_stats=get_platform_stats(db),
        recent_activity=get_recent_activity(db),
    )
