# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Audit log service."""

import csv
import io
import json
import uuid
from datetime import datetime, time
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from tenant_admin.models import AuditLog, User
from tenant_admin.models.enums import AuditModule
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.schemas.audit_log import AuditLogFilters

CSV_HEADERS = [
    "ID",
    "Action",
    "Module",
    "Description",
    "User",
    "User Email",
    "IP Address",
    "User Agent",
    "Created At",
    "Metadata",
]


def record(
    db: Session,
    ctx: ResolvedContext,
    action: str,
    module: AuditModule,
    description: str,
    metadata: dict[str, Any] | None = None,
    system_edition_id: uuid.UUID | None = None,
    company_id: uuid.UUID | None = None,
) -> AuditLog:
    """Add an audit entry to the session.

    The entry is not committed here; it is written in the same transaction
    as the change it describes.
    """
    entry = AuditLog(
        user_id=ctx.user_id,
        system_edition_id=system_edition_id or ctx.system_edition_id,
        company_id=company_id or ctx.company_id,
        action=action,
        module=module,
        description=description,
        ip_address=ctx.ip_address,
        user_agent=ctx.user_agent,
        extra_data=metadata,
    )
    db.add(entry)
    return entry


def _filtered_query(db: Session, filters: AuditLogFilters) -> Query:
    query = db.query(AuditLog, User).outerjoin(User, User.id == AuditLog.user_id)

    if filters.system_edition_id:
        query = query.filter(AuditLog.system_edition_id == filters.system_edition_id)
    if filters.company_id:
        query = query.filter(AuditLog.company_id == filters.company_id)
    if filters.user_id:
        query = query.filter(AuditLog.user_id == filters.user_id)
    if filters.module:
        query = query.filter(AuditLog.module == filters.module)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(
            or_(AuditLog.action.ilike(pattern), AuditLog.description.ilike(pattern))
        )
    if filters.date_from and filters.date_to:
        start = datetime.combine(filters.date_from, time.min)
        end = datetime.combine(filters.date_to, time.max)
        query = query.filter(AuditLog.created_at.between(start, end))

    return query.order_by(AuditLog.created_at.desc())


def get_audit_logs(
    db: Session, filters: AuditLogFilters, offset: int = 0, limit: int = 10
) -> tuple[list[tuple[AuditLog, User | None]], int]:
    """Get a page of audit entries with their users, plus the total count."""
    query = _filtered_query(db, filters)
    total = query.count()
    rows = query.offset(offset).limit(limit).all()
    return [(log, user) for log, user in rows], total


def export_audit_logs_csv(db: Session, filters: AuditLogFilters) -> str:
    """Render all matching audit entries as CSV with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for log, user in _filtered_query(db, filters).all():
        writer.writerow(
            [
                str(log.id),
                log.action,
                log.module.value,
                log.description,
                user.full_name if user else "N/A",
                user.email if user else "N/A",
                log.ip_address or "N/A",
                log.user_agent or "N/A",
                log.created_at.isoformat(),
                json.dumps(log.extra_data) if log.extra_data else "N/A",
            ]
        )
    return buffer.getvalue()


def get_recent_audit_logs(db: Session, limit: int = 5) -> list[AuditLog]:
    """Get the most recent audit entries across the platform."""
    return db.query(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit).all()
