# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Audit log model."""

import uuid as uuid_lib
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, Index, String, Text, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from tenant_admin.models.base import Base, utcnow
from tenant_admin.models.enums import AuditModule


class AuditLog(Base):
    """Append-only record of a mutating operation.

    Identifier columns are plain UUIDs so entries survive the deletion of
    the user, company or edition they mention.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_module_created_at", "module", "created_at"),
    )

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    system_edition_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True, index=True
    )
    company_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True, index=True
    )
    user_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False, index=True
    )
    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    module: Mapped[AuditModule] = mapped_column(
        Enum(AuditModule), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    extra_data: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )


class ImmutableAuditLogError(RuntimeError):
    """Raised on any attempt to modify a persisted audit log entry."""


@event.listens_for(AuditLog, "before_update")
def _reject_update(mapper, connection, target: AuditLog) -> None:
    raise ImmutableAuditLogError(f"Audit log entry {target.id} is immutable")


@event.listens_for(AuditLog, "before_delete")
def _reject_delete(mapper, connection, target: AuditLog) -> None:
    raise ImmutableAuditLogError(f"Audit log entry {target.id} is immutable")
