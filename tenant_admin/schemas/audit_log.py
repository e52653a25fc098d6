# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Audit log schemas."""
import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tenant_admin.models.enums import AuditModule


class AuditLogFilters(BaseModel):
    """Filters applied to audit log listing and export."""

    search: str | None = None
    module: AuditModule | None = None
    date_from: date | None = None
    date_to: date | None = None
    system_edition_id: uuid.UUID | None = None
    company_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None


class AuditLogUser(BaseModel):
    """User summary shown on an audit entry."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str


class AuditLogResponse(BaseModel):
    """Schema for audit log response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    system_edition_id: uuid.UUID | None
    company_id: uuid.UUID | None
    user_id: uuid.UUID
    action: str
    module: AuditModule
    description: str
    ip_address: str | None
    user_agent: str | None
    metadata: dict[str, Any] | None = Field(None, validation_alias="extra_data")
    created_at: datetime
    user: AuditLogUser | None = None
