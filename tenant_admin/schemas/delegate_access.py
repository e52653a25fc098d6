# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Delegate access schemas."""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tenant_admin.models.enums import DelegatePermission


class DelegateUser(BaseModel):
    """User summary shown on a delegate access record."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    last_login_at: Optional[datetime] = None


class DelegateAccessResponse(BaseModel):
    """Schema for delegate access response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    system_edition_id: uuid.UUID
    delegator_id: uuid.UUID
    delegate_id: uuid.UUID
    permissions: list[DelegatePermission]
    is_active: bool
    is_expired: bool
    expiration_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    delegator: Optional[DelegateUser] = None
    delegate: Optional[DelegateUser] = None


class DelegateAccessUpdate(BaseModel):
    """Schema for updating delegate access."""

    permissions: Optional[list[DelegatePermission]] = None
    is_active: Optional[bool] = None
    expiration_date: Optional[datetime] = None


class DelegateInvite(BaseModel):
    """Invitation of a delegate on behalf of the caller.

    Super admins must name the system edition, edition admins invite into
    their own edition.
    """

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    system_edition_id: Optional[uuid.UUID] = None
    permissions: list[DelegatePermission] = Field(default_factory=list)
    expiration_date: Optional[datetime] = None


class DelegateInviteResult(BaseModel):
    user_created: bool
    delegate_access: DelegateAccessResponse
