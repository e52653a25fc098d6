# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User schemas."""
import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tenant_admin.models.enums import LicenseType, RoleName
from tenant_admin.rbac.permissions import AccessScope


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone_number: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    """Schema for creating a user (admin use).

    Without a password a random one is generated.
    """

    password: Optional[str] = Field(None, min_length=8)
    role: RoleName = RoleName.USER
    system_edition_id: Optional[uuid.UUID] = None
    company_id: Optional[uuid.UUID] = None
    is_active: bool = True
    email_verified: bool = False
    seat_assigned: bool = False
    license_type: LicenseType = LicenseType.NONE
    expiration_date: Optional[datetime.datetime] = None


class UserUpdate(BaseModel):
    """Schema for updating a user (admin use)."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None
    email_verified: Optional[bool] = None
    seat_assigned: Optional[bool] = None
    license_type: Optional[LicenseType] = None
    expiration_date: Optional[datetime.datetime] = None
    company_id: Optional[uuid.UUID] = None


class UserProfileUpdate(BaseModel):
    """Schema for updating the caller's own profile."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(None, max_length=20)


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    role: RoleName
    system_edition_id: Optional[uuid.UUID] = None
    company_id: Optional[uuid.UUID] = None
    is_active: bool
    email_verified: bool
    seat_assigned: bool
    license_type: LicenseType
    last_login_at: Optional[datetime.datetime] = None
    expiration_date: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class RolePermissions(BaseModel):
    """Permissions and scope granted by the caller's role."""

    role: RoleName
    scope: AccessScope
    permissions: list[str]
