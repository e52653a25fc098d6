# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Company schemas."""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenant_admin.models.enums import CompanyStatus


class CompanyBase(BaseModel):
    """Base company schema."""

    name: str = Field(..., min_length=2, max_length=100)
    company_admin_id: Optional[uuid.UUID] = None
    total_seats: int = Field(0, ge=0)
    status: CompanyStatus = CompanyStatus.ACTIVE
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    channel_partner_split: Optional[str] = Field(None, max_length=100)
    commission: Optional[Decimal] = Field(None, ge=0, le=100)
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Company name must be between 2 and 100 characters")
        return v


class CompanyCreate(CompanyBase):
    """Schema for creating a company.

    Super admins must name the system edition, other callers create
    companies in their own edition.
    """

    system_edition_id: Optional[uuid.UUID] = None


class CompanyUpdate(BaseModel):
    """Schema for updating a company."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    company_admin_id: Optional[uuid.UUID] = None
    total_seats: Optional[int] = Field(None, ge=0)
    status: Optional[CompanyStatus] = None
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    channel_partner_split: Optional[str] = Field(None, max_length=100)
    commission: Optional[Decimal] = Field(None, ge=0, le=100)
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)


class CompanyResponse(BaseModel):
    """Schema for company response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    system_edition_id: uuid.UUID
    company_admin_id: Optional[uuid.UUID]
    total_seats: int
    used_seats: int
    available_seats: int
    status: CompanyStatus
    type: Optional[str]
    address: Optional[str]
    title: Optional[str]
    channel_partner_split: Optional[str]
    commission: Optional[Decimal]
    payment_method: Optional[str]
    has_master_pin: bool
    pin_options: dict[str, bool]
    pin_settings: dict[str, bool]
    created_at: datetime
    updated_at: datetime


class PinOptions(BaseModel):
    """Content types protected by the master PIN."""

    documents: Optional[bool] = None
    notes: Optional[bool] = None
    certificates: Optional[bool] = None


class PinSettings(BaseModel):
    """When the master PIN is asked for."""

    require_to_view: Optional[bool] = None
    require_to_edit: Optional[bool] = None


class PinManagementUpdate(BaseModel):
    """Schema for updating PIN management.

    Options and settings are merged into the stored values, only the keys
    given are changed.
    """

    master_pin: Optional[str] = Field(None, min_length=4, max_length=12)
    pin_options: Optional[PinOptions] = None
    pin_settings: Optional[PinSettings] = None


class PinValidationRequest(BaseModel):
    pin: str = Field(..., min_length=4, max_length=12)


class PinValidationResult(BaseModel):
    is_valid: bool


class PinConfiguration(BaseModel):
    """PIN management state of a company, without the PIN itself."""

    has_master_pin: bool
    pin_options: dict[str, bool]
    pin_settings: dict[str, bool]
