# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""System edition schemas."""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenant_admin.models.enums import EditionModule
from tenant_admin.schemas.tag import HEX_COLOR_PATTERN


def _validate_modules(value: Optional[dict[str, bool]]) -> Optional[dict[str, bool]]:
    if value is None:
        return value
    known = {module.value for module in EditionModule}
    unknown = sorted(set(value) - known)
    if unknown:
        raise ValueError(f"Unknown modules: {', '.join(unknown)}")
    return value


class SystemEditionCreate(BaseModel):
    """Schema for creating a system edition."""

    name: str = Field(..., min_length=2, max_length=100)
    modules: dict[str, bool] = Field(default_factory=dict)
    archived: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("System edition name must be between 2 and 100 characters")
        return v

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: dict[str, bool]) -> dict[str, bool]:
        return _validate_modules(v)


class SystemEditionUpdate(BaseModel):
    """Schema for updating a system edition."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    modules: Optional[dict[str, bool]] = None
    archived: Optional[bool] = None

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: Optional[dict[str, bool]]) -> Optional[dict[str, bool]]:
        return _validate_modules(v)


class SystemEditionResponse(BaseModel):
    """Schema for system edition response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    modules: dict[str, bool]
    archived: bool
    logo_url: Optional[str]
    organization_name: Optional[str]
    slogan: Optional[str]
    primary_brand_color: Optional[str]
    secondary_brand_color: Optional[str]
    created_by_id: Optional[uuid.UUID]
    last_updated_by_id: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime


class SystemEditionOverview(BaseModel):
    """Summary figures for one system edition."""

    date_created: datetime
    created_by: Optional[str]
    last_update: datetime
    edition_name: str
    edition_admins: int
    companies: int
    active_users: int
    features_enabled: list[str]


class CoBranding(BaseModel):
    """Co-branding of a system edition."""

    model_config = ConfigDict(from_attributes=True)

    organization_name: Optional[str] = None
    slogan: Optional[str] = None
    logo_url: Optional[str] = None
    primary_brand_color: Optional[str] = None
    secondary_brand_color: Optional[str] = None


class CoBrandingUpdate(BaseModel):
    """Schema for updating co-branding. Only given fields change."""

    organization_name: Optional[str] = Field(None, max_length=200)
    slogan: Optional[str] = Field(None, max_length=255)
    logo_url: Optional[str] = Field(None, max_length=500)
    primary_brand_color: Optional[str] = None
    secondary_brand_color: Optional[str] = None

    @field_validator("primary_brand_color", "secondary_brand_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not HEX_COLOR_PATTERN.match(v):
            raise ValueError("Color must be a valid hex color code (e.g., #FF0000)")
        return v
