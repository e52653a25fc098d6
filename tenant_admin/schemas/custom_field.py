# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Custom field schemas."""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenant_admin.models.enums import CustomFieldType


def _clean_options(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return None
    options = [option.strip() for option in value]
    if any(not option for option in options):
        raise ValueError("All dropdown options must be non-empty strings")
    return options


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Field name must be between 1 and 100 characters")
    return value


class CustomFieldCreate(BaseModel):
    """Schema for creating a custom field.

    The field is appended after the last field of the edition when no
    ``field_order`` is given.
    """

    field_name: str = Field(..., min_length=1, max_length=100)
    field_type: CustomFieldType
    help_text: Optional[str] = None
    is_mandatory: bool = False
    use_decimals: bool = False
    dropdown_options: Optional[list[str]] = None
    field_order: Optional[int] = Field(None, ge=0)
    is_active: bool = True

    @field_validator("field_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("dropdown_options")
    @classmethod
    def validate_options(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_options(v)


class CustomFieldUpdate(BaseModel):
    """Schema for updating a custom field."""

    field_name: Optional[str] = Field(None, min_length=1, max_length=100)
    field_type: Optional[CustomFieldType] = None
    help_text: Optional[str] = None
    is_mandatory: Optional[bool] = None
    use_decimals: Optional[bool] = None
    dropdown_options: Optional[list[str]] = None
    field_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("field_name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)

    @field_validator("dropdown_options")
    @classmethod
    def validate_options(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_options(v)


class CustomFieldResponse(BaseModel):
    """Schema for custom field response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    system_edition_id: uuid.UUID
    field_name: str
    field_type: CustomFieldType
    help_text: Optional[str]
    is_mandatory: bool
    use_decimals: bool
    dropdown_options: Optional[list[str]]
    field_order: int
    is_active: bool
    created_by_id: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime


class CustomFieldOrderItem(BaseModel):
    """New position of a single custom field."""

    id: uuid.UUID
    field_order: int = Field(..., ge=0)


class CustomFieldOrderUpdate(BaseModel):
    """Schema for reordering custom fields."""

    field_updates: list[CustomFieldOrderItem] = Field(..., min_length=1)


class CustomFieldStats(BaseModel):
    """Counts over the active custom fields of one system edition."""

    total_fields: int
    mandatory_fields: int
    field_type_breakdown: dict[str, int]
