# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tag schemas."""
import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenant_admin.models.enums import TagType

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _validate_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not HEX_COLOR_PATTERN.match(value):
        raise ValueError("Color must be a valid hex color code (e.g., #FF0000)")
    return value


class TagBase(BaseModel):
    """Base tag schema."""

    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = None
    type: TagType = TagType.DOCUMENT
    is_active: bool = True
    sort_order: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tag name must be between 1 and 100 characters")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return _validate_color(v)


class TagCreate(TagBase):
    """Schema for creating a tag."""


class TagUpdate(BaseModel):
    """Schema for updating a tag."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = None
    type: Optional[TagType] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return _validate_color(v)


class TagResponse(BaseModel):
    """Schema for tag response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    system_edition_id: uuid.UUID
    name: str
    color: Optional[str]
    type: TagType
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class TagOrderItem(BaseModel):
    """New position of a single tag."""

    id: uuid.UUID
    sort_order: int = Field(..., ge=0)


class TagOrderUpdate(BaseModel):
    """Schema for reordering tags."""

    tag_updates: list[TagOrderItem] = Field(..., min_length=1)


class TagMergeRequest(BaseModel):
    """Schema for merging tags into an existing or new tag."""

    source_tag_ids: list[uuid.UUID] = Field(..., min_length=1)
    target_tag_id: Optional[uuid.UUID] = None
    new_tag_name: Optional[str] = Field(None, min_length=1, max_length=100)


class TagMergeResult(BaseModel):
    """Result of a tag merge."""

    merged_tag_id: uuid.UUID


class TagTypeCounts(BaseModel):
    document: int = 0
    note: int = 0
    certificate: int = 0


class TagStats(BaseModel):
    """Tag counts for one system edition."""

    total: int
    by_type: TagTypeCounts
    active: TagTypeCounts
