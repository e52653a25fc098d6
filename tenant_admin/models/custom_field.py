# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Custom field model."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, SoftDeleteMixin, TimestampMixin
from tenant_admin.models.enums import CustomFieldType

if TYPE_CHECKING:
    from tenant_admin.models.system_edition import SystemEdition


class CustomField(Base, TimestampMixin, SoftDeleteMixin):
    """Additional user attribute defined by a system edition."""

    __tablename__ = "custom_fields"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    system_edition_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("system_editions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_type: Mapped[CustomFieldType] = mapped_column(
        Enum(CustomFieldType, name="customfieldtype"),
        nullable=False,
        index=True,
    )
    help_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_mandatory: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Only meaningful for number fields
    use_decimals: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dropdown_options: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    field_order: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
    )
    created_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    system_edition: Mapped[SystemEdition] = relationship(
        "SystemEdition", back_populates="custom_fields"
    )
