# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tag model."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, SoftDeleteMixin, TimestampMixin
from tenant_admin.models.enums import TagType

if TYPE_CHECKING:
    from tenant_admin.models.system_edition import SystemEdition


class Tag(Base, TimestampMixin, SoftDeleteMixin):
    """Label for documents, notes or certificates, owned by one system edition."""

    __tablename__ = "tags"
    __table_args__ = (
        Index("ix_tags_system_edition_id_type", "system_edition_id", "type"),
    )

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
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    type: Mapped[TagType] = mapped_column(
        Enum(TagType, name="tagtype"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
    )
    sort_order: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, index=True
    )

    # Relationships
    system_edition: Mapped[SystemEdition] = relationship(
        "SystemEdition", back_populates="tags"
    )
