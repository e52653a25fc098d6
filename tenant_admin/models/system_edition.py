# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""System edition model, the top-level tenant."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tenant_admin.models.company import Company
    from tenant_admin.models.custom_field import CustomField
    from tenant_admin.models.tag import Tag

DEFAULT_PRIMARY_BRAND_COLOR = "#294199"
DEFAULT_SECONDARY_BRAND_COLOR = "#FF9E1E"


class SystemEdition(Base, TimestampMixin):
    """Tenant grouping a set of companies, tags, custom fields and delegates."""

    __tablename__ = "system_editions"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    modules: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    archived: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )

    # Co-branding
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    organization_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    slogan: Mapped[str | None] = mapped_column(String(255), nullable=True)
    primary_brand_color: Mapped[str | None] = mapped_column(
        String(7), default=DEFAULT_PRIMARY_BRAND_COLOR, nullable=True
    )
    secondary_brand_color: Mapped[str | None] = mapped_column(
        String(7), default=DEFAULT_SECONDARY_BRAND_COLOR, nullable=True
    )

    created_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )
    last_updated_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    # Relationships
    companies: Mapped[list[Company]] = relationship(
        "Company",
        back_populates="system_edition",
        cascade="all, delete-orphan",
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        back_populates="system_edition",
        cascade="all, delete-orphan",
    )
    custom_fields: Mapped[list[CustomField]] = relationship(
        "CustomField",
        back_populates="system_edition",
        cascade="all, delete-orphan",
    )

    @property
    def enabled_modules(self) -> list[str]:
        return [key for key, enabled in (self.modules or {}).items() if enabled is True]
