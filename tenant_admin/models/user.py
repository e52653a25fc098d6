# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User model for authentication."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, TimestampMixin
from tenant_admin.models.enums import LicenseType, RoleName

if TYPE_CHECKING:
    from tenant_admin.models.company import Company
    from tenant_admin.models.system_edition import SystemEdition


class User(Base, TimestampMixin):
    """User model for authentication and authorization.

    A user holds exactly one role. The role's scope decides which of
    ``system_edition_id`` and ``company_id`` must be set.
    """

    __tablename__ = "users"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[RoleName] = mapped_column(
        Enum(RoleName),
        default=RoleName.USER,
        nullable=False,
        index=True,
    )
    system_edition_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("system_editions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    company_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    seat_assigned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    license_type: Mapped[LicenseType] = mapped_column(
        Enum(LicenseType),
        default=LicenseType.NONE,
        nullable=False,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, index=True
    )
    expiration_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    company: Mapped[Company | None] = relationship(
        "Company",
        back_populates="users",
        foreign_keys=[company_id],
    )
    system_edition: Mapped[SystemEdition | None] = relationship("SystemEdition")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
