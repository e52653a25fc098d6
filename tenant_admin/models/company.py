# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Company model, a tenant unit under a system edition."""

from __future__ import annotations

import uuid as uuid_lib
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, TimestampMixin
from tenant_admin.models.enums import CompanyStatus

if TYPE_CHECKING:
    from tenant_admin.models.system_edition import SystemEdition
    from tenant_admin.models.user import User


def default_pin_options() -> dict[str, bool]:
    """PIN protection per content type, all disabled."""
    return {"documents": False, "notes": False, "certificates": False}


def default_pin_settings() -> dict[str, bool]:
    """When a PIN is required, all disabled."""
    return {"require_to_view": False, "require_to_edit": False}


class Company(Base, TimestampMixin):
    """Company with seat accounting and PIN management."""

    __tablename__ = "companies"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    system_edition_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("system_editions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Not a foreign key: users reference companies, so this would form a cycle
    company_admin_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )
    total_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    used_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[CompanyStatus] = mapped_column(
        Enum(CompanyStatus),
        default=CompanyStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    # General information
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    channel_partner_split: Mapped[str | None] = mapped_column(String(100), nullable=True)
    commission: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # PIN management
    encrypted_master_pin: Mapped[str | None] = mapped_column(Text, nullable=True)
    pin_options: Mapped[dict] = mapped_column(
        JSON, default=default_pin_options, nullable=False
    )
    pin_settings: Mapped[dict] = mapped_column(
        JSON, default=default_pin_settings, nullable=False
    )

    # Relationships
    system_edition: Mapped[SystemEdition] = relationship(
        "SystemEdition", back_populates="companies"
    )
    users: Mapped[list[User]] = relationship(
        "User",
        back_populates="company",
        foreign_keys="[User.company_id]",
        passive_deletes=True,
    )

    @property
    def available_seats(self) -> int:
        return max(0, (self.total_seats or 0) - (self.used_seats or 0))

    @property
    def has_master_pin(self) -> bool:
        return bool(self.encrypted_master_pin)
