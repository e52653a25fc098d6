# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Delegate access model."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_admin.models.base import Base, SoftDeleteMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from tenant_admin.models.user import User


class DelegateAccess(Base, TimestampMixin, SoftDeleteMixin):
    """Grant of limited access from a delegator to a delegate user."""

    __tablename__ = "delegate_access"
    __table_args__ = (
        UniqueConstraint(
            "system_edition_id",
            "delegator_id",
            "delegate_id",
            name="uq_delegate_access_edition_delegator_delegate",
        ),
        CheckConstraint(
            "delegator_id <> delegate_id", name="ck_delegate_access_distinct_users"
        ),
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
    delegator_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    delegate_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permissions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expiration_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    delegator: Mapped[User] = relationship("User", foreign_keys=[delegator_id])
    delegate: Mapped[User] = relationship("User", foreign_keys=[delegate_id])

    @property
    def is_expired(self) -> bool:
        return self.expiration_date is not None and self.expiration_date < utcnow()
