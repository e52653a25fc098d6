# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from tenant_admin.models.audit_log import AuditLog
from tenant_admin.models.base import Base, SoftDeleteMixin, TimestampMixin
from tenant_admin.models.company import Company
from tenant_admin.models.custom_field import CustomField
from tenant_admin.models.delegate_access import DelegateAccess
from tenant_admin.models.system_edition import SystemEdition
from tenant_admin.models.tag import Tag
from tenant_admin.models.user import User

__all__ = [
    "AuditLog",
    "Base",
    "Company",
    "CustomField",
    "DelegateAccess",
    "SoftDeleteMixin",
    "SystemEdition",
    "Tag",
    "TimestampMixin",
    "User",
]
