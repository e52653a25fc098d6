# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Per-request authorization context values.

Both context types are immutable and created fresh for every request by the
context resolver. They are passed explicitly through the dependency chain
and never stored globally or persisted.
"""

import uuid
from dataclasses import dataclass

from tenant_admin.models.enums import RoleName


@dataclass(frozen=True)
class PermissionResult:
    """Outcome of an authorization check."""

    granted: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.granted

    @classmethod
    def allow(cls) -> "PermissionResult":
        return cls(granted=True)

    @classmethod
    def deny(cls, reason: str) -> "PermissionResult":
        return cls(granted=False, reason=reason)


@dataclass(frozen=True)
class PermissionContext:
    """Caller identity and scope plus the resource being acted on."""

    user_id: uuid.UUID
    user_role: RoleName
    company_id: uuid.UUID | None = None
    system_edition_id: uuid.UUID | None = None
    target_user_id: uuid.UUID | None = None
    target_company_id: uuid.UUID | None = None
    target_system_edition_id: uuid.UUID | None = None


@dataclass(frozen=True)
class ResolvedContext:
    """Scope a caller acts within for the current request.

    ``ip_address`` and ``user_agent`` describe the client and are recorded
    on audit log entries.
    """

    user_id: uuid.UUID
    role_name: RoleName
    company_id: uuid.UUID | None = None
    system_edition_id: uuid.UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role_name == RoleName.SUPER_ADMIN

    def to_permission_context(
        self,
        target_user_id: uuid.UUID | None = None,
        target_company_id: uuid.UUID | None = None,
        target_system_edition_id: uuid.UUID | None = None,
    ) -> PermissionContext:
        return PermissionContext(
            user_id=self.user_id,
            user_role=self.role_name,
            company_id=self.company_id,
            system_edition_id=self.system_edition_id,
            target_user_id=target_user_id,
            target_company_id=target_company_id,
            target_system_edition_id=target_system_edition_id,
        )
