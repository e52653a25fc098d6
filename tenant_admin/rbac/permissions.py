# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission actions and access scopes."""

from enum import Enum


class Permission(str, Enum):
    """Action tags granted to roles, formatted ``<verb>:<resource>``."""

    # User management
    CREATE_USER = "create:user"
    READ_USER = "read:user"
    UPDATE_USER = "update:user"
    DELETE_USER = "delete:user"

    # Company management
    CREATE_COMPANY = "create:company"
    READ_COMPANY = "read:company"
    UPDATE_COMPANY = "update:company"
    DELETE_COMPANY = "delete:company"

    # System edition management
    CREATE_EDITION = "create:edition"
    READ_EDITION = "read:edition"
    UPDATE_EDITION = "update:edition"
    DELETE_EDITION = "delete:edition"

    # Tag management
    CREATE_TAG = "create:tag"
    READ_TAG = "read:tag"
    UPDATE_TAG = "update:tag"
    DELETE_TAG = "delete:tag"

    # Custom field management
    CREATE_CUSTOM_FIELD = "create:custom_field"
    READ_CUSTOM_FIELD = "read:custom_field"
    UPDATE_CUSTOM_FIELD = "update:custom_field"
    DELETE_CUSTOM_FIELD = "delete:custom_field"

    # Delegate management
    CREATE_DELEGATE = "create:delegate"
    READ_DELEGATE = "read:delegate"
    UPDATE_DELEGATE = "update:delegate"
    DELETE_DELEGATE = "delete:delegate"

    # Seat management
    READ_SEAT_MANAGEMENT = "read:seat_management"
    UPDATE_SEAT_MANAGEMENT = "update:seat_management"

    # Co-branding
    READ_COBRANDING = "read:cobranding"
    UPDATE_COBRANDING = "update:cobranding"

    # Audit & system
    READ_AUDIT_LOGS = "read:audit_logs"
    READ_SYSTEM_SETTINGS = "read:system_settings"
    UPDATE_SYSTEM_SETTINGS = "update:system_settings"

    @property
    def action(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[1]


class AccessScope(str, Enum):
    """Breadth of resources a role may touch."""

    GLOBAL = "global"
    EDITION = "edition"
    COMPANY = "company"
    SELF = "self"
