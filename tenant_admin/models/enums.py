# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for database models."""

from enum import Enum


class RoleName(str, Enum):
    """Fixed set of platform roles."""

    SUPER_ADMIN = "super_admin"
    EDITION_ADMIN = "edition_admin"
    COMPANY_ADMIN = "company_admin"
    USER = "user"
    DELEGATE = "delegate"


class CompanyStatus(str, Enum):
    """Company status enumeration."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class LicenseType(str, Enum):
    """License attached to a user seat."""

    ORGANIZATIONAL_SEAT = "organizational_seat"
    INDIVIDUAL_PARENT = "individual_parent"
    INDIVIDUAL_CHILD = "individual_child"
    NONE = "none"


class TagType(str, Enum):
    """Kind of content a tag applies to."""

    DOCUMENT = "document"
    NOTE = "note"
    CERTIFICATE = "certificate"


class CustomFieldType(str, Enum):
    """Input type of an edition-defined custom field."""

    NUMBER = "number"
    TEXT = "text"
    DATE = "date"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"


class AuditModule(str, Enum):
    """Functional area an audit log entry belongs to."""

    DOCUMENTS = "documents"
    NOTES = "notes"
    CERTIFICATIONS = "certifications"
    USERS = "users"
    SETTINGS = "settings"
    SYSTEM = "system"
    AUTHENTICATION = "authentication"
    PERMISSIONS = "permissions"


class DelegatePermission(str, Enum):
    """Permissions that can be granted on a delegate access record."""

    VIEW_USERS = "view_users"
    MANAGE_USERS = "manage_users"
    VIEW_DOCUMENTS = "view_documents"
    MANAGE_DOCUMENTS = "manage_documents"
    VIEW_NOTES = "view_notes"
    MANAGE_NOTES = "manage_notes"
    VIEW_CERTIFICATIONS = "view_certifications"
    MANAGE_CERTIFICATIONS = "manage_certifications"
    VIEW_REPORTS = "view_reports"
    MANAGE_SETTINGS = "manage_settings"
    FULL_ACCESS = "full_access"


class EditionModule(str, Enum):
    """Feature modules that can be switched on per system edition."""

    CO_BRANDING = "co_branding"
    DOCUMENT_MANAGEMENT = "document_management"
    NOTES = "notes"
    CERTIFICATIONS = "certifications"
    DELEGATE_ACCESS = "delegate_access"
    SEAT_MANAGEMENT = "seat_management"
