# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for auth_service."""

import pytest

from tenant_admin.errors import ConflictError, UnauthorizedError
from tenant_admin.models import AuditLog
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.schemas.auth import RegisterRequest
from tenant_admin.security import decode_access_token
from tenant_admin.services import auth_service

PASSWORD = "testpassword123"  # noqa: S105


def registration(email: str = "New@Example.com") -> RegisterRequest:
    return RegisterRequest(
        email=email, password="Secret123!", first_name="New", last_name="User"
    )


def test_register_creates_regular_user(db_session):
    user = auth_service.register_user(db_session, registration(), "10.0.0.2", "pytest")

    assert user.email == "new@example.com"
    assert user.role == RoleName.USER
    assert user.system_edition_id is None
    entry = db_session.query(AuditLog).one()
    assert entry.action == "user_registered"
    assert entry.module == AuditModule.AUTHENTICATION
    assert entry.ip_address == "10.0.0.2"


def test_register_rejects_existing_email(db_session, regular_user):
    with pytest.raises(ConflictError, match="User already exists with this email"):
        auth_service.register_user(db_session, registration("USER@example.com"))


def test_login_issues_token_and_records_audit(db_session, company_admin):
    assert company_admin.last_login_at is None

    user, token = auth_service.login(
        db_session, "CompanyAdmin@example.com", PASSWORD, "10.0.0.3", "browser"
    )

    assert user.id == company_admin.id
    assert user.last_login_at is not None
    payload = decode_access_token(token)
    assert payload["sub"] == str(company_admin.id)
    assert payload["role"] == "company_admin"

    entry = db_session.query(AuditLog).filter(AuditLog.action == "login").one()
    assert entry.company_id == company_admin.company_id
    assert entry.user_agent == "browser"


def test_login_with_wrong_password(db_session, regular_user):
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        auth_service.login(db_session, regular_user.email, "wrong-password")


def test_login_unknown_email(db_session):
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        auth_service.login(db_session, "ghost@example.com", PASSWORD)


def test_login_deactivated_account(db_session, create_user):
    create_user("inactive@example.com", RoleName.USER, is_active=False)
    with pytest.raises(UnauthorizedError, match="Account is deactivated"):
        auth_service.login(db_session, "inactive@example.com", PASSWORD)
    assert db_session.query(AuditLog).count() == 0
