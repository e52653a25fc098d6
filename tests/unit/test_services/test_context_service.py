# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for context_service."""

import uuid

import pytest

from tenant_admin.errors import ForbiddenError
from tenant_admin.models.enums import RoleName
from tenant_admin.services import context_service


def test_scope_comes_from_assignment(db_session, company_admin, company, edition):
    ctx = context_service.resolve_context(
        db_session, company_admin, ip_address="10.0.0.1", user_agent="pytest"
    )
    assert ctx.role_name == RoleName.COMPANY_ADMIN
    assert ctx.company_id == company.id
    assert ctx.system_edition_id == edition.id
    assert ctx.ip_address == "10.0.0.1"


def test_edition_derived_from_company(db_session, company, edition, create_user):
    user = create_user("nocompanyedition@example.com", RoleName.USER, company=company)
    ctx = context_service.resolve_context(db_session, user)
    assert ctx.system_edition_id == edition.id


def test_super_admin_may_select_scope(db_session, super_admin, company, edition):
    ctx = context_service.resolve_context(
        db_session, super_admin, query_params={"system_edition_id": str(edition.id)}
    )
    assert ctx.system_edition_id == edition.id
    assert ctx.company_id is None

    ctx = context_service.resolve_context(
        db_session, super_admin, path_params={"company_id": str(company.id)}
    )
    assert ctx.company_id == company.id
    assert ctx.system_edition_id == edition.id


def test_invalid_identifiers_are_ignored(db_session, super_admin):
    ctx = context_service.resolve_context(
        db_session, super_admin, query_params={"system_edition_id": "not-a-uuid"}
    )
    assert ctx.system_edition_id is None


def test_only_super_admin_may_override_edition(db_session, company_admin, edition, other_edition):
    ctx = context_service.resolve_context(
        db_session,
        company_admin,
        query_params={"system_edition_id": str(other_edition.id)},
    )
    assert ctx.system_edition_id == edition.id


def test_edition_admin_narrows_to_own_company(db_session, edition_admin, company):
    ctx = context_service.resolve_context(
        db_session, edition_admin, query_params={"company_id": str(company.id)}
    )
    assert ctx.company_id == company.id


def test_edition_admin_foreign_company_is_forbidden(
    db_session, edition_admin, other_edition, create_company
):
    foreign = create_company(other_edition, name="Foreign")
    with pytest.raises(ForbiddenError, match="Company does not belong to your system edition"):
        context_service.resolve_context(
            db_session, edition_admin, path_params={"company_id": str(foreign.id)}
        )


def test_missing_scope_is_forbidden(db_session, create_user):
    lost_edition_admin = create_user("ea@example.com", RoleName.EDITION_ADMIN)
    with pytest.raises(ForbiddenError, match="No system edition assigned"):
        context_service.resolve_context(db_session, lost_edition_admin)

    lost_company_admin = create_user("ca@example.com", RoleName.COMPANY_ADMIN)
    with pytest.raises(ForbiddenError, match="No company assigned"):
        context_service.resolve_context(db_session, lost_company_admin)


def test_regular_user_without_scope_resolves(db_session, create_user):
    user = create_user("free@example.com", RoleName.USER)
    ctx = context_service.resolve_context(db_session, user)
    assert ctx.system_edition_id is None
    assert ctx.company_id is None


def test_validate_company_access(
    db_session, super_admin, edition_admin, company_admin, company, other_edition,
    create_company, ctx_of,
):
    foreign = create_company(other_edition, name="Foreign")

    assert context_service.validate_company_access(db_session, ctx_of(super_admin), foreign.id)
    assert context_service.validate_company_access(db_session, ctx_of(edition_admin), company.id)
    assert not context_service.validate_company_access(
        db_session, ctx_of(edition_admin), foreign.id
    )
    assert context_service.validate_company_access(db_session, ctx_of(company_admin), company.id)
    assert not context_service.validate_company_access(
        db_session, ctx_of(company_admin), foreign.id
    )
    assert not context_service.validate_company_access(db_session, ctx_of(super_admin), None)


def test_validate_system_edition_access(super_admin, edition_admin, edition, ctx_of):
    assert context_service.validate_system_edition_access(ctx_of(super_admin), uuid.uuid4())
    assert context_service.validate_system_edition_access(ctx_of(edition_admin), edition.id)
    assert not context_service.validate_system_edition_access(
        ctx_of(edition_admin), uuid.uuid4()
    )
    assert not context_service.validate_system_edition_access(ctx_of(edition_admin), None)
