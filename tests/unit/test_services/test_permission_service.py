# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for permission_service."""

import uuid
from datetime import timedelta

from tenant_admin.models import Company, DelegateAccess, Tag, User
from tenant_admin.models.base import utcnow
from tenant_admin.models.enums import DelegatePermission, RoleName, TagType
from tenant_admin.rbac.permissions import Permission
from tenant_admin.services.permission_service import (
    ResourceType,
    check_delegate_access,
    check_permission,
    get_resource_filter,
)


def test_role_check_comes_before_scope(db_session, company_admin, ctx_of):
    result = check_permission(
        db_session, ctx_of(company_admin).to_permission_context(), Permission.CREATE_TAG
    )
    assert not result.granted
    assert "does not have permission create:tag" in result.reason


def test_super_admin_is_global(db_session, super_admin, ctx_of):
    ctx = ctx_of(super_admin).to_permission_context(
        target_system_edition_id=uuid.uuid4(), target_user_id=uuid.uuid4()
    )
    assert check_permission(db_session, ctx, Permission.DELETE_EDITION)


def test_edition_scope(db_session, edition, other_edition, company, edition_admin, ctx_of,
                       create_company, create_user):
    ctx = ctx_of(edition_admin)
    assert check_permission(
        db_session,
        ctx.to_permission_context(target_company_id=company.id),
        Permission.UPDATE_COMPANY,
    )

    foreign_company = create_company(other_edition, name="Foreign")
    result = check_permission(
        db_session,
        ctx.to_permission_context(target_company_id=foreign_company.id),
        Permission.UPDATE_COMPANY,
    )
    assert not result
    assert result.reason == "Access denied: company not in your system edition"

    result = check_permission(
        db_session,
        ctx.to_permission_context(target_system_edition_id=other_edition.id),
        Permission.READ_EDITION,
    )
    assert result.reason == "Access denied: different system edition"

    outsider = create_user("outsider@example.com", RoleName.USER, other_edition)
    result = check_permission(
        db_session,
        ctx.to_permission_context(target_user_id=outsider.id),
        Permission.READ_USER,
    )
    assert result.reason == "Access denied: user not in your system edition"


def test_edition_scope_without_edition_is_denied(db_session, create_user, ctx_of):
    admin = create_user("lost@example.com", RoleName.EDITION_ADMIN)
    result = check_permission(
        db_session, ctx_of(admin).to_permission_context(), Permission.READ_TAG
    )
    assert result.reason == "User is not assigned to a system edition"


def test_company_scope(db_session, edition, company, company_admin, regular_user, ctx_of,
                       create_company, create_user):
    ctx = ctx_of(company_admin)
    assert check_permission(
        db_session,
        ctx.to_permission_context(target_user_id=regular_user.id),
        Permission.UPDATE_USER,
    )

    other_company = create_company(edition, name="Other Corp")
    stranger = create_user("stranger@example.com", RoleName.USER, edition, other_company)
    result = check_permission(
        db_session,
        ctx.to_permission_context(target_user_id=stranger.id),
        Permission.UPDATE_USER,
    )
    assert result.reason == "Access denied: user not in your company"

    result = check_permission(
        db_session,
        ctx.to_permission_context(target_company_id=other_company.id),
        Permission.READ_COMPANY,
    )
    assert result.reason == "Access denied: different company"


def test_self_scope(db_session, regular_user, company_admin, ctx_of):
    ctx = ctx_of(regular_user)
    assert check_permission(
        db_session,
        ctx.to_permission_context(target_user_id=regular_user.id),
        Permission.UPDATE_USER,
    )
    result = check_permission(
        db_session,
        ctx.to_permission_context(target_user_id=company_admin.id),
        Permission.READ_USER,
    )
    assert result.reason == "Access denied: can only access own resources"


def _grant(db_session, edition, delegator, delegate, permissions, **kwargs) -> DelegateAccess:
    record = DelegateAccess(
        system_edition_id=edition.id,
        delegator_id=delegator.id,
        delegate_id=delegate.id,
        permissions=permissions,
        **kwargs,
    )
    db_session.add(record)
    db_session.commit()
    return record


def test_delegate_access_checks(db_session, edition, edition_admin, delegate_user):
    _grant(db_session, edition, edition_admin, delegate_user, ["view_users"])

    assert check_delegate_access(
        db_session, delegate_user.id, edition_admin.id, DelegatePermission.VIEW_USERS
    )
    result = check_delegate_access(
        db_session, delegate_user.id, edition_admin.id, "manage_users"
    )
    assert result.reason == "Permission not granted in delegate access"

    result = check_delegate_access(
        db_session, edition_admin.id, delegate_user.id, DelegatePermission.VIEW_USERS
    )
    assert result.reason == "No active delegate access found"


def test_delegate_full_access_and_expiry(db_session, edition, edition_admin, delegate_user):
    record = _grant(
        db_session,
        edition,
        edition_admin,
        delegate_user,
        ["full_access"],
        expiration_date=utcnow() + timedelta(days=1),
    )
    assert check_delegate_access(
        db_session, delegate_user.id, edition_admin.id, DelegatePermission.MANAGE_NOTES
    )

    record.expiration_date = utcnow() - timedelta(minutes=1)
    db_session.commit()
    result = check_delegate_access(
        db_session, delegate_user.id, edition_admin.id, DelegatePermission.MANAGE_NOTES
    )
    assert result.reason == "Delegate access has expired"


def test_soft_deleted_grant_is_ignored(db_session, edition, edition_admin, delegate_user):
    record = _grant(db_session, edition, edition_admin, delegate_user, ["full_access"])
    record.soft_delete()
    db_session.commit()
    assert not check_delegate_access(
        db_session, delegate_user.id, edition_admin.id, DelegatePermission.VIEW_NOTES
    )


def test_resource_filter_scopes_queries(
    db_session, edition, other_edition, company, super_admin, edition_admin,
    company_admin, regular_user, ctx_of, create_company, create_user,
):
    create_company(other_edition, name="Foreign")
    create_user("foreign@example.com", RoleName.USER, other_edition)
    db_session.add_all(
        [
            Tag(system_edition_id=edition.id, name="Mine", type=TagType.NOTE),
            Tag(system_edition_id=other_edition.id, name="Theirs", type=TagType.NOTE),
        ]
    )
    db_session.commit()

    def count(model, user, resource):
        criteria = get_resource_filter(ctx_of(user), resource)
        return db_session.query(model).filter(*criteria).count()

    assert get_resource_filter(ctx_of(super_admin), ResourceType.COMPANY) == []
    assert count(Company, super_admin, ResourceType.COMPANY) == 2
    assert count(Company, edition_admin, ResourceType.COMPANY) == 1
    assert count(Company, company_admin, ResourceType.COMPANY) == 1
    assert count(Tag, edition_admin, ResourceType.TAG) == 1
    # edition admin, company admin, regular user
    assert count(User, edition_admin, ResourceType.USER) == 3
    assert count(User, company_admin, ResourceType.USER) == 2
    assert count(User, regular_user, ResourceType.USER) == 1


def test_resource_filter_matches_nothing_without_scope(db_session, edition, create_user, ctx_of):
    admin = create_user("lost@example.com", RoleName.EDITION_ADMIN)
    criteria = get_resource_filter(ctx_of(admin), ResourceType.USER)
    assert db_session.query(User).filter(*criteria).count() == 0
