# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for user_service."""

import pytest

from tenant_admin.errors import BadRequestError, ConflictError, ForbiddenError
from tenant_admin.models import AuditLog, Company, DelegateAccess, User
from tenant_admin.models.enums import RoleName
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.user import PasswordChange, UserCreate, UserUpdate
from tenant_admin.security import verify_password
from tenant_admin.services import user_service

TEST_PASSWORD = "testpassword123"  # noqa: S105


def new_user(email: str, **kwargs) -> UserCreate:
    return UserCreate(email=email, first_name="New", last_name="Person", **kwargs)


@pytest.mark.parametrize(
    "creator,role,message",
    [
        ("company_admin", RoleName.SUPER_ADMIN, "Company admins can not create"),
        ("company_admin", RoleName.EDITION_ADMIN, "Company admins can not create"),
        ("edition_admin", RoleName.SUPER_ADMIN, "Edition admins cannot create super admins"),
    ],
)
def test_creator_role_restrictions(request, db_session, ctx_of, creator, role, message):
    ctx = ctx_of(request.getfixturevalue(creator))
    with pytest.raises(ForbiddenError, match=message):
        user_service.create_user(db_session, ctx, new_user("x@example.com", role=role))


def test_duplicate_email_conflicts(db_session, regular_user, edition_admin, ctx_of):
    with pytest.raises(ConflictError):
        user_service.create_user(
            db_session, ctx_of(edition_admin), new_user("USER@example.com")
        )


def test_company_admin_creates_in_own_company(
    db_session, company, company_admin, other_edition, create_company, ctx_of
):
    foreign = create_company(other_edition, name="Foreign")
    user = user_service.create_user(
        db_session,
        ctx_of(company_admin),
        new_user("staff@example.com", company_id=foreign.id, password="s3cretpass"),
    )

    assert user.company_id == company.id
    assert user.system_edition_id == company.system_edition_id
    assert user.created_by_id == company_admin.id
    assert verify_password("s3cretpass", user.hashed_password)
    assert db_session.query(AuditLog).filter(AuditLog.action == "user_created").count() == 1


def test_edition_admin_cannot_use_foreign_company(
    db_session, edition_admin, other_edition, create_company, ctx_of
):
    foreign = create_company(other_edition, name="Foreign")
    with pytest.raises(ForbiddenError, match="Access denied to this company"):
        user_service.create_user(
            db_session, ctx_of(edition_admin), new_user("x@example.com", company_id=foreign.id)
        )


def test_seat_assignment_takes_and_releases_seats(
    db_session, edition, edition_admin, create_company, ctx_of
):
    small = create_company(edition, name="Small", total_seats=1)
    ctx = ctx_of(edition_admin)

    first = user_service.create_user(
        db_session, ctx, new_user("one@example.com", company_id=small.id, seat_assigned=True)
    )
    assert first.seat_assigned is True
    assert db_session.get(Company, small.id).used_seats == 1

    with pytest.raises(BadRequestError, match="No available seats in company Small"):
        user_service.create_user(
            db_session, ctx, new_user("two@example.com", company_id=small.id, seat_assigned=True)
        )
    db_session.rollback()

    user_service.update_user(db_session, ctx, first, UserUpdate(seat_assigned=False))
    assert db_session.get(Company, small.id).used_seats == 0


def test_moving_user_moves_seat(db_session, edition, company, edition_admin, create_company,
                                ctx_of):
    target = create_company(edition, name="Target")
    ctx = ctx_of(edition_admin)
    user = user_service.create_user(
        db_session, ctx, new_user("mover@example.com", company_id=company.id, seat_assigned=True)
    )

    user = user_service.update_user(db_session, ctx, user, UserUpdate(company_id=target.id))

    assert user.company_id == target.id
    assert user.seat_assigned is True
    assert db_session.get(Company, company.id).used_seats == 0
    assert db_session.get(Company, target.id).used_seats == 1


def test_company_admin_cannot_move_users(
    db_session, edition, regular_user, company_admin, create_company, ctx_of
):
    other = create_company(edition, name="Sibling")
    with pytest.raises(ForbiddenError, match="cannot move users"):
        user_service.update_user(
            db_session, ctx_of(company_admin), regular_user, UserUpdate(company_id=other.id)
        )


def test_admins_cannot_manage_higher_roles(
    db_session, edition, company, company_admin, edition_admin, create_user, ctx_of
):
    boss = create_user("boss@example.com", RoleName.EDITION_ADMIN, edition, company)
    root = create_user("root2@example.com", RoleName.SUPER_ADMIN, edition)

    with pytest.raises(ForbiddenError, match="You cannot manage edition_admin accounts"):
        user_service.update_user(
            db_session, ctx_of(company_admin), boss, UserUpdate(password="new-secret-1")
        )
    with pytest.raises(ForbiddenError, match="You cannot manage super_admin accounts"):
        user_service.delete_user(db_session, ctx_of(edition_admin), root)

    db_session.refresh(boss)
    assert verify_password(TEST_PASSWORD, boss.hashed_password)
    assert db_session.get(User, root.id) is not None


def test_cannot_deactivate_or_delete_self(db_session, edition_admin, ctx_of):
    ctx = ctx_of(edition_admin)
    with pytest.raises(BadRequestError, match="You cannot deactivate your own account"):
        user_service.update_user(db_session, ctx, edition_admin, UserUpdate(is_active=False))
    with pytest.raises(BadRequestError, match="You cannot delete your own account"):
        user_service.delete_user(db_session, ctx, edition_admin)


def test_delete_removes_delegate_grants(
    db_session, regular_user, delegate_user, edition_admin, ctx_of
):
    db_session.add(
        DelegateAccess(
            system_edition_id=regular_user.system_edition_id,
            delegator_id=regular_user.id,
            delegate_id=delegate_user.id,
        )
    )
    db_session.commit()

    user_id = regular_user.id
    user_service.delete_user(db_session, ctx_of(edition_admin), regular_user)

    assert db_session.get(User, user_id) is None
    assert db_session.query(DelegateAccess).count() == 0


def test_listing_is_scoped(
    db_session, super_admin, edition_admin, company_admin, regular_user, other_edition,
    create_user, ctx_of,
):
    create_user("stranger@example.com", RoleName.USER, edition=other_edition)

    _, total = user_service.get_users(db_session, ctx_of(super_admin), PaginationParams())
    assert total == 5

    _, total = user_service.get_users(db_session, ctx_of(edition_admin), PaginationParams())
    assert total == 3

    users, total = user_service.get_users(
        db_session, ctx_of(company_admin), PaginationParams(), role=RoleName.USER
    )
    assert total == 1
    assert users[0].id == regular_user.id


def test_change_password(db_session, regular_user, ctx_of):
    ctx = ctx_of(regular_user)
    with pytest.raises(BadRequestError, match="Current password is incorrect"):
        user_service.change_password(
            db_session, ctx, regular_user,
            PasswordChange(current_password="wrong", new_password="brandnew123"),
        )
    with pytest.raises(BadRequestError, match="must be different"):
        user_service.change_password(
            db_session, ctx, regular_user,
            PasswordChange(current_password=TEST_PASSWORD, new_password=TEST_PASSWORD),
        )

    user_service.change_password(
        db_session, ctx, regular_user,
        PasswordChange(current_password=TEST_PASSWORD, new_password="brandnew123"),
    )
    assert verify_password("brandnew123", regular_user.hashed_password)
