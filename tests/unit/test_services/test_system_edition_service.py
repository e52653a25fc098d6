# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for system_edition_service."""

import pytest
from pydantic import ValidationError

from tenant_admin.errors import ConflictError
from tenant_admin.models import Company, SystemEdition, Tag, User
from tenant_admin.models.enums import RoleName, TagType
from tenant_admin.schemas.common import PaginationParams
from tenant_admin.schemas.system_edition import (
    CoBrandingUpdate,
    SystemEditionCreate,
    SystemEditionUpdate,
)
from tenant_admin.services import system_edition_service


def test_create_and_reject_duplicate_name(db_session, super_admin, edition, ctx_of):
    ctx = ctx_of(super_admin)
    created = system_edition_service.create_system_edition(
        db_session, ctx, SystemEditionCreate(name="  Beta Edition ", modules={"notes": True})
    )
    assert created.name == "Beta Edition"
    assert created.created_by_id == super_admin.id
    assert created.enabled_modules == ["notes"]

    with pytest.raises(ConflictError, match="already exists"):
        system_edition_service.create_system_edition(
            db_session, ctx, SystemEditionCreate(name="Acme Edition")
        )


def test_unknown_modules_are_rejected():
    with pytest.raises(ValidationError, match="Unknown modules: teleport"):
        SystemEditionCreate(name="Broken", modules={"teleport": True})


def test_update_merges_modules(db_session, edition, edition_admin, ctx_of):
    updated = system_edition_service.update_system_edition(
        db_session,
        ctx_of(edition_admin),
        edition,
        SystemEditionUpdate(modules={"notes": True, "certifications": False}),
    )
    assert updated.modules == {"co_branding": True, "notes": True, "certifications": False}
    assert updated.last_updated_by_id == edition_admin.id


def test_rename_to_existing_name_conflicts(db_session, edition, other_edition, super_admin,
                                           ctx_of):
    with pytest.raises(ConflictError):
        system_edition_service.update_system_edition(
            db_session, ctx_of(super_admin), edition, SystemEditionUpdate(name="Other Edition")
        )


def test_listing_is_scoped(db_session, edition, other_edition, super_admin, edition_admin,
                           ctx_of):
    other_edition.archived = True
    db_session.commit()

    _, total = system_edition_service.get_system_editions(
        db_session, ctx_of(super_admin), PaginationParams()
    )
    assert total == 2

    editions, total = system_edition_service.get_system_editions(
        db_session, ctx_of(edition_admin), PaginationParams()
    )
    assert total == 1
    assert editions[0].id == edition.id

    _, total = system_edition_service.get_system_editions(
        db_session, ctx_of(super_admin), PaginationParams(), archived=True
    )
    assert total == 1


def test_overview(db_session, edition, company, edition_admin, company_admin, create_user):
    create_user("idle@example.com", RoleName.USER, edition=edition, is_active=False)
    edition.created_by_id = edition_admin.id
    db_session.commit()

    overview = system_edition_service.get_overview(db_session, edition)

    assert overview.edition_name == "Acme Edition"
    assert overview.created_by == "Edition Tester"
    assert overview.edition_admins == 1
    assert overview.companies == 1
    assert overview.active_users == 2
    assert overview.features_enabled == ["co_branding"]


def test_co_branding_updates_only_given_fields(db_session, edition, edition_admin, ctx_of):
    ctx = ctx_of(edition_admin)
    system_edition_service.update_co_branding(
        db_session, ctx, edition, CoBrandingUpdate(organization_name="Acme", slogan="Safe")
    )
    branding = system_edition_service.update_co_branding(
        db_session, ctx, edition, CoBrandingUpdate(primary_brand_color="#112233")
    )

    assert branding.organization_name == "Acme"
    assert branding.slogan == "Safe"
    assert branding.primary_brand_color == "#112233"
    assert branding.secondary_brand_color is None


def test_invalid_brand_color():
    with pytest.raises(ValidationError):
        CoBrandingUpdate(primary_brand_color="blue")


def test_delete_cascades_and_detaches_users(
    db_session, edition, company, regular_user, edition_admin, super_admin, ctx_of
):
    db_session.add(Tag(system_edition_id=edition.id, name="Doomed", type=TagType.NOTE))
    db_session.commit()
    edition_id, company_id = edition.id, company.id

    system_edition_service.delete_system_edition(db_session, ctx_of(super_admin), edition)

    assert db_session.get(SystemEdition, edition_id) is None
    assert db_session.get(Company, company_id) is None
    assert db_session.query(Tag).count() == 0
    for user_id in (regular_user.id, edition_admin.id):
        user = db_session.get(User, user_id)
        assert user.system_edition_id is None
        assert user.company_id is None
