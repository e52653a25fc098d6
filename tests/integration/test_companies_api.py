# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for the company endpoints."""

from tenant_admin.models import Company
from tenant_admin.models.enums import RoleName

COMPANIES = "/api/v1/companies"


def test_edition_admin_creates_company(edition_admin_client, db_session, edition):
    response = edition_admin_client.post(
        COMPANIES, json={"name": "Globex", "total_seats": 10, "commission": "12.50"}
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["system_edition_id"] == str(edition.id)
    assert data["has_master_pin"] is False
    assert db_session.query(Company).filter(Company.name == "Globex").count() == 1


def test_company_admin_cannot_create_company(company_admin_client):
    response = company_admin_client.post(COMPANIES, json={"name": "Initech"})
    assert response.status_code == 403


def test_company_admin_lists_only_own_company(
    company_admin_client, company, edition, create_company
):
    create_company(edition, name="Sibling")
    response = company_admin_client.get(COMPANIES)

    assert response.status_code == 200
    assert [c["id"] for c in response.json()["data"]] == [str(company.id)]


def test_my_company(user_client, company, client_for, create_user):
    response = user_client.get(f"{COMPANIES}/me")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == company.name

    loner = create_user("loner@example.com", RoleName.USER)
    response = client_for(loner).get(f"{COMPANIES}/me")
    assert response.status_code == 404
    assert response.json()["message"] == "No company assigned to your account"


def test_edition_admin_cannot_reach_foreign_company(
    edition_admin_client, other_edition, create_company
):
    foreign = create_company(other_edition, name="Foreign")
    response = edition_admin_client.get(f"{COMPANIES}/{foreign.id}")
    assert response.status_code == 403
    assert response.json()["message"] == "Company does not belong to your system edition"


def test_update_company_seats_below_usage(company_admin_client, db_session, company):
    company.used_seats = 4
    db_session.commit()

    response = company_admin_client.put(f"{COMPANIES}/{company.id}", json={"total_seats": 2})
    assert response.status_code == 400


def test_company_users_by_role(company_admin_client, company, regular_user):
    response = company_admin_client.get(
        f"{COMPANIES}/{company.id}/users", params={"role": "user"}
    )
    assert response.status_code == 200
    assert [u["email"] for u in response.json()["data"]] == [regular_user.email]


def test_pin_flow(company_admin_client, user_client, company):
    url = f"{COMPANIES}/{company.id}"

    response = user_client.post(f"{url}/validate-pin", json={"pin": "1234"})
    assert response.status_code == 400
    assert response.json()["message"] == "No master PIN configured for this company"

    response = company_admin_client.put(
        f"{url}/pin-management",
        json={"master_pin": "2468", "pin_options": {"notes": True}},
    )
    assert response.status_code == 200
    config = response.json()["data"]
    assert config["has_master_pin"] is True
    assert "master_pin" not in config
    assert config["pin_options"]["notes"] is True

    response = user_client.post(f"{url}/validate-pin", json={"pin": "2468"})
    assert response.json()["message"] == "PIN is valid"
    assert response.json()["data"] == {"is_valid": True}

    response = user_client.post(f"{url}/validate-pin", json={"pin": "0000"})
    assert response.json()["message"] == "PIN is invalid"

    response = user_client.get(f"{url}/pin-configuration")
    assert response.status_code == 200
    assert response.json()["data"]["pin_settings"] == {
        "require_to_view": False,
        "require_to_edit": False,
    }


def test_user_cannot_manage_pin(user_client, company):
    response = user_client.put(
        f"{COMPANIES}/{company.id}/pin-management", json={"master_pin": "1111"}
    )
    assert response.status_code == 403


def test_user_cannot_read_other_company_pin(user_client, edition, create_company):
    sibling = create_company(edition, name="Sibling")
    response = user_client.get(f"{COMPANIES}/{sibling.id}/pin-configuration")
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this company"


def test_short_pin_is_rejected(user_client, company):
    response = user_client.post(f"{COMPANIES}/{company.id}/validate-pin", json={"pin": "12"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "pin"


def test_company_admin_cannot_update_sibling_company(
    company_admin_client, edition, create_company, db_session
):
    sibling = create_company(edition, name="Sibling")

    response = company_admin_client.put(f"{COMPANIES}/{sibling.id}", json={"name": "Mine now"})

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: different company"
    db_session.refresh(sibling)
    assert sibling.name == "Sibling"
