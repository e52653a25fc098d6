# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for system edition, delegate access and dashboard endpoints."""

import uuid

from tenant_admin.models import SystemEdition

EDITIONS = "/api/v1/system-editions"
DELEGATES = "/api/v1/delegate-access"


def test_super_admin_manages_editions(super_admin_client, db_session):
    response = super_admin_client.post(
        EDITIONS, json={"name": "Gamma", "modules": {"co_branding": True}}
    )
    assert response.status_code == 201
    edition_id = response.json()["data"]["id"]

    response = super_admin_client.post(EDITIONS, json={"name": "Gamma"})
    assert response.status_code == 409

    response = super_admin_client.put(f"{EDITIONS}/{edition_id}", json={"archived": True})
    assert response.json()["data"]["archived"] is True

    response = super_admin_client.get(EDITIONS, params={"archived": "true"})
    assert [e["name"] for e in response.json()["data"]] == ["Gamma"]

    response = super_admin_client.delete(f"{EDITIONS}/{edition_id}")
    assert response.status_code == 200
    assert db_session.get(SystemEdition, uuid.UUID(edition_id)) is None


def test_edition_admin_limited_to_own_edition(edition_admin_client, edition, other_edition):
    response = edition_admin_client.get(EDITIONS)
    assert [e["id"] for e in response.json()["data"]] == [str(edition.id)]

    response = edition_admin_client.get(f"{EDITIONS}/{other_edition.id}")
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this system edition"


def test_unknown_edition(super_admin_client):
    response = super_admin_client.get(f"{EDITIONS}/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["message"] == "System edition not found"


def test_overview_and_children(edition_admin_client, edition, company, company_admin):
    overview = edition_admin_client.get(f"{EDITIONS}/{edition.id}/overview").json()["data"]
    assert overview["edition_name"] == edition.name
    assert overview["companies"] == 1
    assert overview["features_enabled"] == ["co_branding"]

    companies = edition_admin_client.get(f"{EDITIONS}/{edition.id}/companies").json()
    assert [c["name"] for c in companies["data"]] == [company.name]

    users = edition_admin_client.get(
        f"{EDITIONS}/{edition.id}/users", params={"role": "company_admin"}
    ).json()
    assert [u["email"] for u in users["data"]] == [company_admin.email]


def test_co_branding(edition_admin_client, edition):
    url = f"{EDITIONS}/{edition.id}/co-branding"
    response = edition_admin_client.put(
        url, json={"organization_name": "Acme", "primary_brand_color": "#123456"}
    )
    assert response.status_code == 200

    data = edition_admin_client.get(url).json()["data"]
    assert data["organization_name"] == "Acme"
    assert data["primary_brand_color"] == "#123456"
    assert data["slogan"] is None

    response = edition_admin_client.put(url, json={"secondary_brand_color": "green"})
    assert response.status_code == 400


def test_delegate_invite_flow(edition_admin_client, client_for, db_session, regular_user):
    response = edition_admin_client.post(
        f"{DELEGATES}/invite",
        json={
            "email": "assistant@example.com",
            "first_name": "Ada",
            "last_name": "Assistant",
            "permissions": ["view_users", "view_reports"],
        },
    )
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["user_created"] is True
    access = result["delegate_access"]
    assert access["permissions"] == ["view_users", "view_reports"]
    assert access["delegate"]["email"] == "assistant@example.com"

    response = edition_admin_client.post(
        f"{DELEGATES}/invite",
        json={"email": "assistant@example.com", "first_name": "Ada", "last_name": "A"},
    )
    assert response.status_code == 409

    listing = edition_admin_client.get(DELEGATES, params={"search": "assist"}).json()
    assert listing["pagination"]["total"] == 1

    response = edition_admin_client.put(
        f"{DELEGATES}/{access['id']}", json={"permissions": ["full_access"]}
    )
    assert response.json()["data"]["permissions"] == ["full_access"]

    response = edition_admin_client.delete(f"{DELEGATES}/{access['id']}")
    assert response.status_code == 200
    assert edition_admin_client.get(f"{DELEGATES}/{access['id']}").status_code == 404


def test_delegate_sees_own_grant(edition_admin_client, delegate_client, delegate_user):
    response = edition_admin_client.post(
        f"{DELEGATES}/invite",
        json={"email": delegate_user.email, "first_name": "D", "last_name": "U"},
    )
    assert response.json()["data"]["user_created"] is False
    access_id = response.json()["data"]["delegate_access"]["id"]

    response = delegate_client.get(f"{DELEGATES}/{access_id}")
    assert response.status_code == 200
    assert response.json()["data"]["delegator_id"] == response.json()["data"]["delegator"]["id"]

    assert delegate_client.get(f"{DELEGATES}/{uuid.uuid4()}").status_code == 404


def test_dashboard_metrics(super_admin_client, edition, company, regular_user):
    response = super_admin_client.get("/api/v1/super-admin/dashboard-metrics")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Dashboard metrics retrieved successfully"
    data = body["data"]
    assert data["dashboard_metrics"]["total_users"]["value"] == 2
    assert data["dashboard_metrics"]["active_editions"]["value"] == 1
    assert data["dashboard_metrics"]["monthly_revenue"]["currency"] == "USD"
    assert data["platform_stats"]["total_companies"] == 1
    assert data["platform_stats"]["system_health"] == "healthy"
    assert isinstance(data["recent_activity"], list)


def test_edition_admin_cannot_change_foreign_edition(
    edition_admin_client, other_edition, db_session
):
    response = edition_admin_client.put(
        f"{EDITIONS}/{other_edition.id}/co-branding", json={"organization_name": "Hijack"}
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: different system edition"

    response = edition_admin_client.put(
        f"{EDITIONS}/{other_edition.id}", json={"name": "Renamed"}
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: different system edition"

    db_session.refresh(other_edition)
    assert other_edition.name == "Other Edition"
    assert other_edition.organization_name is None


def test_delegate_views_delegator(
    edition_admin_client, delegate_client, edition_admin, delegate_user
):
    url = f"{DELEGATES}/delegators/{edition_admin.id}"
    response = delegate_client.get(url)
    assert response.status_code == 403
    assert response.json()["message"] == "No active delegate access found"

    response = edition_admin_client.post(
        f"{DELEGATES}/invite",
        json={
            "email": delegate_user.email,
            "first_name": "D",
            "last_name": "U",
            "permissions": ["view_reports"],
        },
    )
    access_id = response.json()["data"]["delegate_access"]["id"]

    response = delegate_client.get(url)
    assert response.status_code == 403
    assert response.json()["message"] == "Permission not granted in delegate access"

    edition_admin_client.put(f"{DELEGATES}/{access_id}", json={"permissions": ["view_users"]})
    response = delegate_client.get(url)
    assert response.status_code == 200
    assert response.json()["data"]["email"] == edition_admin.email
