# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for the custom field endpoints."""

import uuid

from tenant_admin.models import CustomField
from tenant_admin.models.enums import CustomFieldType

CUSTOM_FIELDS = "/api/v1/custom-fields"


def add_field(
    db_session,
    edition,
    name: str,
    field_type: CustomFieldType = CustomFieldType.TEXT,
    **kwargs,
) -> CustomField:
    field = CustomField(
        system_edition_id=edition.id, field_name=name, field_type=field_type, **kwargs
    )
    db_session.add(field)
    db_session.commit()
    db_session.refresh(field)
    return field


def test_edition_admin_creates_field(edition_admin_client, edition, edition_admin):
    response = edition_admin_client.post(
        CUSTOM_FIELDS,
        json={
            "field_name": "Shirt size",
            "field_type": "dropdown",
            "dropdown_options": ["S", "M"],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Custom field created successfully"
    assert body["data"]["system_edition_id"] == str(edition.id)
    assert body["data"]["field_order"] == 0
    assert body["data"]["created_by_id"] == str(edition_admin.id)


def test_dropdown_without_options_is_rejected(edition_admin_client):
    response = edition_admin_client.post(
        CUSTOM_FIELDS, json={"field_name": "Shirt size", "field_type": "dropdown"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Dropdown field type must have at least one option"


def test_company_admin_reads_but_cannot_write(company_admin_client, db_session, edition):
    field = add_field(db_session, edition, "Department", field_order=0)

    response = company_admin_client.get(CUSTOM_FIELDS)
    assert response.status_code == 200
    assert [f["field_name"] for f in response.json()["data"]] == ["Department"]

    response = company_admin_client.put(
        f"{CUSTOM_FIELDS}/{field.id}", json={"field_name": "Team"}
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions"


def test_user_reads_single_field(user_client, db_session, edition):
    field = add_field(db_session, edition, "Birthday", CustomFieldType.DATE)

    response = user_client.get(f"{CUSTOM_FIELDS}/{field.id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Custom field retrieved successfully"
    assert response.json()["data"]["field_type"] == "date"


def test_field_of_other_edition_is_not_found(edition_admin_client, db_session, other_edition):
    field = add_field(db_session, other_edition, "Foreign")

    response = edition_admin_client.get(f"{CUSTOM_FIELDS}/{field.id}")
    assert response.status_code == 404
    assert response.json()["message"] == "Custom field not found"


def test_super_admin_needs_edition(super_admin_client, edition):
    response = super_admin_client.get(f"{CUSTOM_FIELDS}/stats")
    assert response.status_code == 400
    assert response.json()["message"] == "System edition ID is required"

    response = super_admin_client.get(
        f"{CUSTOM_FIELDS}/stats", params={"system_edition_id": str(edition.id)}
    )
    assert response.status_code == 200
    assert response.json()["data"]["total_fields"] == 0


def test_update_and_delete(edition_admin_client, db_session, edition):
    field = add_field(db_session, edition, "Height", CustomFieldType.NUMBER, use_decimals=True)

    response = edition_admin_client.put(
        f"{CUSTOM_FIELDS}/{field.id}", json={"field_type": "text", "is_mandatory": True}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["field_type"] == "text"
    assert data["use_decimals"] is False
    assert data["is_mandatory"] is True

    response = edition_admin_client.delete(f"{CUSTOM_FIELDS}/{field.id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Custom field deleted successfully"

    response = edition_admin_client.get(f"{CUSTOM_FIELDS}/{field.id}")
    assert response.status_code == 404


def test_reorder_and_stats(edition_admin_client, db_session, edition):
    first = add_field(db_session, edition, "First", field_order=0, is_mandatory=True)
    second = add_field(db_session, edition, "Second", CustomFieldType.CHECKBOX, field_order=1)

    response = edition_admin_client.put(
        f"{CUSTOM_FIELDS}/order",
        json={
            "field_updates": [
                {"id": str(first.id), "field_order": 1},
                {"id": str(second.id), "field_order": 0},
            ]
        },
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Custom field order updated successfully"

    response = edition_admin_client.get(CUSTOM_FIELDS)
    assert [f["field_name"] for f in response.json()["data"]] == ["Second", "First"]

    response = edition_admin_client.get(f"{CUSTOM_FIELDS}/stats")
    assert response.json()["message"] == "Custom field statistics retrieved successfully"
    stats = response.json()["data"]
    assert stats["total_fields"] == 2
    assert stats["mandatory_fields"] == 1
    assert stats["field_type_breakdown"]["checkbox"] == 1


def test_reorder_unknown_field(edition_admin_client):
    unknown = uuid.uuid4()
    response = edition_admin_client.put(
        f"{CUSTOM_FIELDS}/order",
        json={"field_updates": [{"id": str(unknown), "field_order": 0}]},
    )
    assert response.status_code == 404
    assert response.json()["message"] == f"Custom field with ID {unknown} not found"
