# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""initial_tenant_schema

Revision ID: 4f1c2a7b9d30
Revises:
Create Date: 2026-01-12 09:15:42.118204

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a7b9d30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# SQLAlchemy stores enum member names
role_name = sa.Enum(
    "SUPER_ADMIN", "EDITION_ADMIN", "COMPANY_ADMIN", "USER", "DELEGATE",
    name="rolename",
)
company_status = sa.Enum("ACTIVE", "INACTIVE", "SUSPENDED", name="companystatus")
license_type = sa.Enum(
    "ORGANIZATIONAL_SEAT", "INDIVIDUAL_PARENT", "INDIVIDUAL_CHILD", "NONE",
    name="licensetype",
)
tag_type = sa.Enum("DOCUMENT", "NOTE", "CERTIFICATE", name="tagtype")
custom_field_type = sa.Enum(
    "NUMBER", "TEXT", "DATE", "DROPDOWN", "CHECKBOX", name="customfieldtype"
)
audit_module = sa.Enum(
    "DOCUMENTS", "NOTES", "CERTIFICATIONS", "USERS", "SETTINGS", "SYSTEM",
    "AUTHENTICATION", "PERMISSIONS",
    name="auditmodule",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "system_editions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("modules", sa.JSON(), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("organization_name", sa.String(length=200), nullable=True),
        sa.Column("slogan", sa.String(length=255), nullable=True),
        sa.Column("primary_brand_color", sa.String(length=7), nullable=True),
        sa.Column("secondary_brand_color", sa.String(length=7), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column("last_updated_by_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_system_editions_archived", "system_editions", ["archived"])

    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=False),
        sa.Column("company_admin_id", sa.Uuid(), nullable=True),
        sa.Column("total_seats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("used_seats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", company_status, nullable=False),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("channel_partner_split", sa.String(length=100), nullable=True),
        sa.Column("commission", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("payment_method", sa.String(length=100), nullable=True),
        sa.Column("encrypted_master_pin", sa.Text(), nullable=True),
        sa.Column("pin_options", sa.JSON(), nullable=False),
        sa.Column("pin_settings", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_edition_id"], ["system_editions.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_system_edition_id", "companies", ["system_edition_id"])
    op.create_index("ix_companies_company_admin_id", "companies", ["company_admin_id"])
    op.create_index("ix_companies_status", "companies", ["status"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("role", role_name, nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=True),
        sa.Column("company_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "email_verified", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "seat_assigned", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("license_type", license_type, nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("expiration_date", sa.DateTime(), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_edition_id"], ["system_editions.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_system_edition_id", "users", ["system_edition_id"])
    op.create_index("ix_users_company_id", "users", ["company_id"])
    op.create_index("ix_users_last_login_at", "users", ["last_login_at"])

    op.create_table(
        "tags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=True),
        sa.Column("type", tag_type, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_edition_id"], ["system_editions.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tags_system_edition_id", "tags", ["system_edition_id"])
    op.create_index("ix_tags_type", "tags", ["type"])
    op.create_index("ix_tags_is_active", "tags", ["is_active"])
    op.create_index("ix_tags_sort_order", "tags", ["sort_order"])
    op.create_index("ix_tags_system_edition_id_type", "tags", ["system_edition_id", "type"])

    op.create_table(
        "custom_fields",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("field_type", custom_field_type, nullable=False),
        sa.Column("help_text", sa.Text(), nullable=True),
        sa.Column(
            "is_mandatory", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "use_decimals", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("dropdown_options", sa.JSON(), nullable=True),
        sa.Column("field_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_edition_id"], ["system_editions.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_custom_fields_system_edition_id", "custom_fields", ["system_edition_id"]
    )
    op.create_index("ix_custom_fields_field_type", "custom_fields", ["field_type"])
    op.create_index("ix_custom_fields_field_order", "custom_fields", ["field_order"])
    op.create_index("ix_custom_fields_is_active", "custom_fields", ["is_active"])

    op.create_table(
        "delegate_access",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=False),
        sa.Column("delegator_id", sa.Uuid(), nullable=False),
        sa.Column("delegate_id", sa.Uuid(), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expiration_date", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "delegator_id <> delegate_id", name="ck_delegate_access_distinct_users"
        ),
        sa.ForeignKeyConstraint(
            ["system_edition_id"], ["system_editions.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["delegator_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["delegate_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "system_edition_id",
            "delegator_id",
            "delegate_id",
            name="uq_delegate_access_edition_delegator_delegate",
        ),
    )
    op.create_index(
        "ix_delegate_access_system_edition_id", "delegate_access", ["system_edition_id"]
    )
    op.create_index("ix_delegate_access_delegator_id", "delegate_access", ["delegator_id"])
    op.create_index("ix_delegate_access_delegate_id", "delegate_access", ["delegate_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("system_edition_id", sa.Uuid(), nullable=True),
        sa.Column("company_id", sa.Uuid(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("module", audit_module, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_system_edition_id", "audit_logs", ["system_edition_id"])
    op.create_index("ix_audit_logs_company_id", "audit_logs", ["company_id"])
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_module", "audit_logs", ["module"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index(
        "ix_audit_logs_module_created_at", "audit_logs", ["module", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("delegate_access")
    op.drop_table("custom_fields")
    op.drop_table("tags")
    op.drop_table("users")
    op.drop_table("companies")
    op.drop_table("system_editions")

    bind = op.get_bind()
    for enum_type in (
        audit_module, custom_field_type, tag_type, license_type, company_status, role_name,
    ):
        enum_type.drop(bind, checkfirst=True)
