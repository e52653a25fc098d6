# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"  # nosec - test-only secret  # noqa: S105
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from tenant_admin.database import get_db
from tenant_admin.main import app
from tenant_admin.models import Company, SystemEdition, User
from tenant_admin.models.base import Base
from tenant_admin.models.company import default_pin_options, default_pin_settings
from tenant_admin.models.enums import RoleName
from tenant_admin.rbac.context import ResolvedContext
from tenant_admin.security import create_access_token, get_password_hash

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"  # noqa: S105


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _override_db(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    _override_db(db_session)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_edition(db_session, name: str = "Acme Edition") -> SystemEdition:
    edition = SystemEdition(name=name, modules={"co_branding": True, "notes": False})
    db_session.add(edition)
    db_session.commit()
    db_session.refresh(edition)
    return edition


def make_company(
    db_session, edition: SystemEdition, name: str = "Acme Corp", total_seats: int = 5
) -> Company:
    company = Company(
        name=name,
        system_edition_id=edition.id,
        total_seats=total_seats,
        used_seats=0,
        pin_options=default_pin_options(),
        pin_settings=default_pin_settings(),
    )
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


def make_user(
    db_session,
    email: str,
    role: RoleName,
    edition: SystemEdition | None = None,
    company: Company | None = None,
    is_active: bool = True,
) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        first_name=email.split("@")[0].capitalize(),
        last_name="Tester",
        role=role,
        system_edition_id=edition.id if edition else None,
        company_id=company.id if company else None,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def context_for(user: User) -> ResolvedContext:
    """Context as resolved for the user's own assignment."""
    return ResolvedContext(
        user_id=user.id,
        role_name=user.role,
        company_id=user.company_id,
        system_edition_id=user.system_edition_id,
        ip_address="127.0.0.1",
        user_agent="pytest",
    )


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def edition(db_session) -> SystemEdition:
    return make_edition(db_session)


@pytest.fixture
def other_edition(db_session) -> SystemEdition:
    return make_edition(db_session, name="Other Edition")


@pytest.fixture
def company(db_session, edition) -> Company:
    return make_company(db_session, edition)


@pytest.fixture
def super_admin(db_session) -> User:
    return make_user(db_session, "root@example.com", RoleName.SUPER_ADMIN)


@pytest.fixture
def edition_admin(db_session, edition) -> User:
    return make_user(db_session, "edition@example.com", RoleName.EDITION_ADMIN, edition)


@pytest.fixture
def company_admin(db_session, edition, company) -> User:
    return make_user(
        db_session, "companyadmin@example.com", RoleName.COMPANY_ADMIN, edition, company
    )


@pytest.fixture
def regular_user(db_session, edition, company) -> User:
    return make_user(db_session, "user@example.com", RoleName.USER, edition, company)


@pytest.fixture
def delegate_user(db_session, edition) -> User:
    return make_user(db_session, "delegate@example.com", RoleName.DELEGATE, edition)


@pytest.fixture
def users_by_role(super_admin, edition_admin, company_admin, regular_user, delegate_user):
    return {
        RoleName.SUPER_ADMIN: super_admin,
        RoleName.EDITION_ADMIN: edition_admin,
        RoleName.COMPANY_ADMIN: company_admin,
        RoleName.USER: regular_user,
        RoleName.DELEGATE: delegate_user,
    }


@pytest.fixture
def client_for(client):
    """Return a factory for clients authenticated as a given user."""
    clients = []

    def factory(user: User) -> TestClient:
        authed = TestClient(app, headers=auth_headers(user))
        clients.append(authed)
        return authed

    yield factory
    for authed in clients:
        authed.close()


@pytest.fixture
def super_admin_client(client_for, super_admin):
    return client_for(super_admin)


@pytest.fixture
def edition_admin_client(client_for, edition_admin):
    return client_for(edition_admin)


@pytest.fixture
def company_admin_client(client_for, company_admin):
    return client_for(company_admin)


@pytest.fixture
def user_client(client_for, regular_user):
    return client_for(regular_user)


@pytest.fixture
def delegate_client(client_for, delegate_user):
    return client_for(delegate_user)


@pytest.fixture
def create_edition(db_session):
    def factory(name: str = "Acme Edition") -> SystemEdition:
        return make_edition(db_session, name)

    return factory


@pytest.fixture
def create_company(db_session):
    def factory(edition: SystemEdition, name: str = "Acme Corp", total_seats: int = 5) -> Company:
        return make_company(db_session, edition, name, total_seats)

    return factory


@pytest.fixture
def create_user(db_session):
    def factory(email: str, role: RoleName, edition=None, company=None, is_active=True) -> User:
        return make_user(db_session, email, role, edition, company, is_active)

    return factory


@pytest.fixture
def ctx_of():
    """Return the context resolver result for a user's own assignment."""
    return context_for
