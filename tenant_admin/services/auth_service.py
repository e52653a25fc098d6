# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication service."""

import logging
import uuid

from sqlalchemy.orm import Session

from tenant_admin.errors import ConflictError, UnauthorizedError
from tenant_admin.models import User
from tenant_admin.models.base import utcnow
from tenant_admin.models.enums import AuditModule, RoleName
from tenant_admin.schemas.auth import RegisterRequest
from tenant_admin.security import create_access_token, get_password_hash, verify_password
from tenant_admin.services import audit_log_service
from tenant_admin.services.context_service import own_context

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    """Create a bearer token for a user."""
    return create_access_token(user.id, user.role.value)


def register_user(
    db: Session,
    data: RegisterRequest,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> User:
    """Register a new regular user.

    Raises:
        ConflictError: If the email is already in use.
    """
    if get_user_by_email(db, data.email) is not None:
        raise ConflictError("User already exists with this email")

    user = User(
        email=data.email.lower(),
        hashed_password=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        role=RoleName.USER,
        is_active=True,
    )
    db.add(user)
    db.flush()

    audit_log_service.record(
        db,
        own_context(user, ip_address, user_agent),
        action="user_registered",
        module=AuditModule.AUTHENTICATION,
        description=f"User registered: {user.email}",
    )
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def login(
    db: Session,
    email: str,
    password: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> tuple[User, str]:
    """Verify credentials and issue a token.

    Raises:
        UnauthorizedError: If the credentials are wrong or the account is
            deactivated.
    """
    user = authenticate(db, email, password)
    if user is None:
        logger.warning(f"Failed login attempt for {email}")
        raise UnauthorizedError("Invalid credentials")
    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")

    user.last_login_at = utcnow()
    audit_log_service.record(
        db,
        own_context(user, ip_address, user_agent),
        action="login",
        module=AuditModule.AUTHENTICATION,
        description=f"User logged in: {user.email}",
    )
    db.commit()
    db.refresh(user)
    return user, issue_token(user)


def get_user_by_id(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.lower()).first()
