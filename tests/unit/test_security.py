# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for password hashing, tokens and encryption."""

import uuid

import jwt
import pytest

from tenant_admin.encryption import decrypt_value, encrypt_value
from tenant_admin.security import (
    create_access_token,
    decode_access_token,
    generate_password,
    get_password_hash,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("Secret123!")
    assert hashed != "Secret123!"
    assert verify_password("Secret123!", hashed)
    assert not verify_password("secret123!", hashed)


def test_generated_passwords_differ():
    assert generate_password() != generate_password()
    assert len(generate_password()) >= 16


def test_access_token_claims():
    user_id = uuid.uuid4()
    payload = decode_access_token(create_access_token(user_id, "edition_admin"))
    assert payload["sub"] == str(user_id)
    assert payload["role"] == "edition_admin"


def test_tampered_token_is_rejected():
    token = create_access_token(uuid.uuid4(), "user")
    header, body, signature = token.split(".")
    forged = jwt.encode({"sub": "x", "role": "super_admin", "exp": 9999999999}, "other-key")
    with pytest.raises(jwt.PyJWTError):
        decode_access_token(forged)
    with pytest.raises(jwt.PyJWTError):
        decode_access_token(f"{header}.{body}.{signature[::-1]}")


def test_expired_token_is_rejected():
    token = create_access_token(uuid.uuid4(), "user", expires_minutes=-1)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_encryption_roundtrip():
    token = encrypt_value("1234")
    assert token != "1234"
    assert encrypt_value("1234") != token
    assert decrypt_value(token) == "1234"


def test_decrypt_with_wrong_key():
    token = encrypt_value("1234", secret="first-key")
    with pytest.raises(ValueError, match="Unable to decrypt"):
        decrypt_value(token, secret="second-key")


@pytest.mark.parametrize("value", ["not base64!", "c2hvcnQ="])
def test_decrypt_malformed_value(value):
    with pytest.raises(ValueError, match="Malformed"):
        decrypt_value(value)
