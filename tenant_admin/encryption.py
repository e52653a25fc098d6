# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Symmetric encryption for secrets stored at rest (company master PINs)."""

import base64
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from tenant_admin.config import settings

SALT_LENGTH = 64
NONCE_LENGTH = 12
KEY_LENGTH = 32
ITERATIONS = 100_000


def _derive_key(salt: bytes, secret: str | None = None) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive((secret or settings.secret_key).encode("utf-8"))


def encrypt_value(value: str, secret: str | None = None) -> str:
    """Encrypt a string with AES-256-GCM.

    The result is base64 of ``salt + nonce + ciphertext`` (the GCM tag is
    part of the ciphertext).
    """
    salt = os.urandom(SALT_LENGTH)
    nonce = os.urandom(NONCE_LENGTH)
    ciphertext = AESGCM(_derive_key(salt, secret)).encrypt(
        nonce, value.encode("utf-8"), None
    )
    return base64.b64encode(salt + nonce + ciphertext).decode("ascii")


def decrypt_value(token: str, secret: str | None = None) -> str:
    """Decrypt a value produced by :func:`encrypt_value`.

    Raises:
        ValueError: If the token is malformed or was encrypted with another key.
    """
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
    except (ValueError, UnicodeEncodeError) as e:
        raise ValueError("Malformed encrypted value") from e

    if len(raw) <= SALT_LENGTH + NONCE_LENGTH:
        raise ValueError("Malformed encrypted value")

    salt = raw[:SALT_LENGTH]
    nonce = raw[SALT_LENGTH : SALT_LENGTH + NONCE_LENGTH]
    ciphertext = raw[SALT_LENGTH + NONCE_LENGTH :]
    try:
        plaintext = AESGCM(_derive_key(salt, secret)).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise ValueError("Unable to decrypt value") from e
    return plaintext.decode("utf-8")
