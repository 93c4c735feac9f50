# -*- coding: utf-8 -*-
"""Auth — password hashing (stdlib pbkdf2_hmac)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from typing import Optional

from ..config import settings

_PBKDF2_ALG = "sha256"

_dummy_hash: Optional[str] = None


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    iterations = int(iterations or settings.pbkdf2_iterations)
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(_PBKDF2_ALG, password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_{_PBKDF2_ALG}${iterations}${_b64url_encode(salt)}${_b64url_encode(dk)}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iter_s, salt_b64, dk_b64 = password_hash.split("$", 3)
        if not scheme.startswith("pbkdf2_"):
            return False
        alg = scheme.split("_", 1)[1]
        iterations = int(iter_s)
        salt = _b64url_decode(salt_b64)
        expected = _b64url_decode(dk_b64)
    except (ValueError, TypeError):
        return False
    actual = hashlib.pbkdf2_hmac(alg, password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def burn_password_check(password: str) -> None:
    """Spend the same work as a real check, for usernames that do not exist."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    verify_password(password, _dummy_hash)
