# -*- coding: utf-8 -*-
"""Auth — credential store (users table)."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from ..errors import ConflictError, ValidationError
from .passwords import burn_password_check, hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

DEMO_USERNAME = "testuser"
DEMO_PASSWORD = "password123"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_user_by_username(username: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
        return dict(row) if row else None


def register(
    username: Any,
    password: Any,
    email: Any,
    age: Optional[int] = None,
    gender: Optional[str] = None,
) -> int:
    """Create a user and return its id.

    The password is stored only as a salted PBKDF2 hash. Raises
    ``ValidationError`` for missing fields or a short password and
    ``ConflictError`` when the username is taken.
    """
    username = clean_text(username)
    email = clean_text(email)
    password = password if isinstance(password, str) and password else None
    if not username or not password or not email:
        missing = [
            name
            for name, value in (("username", username), ("password", password), ("email", email))
            if not value
        ]
        raise ValidationError("Username, password, and email are required", fields=missing)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            fields=["password"],
        )
    if age is not None and age < 0:
        raise ValidationError("Age must be a non-negative integer", fields=["age"])

    if get_user_by_username(username):
        raise ConflictError("Username already exists")

    password_hash = hash_password(password)
    with db_conn(settings.app_db_path) as conn:
        try:
            cur = conn.execute(
                """
                INSERT INTO users (username, password_hash, email, age, gender, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (username, password_hash, email, age, clean_text(gender), _utc_now()),
            )
        except sqlite3.IntegrityError as exc:
            # Lost a race with a concurrent registration of the same name.
            raise ConflictError("Username already exists") from exc
        user_id = int(cur.lastrowid)
    logger.info("Registered user %s (id=%s)", username, user_id)
    return user_id


def verify(username: Any, password: Any) -> Optional[int]:
    """Return the user id when the credentials match, else ``None``."""
    username = clean_text(username)
    if not username or not isinstance(password, str):
        return None
    user = get_user_by_username(username)
    if not user:
        burn_password_check(password)
        return None
    if not verify_password(password, user["password_hash"]):
        return None
    return int(user["id"])


def get_profile(user_id: int) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT username, email, age, gender FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        return dict(row) if row else None


def ensure_demo_user() -> Optional[int]:
    """Seed the well-known demo account; no-op when it already exists."""
    existing = get_user_by_username(DEMO_USERNAME)
    if existing:
        return int(existing["id"])
    try:
        user_id = register(DEMO_USERNAME, DEMO_PASSWORD, "test@example.com", 30, "prefer-not-to-say")
    except ConflictError:
        existing = get_user_by_username(DEMO_USERNAME)
        return int(existing["id"]) if existing else None
    logger.info("Demo user created: %s", DEMO_USERNAME)
    return user_id
