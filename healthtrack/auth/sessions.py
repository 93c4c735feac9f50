# -*- coding: utf-8 -*-
"""Auth — server-side session store.

Sessions are rows keyed by an HMAC of the opaque client token, so a copy of
the database does not hand out live cookies. Expiry is absolute: a session
lives ``settings.session_ttl_hours`` from issuance and is never extended.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from ..errors import InvalidCredentialsError, UnauthenticatedError, ValidationError
from .storage import clean_text, verify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user_id: int
    username: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _hash_token(token: str) -> str:
    secret = settings.session_secret.encode("utf-8")
    return hmac.new(secret, token.encode("utf-8"), hashlib.sha256).hexdigest()


def create_session(user_id: int, username: str, *, now: Optional[datetime] = None) -> str:
    now = now or _utc_now()
    token = secrets.token_urlsafe(32)
    expires_at = now + timedelta(hours=int(settings.session_ttl_hours))
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO sessions (token_hash, user_id, username, created_at, expires_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (_hash_token(token), user_id, username, _iso(now), _iso(expires_at)),
        )
    return token


def get_session(token: Optional[str]) -> Optional[Session]:
    """Look up a session by token, without any expiry check."""
    if not token:
        return None
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            """
            SELECT s.user_id, s.username, s.created_at, s.expires_at
            FROM sessions s
            JOIN users u ON u.id = s.user_id
            WHERE s.token_hash = ?
            """,
            (_hash_token(token),),
        ).fetchone()
    if not row:
        return None
    return Session(
        user_id=int(row["user_id"]),
        username=row["username"],
        created_at=_parse_iso(row["created_at"]),
        expires_at=_parse_iso(row["expires_at"]),
    )


def require_session(token: Optional[str], *, now: Optional[datetime] = None) -> Session:
    session = get_session(token)
    if session is None or session.is_expired(now or _utc_now()):
        raise UnauthenticatedError()
    return session


def resolve_session(token: Optional[str], *, now: Optional[datetime] = None) -> Optional[Session]:
    try:
        return require_session(token, now=now)
    except UnauthenticatedError:
        return None


def destroy_session(token: Optional[str]) -> None:
    if not token:
        return
    with db_conn(settings.app_db_path) as conn:
        conn.execute("DELETE FROM sessions WHERE token_hash = ?", (_hash_token(token),))


def purge_expired_sessions(now: Optional[datetime] = None) -> int:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM sessions WHERE expires_at <= ?", (_iso(now or _utc_now()),))
        return cur.rowcount


def login(username: Any, password: Any, *, now: Optional[datetime] = None) -> str:
    username = clean_text(username)
    if not username or not password:
        raise ValidationError("Username and password are required", fields=["username", "password"])
    user_id = verify(username, password)
    if user_id is None:
        logger.info("Failed login for %s", username)
        raise InvalidCredentialsError()
    purge_expired_sessions(now)
    token = create_session(user_id, username, now=now)
    logger.info("User %s logged in", username)
    return token


def logout(token: Optional[str]) -> None:
    destroy_session(token)


def status(token: Optional[str], *, now: Optional[datetime] = None) -> Dict[str, Any]:
    session = resolve_session(token, now=now)
    if session is None:
        return {"authenticated": False}
    return {
        "authenticated": True,
        "user": {"id": session.user_id, "username": session.username},
    }
