# -*- coding: utf-8 -*-
"""Auth — session cookie + FastAPI request helpers."""

from __future__ import annotations

from typing import Optional

from fastapi import Request, Response

from ..config import settings
from ..errors import UnauthenticatedError
from .sessions import Session, resolve_session


def set_session_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.session_ttl_hours) * 60 * 60
    resp.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(settings.session_cookie_name, path="/")


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    cookie = request.cookies.get(settings.session_cookie_name)
    return cookie or None


def get_session_from_request(request: Request) -> Optional[Session]:
    # The session gate middleware resolves once per request; reuse it.
    if hasattr(request.state, "session"):
        return request.state.session
    session = resolve_session(get_token_from_request(request))
    request.state.session = session
    return session


def get_current_user(request: Request) -> Session:
    """Dependency for protected routes: the caller's session or 401."""
    session = get_session_from_request(request)
    if session is None:
        raise UnauthenticatedError()
    return session