# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from ..errors import UnauthenticatedError
from .models import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    StatusResponse,
    UserPublic,
)
from .security import clear_session_cookie, get_current_user, get_token_from_request, set_session_cookie
from .sessions import Session, create_session, login, logout, require_session, status
from .storage import get_profile, register

router = APIRouter(prefix="/api/auth", tags=["Auth"])
user_router = APIRouter(prefix="/api/user", tags=["User"])


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register_user(request: RegisterRequest, response: Response):
    user_id = register(
        request.username,
        request.password,
        request.email,
        age=request.age,
        gender=request.gender,
    )
    # Registration logs the new user straight in.
    username = (request.username or "").strip()
    token = create_session(user_id, username)
    set_session_cookie(response, token)
    return AuthResponse(
        message="Account created successfully!",
        user=UserPublic(id=user_id, username=username),
    )


@router.post("/login", response_model=AuthResponse, summary="Login")
def login_user(request: LoginRequest, response: Response):
    token = login(request.username, request.password)
    session = require_session(token)
    set_session_cookie(response, token)
    return AuthResponse(
        message="Login successful!",
        user=UserPublic(id=session.user_id, username=session.username),
    )


@router.post("/logout", response_model=MessageResponse, summary="Logout")
def logout_user(request: Request, response: Response):
    logout(get_token_from_request(request))
    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/status", response_model=StatusResponse, response_model_exclude_none=True, summary="Session probe")
def auth_status(request: Request):
    return StatusResponse.model_validate(status(get_token_from_request(request)))


@user_router.get("/profile", response_model=ProfileResponse, summary="Current user's profile")
def user_profile(session: Session = Depends(get_current_user)):
    profile = get_profile(session.user_id)
    if profile is None:
        raise UnauthenticatedError()
    return ProfileResponse.model_validate(profile)
