# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# Request fields are all optional so that missing values reach the
# credential store and come back as a single readable 400.
class RegisterRequest(BaseModel):
    username: Optional[str] = Field(default=None, max_length=64)
    password: Optional[str] = Field(default=None, max_length=128)
    email: Optional[str] = Field(default=None, max_length=254)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    gender: Optional[str] = Field(default=None, max_length=32)

    @field_validator("age", "gender", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        """HTML forms post unfilled optional inputs as empty strings."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(BaseModel):
    username: Optional[str] = Field(default=None, max_length=64)
    password: Optional[str] = Field(default=None, max_length=128)


class UserPublic(BaseModel):
    id: int
    username: str


class AuthResponse(BaseModel):
    message: str
    user: UserPublic


class MessageResponse(BaseModel):
    message: str


class StatusResponse(BaseModel):
    authenticated: bool
    user: Optional[UserPublic] = None


class ProfileResponse(BaseModel):
    username: str
    email: str
    age: Optional[int] = None
    gender: Optional[str] = None
