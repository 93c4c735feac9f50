# -*- coding: utf-8 -*-
"""Error taxonomy shared by the stores and the HTTP boundary.

Every error carries the HTTP status it maps to; the app-level exception
handler renders it as ``{"error": message}``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class HealthTrackError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(HealthTrackError):
    """Missing or malformed input; raised before anything touches the store."""

    status_code = 400

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.fields: List[str] = list(fields or [])


class ConflictError(HealthTrackError):
    status_code = 400


class AuthenticationError(HealthTrackError):
    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    # Login failures are reported as 400 with a single message for both
    # unknown user and wrong password.
    status_code = 400

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class UnauthenticatedError(AuthenticationError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class StoreError(HealthTrackError):
    status_code = 500

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message)
