from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _flag(name: str, default: str) -> bool:
    return (os.environ.get(name) or default).strip() in {"1", "true", "True", "yes", "on"}


class Settings:
    """Centralized configuration for the health tracker service."""

    def __init__(self) -> None:
        repo_root = Path(__file__).resolve().parent.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("HEALTHTRACK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("HEALTHTRACK_DB_PATH") or (self.data_root / "health.db")
        ).expanduser()

        # Sessions are absolute-lifetime: never extended on use.
        self.session_ttl_hours: int = int(os.environ.get("HEALTHTRACK_SESSION_TTL_HOURS") or "24")
        # In production you MUST set HEALTHTRACK_SESSION_SECRET. Session tokens are stored
        # as HMACs keyed by this secret.
        self.session_secret: str = os.environ.get("HEALTHTRACK_SESSION_SECRET") or "dev-secret-change-me"
        self.session_cookie_name: str = os.environ.get("HEALTHTRACK_COOKIE_NAME") or "healthtrack_session"
        self.cookie_secure: bool = _flag("HEALTHTRACK_COOKIE_SECURE", "")

        self.pbkdf2_iterations: int = int(os.environ.get("HEALTHTRACK_PBKDF2_ITERATIONS") or "200000")
        self.seed_demo_user: bool = _flag("HEALTHTRACK_SEED_DEMO_USER", "1")
        self.log_level: str = (os.environ.get("HEALTHTRACK_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("HEALTHTRACK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
