# -*- coding: utf-8 -*-
"""Shared setup: point the app at a throwaway database and reload it."""

from __future__ import annotations

import importlib
import os
import sys
import tempfile
import uuid
from pathlib import Path


def load_app(prefix: str = "healthtrack-test-") -> Path:
    tmp = Path(tempfile.mkdtemp(prefix=prefix))
    os.environ["HEALTHTRACK_DATA_ROOT"] = str(tmp)
    os.environ["HEALTHTRACK_DB_PATH"] = str(tmp / "health.db")
    os.environ["HEALTHTRACK_SESSION_SECRET"] = "test-secret"
    # Keep hashing cheap; the stored hash records its own iteration count.
    os.environ["HEALTHTRACK_PBKDF2_ITERATIONS"] = "1000"
    os.environ["HEALTHTRACK_SEED_DEMO_USER"] = "1"

    # Ensure settings/app reflect the env vars above.
    for name in list(sys.modules.keys()):
        if name == "healthtrack" or name.startswith("healthtrack."):
            sys.modules.pop(name, None)
    importlib.import_module("healthtrack.api")
    return tmp


def unique_name(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"
