# -*- coding: utf-8 -*-
"""Health records — owner-scoped SQLite storage.

Every statement filters on ``user_id``; the owner is always the
authenticated caller and never read from the payload.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import db_conn
from ..config import settings
from .kinds import KindSpec, clean_fields

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 50


def _utc_now(now: Optional[datetime] = None) -> str:
    ts = now or datetime.now(timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def insert_record(
    spec: KindSpec,
    user_id: int,
    fields: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
) -> int:
    values = clean_fields(spec, fields)
    columns = ["user_id", *spec.columns, "created_at"]
    params = [user_id, *(values[c] for c in spec.columns), _utc_now(now)]
    placeholders = ", ".join("?" for _ in columns)
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            f"INSERT INTO {spec.table} ({', '.join(columns)}) VALUES ({placeholders})",
            params,
        )
        record_id = int(cur.lastrowid)
    logger.info("%s saved (id=%s, user=%s)", spec.label, record_id, user_id)
    return record_id


def list_records(spec: KindSpec, user_id: int, limit: int = MAX_LIST_LIMIT) -> List[Dict[str, Any]]:
    limit = max(1, min(int(limit), MAX_LIST_LIMIT))
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            f"SELECT * FROM {spec.table} WHERE user_id = ? ORDER BY {spec.order_by} LIMIT ?",
            (user_id, limit),
        ).fetchall()
    return [spec.model.model_validate(dict(r)).model_dump() for r in rows]


def delete_record(spec: KindSpec, user_id: int, record_id: int) -> bool:
    """Delete one of the caller's records.

    Returns ``False`` both when the id does not exist and when it belongs to
    someone else, so callers cannot probe for other users' records.
    """
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            f"DELETE FROM {spec.table} WHERE id = ? AND user_id = ?",
            (record_id, user_id),
        )
        deleted = cur.rowcount > 0
    if deleted:
        logger.info("%s deleted (id=%s, user=%s)", spec.label, record_id, user_id)
    return deleted
