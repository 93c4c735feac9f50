# -*- coding: utf-8 -*-
"""Dashboard summary — today's rollup across record kinds.

The three figures come from three independent owner-scoped queries, each on
its own connection. A failing query raises ``StoreError``; there is no
partial result.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from .models import NutritionToday, SummaryResponse, WorkoutsToday


def today_iso() -> str:
    # UTC calendar day, the same day boundary browsers get from toISOString().
    return datetime.now(timezone.utc).date().isoformat()


def workouts_on(user_id: int, day: str) -> WorkoutsToday:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            """
            SELECT COUNT(*) AS count, COALESCE(SUM(calories_burned), 0) AS calories
            FROM workouts WHERE user_id = ? AND date = ?
            """,
            (user_id, day),
        ).fetchone()
    return WorkoutsToday(count=int(row["count"] or 0), calories=int(row["calories"] or 0))


def nutrition_on(user_id: int, day: str) -> NutritionToday:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT COALESCE(SUM(calories), 0) AS calories FROM nutrition WHERE user_id = ? AND date = ?",
            (user_id, day),
        ).fetchone()
    return NutritionToday(calories=int(row["calories"] or 0))


def active_medication_count(user_id: int) -> int:
    # Not date-scoped: a medication is active until the user says otherwise.
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT COUNT(*) AS count FROM medications WHERE user_id = ? AND is_active = 1",
            (user_id,),
        ).fetchone()
    return int(row["count"] or 0)


def get_summary(user_id: int, today: Optional[str] = None) -> Dict[str, Any]:
    day = today or today_iso()
    resp = SummaryResponse(
        date=day,
        workouts_today=workouts_on(user_id, day),
        nutrition_today=nutrition_on(user_id, day),
        active_medications=active_medication_count(user_id),
    )
    return resp.model_dump()
