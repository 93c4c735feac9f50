# -*- coding: utf-8 -*-
"""Dashboard summary — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..auth.sessions import Session
from ..records.kinds import parse_date
from .models import SummaryResponse
from .storage import get_summary

router = APIRouter(prefix="/api/health", tags=["Summary"])


@router.get("/summary", response_model=SummaryResponse, summary="Today's dashboard rollup")
def health_summary(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD, defaults to today (UTC)"),
    session: Session = Depends(get_current_user),
):
    day = None
    if date:
        try:
            day = parse_date(date)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"date {exc}") from exc
    return SummaryResponse.model_validate(get_summary(session.user_id, day))
