# -*- coding: utf-8 -*-
"""Health records — API endpoints (one route set shared by every kind)."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..auth.sessions import Session
from .kinds import KindSpec, get_kind
from .models import RecordCreatedResponse, RecordDeletedResponse
from .storage import MAX_LIST_LIMIT, delete_record, insert_record, list_records

router = APIRouter(prefix="/api/health", tags=["Health records"])


def _kind_or_404(kind: str) -> KindSpec:
    spec = get_kind(kind)
    if spec is None:
        raise HTTPException(status_code=404, detail="API endpoint not found")
    return spec


# Dependencies resolve in declaration order: an unknown kind is a 404 for
# anonymous callers too.

@router.get("/{kind}", response_model=List[Dict[str, Any]], summary="List the caller's records, newest first")
def list_kind(
    spec: KindSpec = Depends(_kind_or_404),
    limit: int = Query(default=MAX_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
    session: Session = Depends(get_current_user),
):
    return list_records(spec, session.user_id, limit=limit)


@router.post("/{kind}", response_model=RecordCreatedResponse, summary="Create a record")
def create_kind(
    spec: KindSpec = Depends(_kind_or_404),
    payload: Dict[str, Any] = Body(...),
    session: Session = Depends(get_current_user),
):
    record_id = insert_record(spec, session.user_id, payload)
    return RecordCreatedResponse(id=record_id, message=f"{spec.label} saved successfully!")


@router.delete("/{kind}/{record_id}", response_model=RecordDeletedResponse, summary="Delete one of the caller's records")
def delete_kind(
    record_id: int,
    spec: KindSpec = Depends(_kind_or_404),
    session: Session = Depends(get_current_user),
):
    deleted = delete_record(spec, session.user_id, record_id)
    # Same response whether the id was missing or owned by someone else.
    return RecordDeletedResponse(message=f"{spec.label} deleted successfully", deleted=deleted)
