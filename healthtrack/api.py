# -*- coding: utf-8 -*-
"""
Health tracker API

Session-authenticated tracking of workouts, nutrition, health metrics and
medications, plus the daily dashboard summary.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.api import user_router
from .auth.security import get_token_from_request
from .auth.sessions import resolve_session
from .auth.storage import ensure_demo_user
from .config import settings
from .errors import HealthTrackError
from .records.api import router as records_router
from .summary.api import router as summary_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Health Tracker",
    description="Workouts, nutrition, health metrics and medications per user",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _init_store() -> None:
    init_app_db(settings.app_db_path)
    if settings.seed_demo_user:
        ensure_demo_user()


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
_init_store()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.middleware("http")
async def _session_gate(request: Request, call_next):
    # Resolve the caller once per API request; protected routes enforce it
    # through the get_current_user dependency.
    if request.url.path.startswith("/api"):
        try:
            request.state.session = await run_in_threadpool(resolve_session, get_token_from_request(request))
        except HealthTrackError as exc:
            return _error(exc.status_code, exc.message)
    return await call_next(request)


@app.exception_handler(HealthTrackError)
async def _domain_error(request: Request, exc: HealthTrackError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and request.url.path.startswith("/api"):
        return _error(404, "API endpoint not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        where = ".".join(loc)
        problems.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
    return _error(400, "Invalid request: " + "; ".join(problems))


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


app.include_router(auth_router)
app.include_router(user_router)
# Summary before records: /api/health/summary must not be read as a record kind.
app.include_router(summary_router)
app.include_router(records_router)
