# -*- coding: utf-8 -*-
"""
Daily tracker API

Meal, activity, intestinal health and weight logging with calendar and
dashboard views. Every route under /api requires a session except the
public ones listed in `_PUBLIC_PREFIXES` and the liveness probe.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .activity.api import router as activity_router
from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.security import get_current_user_from_request
from .calendar_view.api import router as calendar_router
from .config import settings
from .dashboard.api import router as dashboard_router
from .health.api import router as health_router
from .local_time import InvalidTimestampError
from .meals.api import router as meals_router
from .profile.api import router as profile_router
from .subscription.api import router as subscription_router
from .uploads.api import router as uploads_router
from .weight.api import router as weight_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Daily Tracker",
    description="Meals, activity, intestinal health and weight, with calorie balance views",
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

_PUBLIC_PREFIXES = (
    "/api/auth/register",
    "/api/auth/login",
    "/api/auth/logout",
    "/api/subscription/webhook",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)
_LIVENESS_PATH = "/api/health"


def _session_required(path: str) -> bool:
    # /api/health itself is public; /api/health/entries is not.
    if not path.startswith("/api") or path == _LIVENESS_PATH:
        return False
    return not path.startswith(_PUBLIC_PREFIXES)


@app.on_event("startup")
def _prepare_database() -> None:
    init_app_db(settings.app_db_path)
    logger.info("App database ready at %s", settings.app_db_path)


# Test clients that skip lifespan events still need the schema.
init_app_db(settings.app_db_path)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    if _session_required(request.url.path):
        try:
            request.state.user = get_current_user_from_request(request)
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return await call_next(request)


@app.exception_handler(InvalidTimestampError)
async def _invalid_timestamp(request: Request, exc: InvalidTimestampError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


for _router in (
    auth_router,
    profile_router,
    meals_router,
    activity_router,
    health_router,
    weight_router,
    calendar_router,
    dashboard_router,
    subscription_router,
    uploads_router,
):
    app.include_router(_router)


@app.get(_LIVENESS_PATH)
def health_check():
    """Liveness probe."""
    return {"status": "ok", "version": app.version, "timestamp": datetime.now().isoformat()}


def run() -> None:
    """Console entry point (`daily-tracker`)."""
    import uvicorn

    host = os.environ.get("DAILY_TRACKER_HOST", "127.0.0.1")
    try:
        port = int(os.environ.get("DAILY_TRACKER_PORT", "8000"))
    except ValueError:
        port = 8000
    logger.info("Starting daily tracker on %s:%d", host, port)
    uvicorn.run("daily_tracker.api:app", host=host, port=port, reload=False)
