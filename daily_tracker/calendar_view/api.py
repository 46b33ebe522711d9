# -*- coding: utf-8 -*-
"""Calendar — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..local_time import parse_date
from .models import CalendarMonthResponse, DayDetailsResponse
from .service import build_day, build_month

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


@router.get("/month", response_model=CalendarMonthResponse, summary="Per-day counts for a month")
def month_view(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    user: dict = Depends(get_current_user),
):
    return build_month(user["id"], year, month)


@router.get("/day", response_model=DayDetailsResponse, summary="Timeline and summary for a day")
def day_view(date: str = Query(..., description="YYYY-MM-DD"), user: dict = Depends(get_current_user)):
    return build_day(user["id"], parse_date(date))
