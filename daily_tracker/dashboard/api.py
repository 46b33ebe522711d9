# -*- coding: utf-8 -*-
"""Dashboard — today's totals and energy balance in one call."""

from __future__ import annotations

from datetime import date as date_type

from fastapi import APIRouter, Depends, Query

from ..activity.storage import list_activities_between
from ..auth.security import get_current_user
from ..balance import build_balance_card
from ..health.storage import list_health_between
from ..local_time import day_bounds, parse_date
from ..meals.storage import compute_totals, list_meals_between
from ..meals.storage import row_to_entry as meal_entry
from ..weight.storage import get_latest_weight
from ..weight.storage import row_to_entry as weight_entry
from .models import DashboardResponse

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse, summary="Daily dashboard")
def dashboard(
    date: str | None = Query(default=None, description="YYYY-MM-DD; defaults to the server's local date"),
    user: dict = Depends(get_current_user),
):
    day = parse_date(date) if date else date_type.today()
    start, end = day_bounds(day)
    meals = [meal_entry(r) for r in list_meals_between(user["id"], start, end)]
    latest = get_latest_weight(user["id"], on_or_before=day)
    return DashboardResponse(
        date=day.isoformat(),
        totals=compute_totals(meals),
        meal_count=len(meals),
        activity_count=len(list_activities_between(user["id"], start, end)),
        health_count=len(list_health_between(user["id"], start, end)),
        latest_weight=weight_entry(latest) if latest else None,
        energy=build_balance_card(user["id"], day),
    )
