# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..local_time import day_bounds, encode, parse_date, parse_wall_clock
from ..subscription.models import UsageAction
from ..subscription.storage import check_usage, increment_usage
from .estimator import estimate_macros
from .models import Macros, MealCreateRequest, MealEntry, MealListResponse, MealUpdateRequest
from .storage import compute_totals, create_meal, delete_meal, get_meal, list_meals_between, row_to_entry, update_meal

router = APIRouter(prefix="/api/meals", tags=["Meals"])

_NOT_FOUND = "Entry not found or access denied"


def _estimate_for(user_id: str, description: str, image_url: Optional[str]) -> Optional[Macros]:
    usage = check_usage(user_id, UsageAction.ai_calculation)
    if not usage["can_perform"]:
        raise HTTPException(
            status_code=403,
            detail=f"Monthly AI calculation limit reached ({usage['limit']}). Please upgrade to continue.",
        )
    macros = estimate_macros(description, image_url)
    if macros is not None:
        increment_usage(user_id, UsageAction.ai_calculation)
    return macros


def _list_response(user_id: str, start_day, end_day) -> MealListResponse:
    rows = list_meals_between(user_id, day_bounds(start_day)[0], day_bounds(end_day)[1])
    entries = [row_to_entry(r) for r in rows]
    return MealListResponse(
        start=start_day.isoformat(),
        end=end_day.isoformat(),
        count=len(entries),
        totals=compute_totals(entries),
        entries=entries,
    )


@router.post("", response_model=MealEntry, summary="Log a meal (macros estimated)")
def create(request: MealCreateRequest, user: dict = Depends(get_current_user)):
    eaten_at = encode(parse_wall_clock(request.local_date_time))
    macros = _estimate_for(user["id"], request.description, request.image_url)
    row = create_meal(
        user["id"],
        description=request.description,
        image_url=request.image_url,
        local_date_time=eaten_at,
        macros=macros,
    )
    return row_to_entry(row)


@router.put("/{entry_id}", response_model=MealEntry, summary="Update a meal")
def update(entry_id: str, request: MealUpdateRequest, user: dict = Depends(get_current_user)):
    existing = get_meal(user["id"], entry_id)
    if not existing:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    eaten_at = encode(parse_wall_clock(request.local_date_time))

    macros = row_to_entry(existing).calculated_macros
    if request.description != existing["description"] or request.image_url != existing.get("image_url"):
        # Keep the previous macros when re-estimation fails.
        macros = _estimate_for(user["id"], request.description, request.image_url) or macros

    row = update_meal(
        user["id"],
        entry_id,
        description=request.description,
        image_url=request.image_url,
        local_date_time=eaten_at,
        macros=macros,
    )
    if not row:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return row_to_entry(row)


@router.delete("/{entry_id}", summary="Delete a meal")
def delete(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_meal(user["id"], entry_id):
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return {"success": True}


@router.get("", response_model=MealListResponse, summary="Meals for one day")
def list_for_day(date: str = Query(..., description="YYYY-MM-DD"), user: dict = Depends(get_current_user)):
    day = parse_date(date)
    return _list_response(user["id"], day, day)


@router.get("/range", response_model=MealListResponse, summary="Meals for a date range")
def list_for_range(
    start: str = Query(..., description="YYYY-MM-DD"),
    end: str = Query(..., description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    start_day, end_day = parse_date(start), parse_date(end)
    if end_day < start_day:
        raise HTTPException(status_code=400, detail="end must not be before start")
    return _list_response(user["id"], start_day, end_day)
