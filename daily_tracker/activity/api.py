# -*- coding: utf-8 -*-
"""Activity — API endpoints."""

from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..balance import BalanceCard, build_balance_card
from ..energy import ACTIVITY_CALORIES, estimate_activity_calories
from ..local_time import day_bounds, encode, parse_date, parse_wall_clock
from ..weight.storage import get_latest_weight
from .models import (
    ActivityCreateRequest,
    ActivityEntry,
    ActivityListResponse,
    ActivityTypesResponse,
    ActivityUpdateRequest,
)
from .storage import (
    create_activity,
    delete_activity,
    get_activity,
    list_activities_between,
    row_to_entry,
    total_calories_burned,
    update_activity,
)

router = APIRouter(prefix="/api/activity", tags=["Activity"])

_NOT_FOUND = "Activity entry not found or access denied"


def _resolve_calories(user_id: str, request: Union[ActivityCreateRequest, ActivityUpdateRequest]) -> dict:
    if request.calories_burned is not None:
        return {"calories_burned": int(request.calories_burned), "calories_manually_entered": True}

    # Same weight the balance card for that day uses.
    performed_on = parse_wall_clock(request.local_date_time).to_date()
    weight_row = get_latest_weight(user_id, on_or_before=performed_on)
    if not weight_row:
        raise HTTPException(
            status_code=400,
            detail="Please add your weight first to calculate calories burned accurately.",
        )
    calories = estimate_activity_calories(
        request.activity_type,
        request.intensity,
        request.duration,
        float(weight_row["weight"]),
    )
    return {"calories_burned": calories, "calories_manually_entered": False}


def _fields(request: Union[ActivityCreateRequest, ActivityUpdateRequest]) -> dict:
    return {
        "activity_type": request.activity_type,
        "description": request.description,
        "duration": request.duration,
        "intensity": request.intensity.value,
        "notes": request.notes,
    }


@router.get("/types", response_model=ActivityTypesResponse, summary="Known activity types")
def list_types():
    return ActivityTypesResponse(types=list(ACTIVITY_CALORIES))


@router.post("", response_model=ActivityEntry, summary="Log an activity")
def create(request: ActivityCreateRequest, user: dict = Depends(get_current_user)):
    performed_at = encode(parse_wall_clock(request.local_date_time))
    row = create_activity(
        user["id"],
        local_date_time=performed_at,
        **_fields(request),
        **_resolve_calories(user["id"], request),
    )
    return row_to_entry(row)


@router.put("/{entry_id}", response_model=ActivityEntry, summary="Update an activity")
def update(entry_id: str, request: ActivityUpdateRequest, user: dict = Depends(get_current_user)):
    if not get_activity(user["id"], entry_id):
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    performed_at = encode(parse_wall_clock(request.local_date_time))
    row = update_activity(
        user["id"],
        entry_id,
        local_date_time=performed_at,
        **_fields(request),
        **_resolve_calories(user["id"], request),
    )
    if not row:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return row_to_entry(row)


@router.delete("/{entry_id}", summary="Delete an activity")
def delete(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_activity(user["id"], entry_id):
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return {"success": True}


@router.get("", response_model=ActivityListResponse, summary="Activities for one day")
def list_for_day(date: str = Query(..., description="YYYY-MM-DD"), user: dict = Depends(get_current_user)):
    day = parse_date(date)
    start, end = day_bounds(day)
    rows = list_activities_between(user["id"], start, end)
    return ActivityListResponse(
        date=day.isoformat(),
        count=len(rows),
        total_calories_burned=total_calories_burned(rows),
        entries=[row_to_entry(r) for r in rows],
    )


@router.get("/balance", response_model=BalanceCard, summary="Daily calorie balance")
def daily_balance(date: str = Query(..., description="YYYY-MM-DD"), user: dict = Depends(get_current_user)):
    return build_balance_card(user["id"], parse_date(date))
