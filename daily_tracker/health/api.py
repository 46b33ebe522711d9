# -*- coding: utf-8 -*-
"""Health — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..local_time import day_bounds, encode, parse_date, parse_wall_clock
from .models import HealthCreateRequest, HealthEntry, HealthListResponse, HealthUpdateRequest
from .storage import create_health_entry, delete_health_entry, list_health_between, row_to_entry, update_health_entry

router = APIRouter(prefix="/api/health", tags=["Health"])

_NOT_FOUND = "Entry not found or access denied"


@router.post("/entries", response_model=HealthEntry, summary="Log an intestinal observation")
def create_entry(request: HealthCreateRequest, user: dict = Depends(get_current_user)):
    row = create_health_entry(
        user["id"],
        consistency=request.consistency,
        color=request.color,
        pain_level=request.pain_level,
        notes=request.notes,
        image_url=request.image_url,
        local_date_time=encode(parse_wall_clock(request.local_date_time)),
    )
    return row_to_entry(row)


@router.put("/entries/{entry_id}", response_model=HealthEntry, summary="Update an observation")
def update_entry(entry_id: str, request: HealthUpdateRequest, user: dict = Depends(get_current_user)):
    # Only notes and image_url may be cleared with an explicit null.
    fields = {
        k: v
        for k, v in request.model_dump(exclude_unset=True).items()
        if v is not None or k in ("notes", "image_url")
    }
    if "local_date_time" in fields:
        fields["local_date_time"] = encode(parse_wall_clock(fields["local_date_time"]))
    row = update_health_entry(user["id"], entry_id, fields)
    if not row:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return row_to_entry(row)


@router.delete("/entries/{entry_id}", summary="Delete an observation")
def delete_entry(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_health_entry(user["id"], entry_id):
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return {"success": True}


@router.get("/entries", response_model=HealthListResponse, summary="Observations for one day")
def list_for_day(date: str = Query(..., description="YYYY-MM-DD"), user: dict = Depends(get_current_user)):
    day = parse_date(date)
    start, end = day_bounds(day)
    rows = list_health_between(user["id"], start, end)
    return HealthListResponse(
        start=day.isoformat(),
        end=day.isoformat(),
        count=len(rows),
        entries=[row_to_entry(r) for r in rows],
    )


@router.get("/entries/range", response_model=HealthListResponse, summary="Observations for a date range")
def list_for_range(
    start: str = Query(..., description="YYYY-MM-DD"),
    end: str = Query(..., description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    start_day, end_day = parse_date(start), parse_date(end)
    if end_day < start_day:
        raise HTTPException(status_code=400, detail="end must not be before start")
    rows = list_health_between(user["id"], day_bounds(start_day)[0], day_bounds(end_day)[1])
    return HealthListResponse(
        start=start_day.isoformat(),
        end=end_day.isoformat(),
        count=len(rows),
        entries=[row_to_entry(r) for r in rows],
    )
