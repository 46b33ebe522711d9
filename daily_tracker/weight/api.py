# -*- coding: utf-8 -*-
"""Weight — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..local_time import month_days, parse_date
from .models import WeightEntry, WeightListResponse, WeightUpdateRequest, WeightUpsertRequest
from .storage import (
    delete_weight_by_date,
    delete_weight_by_id,
    get_latest_weight,
    get_weight_by_date,
    list_weights_between,
    row_to_entry,
    update_weight,
    upsert_weight,
)

router = APIRouter(prefix="/api/weight", tags=["Weight"])


@router.post("", response_model=WeightEntry, summary="Create or replace the weight for a day")
def upsert(request: WeightUpsertRequest, user: dict = Depends(get_current_user)):
    day = parse_date(request.local_date)
    row = upsert_weight(user["id"], day, request.weight, request.image_url)
    return row_to_entry(row)


@router.get("/latest", response_model=Optional[WeightEntry], summary="Most recent weight")
def latest(user: dict = Depends(get_current_user)):
    row = get_latest_weight(user["id"])
    return row_to_entry(row) if row else None


@router.get("/month", response_model=WeightListResponse, summary="Weights for a month")
def by_month(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    user: dict = Depends(get_current_user),
):
    days = month_days(year, month)
    rows = list_weights_between(user["id"], days[0], days[-1])
    return WeightListResponse(count=len(rows), entries=[row_to_entry(r) for r in rows])


@router.get("/date/{local_date}", response_model=Optional[WeightEntry], summary="Weight for a day")
def by_date(local_date: str, user: dict = Depends(get_current_user)):
    row = get_weight_by_date(user["id"], parse_date(local_date))
    return row_to_entry(row) if row else None


@router.put("/{entry_id}", response_model=WeightEntry, summary="Update a weight entry")
def update(entry_id: str, request: WeightUpdateRequest, user: dict = Depends(get_current_user)):
    row = update_weight(user["id"], entry_id, request.weight, request.image_url)
    if not row:
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return row_to_entry(row)


@router.delete("/date/{local_date}", summary="Delete the weight for a day")
def delete_by_date(local_date: str, user: dict = Depends(get_current_user)):
    if not delete_weight_by_date(user["id"], parse_date(local_date)):
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return {"success": True}


@router.delete("/{entry_id}", summary="Delete a weight entry")
def delete_by_id(entry_id: str, user: dict = Depends(get_current_user)):
    if not delete_weight_by_id(user["id"], entry_id):
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return {"success": True}
