# -*- coding: utf-8 -*-
"""Profile — API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..energy import compute_age, validate_birth_date
from .models import ProfileResponse, ProfileUpdateRequest
from .storage import get_profile_row, to_profile_inputs, update_profile

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _profile_response(row: dict) -> ProfileResponse:
    inputs = to_profile_inputs(row)
    age = compute_age(inputs.birth_date, date.today()) if inputs.birth_date else None
    return ProfileResponse(
        email=row["email"],
        name=row.get("name"),
        birth_date=row.get("birth_date"),
        age=age,
        sex=inputs.sex,
        height_cm=inputs.height_cm,
        activity_level=inputs.activity_level,
    )


@router.get("", response_model=ProfileResponse, summary="Get my profile")
def get_profile(user: dict = Depends(get_current_user)):
    row = get_profile_row(user["id"])
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return _profile_response(row)


@router.put("", response_model=ProfileResponse, summary="Update my profile")
def put_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    fields = request.model_dump(exclude_unset=True, mode="json")
    if request.birth_date is not None:
        try:
            validate_birth_date(request.birth_date, date.today())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    row = update_profile(user["id"], fields)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return _profile_response(row)
