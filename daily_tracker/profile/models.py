# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..energy import ActivityLevel, Sex


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    birth_date: Optional[date] = Field(None, description="YYYY-MM-DD")
    sex: Optional[Sex] = None
    height_cm: Optional[float] = Field(None, gt=0, le=300)
    activity_level: Optional[ActivityLevel] = None


class ProfileResponse(BaseModel):
    email: str
    name: Optional[str] = None
    birth_date: Optional[str] = None
    age: Optional[int] = Field(None, description="Derived from birth_date as of today")
    sex: Optional[Sex] = None
    height_cm: Optional[float] = None
    activity_level: ActivityLevel = ActivityLevel.sedentary
