# -*- coding: utf-8 -*-
"""Activity — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..energy import Intensity


class ActivityCreateRequest(BaseModel):
    activity_type: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., min_length=1, max_length=2000)
    duration: float = Field(..., gt=0, description="Minutes")
    intensity: Intensity
    local_date_time: str = Field(..., description="Wall clock, YYYY-MM-DDTHH:MM[:SS]")
    notes: Optional[str] = Field(None, max_length=2000)
    calories_burned: Optional[int] = Field(None, gt=0, description="Manual value; estimated when omitted")


class ActivityUpdateRequest(ActivityCreateRequest):
    pass


class ActivityEntry(BaseModel):
    kind: Literal["activity"] = "activity"
    id: str
    activity_type: str
    description: str
    duration: float
    intensity: Intensity
    calories_burned: int
    calories_manually_entered: bool = False
    local_date_time: str
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class ActivityListResponse(BaseModel):
    date: str
    count: int
    total_calories_burned: int
    entries: List[ActivityEntry]


class ActivityTypesResponse(BaseModel):
    types: List[str]
