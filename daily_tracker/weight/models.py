# -*- coding: utf-8 -*-
"""Weight — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class WeightUpsertRequest(BaseModel):
    local_date: str = Field(..., description="YYYY-MM-DD, the user's calendar day")
    weight: float = Field(..., ge=20, le=300, description="kg")
    image_url: Optional[str] = Field(None, max_length=2048)


class WeightUpdateRequest(BaseModel):
    weight: float = Field(..., ge=20, le=300, description="kg")
    image_url: Optional[str] = Field(None, max_length=2048)


class WeightEntry(BaseModel):
    kind: Literal["weight"] = "weight"
    id: str
    local_date: str = Field(..., description="YYYY-MM-DD")
    weight: float
    image_url: Optional[str] = None
    created_at: str
    updated_at: str


class WeightListResponse(BaseModel):
    count: int
    entries: List[WeightEntry]
