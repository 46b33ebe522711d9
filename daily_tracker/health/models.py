# -*- coding: utf-8 -*-
"""Health — Pydantic models for intestinal observations."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class HealthCreateRequest(BaseModel):
    consistency: str = Field(..., min_length=1, max_length=64, description="Bristol scale label")
    color: str = Field(..., min_length=1, max_length=64)
    pain_level: int = Field(..., ge=0, le=10)
    notes: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=2048)
    local_date_time: str = Field(..., description="Wall clock, YYYY-MM-DDTHH:MM[:SS]")


class HealthUpdateRequest(BaseModel):
    consistency: Optional[str] = Field(None, min_length=1, max_length=64)
    color: Optional[str] = Field(None, min_length=1, max_length=64)
    pain_level: Optional[int] = Field(None, ge=0, le=10)
    notes: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=2048)
    local_date_time: Optional[str] = None


class HealthEntry(BaseModel):
    kind: Literal["health"] = "health"
    id: str
    consistency: str
    color: str
    pain_level: int
    notes: Optional[str] = None
    image_url: Optional[str] = None
    local_date_time: str
    created_at: str
    updated_at: str


class HealthListResponse(BaseModel):
    start: str
    end: str
    count: int
    entries: List[HealthEntry]
