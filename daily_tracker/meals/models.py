# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class Macros(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0, description="grams")
    carbs: float = Field(0.0, ge=0, description="grams")
    fat: float = Field(0.0, ge=0, description="grams")

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce_number(cls, value: object) -> object:
        """Models sometimes answer "12g" or null; keep what is numeric."""
        if value is None:
            return 0.0
        if isinstance(value, str):
            digits = value.strip().lower().rstrip("gkcal").strip()
            return digits or 0.0
        return value


class MealCreateRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=2048)
    local_date_time: str = Field(..., description="Wall clock, YYYY-MM-DDTHH:MM[:SS]")


class MealUpdateRequest(MealCreateRequest):
    pass


class MealEntry(BaseModel):
    kind: Literal["meal"] = "meal"
    id: str
    description: str
    image_url: Optional[str] = None
    local_date_time: str
    calculated_macros: Optional[Macros] = None
    created_at: str
    updated_at: str


class MealListResponse(BaseModel):
    start: str
    end: str
    count: int
    totals: Macros
    entries: List[MealEntry]
