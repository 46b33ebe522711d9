# -*- coding: utf-8 -*-
"""Calendar — Pydantic models."""

from __future__ import annotations

from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, Field

from ..activity.models import ActivityEntry
from ..balance import BalanceCard
from ..health.models import HealthEntry
from ..meals.models import Macros, MealEntry
from ..weight.models import WeightEntry

TimelineEntry = Annotated[
    Union[MealEntry, ActivityEntry, HealthEntry, WeightEntry],
    Field(discriminator="kind"),
]


class CalendarDay(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    meal_count: int = 0
    activity_count: int = 0
    health_count: int = 0
    weight_count: int = 0
    total_calories: float = 0.0
    total_calories_burned: int = 0


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    days: List[CalendarDay]


class DaySummary(BaseModel):
    meal_count: int
    activity_count: int
    health_count: int
    weight: Optional[float] = None
    totals: Macros
    calories_burned: int
    energy: BalanceCard


class DayDetailsResponse(BaseModel):
    date: str
    timeline: List[TimelineEntry]
    summary: DaySummary
