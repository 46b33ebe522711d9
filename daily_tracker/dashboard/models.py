# -*- coding: utf-8 -*-
"""Dashboard — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..balance import BalanceCard
from ..meals.models import Macros
from ..weight.models import WeightEntry


class DashboardResponse(BaseModel):
    date: str
    totals: Macros
    meal_count: int
    activity_count: int
    health_count: int
    latest_weight: Optional[WeightEntry] = None
    energy: BalanceCard
