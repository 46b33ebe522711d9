# -*- coding: utf-8 -*-
"""Daily energy balance card shared by the activity, calendar and dashboard views."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from .activity.storage import list_activities_between, total_calories_burned
from .energy import ActivityLevel, MissingProfileDataError, summarize_day
from .local_time import day_bounds
from .meals.storage import compute_totals, list_meals_between, row_to_entry
from .profile.storage import get_profile_row, to_profile_inputs
from .weight.storage import get_latest_weight


class BalanceCard(BaseModel):
    date: str
    setup_required: bool = False
    missing_fields: List[str] = Field(default_factory=list)
    calories_consumed: int = 0
    exercise_burned: int = 0
    weight_kg: Optional[float] = None
    age: Optional[int] = None
    activity_level: Optional[ActivityLevel] = None
    bmr: Optional[int] = None
    tdee: Optional[int] = None
    total_burned: Optional[int] = None
    balance: Optional[int] = None
    is_deficit: Optional[bool] = None


def build_balance_card(user_id: str, day: date) -> BalanceCard:
    """Consumed vs. TDEE plus logged exercise for one local day.

    The weight used is the latest entry on or before `day`. An incomplete
    profile yields `setup_required` with the missing fields instead of numbers.
    """
    start, end = day_bounds(day)
    meals = [row_to_entry(r) for r in list_meals_between(user_id, start, end)]
    consumed = compute_totals(meals).calories
    burned = total_calories_burned(list_activities_between(user_id, start, end))

    weight_row = get_latest_weight(user_id, on_or_before=day)
    weight_kg = float(weight_row["weight"]) if weight_row else None
    profile_row = get_profile_row(user_id) or {}

    card = BalanceCard(
        date=day.isoformat(),
        calories_consumed=round(consumed),
        exercise_burned=burned,
        weight_kg=weight_kg,
    )
    try:
        summary = summarize_day(to_profile_inputs(profile_row), weight_kg, day, consumed, burned)
    except MissingProfileDataError as exc:
        card.setup_required = True
        card.missing_fields = exc.missing_fields
        return card

    card.age = summary.age
    card.activity_level = summary.activity_level
    card.bmr = round(summary.bmr)
    card.tdee = round(summary.tdee)
    card.total_burned = round(summary.balance.total_burned)
    card.balance = round(summary.balance.balance)
    card.is_deficit = summary.balance.is_deficit
    return card
