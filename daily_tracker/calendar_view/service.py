# -*- coding: utf-8 -*-
"""Calendar — month grid and day timeline assembled from every entry kind."""

from __future__ import annotations

from datetime import date
from typing import Dict, List

from ..activity.storage import list_activities_between
from ..activity.storage import row_to_entry as activity_entry
from ..balance import build_balance_card
from ..health.storage import list_health_between
from ..health.storage import row_to_entry as health_entry
from ..local_time import date_key, day_bounds, from_column, month_bounds, month_days
from ..meals.storage import compute_totals, list_meals_between
from ..meals.storage import row_to_entry as meal_entry
from ..weight.storage import list_weights_between
from ..weight.storage import row_to_entry as weight_entry
from .models import CalendarDay, CalendarMonthResponse, DayDetailsResponse, DaySummary, TimelineEntry

# Same-minute entries are shown in this order.
_KIND_ORDER = {"weight": 0, "meal": 1, "activity": 2, "health": 3}


def build_month(user_id: str, year: int, month: int) -> CalendarMonthResponse:
    days = month_days(year, month)
    start, end = month_bounds(year, month)
    grid: Dict[str, CalendarDay] = {d.isoformat(): CalendarDay(date=d.isoformat()) for d in days}

    for row in list_meals_between(user_id, start, end):
        cell = grid.get(date_key(from_column(row["local_date_time"])))
        if cell is None:
            continue
        cell.meal_count += 1
        entry = meal_entry(row)
        if entry.calculated_macros is not None:
            cell.total_calories = round(cell.total_calories + entry.calculated_macros.calories, 1)

    for row in list_activities_between(user_id, start, end):
        cell = grid.get(date_key(from_column(row["local_date_time"])))
        if cell is None:
            continue
        cell.activity_count += 1
        cell.total_calories_burned += int(row["calories_burned"])

    for row in list_health_between(user_id, start, end):
        cell = grid.get(date_key(from_column(row["local_date_time"])))
        if cell is not None:
            cell.health_count += 1

    for row in list_weights_between(user_id, days[0], days[-1]):
        cell = grid.get(date_key(from_column(row["local_date"])))
        if cell is not None:
            cell.weight_count += 1

    return CalendarMonthResponse(year=year, month=month, days=list(grid.values()))


def _sort_key(entry: TimelineEntry) -> tuple:
    when = entry.local_date if entry.kind == "weight" else entry.local_date_time
    return (when, _KIND_ORDER[entry.kind])


def build_day(user_id: str, day: date) -> DayDetailsResponse:
    start, end = day_bounds(day)
    meals = [meal_entry(r) for r in list_meals_between(user_id, start, end)]
    activities = [activity_entry(r) for r in list_activities_between(user_id, start, end)]
    health = [health_entry(r) for r in list_health_between(user_id, start, end)]
    weights = [weight_entry(r) for r in list_weights_between(user_id, day, day)]

    timeline: List[TimelineEntry] = sorted([*meals, *activities, *health, *weights], key=_sort_key)
    summary = DaySummary(
        meal_count=len(meals),
        activity_count=len(activities),
        health_count=len(health),
        weight=weights[0].weight if weights else None,
        totals=compute_totals(meals),
        calories_burned=sum(a.calories_burned for a in activities),
        energy=build_balance_card(user_id, day),
    )
    return DayDetailsResponse(date=day.isoformat(), timeline=timeline, summary=summary)
