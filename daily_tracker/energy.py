# -*- coding: utf-8 -*-
"""
Energy balance calculator.

Pure functions for age, BMR, TDEE, activity calorie estimates and the daily
calorie balance. No I/O.

Balance convention: TDEE (BMR x activity multiplier) already covers baseline
non-exercise activity, and logged exercise calories are added on top of it.
Every view that shows a balance goes through `compute_balance`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Union


class Sex(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extremely_active = "extremely_active"


class Intensity(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"


ACTIVITY_MULTIPLIERS: Dict[ActivityLevel, float] = {
    ActivityLevel.sedentary: 1.2,  # little or no exercise
    ActivityLevel.lightly_active: 1.375,  # 1-3 days/week
    ActivityLevel.moderately_active: 1.55,  # 3-5 days/week
    ActivityLevel.very_active: 1.725,  # 6-7 days/week
    ActivityLevel.extremely_active: 1.9,  # hard daily exercise or physical job
}

# kcal per minute per kg of body weight.
ACTIVITY_CALORIES: Dict[str, Dict[Intensity, float]] = {
    "Weight Training": {Intensity.low: 0.08, Intensity.moderate: 0.12, Intensity.high: 0.16},
    "Running": {Intensity.low: 0.15, Intensity.moderate: 0.20, Intensity.high: 0.25},
    "Cycling": {Intensity.low: 0.12, Intensity.moderate: 0.16, Intensity.high: 0.20},
    "Swimming": {Intensity.low: 0.14, Intensity.moderate: 0.18, Intensity.high: 0.22},
    "Walking": {Intensity.low: 0.05, Intensity.moderate: 0.08, Intensity.high: 0.10},
    "Yoga": {Intensity.low: 0.04, Intensity.moderate: 0.06, Intensity.high: 0.08},
    "Tennis": {Intensity.low: 0.10, Intensity.moderate: 0.14, Intensity.high: 0.18},
    "Basketball": {Intensity.low: 0.12, Intensity.moderate: 0.16, Intensity.high: 0.20},
    "Soccer": {Intensity.low: 0.12, Intensity.moderate: 0.16, Intensity.high: 0.20},
    "Dancing": {Intensity.low: 0.06, Intensity.moderate: 0.10, Intensity.high: 0.14},
    "Hiking": {Intensity.low: 0.08, Intensity.moderate: 0.12, Intensity.high: 0.16},
    "Boxing": {Intensity.low: 0.14, Intensity.moderate: 0.18, Intensity.high: 0.22},
    "Climbing": {Intensity.low: 0.12, Intensity.moderate: 0.16, Intensity.high: 0.20},
    "Other": {Intensity.low: 0.06, Intensity.moderate: 0.10, Intensity.high: 0.14},
}

MIN_AGE_YEARS = 10
MAX_AGE_YEARS = 120


class MissingProfileDataError(Exception):
    """The profile lacks attributes the calculator needs."""

    def __init__(self, missing_fields: List[str]) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__(f"missing profile data: {', '.join(self.missing_fields)}")


@dataclass
class EnergyBalance:
    calories_consumed: float
    exercise_burned: float
    tdee: float
    total_burned: float
    balance: float
    is_deficit: bool


@dataclass
class ProfileInputs:
    birth_date: Optional[date] = None
    sex: Optional[Sex] = None
    height_cm: Optional[float] = None
    activity_level: ActivityLevel = ActivityLevel.sedentary


@dataclass
class DaySummary:
    age: int
    weight_kg: float
    bmr: float
    tdee: float
    balance: EnergyBalance
    activity_level: ActivityLevel = ActivityLevel.sedentary


def compute_age(birth_date: date, as_of: date) -> int:
    """
    Whole years between `birth_date` and `as_of`.

    A Feb 29 birthday counts as reached on Mar 1 in non-leap years.

    Args:
        birth_date: date of birth
        as_of: reference date

    Returns:
        age in completed years
    """
    age = as_of.year - birth_date.year
    if (as_of.month, as_of.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def validate_birth_date(birth_date: date, today: date) -> None:
    if birth_date > today:
        raise ValueError("Birth date cannot be in the future")
    if birth_date.year < today.year - MAX_AGE_YEARS:
        raise ValueError(f"Birth date cannot be more than {MAX_AGE_YEARS} years ago")
    if birth_date.year > today.year - MIN_AGE_YEARS:
        raise ValueError(f"Birth date cannot be less than {MIN_AGE_YEARS} years ago")


def compute_bmr(sex: Union[Sex, str], weight_kg: float, height_cm: float, age_years: int) -> float:
    """
    Basal metabolic rate, Mifflin-St Jeor.

    Men:   10 x weight(kg) + 6.25 x height(cm) - 5 x age + 5
    Women: 10 x weight(kg) + 6.25 x height(cm) - 5 x age - 161

    Args:
        sex: "male" or "female"
        weight_kg: body weight (kg)
        height_cm: height (cm)
        age_years: age in years

    Returns:
        kcal/day, unrounded
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    return base + 5 if Sex(sex) is Sex.male else base - 161


def activity_multiplier(level: Union[ActivityLevel, str]) -> float:
    return ACTIVITY_MULTIPLIERS[ActivityLevel(level)]


def compute_tdee(bmr: float, activity: Union[ActivityLevel, str, float]) -> float:
    """BMR scaled by an activity level or an explicit multiplier."""
    if isinstance(activity, (int, float)) and not isinstance(activity, bool):
        multiplier = float(activity)
    else:
        multiplier = activity_multiplier(activity)
    return bmr * multiplier


def compute_balance(calories_consumed: float, exercise_burned: float, tdee: float) -> EnergyBalance:
    """
    Daily calorie balance.

    Args:
        calories_consumed: food calories logged for the day
        exercise_burned: calories from logged activities only
        tdee: total daily energy expenditure (includes baseline activity)

    Returns:
        EnergyBalance; negative balance means deficit
    """
    total_burned = tdee + exercise_burned
    balance = calories_consumed - total_burned
    return EnergyBalance(
        calories_consumed=calories_consumed,
        exercise_burned=exercise_burned,
        tdee=tdee,
        total_burned=total_burned,
        balance=balance,
        is_deficit=balance < 0,
    )


def estimate_activity_calories(
    activity_type: str,
    intensity: Union[Intensity, str],
    duration_min: float,
    weight_kg: float,
) -> int:
    rates = ACTIVITY_CALORIES.get(activity_type) or ACTIVITY_CALORIES["Other"]
    return round(rates[Intensity(intensity)] * duration_min * weight_kg)


def missing_profile_fields(profile: ProfileInputs, weight_kg: Optional[float]) -> List[str]:
    missing = []
    if profile.birth_date is None:
        missing.append("birth_date")
    if profile.sex is None:
        missing.append("sex")
    if not profile.height_cm:
        missing.append("height_cm")
    if not weight_kg:
        missing.append("weight")
    return missing


def summarize_day(
    profile: ProfileInputs,
    weight_kg: Optional[float],
    as_of: date,
    calories_consumed: float,
    exercise_burned: float,
) -> DaySummary:
    """Age -> BMR -> TDEE -> balance for one day.

    Raises MissingProfileDataError instead of guessing defaults.
    """
    missing = missing_profile_fields(profile, weight_kg)
    if missing:
        raise MissingProfileDataError(missing)
    age = compute_age(profile.birth_date, as_of)
    bmr = compute_bmr(profile.sex, weight_kg, profile.height_cm, age)
    tdee = compute_tdee(bmr, profile.activity_level)
    return DaySummary(
        age=age,
        weight_kg=weight_kg,
        bmr=bmr,
        tdee=tdee,
        balance=compute_balance(calories_consumed, exercise_burned, tdee),
        activity_level=profile.activity_level,
    )
