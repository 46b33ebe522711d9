# -*- coding: utf-8 -*-
"""Profile — attributes live on the users row."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from ..energy import ActivityLevel, ProfileInputs, Sex
from ..local_time import parse_date

_PROFILE_COLUMNS = ("name", "birth_date", "sex", "height_cm", "activity_level")


def get_profile_row(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT id, email, name, birth_date, sex, height_cm, activity_level FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        return dict(row) if row else None


def update_profile(user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Partial update: only keys present in `fields` are written."""
    updates = {k: v for k, v in fields.items() if k in _PROFILE_COLUMNS}
    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        with db_conn(settings.app_db_path) as conn:
            conn.execute(f"UPDATE users SET {assignments} WHERE id = ?", (*updates.values(), user_id))
    return get_profile_row(user_id)


def to_profile_inputs(row: Dict[str, Any]) -> ProfileInputs:
    return ProfileInputs(
        birth_date=parse_date(row["birth_date"]) if row.get("birth_date") else None,
        sex=Sex(row["sex"]) if row.get("sex") else None,
        height_cm=float(row["height_cm"]) if row.get("height_cm") else None,
        activity_level=ActivityLevel(row.get("activity_level") or ActivityLevel.sedentary.value),
    )
