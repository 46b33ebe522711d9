# -*- coding: utf-8 -*-
"""Meals — SQLite storage. Macros are kept as a JSON text column."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now
from ..config import settings
from ..local_time import column_to_display, to_column
from .models import Macros, MealEntry


def _load_macros(raw: Optional[str]) -> Optional[Macros]:
    if not raw:
        return None
    try:
        return Macros.model_validate(json.loads(raw))
    except ValueError:
        return None


def row_to_entry(row: Dict[str, Any]) -> MealEntry:
    return MealEntry(
        id=row["id"],
        description=row["description"],
        image_url=row.get("image_url"),
        local_date_time=column_to_display(row["local_date_time"]),
        calculated_macros=_load_macros(row.get("calculated_macros")),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _dump_macros(macros: Optional[Macros]) -> Optional[str]:
    return macros.model_dump_json() if macros is not None else None


def create_meal(
    user_id: str,
    *,
    description: str,
    image_url: Optional[str],
    local_date_time: datetime,
    macros: Optional[Macros],
) -> Dict[str, Any]:
    entry_id = str(uuid4())
    now = utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO meal_entries (
                id, user_id, description, image_url, local_date_time, calculated_macros, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (entry_id, user_id, description, image_url, to_column(local_date_time), _dump_macros(macros), now, now),
        )
        row = conn.execute("SELECT * FROM meal_entries WHERE id = ?", (entry_id,)).fetchone()
    return dict(row)


def get_meal(user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM meal_entries WHERE id = ? AND user_id = ?", (entry_id, user_id)).fetchone()
        return dict(row) if row else None


def update_meal(
    user_id: str,
    entry_id: str,
    *,
    description: str,
    image_url: Optional[str],
    local_date_time: datetime,
    macros: Optional[Macros],
) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            """
            UPDATE meal_entries
            SET description = ?, image_url = ?, local_date_time = ?, calculated_macros = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                description,
                image_url,
                to_column(local_date_time),
                _dump_macros(macros),
                utc_now(),
                entry_id,
                user_id,
            ),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM meal_entries WHERE id = ?", (entry_id,)).fetchone()
        return dict(row)


def delete_meal(user_id: str, entry_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM meal_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
        return cur.rowcount > 0


def list_meals_between(user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM meal_entries
            WHERE user_id = ? AND local_date_time >= ? AND local_date_time <= ?
            ORDER BY local_date_time ASC
            """,
            (user_id, to_column(start), to_column(end)),
        ).fetchall()
        return [dict(r) for r in rows]


def compute_totals(entries: List[MealEntry]) -> Macros:
    calories = protein = carbs = fat = 0.0
    for entry in entries:
        macros = entry.calculated_macros
        if macros is None:
            continue
        calories += macros.calories
        protein += macros.protein
        carbs += macros.carbs
        fat += macros.fat
    return Macros(
        calories=round(calories, 1),
        protein=round(protein, 1),
        carbs=round(carbs, 1),
        fat=round(fat, 1),
    )
