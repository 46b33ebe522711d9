# -*- coding: utf-8 -*-
"""Weight — SQLite storage.

`local_date` holds the envelope of local midnight, so one row per user per
calendar day is enforced by the UNIQUE constraint.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now
from ..config import settings
from ..local_time import date_key, encode, from_column, to_column
from .models import WeightEntry


def _day_column(day: date) -> str:
    return to_column(encode(day))


def row_to_entry(row: Dict[str, Any]) -> WeightEntry:
    return WeightEntry(
        id=row["id"],
        local_date=date_key(from_column(row["local_date"])),
        weight=float(row["weight"]),
        image_url=row.get("image_url"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def upsert_weight(user_id: str, day: date, weight: float, image_url: Optional[str]) -> Dict[str, Any]:
    now = utc_now()
    column = _day_column(day)
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO weight_entries (id, user_id, local_date, weight, image_url, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, local_date) DO UPDATE SET
                weight = excluded.weight,
                image_url = excluded.image_url,
                updated_at = excluded.updated_at
            """,
            (str(uuid4()), user_id, column, float(weight), image_url, now, now),
        )
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE user_id = ? AND local_date = ?",
            (user_id, column),
        ).fetchone()
    return dict(row)


def get_weight_by_date(user_id: str, day: date) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE user_id = ? AND local_date = ?",
            (user_id, _day_column(day)),
        ).fetchone()
        return dict(row) if row else None


def get_latest_weight(user_id: str, on_or_before: Optional[date] = None) -> Optional[Dict[str, Any]]:
    """Most recent weight entry, optionally not later than `on_or_before`."""
    sql = "SELECT * FROM weight_entries WHERE user_id = ?"
    params: List[Any] = [user_id]
    if on_or_before is not None:
        sql += " AND local_date <= ?"
        params.append(_day_column(on_or_before))
    sql += " ORDER BY local_date DESC LIMIT 1"
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(sql, params).fetchone()
        return dict(row) if row else None


def list_weights_between(user_id: str, start: date, end: date) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM weight_entries
            WHERE user_id = ? AND local_date >= ? AND local_date <= ?
            ORDER BY local_date ASC
            """,
            (user_id, _day_column(start), _day_column(end)),
        ).fetchall()
        return [dict(r) for r in rows]


def update_weight(user_id: str, entry_id: str, weight: float, image_url: Optional[str]) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            """
            UPDATE weight_entries SET weight = ?, image_url = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (float(weight), image_url, utc_now(), entry_id, user_id),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM weight_entries WHERE id = ?", (entry_id,)).fetchone()
        return dict(row)


def delete_weight_by_date(user_id: str, day: date) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "DELETE FROM weight_entries WHERE user_id = ? AND local_date = ?",
            (user_id, _day_column(day)),
        )
        return cur.rowcount > 0


def delete_weight_by_id(user_id: str, entry_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM weight_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
        return cur.rowcount > 0
