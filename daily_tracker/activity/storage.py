# -*- coding: utf-8 -*-
"""Activity — SQLite storage."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now
from ..config import settings
from ..local_time import column_to_display, to_column
from .models import ActivityEntry

_WRITABLE = (
    "activity_type",
    "description",
    "duration",
    "intensity",
    "calories_burned",
    "calories_manually_entered",
    "local_date_time",
    "notes",
)


def row_to_entry(row: Dict[str, Any]) -> ActivityEntry:
    return ActivityEntry(
        id=row["id"],
        activity_type=row["activity_type"],
        description=row["description"],
        duration=float(row["duration"]),
        intensity=row["intensity"],
        calories_burned=int(row["calories_burned"]),
        calories_manually_entered=bool(row["calories_manually_entered"]),
        local_date_time=column_to_display(row["local_date_time"]),
        notes=row.get("notes"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_activity(user_id: str, *, local_date_time: datetime, **fields: Any) -> Dict[str, Any]:
    entry_id = str(uuid4())
    now = utc_now()
    values = {k: fields.get(k) for k in _WRITABLE if k != "local_date_time"}
    values["local_date_time"] = to_column(local_date_time)
    values["calories_manually_entered"] = int(bool(values["calories_manually_entered"]))
    columns = ", ".join(("id", "user_id", *values, "created_at", "updated_at"))
    placeholders = ", ".join("?" for _ in range(len(values) + 4))
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            f"INSERT INTO activity_entries ({columns}) VALUES ({placeholders})",
            (entry_id, user_id, *values.values(), now, now),
        )
        row = conn.execute("SELECT * FROM activity_entries WHERE id = ?", (entry_id,)).fetchone()
    return dict(row)


def get_activity(user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM activity_entries WHERE id = ? AND user_id = ?", (entry_id, user_id)
        ).fetchone()
        return dict(row) if row else None


def update_activity(
    user_id: str, entry_id: str, *, local_date_time: datetime, **fields: Any
) -> Optional[Dict[str, Any]]:
    values = {k: fields.get(k) for k in _WRITABLE if k != "local_date_time"}
    values["local_date_time"] = to_column(local_date_time)
    values["calories_manually_entered"] = int(bool(values["calories_manually_entered"]))
    assignments = ", ".join(f"{column} = ?" for column in values)
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            f"UPDATE activity_entries SET {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
            (*values.values(), utc_now(), entry_id, user_id),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM activity_entries WHERE id = ?", (entry_id,)).fetchone()
        return dict(row)


def delete_activity(user_id: str, entry_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM activity_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
        return cur.rowcount > 0


def list_activities_between(user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Entries whose wall clock falls in [start, end], both storage instants."""
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM activity_entries
            WHERE user_id = ? AND local_date_time >= ? AND local_date_time <= ?
            ORDER BY local_date_time ASC
            """,
            (user_id, to_column(start), to_column(end)),
        ).fetchall()
        return [dict(r) for r in rows]


def total_calories_burned(rows: List[Dict[str, Any]]) -> int:
    return sum(int(r.get("calories_burned") or 0) for r in rows)
