# -*- coding: utf-8 -*-
"""Health — SQLite storage."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now
from ..config import settings
from ..local_time import column_to_display, to_column
from .models import HealthEntry

_UPDATABLE = ("consistency", "color", "pain_level", "notes", "image_url", "local_date_time")


def row_to_entry(row: Dict[str, Any]) -> HealthEntry:
    return HealthEntry(
        id=row["id"],
        consistency=row["consistency"],
        color=row["color"],
        pain_level=int(row["pain_level"]),
        notes=row.get("notes"),
        image_url=row.get("image_url"),
        local_date_time=column_to_display(row["local_date_time"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_health_entry(
    user_id: str,
    *,
    consistency: str,
    color: str,
    pain_level: int,
    notes: Optional[str],
    image_url: Optional[str],
    local_date_time: datetime,
) -> Dict[str, Any]:
    entry_id = str(uuid4())
    now = utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO health_entries (
                id, user_id, consistency, color, pain_level, notes, image_url, local_date_time, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry_id,
                user_id,
                consistency,
                color,
                int(pain_level),
                notes,
                image_url,
                to_column(local_date_time),
                now,
                now,
            ),
        )
        row = conn.execute("SELECT * FROM health_entries WHERE id = ?", (entry_id,)).fetchone()
    return dict(row)


def update_health_entry(user_id: str, entry_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Partial update; `local_date_time`, when present, is a storage instant."""
    updates = {k: v for k, v in fields.items() if k in _UPDATABLE}
    if "local_date_time" in updates:
        updates["local_date_time"] = to_column(updates["local_date_time"])
    assignments = ", ".join([*(f"{column} = ?" for column in updates), "updated_at = ?"])
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            f"UPDATE health_entries SET {assignments} WHERE id = ? AND user_id = ?",
            (*updates.values(), utc_now(), entry_id, user_id),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM health_entries WHERE id = ?", (entry_id,)).fetchone()
        return dict(row)


def delete_health_entry(user_id: str, entry_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM health_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
        return cur.rowcount > 0


def list_health_between(user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM health_entries
            WHERE user_id = ? AND local_date_time >= ? AND local_date_time <= ?
            ORDER BY local_date_time ASC
            """,
            (user_id, to_column(start), to_column(end)),
        ).fetchall()
        return [dict(r) for r in rows]
