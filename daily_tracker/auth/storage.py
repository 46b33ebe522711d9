# -*- coding: utf-8 -*-
"""Auth — user rows."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn, utc_now
from ..config import settings


def _normalize_email(email: str) -> str:
    return email.lower().strip()


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (_normalize_email(email),)).fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def create_user(*, email: str, name: str, password_hash: str) -> Dict[str, Any]:
    user_id = str(uuid4())
    now = utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO users (id, email, name, password_hash, created_at, last_usage_reset)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, _normalize_email(email), name.strip(), password_hash, now, now),
        )
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return dict(row)
