# -*- coding: utf-8 -*-
"""App database: SQLite helpers.

Wall-clock columns (`local_date_time`, `local_date`) hold local-time envelopes
written by `daily_tracker.local_time.to_column`; every other timestamp column
is a genuine UTC instant.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

# Recorded once wall-clock columns hold envelopes, either because the
# database was created that way or because `daily_tracker.migrate` ran.
LOCAL_TIME_MIGRATION = "local_time_envelopes"

_MIGRATIONS_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        name TEXT PRIMARY KEY,
        applied_at TEXT NOT NULL,
        detail TEXT
    );
"""

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        name TEXT,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL,
        birth_date TEXT,
        sex TEXT,
        height_cm REAL,
        activity_level TEXT,
        subscription_status TEXT NOT NULL DEFAULT 'free',
        subscription_id TEXT,
        customer_id TEXT,
        trial_end_date TEXT,
        subscription_end_date TEXT,
        monthly_ai_usage INTEGER NOT NULL DEFAULT 0,
        monthly_uploads INTEGER NOT NULL DEFAULT 0,
        last_usage_reset TEXT NOT NULL,
        is_unlimited INTEGER NOT NULL DEFAULT 0
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_users_customer ON users(customer_id);",
    """
    CREATE TABLE IF NOT EXISTS meal_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        description TEXT NOT NULL,
        image_url TEXT,
        local_date_time TEXT NOT NULL,
        calculated_macros TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_meal_entries_user_time ON meal_entries(user_id, local_date_time);",
    """
    CREATE TABLE IF NOT EXISTS activity_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        activity_type TEXT NOT NULL,
        description TEXT NOT NULL,
        duration REAL NOT NULL,
        intensity TEXT NOT NULL,
        calories_burned INTEGER NOT NULL,
        calories_manually_entered INTEGER NOT NULL DEFAULT 0,
        local_date_time TEXT NOT NULL,
        notes TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_activity_entries_user_time ON activity_entries(user_id, local_date_time);",
    """
    CREATE TABLE IF NOT EXISTS health_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        consistency TEXT NOT NULL,
        color TEXT NOT NULL,
        pain_level INTEGER NOT NULL,
        notes TEXT,
        image_url TEXT,
        local_date_time TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_health_entries_user_time ON health_entries(user_id, local_date_time);",
    """
    CREATE TABLE IF NOT EXISTS weight_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        local_date TEXT NOT NULL,
        weight REAL NOT NULL,
        image_url TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (user_id, local_date),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS uploads (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        filename TEXT NOT NULL,
        content_type TEXT NOT NULL,
        size_bytes INTEGER NOT NULL,
        sha256 TEXT NOT NULL,
        stored_relpath TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    _MIGRATIONS_TABLE,
)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def _table_exists(conn: sqlite3.Connection, name: str) -> bool:
    row = conn.execute("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)).fetchone()
    return row is not None


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        fresh = not _table_exists(conn, "users")
        cur = conn.cursor()
        for statement in _SCHEMA:
            cur.execute(statement)
        if fresh:
            record_migration(conn, LOCAL_TIME_MIGRATION, "created with local-time envelopes")
        conn.commit()
    finally:
        conn.close()


def get_migration(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    """The `schema_migrations` row for `name`, or None (also on pre-marker databases)."""
    if not _table_exists(conn, "schema_migrations"):
        return None
    row = conn.execute("SELECT * FROM schema_migrations WHERE name = ?", (name,)).fetchone()
    return dict(row) if row else None


def record_migration(conn: sqlite3.Connection, name: str, detail: str) -> None:
    conn.execute(_MIGRATIONS_TABLE)
    conn.execute(
        "INSERT OR REPLACE INTO schema_migrations (name, applied_at, detail) VALUES (?, ?, ?)",
        (name, utc_now(), detail),
    )


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def utc_now() -> str:
    """Real UTC instant as ISO text (audit columns, not wall clocks)."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
