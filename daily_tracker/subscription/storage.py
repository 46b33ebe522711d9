# -*- coding: utf-8 -*-
"""Subscription — usage counters and billing fields on the users row."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from .models import SubscriptionStatus, UsageAction

_COUNTER_COLUMNS = {
    UsageAction.ai_calculation: "monthly_ai_usage",
    UsageAction.upload: "monthly_uploads",
}

_BILLING_COLUMNS = ("subscription_status", "subscription_id", "subscription_end_date")


def free_limit(action: UsageAction) -> int:
    if action is UsageAction.ai_calculation:
        return int(settings.free_ai_calculations)
    return int(settings.free_uploads)


def has_unlimited_access(user_row: Dict[str, Any]) -> bool:
    return bool(user_row.get("is_unlimited")) or user_row.get("subscription_status") == SubscriptionStatus.active.value


def _parse_instant(text: str) -> datetime:
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def refresh_usage(user_id: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
    """Load the user row, zeroing monthly counters when the calendar month changed."""
    now = now or datetime.now(timezone.utc)
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            return None
        user = dict(row)
        last = _parse_instant(user["last_usage_reset"])
        if (last.year, last.month) != (now.year, now.month):
            stamp = now.isoformat(timespec="seconds").replace("+00:00", "Z")
            conn.execute(
                "UPDATE users SET monthly_ai_usage = 0, monthly_uploads = 0, last_usage_reset = ? WHERE id = ?",
                (stamp, user_id),
            )
            user.update(monthly_ai_usage=0, monthly_uploads=0, last_usage_reset=stamp)
        return user


def check_usage(user_id: str, action: UsageAction) -> Dict[str, Any]:
    user = refresh_usage(user_id)
    if user is None:
        return {"can_perform": False, "usage": 0, "limit": 0}
    if has_unlimited_access(user):
        return {"can_perform": True, "usage": 0, "limit": None}
    usage = int(user[_COUNTER_COLUMNS[action]])
    limit = free_limit(action)
    return {"can_perform": usage < limit, "usage": usage, "limit": limit}


def increment_usage(user_id: str, action: UsageAction) -> None:
    """Count one action against the free tier; unlimited users are not counted."""
    column = _COUNTER_COLUMNS[action]
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            f"""
            UPDATE users SET {column} = {column} + 1
            WHERE id = ? AND is_unlimited = 0 AND subscription_status != ?
            """,
            (user_id, SubscriptionStatus.active.value),
        )


def set_customer_id(user_id: str, customer_id: str) -> None:
    with db_conn(settings.app_db_path) as conn:
        conn.execute("UPDATE users SET customer_id = ? WHERE id = ?", (customer_id, user_id))


def grant_unlimited(email: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "UPDATE users SET is_unlimited = 1, subscription_status = ? WHERE email = ?",
            (SubscriptionStatus.unlimited.value, email.lower().strip()),
        )
        return cur.rowcount > 0


def update_billing_by_customer(customer_id: str, **fields: Any) -> bool:
    """Apply billing fields to the user owning `customer_id`; False if none does."""
    updates = {k: v for k, v in fields.items() if k in _BILLING_COLUMNS}
    if not updates:
        return False
    assignments = ", ".join(f"{column} = ?" for column in updates)
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            f"UPDATE users SET {assignments} WHERE customer_id = ?",
            (*updates.values(), customer_id),
        )
        return cur.rowcount > 0
