# -*- coding: utf-8 -*-
"""Subscription — apply Stripe webhook events to users."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .models import SubscriptionStatus
from .storage import update_billing_by_customer

logger = logging.getLogger(__name__)

# Stripe subscription states that grant premium access.
_PAID_STATES = {"active", "trialing"}


def _customer_id(obj: Dict[str, Any]) -> Optional[str]:
    customer = obj.get("customer")
    if isinstance(customer, dict):
        customer = customer.get("id")
    return str(customer) if customer else None


def _epoch_to_text(value: Any) -> Optional[str]:
    if not value:
        return None
    instant = datetime.fromtimestamp(int(value), tz=timezone.utc)
    return instant.isoformat(timespec="seconds").replace("+00:00", "Z")


def _subscription_changed(obj: Dict[str, Any], customer_id: str) -> bool:
    status = SubscriptionStatus.active if obj.get("status") in _PAID_STATES else SubscriptionStatus.cancelled
    return update_billing_by_customer(
        customer_id,
        subscription_id=obj.get("id"),
        subscription_status=status.value,
        subscription_end_date=_epoch_to_text(obj.get("current_period_end")),
    )


def _subscription_deleted(obj: Dict[str, Any], customer_id: str) -> bool:
    return update_billing_by_customer(
        customer_id,
        subscription_id=None,
        subscription_status=SubscriptionStatus.cancelled.value,
    )


def _payment_succeeded(obj: Dict[str, Any], customer_id: str) -> bool:
    if not obj.get("subscription"):
        return False
    return update_billing_by_customer(customer_id, subscription_status=SubscriptionStatus.active.value)


def _payment_failed(obj: Dict[str, Any], customer_id: str) -> bool:
    return update_billing_by_customer(customer_id, subscription_status=SubscriptionStatus.cancelled.value)


_HANDLERS: Dict[str, Callable[[Dict[str, Any], str], bool]] = {
    "customer.subscription.created": _subscription_changed,
    "customer.subscription.updated": _subscription_changed,
    "customer.subscription.deleted": _subscription_deleted,
    "invoice.payment_succeeded": _payment_succeeded,
    "invoice.payment_failed": _payment_failed,
}


def handle_event(event: Dict[str, Any]) -> bool:
    """Returns True when a user row was updated."""
    event_type = str(event.get("type") or "")
    handler = _HANDLERS.get(event_type)
    if handler is None:
        logger.info("Ignoring unhandled Stripe event type %s", event_type)
        return False

    obj = (event.get("data") or {}).get("object") or {}
    customer_id = _customer_id(obj)
    if not customer_id:
        logger.info("Stripe event %s has no customer; skipped", event_type)
        return False

    updated = handler(obj, customer_id)
    logger.info("Stripe event %s for customer %s applied=%s", event_type, customer_id, updated)
    return updated
