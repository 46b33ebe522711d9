# -*- coding: utf-8 -*-
"""Subscription — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionStatus(str, Enum):
    free = "free"
    active = "active"
    cancelled = "cancelled"
    unlimited = "unlimited"


class UsageAction(str, Enum):
    ai_calculation = "ai_calculation"
    upload = "upload"


class FreeLimits(BaseModel):
    ai_calculations: int
    uploads: int


class SubscriptionConfigResponse(BaseModel):
    premium_price_id: Optional[str] = None
    limits: FreeLimits
    trial_period_days: int


class SubscriptionStatusResponse(BaseModel):
    subscription_status: SubscriptionStatus
    trial_end_date: Optional[str] = None
    subscription_end_date: Optional[str] = None
    monthly_ai_usage: int
    monthly_uploads: int
    last_usage_reset: str
    is_unlimited: bool
    has_unlimited_access: bool
    limits: FreeLimits


class UsageCheckResponse(BaseModel):
    can_perform: bool
    usage: int
    limit: Optional[int] = Field(None, description="null when access is unlimited")


class UsageRequest(BaseModel):
    action: UsageAction


class CheckoutRequest(BaseModel):
    price_id: Optional[str] = Field(None, description="Defaults to the premium price")
    success_url: str = Field(..., pattern=r"^https?://")
    cancel_url: str = Field(..., pattern=r"^https?://")


class PortalRequest(BaseModel):
    return_url: str = Field(..., pattern=r"^https?://")


class SessionUrlResponse(BaseModel):
    session_url: str


class GrantUnlimitedRequest(BaseModel):
    user_email: str = Field(..., min_length=3, max_length=254)
