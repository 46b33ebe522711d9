from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _int_env(name: str, default: int) -> int:
    return int(os.environ.get(name) or str(default))


def _csv_env(name: str, default: str = "") -> List[str]:
    raw = os.environ.get(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    """Centralized configuration for the daily tracker backend."""

    def __init__(self) -> None:
        repo_root = Path(__file__).resolve().parent.parent
        self.data_root: Path = Path(
            os.environ.get("DAILY_TRACKER_DATA_ROOT") or (repo_root / "data")
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("DAILY_TRACKER_DB_PATH") or (self.data_root / "daily_tracker.db")
        ).expanduser()
        self.uploads_root: Path = self.data_root / "uploads"
        self.log_level: str = (os.environ.get("DAILY_TRACKER_LOG_LEVEL") or "INFO").upper()

        # ---- auth ----
        # Production deployments must set DAILY_TRACKER_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("DAILY_TRACKER_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = _int_env("DAILY_TRACKER_TOKEN_TTL_DAYS", 7)
        self.cookie_secure: bool = (os.environ.get("DAILY_TRACKER_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}
        self.admin_emails: List[str] = [e.lower() for e in _csv_env("DAILY_TRACKER_ADMIN_EMAILS")]

        # ---- uploads ----
        self.max_upload_mb: int = _int_env("DAILY_TRACKER_MAX_UPLOAD_MB", 10)

        # ---- macro estimation (OpenAI-compatible chat completions) ----
        self.macros_api_key: str | None = os.environ.get("MACROS_API_KEY")
        self.macros_base_url: str = os.environ.get(
            "MACROS_BASE_URL", "https://dashscope.aliyuncs.com/compatible-mode/v1"
        )
        self.macros_model: str = os.environ.get("MACROS_MODEL", "qwen-plus")
        self.macros_timeout: float = float(os.environ.get("MACROS_TIMEOUT", "30"))

        # ---- billing ----
        self.stripe_secret_key: str | None = os.environ.get("STRIPE_SECRET_KEY")
        self.stripe_webhook_secret: str | None = os.environ.get("STRIPE_WEBHOOK_SECRET")
        self.stripe_premium_price_id: str | None = os.environ.get("STRIPE_PREMIUM_PRICE_ID")
        self.stripe_api_base: str = os.environ.get("STRIPE_API_BASE", "https://api.stripe.com")
        self.free_ai_calculations: int = _int_env("FREE_AI_CALCULATIONS", 20)
        self.free_uploads: int = _int_env("FREE_UPLOADS", 5)
        self.trial_period_days: int = _int_env("TRIAL_PERIOD_DAYS", 7)

        cors = os.environ.get("DAILY_TRACKER_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = _csv_env("DAILY_TRACKER_CORS_ORIGINS")


settings = Settings()
