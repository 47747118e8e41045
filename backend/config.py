"""
Ledger backend configuration.
Single source of truth for environment and app settings.
"""

import json
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv

# Project root (parent of backend/): anchor for relative storage paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(PROJECT_ROOT / ".env")

logger = logging.getLogger(__name__)

FEATURE_KEYS = ("auth", "payments", "voice", "chat", "analytics", "emails")

_cached_settings: Optional["Settings"] = None


def get_settings() -> "Settings":
    """Return app settings (use as FastAPI Depends or call directly)."""
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = Settings()
    return _cached_settings


def reset_settings_cache() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _cached_settings
    _cached_settings = None


def parse_feature_overrides(flags: Optional[str]) -> dict[str, bool]:
    """
    Parse FEATURE_FLAGS. Accepts a JSON object ({"voice": false}) or
    comma-separated pairs (voice=false,chat=true). Unknown keys are dropped.
    """
    if not flags or not flags.strip():
        return {}
    try:
        parsed = json.loads(flags)
    except json.JSONDecodeError:
        overrides = {}
        for pair in flags.split(","):
            pair = pair.strip()
            if not pair:
                continue
            key, _, value = pair.partition("=")
            key = key.strip()
            if key:
                overrides[key] = value.strip().lower() == "true"
    else:
        if not isinstance(parsed, dict):
            return {}
        overrides = {k: bool(v) for k, v in parsed.items()}

    unknown = set(overrides) - set(FEATURE_KEYS)
    if unknown:
        logger.warning("Ignoring unknown feature flags: %s", ", ".join(sorted(unknown)))
    return {k: v for k, v in overrides.items() if k in FEATURE_KEYS}


class Settings:
    """Application settings loaded from environment."""

    # App
    APP_TITLE: str = "Ledger API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "test", "production"] = "development"
    ALLOWED_ORIGINS: list[str]
    LOG_LEVEL: str = "INFO"

    # Storage
    DATABASE_FILE: str = "data/database.json"
    KNOWLEDGE_BASE_DIR: str = "docs"

    # Demo data / collaborators
    DEFAULT_USER_EMAIL: str = "founder@example.com"
    ANALYTICS_RECENT_LIMIT: int = 10

    FEATURES: dict[str, bool]

    def __init__(self):
        env = (os.environ.get("APP_ENV") or "development").strip().lower()
        self.APP_ENV = env if env in ("development", "test", "production") else "development"
        origins = os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000")
        self.ALLOWED_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        self.LOG_LEVEL = (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
        self.DATABASE_FILE = (os.environ.get("DATABASE_FILE") or "data/database.json").strip()
        self.KNOWLEDGE_BASE_DIR = (os.environ.get("KNOWLEDGE_BASE_DIR") or "docs").strip()
        self.DEFAULT_USER_EMAIL = (
            os.environ.get("DEFAULT_USER_EMAIL") or "founder@example.com"
        ).strip()
        try:
            self.ANALYTICS_RECENT_LIMIT = int(os.environ.get("ANALYTICS_RECENT_LIMIT") or 10)
        except ValueError:
            self.ANALYTICS_RECENT_LIMIT = 10
        overrides = parse_feature_overrides(os.environ.get("FEATURE_FLAGS"))
        self.FEATURES = {key: overrides.get(key, True) for key in FEATURE_KEYS}


def is_feature_enabled(key: str, overrides: Optional[dict[str, bool]] = None) -> bool:
    """True when the feature is on, after applying per-call overrides."""
    if key not in FEATURE_KEYS:
        raise KeyError(f"Unknown feature flag: {key}")
    flags = {**get_settings().FEATURES, **(overrides or {})}
    return bool(flags[key])
