"""
Centralized settings for the Waitlist API.

This file reads environment variables (optionally from a .env file)
and provides sane defaults so the app can boot locally.
Values are read when asked for, not at import time, so a missing
MONGODB_URI only fails the first request that needs the database.
"""

import os
from dataclasses import dataclass
from typing import Dict, Any, List
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from the .env file NEXT TO THIS FILE
ENV_PATH = Path(__file__).resolve().parent / ".env"
load_dotenv(ENV_PATH, override=False)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    return default if raw is None else raw


def _get_list(name: str) -> List[str]:
    raw = _get_str(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


# ---------------------------
# Defaults
# ---------------------------
DEFAULT_DB_NAME = "waitlist"
DEFAULT_COLLECTION = "submissions"
DEFAULT_TIMEOUT_MS = 10000


@dataclass(frozen=True)
class Settings:
    MONGODB_URI: str
    MONGODB_DB: str
    WAITLIST_COLLECTION: str
    MONGODB_TIMEOUT_MS: int
    CORS_ALLOWED_ORIGINS: List[str]


def get_settings() -> Dict[str, Any]:
    return {
        "MONGODB_URI": _get_str("MONGODB_URI", "").strip(),
        "MONGODB_DB": _get_str("MONGODB_DB", DEFAULT_DB_NAME) or DEFAULT_DB_NAME,
        "WAITLIST_COLLECTION": _get_str("WAITLIST_COLLECTION", DEFAULT_COLLECTION) or DEFAULT_COLLECTION,
        "MONGODB_TIMEOUT_MS": _get_int("MONGODB_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        "CORS_ALLOWED_ORIGINS": _get_list("CORS_ALLOWED_ORIGINS"),
    }


def get_settings_obj() -> Settings:
    return Settings(**get_settings())
