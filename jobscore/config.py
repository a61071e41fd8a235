"""Environment configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

MAX_HISTORY_LIMIT = 100


def _to_int(x: str | None, default: int) -> int:
    try:
        return int(x) if x else default
    except ValueError:
        return default


def _to_float(x: str | None, default: float) -> float:
    try:
        return float(x) if x else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_anon_key: str = ""
    kv_url: str = ""
    auth_timeout: float = 5.0
    history_default_limit: int = 50


def load_settings() -> Settings:
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", "").strip().rstrip("/"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        kv_url=os.getenv("KV_URL", "").strip(),
        auth_timeout=_to_float(os.getenv("AUTH_TIMEOUT"), 5.0),
        history_default_limit=max(1, min(MAX_HISTORY_LIMIT, _to_int(os.getenv("HISTORY_DEFAULT_LIMIT"), 50))),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
