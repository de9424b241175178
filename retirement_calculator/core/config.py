from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Tuple

import yaml
from dotenv import load_dotenv

from retirement_calculator.store.lifestyle_store import DEFAULT_DB_PATH
from retirement_calculator.store.rate_table import DEFAULT_RATE_TABLE_PATH

DEFAULT_CORS_ORIGINS = ("http://localhost:4200", "http://localhost:3000", "http://localhost:5173")


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    log_level: str = "INFO"
    cache_ttl_seconds: int = 86400

    database_path: str = str(DEFAULT_DB_PATH)
    rate_table_path: str = str(DEFAULT_RATE_TABLE_PATH)
    seed_lifestyles: bool = True

    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # treat empty env vars as "not set"
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None or v.strip() == "":
            return _deep_get(cfg, cfg_path, default)
        return v.strip()

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")
    cache_ttl_seconds = int(_env_or_cfg("CACHE_TTL_SECONDS", "cache.ttl_seconds", 86400))
    if cache_ttl_seconds <= 0:
        raise ValueError(f"CACHE_TTL_SECONDS must be positive, got {cache_ttl_seconds}")

    database_path = _env_or_cfg("DATABASE_PATH", "paths.database", str(DEFAULT_DB_PATH))
    rate_table_path = _env_or_cfg("RATE_TABLE_PATH", "paths.rate_table", str(DEFAULT_RATE_TABLE_PATH))
    seed_lifestyles = _as_bool(_env_or_cfg("SEED_LIFESTYLES", "store.seed", True))

    origins = _env_or_cfg("CORS_ORIGINS", "cors.origins", list(DEFAULT_CORS_ORIGINS))
    if isinstance(origins, str):
        origins = [origin.strip() for origin in origins.split(",") if origin.strip()]

    return Settings(
        env=env,
        log_level=str(log_level).upper(),
        cache_ttl_seconds=cache_ttl_seconds,
        database_path=str(database_path),
        rate_table_path=str(rate_table_path),
        seed_lifestyles=seed_lifestyles,
        cors_origins=tuple(origins),
    )
