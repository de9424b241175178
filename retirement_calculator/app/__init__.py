"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
import uuid
from functools import partial
from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from retirement_calculator.app.api.routes import SERVICE_EXTENSION, api_bp
from retirement_calculator.cache.lifestyle_cache import LifestyleCache, LifestyleSource
from retirement_calculator.cache.rate_cache import InterestRateCache, RateLoader
from retirement_calculator.core.config import Settings, load_settings
from retirement_calculator.core.service import RetirementCalculatorService
from retirement_calculator.store.lifestyle_store import LifestyleStore
from retirement_calculator.store.rate_table import load_rate_table
from retirement_calculator.utils.cache import CacheBackend, TTLCache
from retirement_calculator.utils.logging import set_log_context, setup_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/calculator"


def build_service(
    settings: Settings,
    store: Optional[LifestyleSource] = None,
    cache_backend: Optional[CacheBackend] = None,
    rate_loader: Optional[RateLoader] = None,
    initialize_caches: bool = True,
) -> RetirementCalculatorService:
    """Wire store, rate table and caches together; every collaborator can be swapped."""
    if store is None:
        sqlite_store = LifestyleStore(settings.database_path)
        sqlite_store.init_schema()
        if settings.seed_lifestyles:
            sqlite_store.seed()
        store = sqlite_store

    backend = cache_backend if cache_backend is not None else TTLCache(settings.cache_ttl_seconds)
    loader = rate_loader if rate_loader is not None else partial(load_rate_table, settings.rate_table_path)

    lifestyle_cache = LifestyleCache(backend, store, ttl=settings.cache_ttl)
    rate_cache = InterestRateCache(backend, loader, ttl=settings.cache_ttl)
    if initialize_caches:
        lifestyle_cache.initialize_cache()
        rate_cache.initialize_cache()

    return RetirementCalculatorService(lifestyle_cache, rate_cache)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[RetirementCalculatorService] = None,
    **collaborators,
) -> Flask:
    """Build the Flask app instance."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.config["APP_ENV"] = settings.env

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    @app.before_request
    def _bind_request_id() -> None:
        set_log_context(request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12])

    app.extensions[SERVICE_EXTENSION] = service or build_service(settings, **collaborators)
    app.register_blueprint(api_bp, url_prefix=API_PREFIX)
    logger.info("Retirement calculator started (env=%s)", settings.env)
    return app
