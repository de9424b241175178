from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from retirement_calculator.app import create_app
from retirement_calculator.core.config import Settings
from retirement_calculator.store.lifestyle_store import LifestyleStore


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="DEBUG",
        database_path=str(tmp_path / "lifestyles.db"),
    )


@pytest.fixture()
def sqlite_store(settings) -> LifestyleStore:
    store = LifestyleStore(settings.database_path)
    store.init_schema()
    store.seed()
    return store


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
