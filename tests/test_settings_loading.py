"""
Test settings loading from the environment.

Each section reads its own env prefix; get_app_settings() caches the
aggregate, so tests clear the cache around every case.
"""
from __future__ import annotations

import pydantic
import pytest

from core.settings import AppSettings, ProcessorSettings, ServiceSettings, get_app_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path):
    # Run from an empty directory so a developer's .env cannot leak in
    monkeypatch.chdir(tmp_path)
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()


def test_defaults():
    settings = get_app_settings()

    assert settings.service.store_backend == "sqlalchemy"
    assert settings.service.channel_backend == "redis"
    assert settings.redis.stream_name == "orders:events"
    assert settings.redis.dead_letter_stream == "orders:events:dlq"
    assert settings.processor.review_item_threshold == 10
    assert settings.processor.approval_value_threshold == 10000
    assert settings.processor.max_deliveries == 3
    assert settings.processor.require_pending is False


def test_env_overrides_each_section(monkeypatch):
    monkeypatch.setenv("ORDERS_STORE_BACKEND", "memory")
    monkeypatch.setenv("ORDERS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6380/2")
    monkeypatch.setenv("PROCESSOR_MAX_DELIVERIES", "5")
    monkeypatch.setenv("PROCESSOR_REQUIRE_PENDING", "true")

    settings = get_app_settings()

    assert settings.service.store_backend == "memory"
    assert settings.service.log_level == "DEBUG"
    assert settings.database.database_url == "sqlite+aiosqlite:///:memory:"
    assert settings.redis.url == "redis://cache:6380/2"
    assert settings.processor.max_deliveries == 5
    assert settings.processor.require_pending is True


def test_settings_are_cached(monkeypatch):
    first = get_app_settings()
    monkeypatch.setenv("ORDERS_SERVICE_NAME", "changed")

    assert get_app_settings() is first
    assert first.service.service_name == "orders-service"


def test_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("PROCESSOR_REVIEW_ITEM_THRESHOLD=4\n", encoding="utf-8")

    assert ProcessorSettings().review_item_threshold == 4


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("ORDERS_CHANNEL_BACKEND", "kafka")

    with pytest.raises(pydantic.ValidationError):
        ServiceSettings()


def test_unrelated_keys_are_ignored(monkeypatch):
    monkeypatch.setenv("ORDERS_SOMETHING_ELSE", "x")

    assert isinstance(AppSettings.load(), AppSettings)
