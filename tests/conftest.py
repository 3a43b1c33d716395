"""
PyTest configuration

Shared fixtures for cache and settings tests.
"""

import pytest
from loguru import logger

from lazy_cache.shared.config.settings import get_settings, reload_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run each test against default settings"""
    monkeypatch.delenv("LAZY_CACHE_DEBOUNCE_DELAY", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    reload_settings()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_records():
    """Collect loguru records emitted during a test"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
