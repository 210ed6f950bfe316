"""
Tests for Settings.
"""

from __future__ import annotations

import pytest

from bookstore_contracts.clients import DemoqaClient
from bookstore_contracts.config import DEFAULT_BASE_URL, Settings


def test_defaults(monkeypatch) -> None:
    for name in ("BOOKSTORE_BASE_URL", "BOOKSTORE_TIMEOUT", "BOOKSTORE_LIVE", "BOOKSTORE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == 10.0
    assert settings.live is False
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("BOOKSTORE_BASE_URL", "http://localhost:8080/")
    monkeypatch.setenv("BOOKSTORE_TIMEOUT", "2.5")
    monkeypatch.setenv("BOOKSTORE_RATE_LIMIT", "0")
    monkeypatch.setenv("BOOKSTORE_MAX_CONCURRENT", "8")
    monkeypatch.setenv("BOOKSTORE_RESULTS_DIR", "/tmp/out")
    monkeypatch.setenv("BOOKSTORE_LIVE", "yes")
    monkeypatch.setenv("BOOKSTORE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.base_url == "http://localhost:8080"
    assert settings.timeout == 2.5
    assert settings.rate_limit == 0.0
    assert settings.max_concurrent == 8
    assert settings.results_dir == "/tmp/out"
    assert settings.live is True
    assert settings.log_level == "DEBUG"


def test_client_from_settings() -> None:
    client = DemoqaClient.from_settings(Settings(base_url="http://localhost:8080", timeout=3, rate_limit=0))

    assert client.base_url == "http://localhost:8080"
    assert client.api_caller.timeout == 3
    assert client.accounts.base_url == "http://localhost:8080"


def test_catalog_client_inherits_concurrency_and_timeout() -> None:
    client = DemoqaClient.from_settings(Settings(base_url="http://localhost:8080", timeout=3, rate_limit=0, max_concurrent=7))

    catalog = client.catalog()

    assert catalog.max_concurrent == 7
    assert catalog.timeout == 3
    assert catalog.base_url == "http://localhost:8080"


def test_client_rejects_concurrency_below_one() -> None:
    with pytest.raises(ValueError, match="max_concurrent"):
        DemoqaClient("http://localhost:8080", max_concurrent=0)
