"""Tests for settings loading."""

from __future__ import annotations

from src.sampler.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3001
    assert settings.feed_host == "https://www.youtube.com"
    assert settings.cors_allow_origins == ["*"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("INGEST_CONCURRENCY", "4")
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.ingest_concurrency == 4


def test_test_settings_fixture(test_settings):
    assert test_settings.scheduler_enabled is False
    assert test_settings.app_env == "test"
