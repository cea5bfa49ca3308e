"""
Tests for `config.py`.
"""

from __future__ import annotations

import logging

import pytest

from config import load_settings, setup_logging


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OFFER_STORE", "HOST_URL", "SESSION_SECRET", "SESSION_TTL_MINUTES", "SMTP_PORT",
        "SMTP_USE_TLS", "EMPLOYER_NAME", "EMPLOYER_LOCATION", "ALLOWED_ORIGINS", "LOG_LEVEL", "APP_ENV",
        "COOKIE_SECURE",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.offer_store == "supabase"
    assert settings.host_url == "http://localhost:3000"
    assert settings.session_ttl_minutes == 60
    assert settings.smtp_port == 587
    assert settings.smtp_use_tls is True
    assert settings.employer_name == "TYROADS"
    assert settings.employer_location == "Gwalior"
    assert settings.cookie_secure is False
    assert settings.allowed_origin_list == ["*"]
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OFFER_STORE", "Memory")
    monkeypatch.setenv("HOST_URL", "https://offers.example.com/")
    monkeypatch.setenv("SESSION_TTL_MINUTES", "15")
    monkeypatch.setenv("SMTP_USE_TLS", "false")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = load_settings()

    assert settings.offer_store == "memory"
    assert settings.host_url == "https://offers.example.com"
    assert settings.session_ttl_minutes == 15
    assert settings.smtp_use_tls is False
    assert settings.cookie_secure is True
    assert settings.allowed_origin_list == ["https://a.example.com", "https://b.example.com"]


def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OFFER_STORE", "redis")
    with pytest.raises(RuntimeError):
        load_settings()

    monkeypatch.setenv("OFFER_STORE", "memory")
    monkeypatch.setenv("SESSION_TTL_MINUTES", "an hour")
    with pytest.raises(RuntimeError):
        load_settings()


def test_setup_logging_installs_single_handler() -> None:
    setup_logging("DEBUG")
    setup_logging("WARNING")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING


def test_cookie_secure_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("COOKIE_SECURE", "false")
    assert load_settings().cookie_secure is False

    monkeypatch.delenv("APP_ENV")
    monkeypatch.setenv("COOKIE_SECURE", "true")
    assert load_settings().cookie_secure is True

    monkeypatch.delenv("COOKIE_SECURE")
    assert load_settings().cookie_secure is False
