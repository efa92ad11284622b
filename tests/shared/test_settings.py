"""Tests for environment-driven admin settings."""

import pytest
from pydantic import ValidationError
from shared.settings import AdminSettings


def test_defaults():
    settings = AdminSettings()
    assert settings.currency == "ZAR"
    assert settings.timezone == "Africa/Johannesburg"
    assert settings.allow_negative_stock is False
    assert settings.order_status_webhook_url is None


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("BLOM_LOW_STOCK_THRESHOLD", "12")
    monkeypatch.setenv("BLOM_ALLOW_NEGATIVE_STOCK", "true")

    settings = AdminSettings()

    assert settings.low_stock_threshold == 12
    assert settings.allow_negative_stock is True


def test_rejects_invalid_webhook_url(monkeypatch):
    monkeypatch.setenv("BLOM_ORDER_STATUS_WEBHOOK_URL", "not a url")
    with pytest.raises(ValidationError):
        AdminSettings()


def test_rejects_unknown_timezone(monkeypatch):
    monkeypatch.setenv("BLOM_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValidationError):
        AdminSettings()
