"""Tests for settings."""

from __future__ import annotations

from writeassist.config import DEFAULT_PROXY_URL, AISettings, Settings
from writeassist.tasks import TaskRunner


def test_settings_fields() -> None:
    """Only fields the service reads are exposed."""

    assert set(Settings.model_fields) >= {"log_level", "proxy_url", "session_tokens", "upstream_timeout_s"}
    assert "app_env" not in Settings.model_fields


def test_proxy_url_default_shared() -> None:
    """Settings and task runners agree on where the proxy endpoint lives."""

    assert Settings.model_fields["proxy_url"].default == DEFAULT_PROXY_URL
    assert TaskRunner(AISettings(api_key="sk-test")).proxy_url == DEFAULT_PROXY_URL
