# /tests/test_config.py

import pytest

from quadriparlanti.core.config import get_settings
from quadriparlanti.core.exceptions import ConfigurationError


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("SITE_URL", "https://quadriparlanti.example.org/")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.backend_url == "sqlite://"
    assert settings.site_url == "https://quadriparlanti.example.org"
    assert settings.log_level == "DEBUG"
    assert settings.smtp_enabled is False


def test_missing_required_variables_are_named(monkeypatch):
    monkeypatch.delenv("BACKEND_URL")
    monkeypatch.delenv("BACKEND_API_KEY")
    # Keep a stray .env file from filling the gap.
    monkeypatch.setattr("quadriparlanti.core.config.load_dotenv", lambda: None)
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert "BACKEND_URL" in exc_info.value.message
    assert "BACKEND_API_KEY" in exc_info.value.message


def test_missing_configuration_fails_the_request_not_the_app(client, monkeypatch):
    monkeypatch.delenv("BACKEND_API_KEY")
    monkeypatch.setattr("quadriparlanti.core.config.load_dotenv", lambda: None)
    get_settings.cache_clear()

    response = client.get("/api/teachers")

    assert response.status_code == 500
    assert "BACKEND_API_KEY" in response.json()["detail"]
