"""Tests for application configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from backends import build_backend_registry
from config import AppConfig


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FETCH_MAX_WORKERS", raising=False)

        config = AppConfig(_env_file=None)

        assert config.upstream_timeout_seconds == 10.0
        assert config.fetch_max_workers == 1
        assert config.default_entity_type == "Thing"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("FETCH_MAX_WORKERS", "4")
        monkeypatch.setenv("WEATHER_API_KEY", "abc123")

        config = AppConfig(_env_file=None)

        assert config.fetch_max_workers == 4
        assert config.weather_api_key == "abc123"

    def test_twitter_max_results_bounds(self):
        with pytest.raises(ValidationError):
            AppConfig(_env_file=None, twitter_max_results=5)

    def test_missing_fixture_file(self, tmp_path):
        with pytest.raises(ValidationError):
            AppConfig(_env_file=None, static_fixtures_path=tmp_path / "missing.json")

    def test_registry_from_config(self, tmp_path):
        path = tmp_path / "fixtures.json"
        path.write_text('{"default": {"windSpeed": 3.5}}')
        config = AppConfig(_env_file=None, static_fixtures_path=path, random_list_length=2)

        registry = build_backend_registry(config)

        assert sorted(registry.names()) == ["random", "static", "twitter", "weather"]
        assert registry.get("static").lookup("windSpeed", None) == 3.5
        assert registry.get("random").list_length == 2


class TestModuleHeaders:
    """Every application module opens with the context banner."""

    ROOT = Path(__file__).resolve().parent.parent

    @pytest.mark.parametrize("relative", [
        "config.py",
        "function_app.py",
        "health.py",
        "util_logger.py",
        "backends/__init__.py",
        "backends/base.py",
        "backends/random_backend.py",
        "backends/registry.py",
        "backends/static_backend.py",
        "backends/twitter_backend.py",
        "backends/weather_backend.py",
        "ngsi_proxy/config.py",
        "ngsi_proxy/service.py",
        "ngsi_proxy/triggers.py",
    ])
    def test_context_banner(self, relative):
        lines = (self.ROOT / relative).read_text().splitlines()

        assert "CLAUDE CONTEXT" in lines[1]
        assert any(line.startswith("# PURPOSE:") for line in lines[:12])
