"""Tests for WrapperConfig — env-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from ninjacolor.config import WrapperConfig
from ninjacolor.core.status_pattern import DEFAULT_STATUS_TEMPLATE


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("NINJA_STATUS", "NINJACOLOR_NINJA", "NINJACOLOR_PREFERENCES", "NINJACOLOR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestWrapperConfig:
    def test_defaults(self):
        config = WrapperConfig()
        assert config.ninja == "ninja"
        assert config.status_format == DEFAULT_STATUS_TEMPLATE
        assert config.log_level == "WARNING"
        assert config.read_size == 4096

    def test_default_preferences_path(self):
        config = WrapperConfig()
        assert config.preferences_path == Path("~/.ninjacolor")
        assert config.resolved_preferences_path == Path.home() / ".ninjacolor"

    def test_ninja_status_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("NINJA_STATUS", "[%p %f/%t] ")
        assert WrapperConfig().status_format == "[%p %f/%t] "

    def test_prefixed_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("NINJACOLOR_NINJA", "/opt/bin/ninja")
        monkeypatch.setenv("NINJACOLOR_PREFERENCES", str(tmp_path / "prefs"))
        monkeypatch.setenv("NINJACOLOR_LOG_LEVEL", "DEBUG")
        config = WrapperConfig()
        assert config.ninja == "/opt/bin/ninja"
        assert config.preferences_path == tmp_path / "prefs"
        assert config.log_level == "DEBUG"

    def test_constructor_arguments(self):
        config = WrapperConfig(ninja="samu", status_format="%f ")
        assert config.ninja == "samu"
        assert config.status_format == "%f "
