"""Tests for environment parsing."""

from __future__ import annotations

from notification_doctor import config


class TestEnvFloat:
    def test_number(self, monkeypatch) -> None:
        monkeypatch.setenv("LISTEN_WINDOW_SECONDS", "2.5")
        assert config._env_float("LISTEN_WINDOW_SECONDS", 5.0) == 2.5

    def test_garbage_falls_back(self, monkeypatch) -> None:
        monkeypatch.setenv("LISTEN_WINDOW_SECONDS", "five")
        assert config._env_float("LISTEN_WINDOW_SECONDS", 5.0) == 5.0

    def test_unset_or_blank(self, monkeypatch) -> None:
        monkeypatch.delenv("LISTEN_WINDOW_SECONDS", raising=False)
        assert config._env_float("LISTEN_WINDOW_SECONDS", 5.0) == 5.0
        monkeypatch.setenv("LISTEN_WINDOW_SECONDS", "  ")
        assert config._env_float("LISTEN_WINDOW_SECONDS", 5.0) == 5.0


class TestEnvBool:
    def test_values(self, monkeypatch) -> None:
        monkeypatch.setenv("VERIFY_ID_TOKEN", "false")
        assert config._env_bool("VERIFY_ID_TOKEN", True) is False
        monkeypatch.delenv("VERIFY_ID_TOKEN")
        assert config._env_bool("VERIFY_ID_TOKEN", True) is True
