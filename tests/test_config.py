"""Tests for core.config and core.log."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.selection import SelectionPolicy
from core.log import configure_logging, get_logger


class TestAppSettings:
    def test_defaults(self) -> None:
        settings = AppSettings(_env_file=None)

        assert settings.base_url == "https://jsonplaceholder.typicode.com"
        assert settings.reactive_policy is SelectionPolicy.LAST
        assert settings.suspending_policy is SelectionPolicy.FIRST

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCH_CHAIN_BASE_URL", "http://localhost:3000")
        monkeypatch.setenv("FETCH_CHAIN_REACTIVE_POLICY", "first")
        monkeypatch.setenv("FETCH_CHAIN_HTTP_TIMEOUT_SECONDS", "2.5")

        settings = AppSettings(_env_file=None)

        assert settings.base_url == "http://localhost:3000"
        assert settings.reactive_policy is SelectionPolicy.FIRST
        assert settings.http_timeout_seconds == 2.5

    def test_rejects_bad_timeout(self) -> None:
        with pytest.raises(ValueError):
            AppSettings(_env_file=None, http_timeout_seconds=0)


class TestUserEnvFile:
    def test_write_merges_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        env_path = get_user_env_file()
        env_path.parent.mkdir(parents=True)
        env_path.write_text("# comment\nFETCH_CHAIN_BASE_URL='http://old'\nOTHER=1\n", encoding="utf-8")

        written = write_user_env_vars({"FETCH_CHAIN_BASE_URL": "http://new"})

        assert written == tmp_path / "fetch-chain" / ".env"
        lines = written.read_text(encoding="utf-8").splitlines()
        assert "FETCH_CHAIN_BASE_URL=http://new" in lines
        assert "OTHER=1" in lines


class TestLogging:
    def test_configure_sets_root_level(self) -> None:
        configure_logging("debug", json=True)
        assert logging.getLogger().level == logging.DEBUG
        get_logger("fetch-chain.test").debug("logging_configured")

        configure_logging("nonsense")
        assert logging.getLogger().level == logging.WARNING
