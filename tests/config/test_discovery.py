"""Tests for cepweather.toml discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from cepweather.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config


class TestFindConfig:
    def test_found_in_start_dir(self, tmp_path: Path) -> None:
        target = tmp_path / CONFIG_FILENAME
        target.write_text("")
        assert find_config(tmp_path) == target

    def test_walks_up(self, tmp_path: Path) -> None:
        target = tmp_path / CONFIG_FILENAME
        target.write_text("")
        deep = tmp_path / "x" / "y" / "z"
        deep.mkdir(parents=True)
        assert find_config(deep) == target.resolve()

    def test_nearest_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / CONFIG_FILENAME).write_text("")
        assert find_config(inner) == (inner / CONFIG_FILENAME).resolve()

    def test_env_var_pins_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pinned = tmp_path / "elsewhere.toml"
        pinned.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(pinned))
        assert find_config(tmp_path) == pinned

    def test_dangling_env_var_returns_none(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None
