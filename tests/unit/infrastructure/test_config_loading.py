"""Tests for layered configuration loading."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from streamhub.infrastructure.config import AppConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.upper().startswith("STREAMHUB_"):
            monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        config = load_config()
        assert config.app_name == "streamhub"
        assert config.player.controls_hide_seconds == 3.0
        assert config.player.max_retries == 3
        assert config.player.close_key == "Escape"
        assert config.player.controls_key == "Space"
        assert config.player.probe_timeout_seconds == 5.0
        assert config.aggregator.enabled is True
        assert config.log_format == "console"

    def test_prod_defaults_to_json_logs(self) -> None:
        config = AppConfig(environment="prod")
        assert config.log_format == "json"


class TestPrecedence:
    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "aggregator:\n  base_url: https://yaml.test\n"
            "player:\n  controls_hide_seconds: 5\n"
            "logging:\n  level: DEBUG\n",
            encoding="utf-8",
        )
        config = load_config(config_path=path)
        assert config.aggregator.base_url == "https://yaml.test"
        assert config.player.controls_hide_seconds == 5.0
        assert config.player.max_retries == 3
        assert config.log_level == "DEBUG"

    def test_env_overrides_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("api:\n  port: 8000\n", encoding="utf-8")
        monkeypatch.setenv("STREAMHUB_API_PORT", "9000")
        monkeypatch.setenv("STREAMHUB_AGGREGATOR_ENABLED", "false")
        config = load_config(config_path=path)
        assert config.api.port == 9000
        assert config.aggregator.enabled is False

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STREAMHUB_LOG_LEVEL", "WARNING")
        config = load_config(cli_overrides={"log_level": "ERROR"})
        assert config.log_level == "ERROR"

    def test_dotenv_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("STREAMHUB_SUBTITLES_BASE_URL=https://dotenv.test\n")
        try:
            config = load_config(dotenv_path=env_file)
        finally:
            os.environ.pop("STREAMHUB_SUBTITLES_BASE_URL", None)
        assert config.subtitles.base_url == "https://dotenv.test"


class TestErrors:
    def test_missing_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nope.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_invalid_retry_cap(self) -> None:
        with pytest.raises(ValidationError):
            load_config(cli_overrides={"player_max_retries": 5})

    def test_round_trip_sectioned(self) -> None:
        config = load_config()
        again = AppConfig.model_validate(config.to_sectioned_dict())
        assert again == config
