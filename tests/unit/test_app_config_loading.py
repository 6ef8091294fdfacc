"""Unit tests for the app_config module."""
import os
from unittest.mock import patch, MagicMock

import pytest
import yaml

from game_localizer.app_config import (
    DEFAULT_MISSING_KEYS_FILE,
    LocalizerConfig,
    load_app_config,
)


@pytest.fixture
def write_config(tmp_path):
    """Write a config.yaml into tmp_path and return its path."""
    def _write(content):
        config_path = tmp_path / "config.yaml"
        if isinstance(content, dict):
            content = yaml.dump(content)
        config_path.write_text(content, encoding="utf-8")
        return str(config_path)
    return _write


def _load(config_path, extra_env=None):
    env = {"LOCALIZER_CONFIG_FILE": config_path}
    env.update(extra_env or {})
    with patch("game_localizer.app_config.setup_logger") as mock_logger:
        mock_logger.return_value = MagicMock()
        with patch("game_localizer.app_config.load_dotenv"):
            with patch.dict(os.environ, env, clear=True):
                return load_app_config(), mock_logger


class TestLocalizerConfig:
    """Test cases for the LocalizerConfig dataclass."""

    def test_config_creation(self):
        config = LocalizerConfig(
            project_root="/test/root",
            language_code="de",
            missing_keys_file_path="/test/root/need_translate.csv",
            record_missing_keys=True,
            dry_run=False,
            log_level="INFO",
            log_file_path="logs/localizer.log",
            log_to_console=True
        )

        assert config.language_code == "de"
        assert config.dry_run is False


class TestLoadAppConfig:
    """Test cases for the load_app_config function."""

    def test_load_config_with_valid_yaml_file(self, write_config):
        config_path = write_config({
            "language_code": "fr",
            "missing_keys_file_path": "/data/fr/need_translate.csv",
            "record_missing_keys": False,
            "dry_run": True,
            "logging": {"log_level": "debug", "log_file_path": "test.log", "log_to_console": False}
        })

        config, mock_logger = _load(config_path)

        assert config.language_code == "fr"
        assert config.missing_keys_file_path == "/data/fr/need_translate.csv"
        assert config.record_missing_keys is False
        assert config.dry_run is True
        assert config.log_level == "DEBUG"
        assert config.log_to_console is False
        mock_logger.assert_called_once_with("DEBUG", "test.log", False)

    def test_missing_file_uses_defaults(self, tmp_path, capsys):
        config, _ = _load(str(tmp_path / "absent.yaml"))

        assert config.language_code == "en"
        assert config.record_missing_keys is True
        assert config.dry_run is False
        assert config.log_level == "INFO"
        assert config.missing_keys_file_path == os.path.join(config.project_root, DEFAULT_MISSING_KEYS_FILE)
        assert "not found" in capsys.readouterr().err

    def test_schema_violation_uses_defaults(self, write_config, capsys):
        config_path = write_config({"record_missing_keys": "sometimes", "language_code": "fr"})

        config, _ = _load(config_path)

        assert config.language_code == "en"
        assert config.record_missing_keys is True
        assert "does not match the expected schema" in capsys.readouterr().err

    def test_invalid_yaml_uses_defaults(self, write_config, capsys):
        config_path = write_config("language_code: [unclosed")

        config, _ = _load(config_path)

        assert config.language_code == "en"
        assert "Invalid YAML" in capsys.readouterr().err

    def test_non_mapping_yaml_uses_defaults(self, write_config, capsys):
        config_path = write_config("- just\n- a list\n")

        config, _ = _load(config_path)

        assert config.language_code == "en"
        assert "must contain a YAML dictionary" in capsys.readouterr().err

    def test_environment_overrides_missing_keys_file(self, write_config):
        config_path = write_config({"missing_keys_file_path": "from_file.csv"})

        config, _ = _load(config_path, {"MISSING_KEYS_FILE": "/tmp/from_env.csv"})

        assert config.missing_keys_file_path == "/tmp/from_env.csv"

    def test_relative_missing_keys_file_is_anchored_at_project_root(self, write_config):
        config_path = write_config({"missing_keys_file_path": "packs/de/need_translate.csv"})

        config, _ = _load(config_path)

        assert config.missing_keys_file_path == os.path.join(
            config.project_root, "packs/de/need_translate.csv")

    def test_dotenv_file_is_loaded(self, write_config):
        config_path = write_config({"language_code": "de"})

        with patch("game_localizer.app_config.setup_logger") as mock_logger:
            mock_logger.return_value = MagicMock()
            with patch("game_localizer.app_config.os.path.exists") as mock_exists:
                mock_exists.side_effect = lambda path: path.endswith("/.env") or path == config_path
                with patch("game_localizer.app_config.load_dotenv") as mock_load_dotenv:
                    with patch.dict(os.environ, {"LOCALIZER_CONFIG_FILE": config_path}, clear=True):
                        load_app_config()

        mock_load_dotenv.assert_called_once()
