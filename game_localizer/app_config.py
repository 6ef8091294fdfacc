"""Application configuration module for the localization layer."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Dict, Any

import jsonschema
import yaml
from dotenv import load_dotenv

from game_localizer.logging_config import setup_logger

DEFAULT_LOG_FILE_PATH = 'logs/localizer.log'
DEFAULT_MISSING_KEYS_FILE = 'need_translate.csv'

# Shape of config.yaml. Unknown keys are tolerated so that hosts can keep
# their own settings in the same file.
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "language_code": {"type": "string"},
        "missing_keys_file_path": {"type": "string"},
        "record_missing_keys": {"type": "boolean"},
        "dry_run": {"type": "boolean"},
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": ["string", "null"]},
                "log_to_console": {"type": "boolean"}
            }
        }
    }
}


@dataclass
class LocalizerConfig:
    """Application configuration dataclass."""
    project_root: str
    language_code: str

    # Missing-key ledger
    missing_keys_file_path: str
    record_missing_keys: bool
    dry_run: bool

    # Logging
    log_level: str
    log_file_path: str
    log_to_console: bool


def _compute_project_root() -> str:
    """Compute the project root directory."""
    module_real_path = os.path.realpath(__file__)
    package_dir = os.path.dirname(module_real_path)
    return os.path.abspath(os.path.join(package_dir, os.pardir))


def _load_dotenv_files(project_root: str) -> None:
    """Load the .env file from the project root, if there is one."""
    dotenv_path = os.path.join(project_root, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load and validate the YAML configuration file, falling back to defaults on any problem."""
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('LOCALIZER_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                jsonschema.validate(instance=loaded_config, schema=CONFIG_SCHEMA)
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except jsonschema.ValidationError as e:
        print(f"Error: Configuration file '{config_file}' does not match the expected schema: {e.message}",
              file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)
    except (OSError, IOError) as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {})
    log_level_str = log_config.get('log_level', 'INFO').upper()
    log_file_path = log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH)
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def load_app_config() -> LocalizerConfig:
    """
    Load application configuration from YAML file and environment variables.

    Returns:
        LocalizerConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    logger = _setup_logger_from_config(config)

    log_config = config.get('logging', {})
    missing_keys_file_path = os.environ.get(
        'MISSING_KEYS_FILE',
        config.get('missing_keys_file_path', DEFAULT_MISSING_KEYS_FILE)
    )
    if not os.path.isabs(missing_keys_file_path):
        missing_keys_file_path = os.path.join(project_root, missing_keys_file_path)

    dry_run = config.get('dry_run', False)
    if dry_run:
        logger.info("Running in dry-run mode, missing keys will only be logged")

    return LocalizerConfig(
        project_root=project_root,
        language_code=config.get('language_code', 'en'),
        missing_keys_file_path=missing_keys_file_path,
        record_missing_keys=config.get('record_missing_keys', True),
        dry_run=dry_run,
        log_level=log_config.get('log_level', 'INFO').upper(),
        log_file_path=log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH),
        log_to_console=log_config.get('log_to_console', True)
    )
