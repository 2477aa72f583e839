# common/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for envup.

Handles loading settings from Pydantic model defaults, environment variables,
a YAML file and command-line overrides, applying this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (loaded by BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from common.config_models import AppSettings

module_logger = logging.getLogger(__name__)

CONFIG_FILE_DEFAULT = "envup.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update ``source`` with the non-None values of ``overrides``.

    Nested dictionaries are merged rather than replaced.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML configuration file into a dictionary.

    A missing file or a file that is not a YAML mapping yields an empty
    dictionary; the condition is logged rather than raised.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(config_file_path)

    if not path.is_file():
        logger_to_use.debug(
            f"Configuration file '{path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {path}")
    return yaml_data


def load_app_settings(
    cli_overrides: Optional[Dict[str, Any]] = None,
    config_file_path: Union[str, Path] = CONFIG_FILE_DEFAULT,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Build the effective AppSettings.

    Args:
        cli_overrides: Values given on the command line; None entries are ignored.
        config_file_path: Path to the YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    current_values_dict = AppSettings().model_dump()
    current_values_dict = _deep_update(
        current_values_dict,
        load_yaml_config(config_file_path, logger_to_use),
    )
    if cli_overrides:
        current_values_dict = _deep_update(current_values_dict, cli_overrides)

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated application settings")
    return final_settings
