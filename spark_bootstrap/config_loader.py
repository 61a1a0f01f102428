# spark_bootstrap/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the bootstrap action.

Handles loading settings from Pydantic model defaults, environment variables,
an optional YAML settings file and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (SPARK_BOOTSTRAP_*, loaded by BaseSettings)
3. YAML Settings File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .config_models import DRIVER_LOG_LEVELS, AppSettings, BootstrapOptions

module_logger = logging.getLogger(__name__)

# argparse destinations that override AppSettings fields.
CLI_SETTINGS_OVERRIDES = ("log_prefix", "sentinel_path", "work_dir_parent")


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`.

    Nested dictionaries are merged key by key; None values in `overrides`
    never replace an existing value.
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


def read_settings_file(
    settings_file: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML settings file into a dictionary.

    A missing, unreadable or malformed file is logged and ignored, so the
    bootstrap still runs with defaults and environment values.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if not settings_file.is_file():
        logger_to_use.info(
            f"Settings file '{settings_file}' not found. Using defaults and environment variables."
        )
        return {}
    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML settings file '{settings_file}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read settings file '{settings_file}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Settings file '{settings_file}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.info(f"Loaded settings from {settings_file}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    settings_file: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads bootstrap settings with the precedence described in the module docstring.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        settings_file: Optional path to a YAML settings file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged values fail validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        current_values_dict = AppSettings().model_dump()
    except ValidationError as e:
        logger_to_use.error(f"Environment configuration is invalid: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    if settings_file:
        current_values_dict = _deep_update(
            current_values_dict, read_settings_file(Path(settings_file), logger_to_use)
        )

    if cli_args:
        cli_arg_dict = vars(cli_args)
        mapped_cli_values = {
            key: cli_arg_dict.get(key) for key in CLI_SETTINGS_OVERRIDES
        }
        current_values_dict = _deep_update(current_values_dict, mapped_cli_values)

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated bootstrap settings")
    return final_settings


def options_from_args(cli_args: argparse.Namespace) -> BootstrapOptions:
    """
    Build BootstrapOptions from parsed command-line arguments.

    Raises:
        SystemExit: If an option value is invalid.
    """
    try:
        options = BootstrapOptions(
            config_location=cli_args.config_location,
            requested_version=cli_args.requested_version or "",
            build_id=cli_args.build_id or "",
            install_ganglia=cli_args.install_ganglia,
            maximize_config=cli_args.maximize_config,
            user_jars_path=cli_args.user_jars_path,
            assembly_first=cli_args.assembly_first,
            driver_log_level=cli_args.driver_log_level,
            dynamic_allocation=cli_args.dynamic_allocation,
        )
    except ValidationError as e:
        module_logger.error(f"Invalid bootstrap options: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    if options.driver_log_level not in DRIVER_LOG_LEVELS:
        module_logger.warning(
            f"Driver log level '{options.driver_log_level}' is not one of "
            f"{', '.join(DRIVER_LOG_LEVELS)}; passing it to the installer unchanged."
        )
    return options
