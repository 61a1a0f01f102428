# spark_bootstrap/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) output for the Spark bootstrap action.
"""

import logging
from typing import Optional

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from spark_bootstrap import aws_defaults
from spark_bootstrap import config as static_config
from spark_bootstrap.config_models import AppSettings, BootstrapOptions

module_logger = logging.getLogger(__name__)


def view_configuration(
    app_settings: AppSettings,
    options: BootstrapOptions,
    region: str = "",
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Displays the effective configuration: the bootstrap options from the CLI,
    the settings (CLI > YAML > ENV > Defaults) and the support locations that
    apply to `region` when the manifest leaves them blank.

    Returns:
        The text that was logged.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values:\n\n"
    config_text += "  Bootstrap options:\n"
    config_text += f"    Manifest location:           {options.config_location or '[region default]'}\n"
    config_text += f"    Requested Spark version:     {options.requested_version or '[first for AMI]'}\n"
    config_text += f"    Build id:                    {options.build_id or '[none]'}\n"
    config_text += f"    Install Ganglia:             {options.install_ganglia}\n"
    config_text += f"    Maximize config:             {options.maximize_config}\n"
    config_text += f"    User jars path:              {options.user_jars_path or '[none]'}\n"
    config_text += f"    Assembly jar first:          {options.assembly_first}\n"
    config_text += f"    Driver log level:            {options.driver_log_level}\n"
    config_text += f"    Dynamic allocation:          {options.dynamic_allocation}\n\n"

    config_text += "  Settings:\n"
    for name, value in app_settings.model_dump(exclude={"symbols"}).items():
        config_text += f"    {name + ':':<29}{value}\n"

    config_text += f"\n  Support locations for region '{region or 'unknown'}':\n"
    config_text += f"    Manifest:                    {aws_defaults.default_manifest_location(region, app_settings)}\n"
    config_text += f"    Ganglia script:              {aws_defaults.default_ganglia_script(region, app_settings)}\n"
    config_text += f"    Max-config script:           {aws_defaults.default_max_config_script(region, app_settings)}\n"
    config_text += f"    Scala binaries:              {aws_defaults.default_scala_location(region, app_settings)}\n\n"
    config_text += f"  Bootstrap version:             {static_config.SCRIPT_VERSION}\n"

    log_bootstrap(f"\n{config_text}", "info", logger_to_use, app_settings)
    return config_text
