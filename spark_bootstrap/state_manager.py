# spark_bootstrap/state_manager.py
# -*- coding: utf-8 -*-
"""
Manages the sentinel marker that records a completed Spark install.
"""

import datetime
import logging
from pathlib import Path
from typing import Optional

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from spark_bootstrap import config as static_config
from spark_bootstrap.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def is_install_completed(app_settings: AppSettings) -> bool:
    """True if the sentinel marker exists."""
    return Path(app_settings.sentinel_path).exists()


def mark_install_completed(
    app_settings: AppSettings,
    ami_version: str = "",
    spark_version: str = "",
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Write the sentinel marker.

    The body is informational; only the file's existence is checked on later
    runs.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    sentinel = Path(app_settings.sentinel_path)
    sentinel.parent.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    sentinel.write_text(
        f"# Spark installed: {timestamp}\n"
        f"# Bootstrap version: {static_config.SCRIPT_VERSION}\n"
        f"# AMI version: {ami_version or 'unknown'}\n"
        f"# Spark version: {spark_version or 'unknown'}\n",
        encoding="utf-8",
    )
    log_bootstrap(
        f"{symbols.get('success', '✅')} Marked Spark install as completed: {sentinel}",
        "success",
        logger_to_use,
        app_settings,
    )
    return sentinel
