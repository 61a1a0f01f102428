# bootstrap_common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions, such as backing up files and locating jars.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from spark_bootstrap.config_models import AppSettings

from .command_utils import get_symbols, log_bootstrap

module_logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".prev"


def backup_file(
    file_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy a file to '<file>.prev', replacing any earlier backup.

    Parameters:
        file_path (Path): The file to back up.
        app_settings (Optional[AppSettings]): Settings providing the logging symbols.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to the module logger.

    Returns:
        Optional[Path]: The backup path, or None if the file does not exist.

    Raises:
        OSError: If the copy fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not file_path.is_file():
        log_bootstrap(
            f"{symbols.get('info', 'ℹ️')} File {file_path} does not exist. No backup needed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return None

    backup_path = file_path.with_name(file_path.name + BACKUP_SUFFIX)
    shutil.copy2(file_path, backup_path)
    log_bootstrap(
        f"{symbols.get('success', '✅')} Backed up {file_path} to {backup_path}",
        "success",
        logger_to_use,
        app_settings,
    )
    return backup_path


def create_work_directory(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Create a fresh working directory with a random suffix.

    The directory is left in place after the run so the fetched scripts can be
    inspected.
    """
    logger_to_use = current_logger if current_logger else module_logger
    parent = Path(app_settings.work_dir_parent)
    parent.mkdir(parents=True, exist_ok=True)
    work_dir = Path(tempfile.mkdtemp(prefix="spark-bootstrap-", dir=parent))
    log_bootstrap(
        f"Created working directory: {work_dir}",
        "debug",
        logger_to_use,
        app_settings,
    )
    return work_dir


def find_first_file(directory: Path, pattern: str) -> Optional[Path]:
    """Return the first file in `directory` matching `pattern`, in name order."""
    if not directory.is_dir():
        return None
    matches = sorted(p for p in directory.glob(pattern) if p.is_file())
    return matches[0] if matches else None
