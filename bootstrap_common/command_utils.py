# bootstrap_common/command_utils.py
# -*- coding: utf-8 -*-
"""
Running external commands (hadoop, the fetched installer scripts) and the
shared log helper used by every bootstrap module.
"""

import logging
import subprocess
from typing import Dict, List, Optional

from spark_bootstrap.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

# "success" has no logging level of its own and goes out at INFO.
_LEVEL_METHODS = {
    "debug": "debug",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Return the log symbols from the settings, or the defaults."""
    if app_settings is not None and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def log_bootstrap(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Log a bootstrap message.

    Args:
        message: Text to log, usually prefixed with one of the settings' symbols.
        level: "debug", "info", "success", "warning", "error" or "critical".
            Anything unrecognised is logged at info.
        current_logger: Logger to use. Defaults to the module logger.
        app_settings: Bootstrap settings. Accepted so every caller can pass the
            same arguments; the message is already formatted.
        exc_info: Attach the current exception's traceback.
    """
    target = current_logger if current_logger else module_logger
    log_method = getattr(target, _LEVEL_METHODS.get(level, "info"))
    log_method(message, exc_info=exc_info)


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Run a command without a shell and log what ran.

    Args:
        command: Program and arguments.
        app_settings: Settings providing the logging symbols.
        check: Raise CalledProcessError on a non-zero exit status.
        capture_output: Capture stdout/stderr; captured stdout is logged at debug.
        current_logger: Logger to use. Defaults to the module logger.
        cwd: Working directory for the command.
        env: Complete environment for the command. Defaults to the inherited one.

    Returns:
        The CompletedProcess.

    Raises:
        subprocess.CalledProcessError: Non-zero exit status and `check` is set.
        FileNotFoundError: The program does not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    printable = subprocess.list2cmdline(command)
    location = f" (in {cwd})" if cwd else ""

    log_bootstrap(
        f"{symbols.get('gear', '⚙️')} Executing: {printable}{location}",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=True,
            cwd=cwd,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_bootstrap(
            f"{symbols.get('error', '❌')} Command `{printable}` failed (rc {e.returncode}).",
            "error",
            logger_to_use,
            app_settings,
        )
        if e.stderr and e.stderr.strip():
            log_bootstrap(f"   stderr: {e.stderr.strip()}", "error", logger_to_use, app_settings)
        raise
    except FileNotFoundError as e:
        log_bootstrap(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise

    if capture_output and result.stdout and result.stdout.strip():
        log_bootstrap(f"   stdout: {result.stdout.strip()}", "debug", logger_to_use, app_settings)
    return result
