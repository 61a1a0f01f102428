# bootstrap_common/logging_config.py
# -*- coding: utf-8 -*-
"""
Logging configuration for the Spark bootstrap action.

Bootstrap actions run unattended at boot, so their stdout ends up in the EMR
bootstrap logs. This module configures a readable prefixed console format by
default, JSON lines on request, and an optional log file on the node.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

_RESERVED_RECORD_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "getMessage",
    "exc_info", "exc_text", "stack_info", "taskName", "message", "asctime",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as JSON with a timestamp, level, service name, logger,
    message, source location and any extra fields passed to the log call.
    """

    def __init__(self, service_name: str = "spark-bootstrap"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("HOSTNAME", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def resolve_log_level(log_level: Optional[str] = None) -> int:
    """
    Turn a level name into a logging level.

    Falls back to the LOGLEVEL environment variable, then INFO. Invalid names
    also give INFO.
    """
    level_str = (log_level or os.environ.get("LOGLEVEL", "INFO")).upper()
    level = getattr(logging, level_str, None)
    if not isinstance(level, int):
        print(
            f"Warning: Invalid log level '{level_str}'. Defaulting to INFO.",
            file=sys.stderr,
        )
        return logging.INFO
    return level


def setup_logging(
    log_prefix: str,
    log_level: Optional[str] = None,
    json_format: bool = False,
    log_file_path: Optional[str] = None,
    service_name: str = "spark-bootstrap",
) -> None:
    """
    Configure the root logger for a bootstrap run.

    Args:
        log_prefix: Prefix placed in front of every console line.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit console lines as JSON instead of text.
        log_file_path: If given, also log to this file as JSON lines.
        service_name: Service name recorded by the JSON formatter.
    """
    level = resolve_log_level(log_level)
    json_formatter = JSONFormatter(service_name)
    console_formatter = logging.Formatter(
        f"{log_prefix} %(asctime)s - [%(levelname)s] - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(json_formatter if json_format else console_formatter)
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)
