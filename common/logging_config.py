# common/logging_config.py
# -*- coding: utf-8 -*-
"""
Centralized logging configuration for envup.

Console output is human readable by default. JSON-structured records can be
requested for the console (for log shippers in CI) and are always used for
the optional log file, so a long-running ``up`` leaves a parseable trail of
every stage and checkpoint.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

_RESERVED_RECORD_KEYS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Each record becomes one JSON object with timestamp, level, service,
    logger, message and source location. Values passed through ``extra=``
    are collected under ``"extra"``.
    """

    def __init__(self, service_name: str = "envup"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("HOSTNAME", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
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


def setup_logging(
    service_name: str = "envup",
    log_level: Optional[str] = None,
    log_format: str = "text",
    log_file_path: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Set up logging for the process.

    Args:
        service_name: Name reported in JSON records and used for the returned logger.
        log_level: Logging level name. Falls back to the LOG_LEVEL environment
            variable, then INFO. Unknown names also fall back to INFO.
        log_format: "text" for human-readable console output, "json" for
            structured console output.
        log_file_path: If given, JSON records are also written to this file.

    Returns:
        The service logger.
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")
    log_level = log_level.upper()

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    json_formatter = JSONFormatter(service_name)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    if log_format == "json":
        console_handler.setFormatter(json_formatter)
    else:
        console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": log_level,
            "log_format": log_format,
            "file_enabled": bool(log_file_path),
        },
    )
    return logger
