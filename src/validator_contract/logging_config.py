"""
Structured JSON logging configuration.

Usage:
    from validator_contract.logging_config import setup_logging

    logger = setup_logging(level="DEBUG", log_file="/var/log/validator_contract.json")
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds timestamp, level, service and source location."""

    def __init__(
        self,
        fmt: str = "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name: str = "validator_contract",
    ):
        super().__init__(fmt=fmt)
        self.service_name = service_name

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "timestamp" not in log_record or not log_record["timestamp"]:
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        if "level" not in log_record or not log_record["level"]:
            log_record["level"] = record.levelname.lower()
        log_record["service"] = self.service_name
        log_record["source"] = {
            "function": record.funcName,
            "module": record.module,
            "line": record.lineno,
        }


def setup_logging(
    name: str = "validator_contract",
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure JSON logging for the package logger.

    Args:
        name: Logger name
        level: Logging level name
        log_file: Optional path of a rotating JSON log file
        enable_console: Whether to log to stderr
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    formatter = CustomJsonFormatter(service_name=name.split(".")[0])

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
