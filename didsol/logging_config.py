"""JSON logging configuration for the did:sol decoder and CLI."""

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in ("account", "opcode", "error_code"):
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    log_file: str = None,
    log_level: str = None,
):
    """Configure logging with JSON formatter.

    Logs go to stderr so CLI output on stdout stays machine-readable.

    Args:
        log_file: Optional path to an append-mode log file.
            Defaults to DIDSOL_LOG_FILE env var; no file handler when unset.
        log_level: Log level. Defaults to DIDSOL_LOG_LEVEL env var or 'INFO'.
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JsonFormatter())
    handlers = [console_handler]

    log_file = log_file or os.getenv("DIDSOL_LOG_FILE")
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    log_level = (log_level or os.getenv("DIDSOL_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.handlers = handlers
