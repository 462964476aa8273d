"""JSON logging for the medical credential issuer.

Each record is one JSON object on stdout. Request-scoped fields passed via
``extra=`` are copied into the object when present.

Two guards keep identity data and key material out of the output:
- configured secrets are masked in messages and tracebacks
- httpx/httpcore request lines (which carry NPI query parameters such as
  practitioner names) are raised to WARNING
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

CONTEXT_FIELDS: tuple[str, ...] = (
    "request_id",
    "route",
    "method",
    "status",
    "remote_addr",
    "duration_ms",
)

QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "web3", "urllib3")

REDACTED = "[REDACTED]"


class SecretRedactingFilter(logging.Filter):
    """Masks known secret values wherever they would be rendered."""

    def __init__(self, secrets: Iterable[Optional[str]] = ()):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        for secret in self.secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        record.msg = self.redact(record.getMessage())
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        if record.exc_text:
            payload["exc_info"] = record.exc_text
        elif record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    secrets: Iterable[Optional[str]] = (),
):
    """Install JSON handlers on the root logger.

    Args:
        log_file: Optional path to an additional log file. Defaults to
            MEDCRED_LOG_FILE; no file handler when unset.
        log_level: Log level. Defaults to MEDCRED_LOG_LEVEL env var or 'INFO'.
        secrets: Values masked in every handler's output.
    """
    redactor = SecretRedactingFilter(secrets)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = log_file or os.getenv("MEDCRED_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a"))

    for handler in handlers:
        handler.setFormatter(JsonFormatter())
        handler.addFilter(redactor)

    root = logging.getLogger()
    log_level = (log_level or os.getenv("MEDCRED_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.handlers = handlers

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
