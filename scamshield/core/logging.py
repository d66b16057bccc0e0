"""
Structured logging for ScamShield.

Records are emitted as one JSON object per line. Phone numbers and email
addresses of users and their family members are masked on the way out:
fields known to hold contact details keep only a short suffix, and contact
details embedded in the message text are rewritten the same way.
"""

import logging
import json
import re
import sys
from datetime import datetime
from typing import Dict, Any, Optional


CONTEXT_FIELDS = ("correlation_id", "user_id", "contact_id", "risk_score")
CONTACT_FIELDS = frozenset({"phone", "phone_number", "recipient", "email"})

# Attributes present on every LogRecord; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "message", "asctime",
}) | frozenset(CONTEXT_FIELDS)

_PHONE_IN_TEXT_RE = re.compile(r"(?<![\w-])\+?\d(?:[ -]?\d){9,13}(?![\w-])")
_EMAIL_IN_TEXT_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")

VISIBLE_PHONE_DIGITS = 4


def mask_phone(phone: str) -> str:
    """``+919876543210`` becomes ``+91******3210``; short values are hidden entirely."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) <= VISIBLE_PHONE_DIGITS:
        return "*" * len(digits)
    prefix = "+" if phone.lstrip().startswith("+") else ""
    country = digits[:2] if prefix else ""
    hidden = len(digits) - len(country) - VISIBLE_PHONE_DIGITS
    return f"{prefix}{country}{'*' * hidden}{digits[-VISIBLE_PHONE_DIGITS:]}"


def mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"


def mask_contact(value: Any) -> Any:
    if not isinstance(value, str) or not value:
        return value
    return mask_email(value) if "@" in value else mask_phone(value)


def redact_contacts(text: str) -> str:
    """Mask every phone number and email address found in free text."""
    text = _EMAIL_IN_TEXT_RE.sub(lambda m: mask_email(m.group(0)), text)
    return _PHONE_IN_TEXT_RE.sub(lambda m: mask_phone(m.group(0)), text)


def _scrub(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _scrub(k, v) for k, v in value.items()}
    if key in CONTACT_FIELDS:
        return mask_contact(value)
    return value


class JSONFormatter(logging.Formatter):
    """JSON formatter masking contact details unless told otherwise."""

    def __init__(self, mask_contacts: bool = True):
        super().__init__()
        self.mask_contacts = mask_contacts

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        log_entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": redact_contacts(message) if self.mask_contacts else message,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = _scrub(key, value) if self.mask_contacts else value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", mask_contacts: bool = True) -> None:
    """Install the JSON handler on the root logger."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter(mask_contacts=mask_contacts))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Third-party noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextLogger:
    """Carries per-request fields such as ``user_id`` into every record."""

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        self.logger = logger
        self.context = context or {}

    def _log(self, level: int, message: str, exc_info=None, **fields):
        self.logger.log(level, message, exc_info=exc_info, extra={**self.context, **fields})

    def debug(self, message: str, **fields):
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self._log(logging.ERROR, message, **fields)

    def with_context(self, **context) -> "ContextLogger":
        return ContextLogger(self.logger, {**self.context, **context})
