"""
Logging Configuration with Correlation ID Support

This module provides:
1. A context variable holding the current request's correlation ID
2. A filter that stamps the correlation ID on every record
3. A filter that redacts Klaviyo credentials before anything is emitted
"""
import logging
import re
import uuid
from contextvars import ContextVar
from typing import Optional, Union

# Works across asyncio tasks: each request sees its own value
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# "Klaviyo-API-Key pk_abc123" or a bare private key
_CREDENTIAL_PATTERNS = [
    re.compile(r"(Klaviyo-API-Key\s+)\S+"),
    re.compile(r"\bpk_[A-Za-z0-9]+"),
]
REDACTED = "***"


def get_correlation_id() -> Optional[str]:
    """Get the current request's correlation ID."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set the correlation ID for the current request.
    If not provided, generates a new one (req-xxxxxxxx).

    Returns the correlation ID that was set.
    """
    if correlation_id is None:
        correlation_id = f"req-{uuid.uuid4().hex[:8]}"
    correlation_id_var.set(correlation_id)
    return correlation_id


def mask_credentials(text: str) -> str:
    """Replace any Klaviyo key found in text with a fixed marker."""
    masked = _CREDENTIAL_PATTERNS[0].sub(lambda m: m.group(1) + REDACTED, text)
    return _CREDENTIAL_PATTERNS[1].sub(REDACTED, masked)


class CorrelationIdFilter(logging.Filter):
    """Adds correlation_id to log records so the formatter can print it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-request"
        return True


class CredentialMaskingFilter(logging.Filter):
    """
    Rewrites the rendered message with credentials masked.

    Upstream error bodies are logged verbatim, and some of them echo the
    Authorization header back, so masking happens at the handler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_credentials(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure the root logger with a single stream handler.

    Format: timestamp | [correlation id] | logger | level | message
    """
    log_format = "%(asctime)s | [%(correlation_id)s] | %(name)s | %(levelname)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    handler.addFilter(CorrelationIdFilter())
    handler.addFilter(CredentialMaskingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicate logs
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)

    # Route uvicorn's loggers through the same handler
    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers = []
        uvicorn_logger.addHandler(handler)
