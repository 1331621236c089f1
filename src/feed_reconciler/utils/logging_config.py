"""Logging configuration for the feed reconciler."""

import logging
import re
import sys
import time
from pathlib import Path

DEFAULT_LOG_FILE = "feed_reconciler.log"

APP_LOGGER = "feed_reconciler"

# Context keys whose values never reach a log line
SENSITIVE_FIELDS = {'password', 'token', 'secret', 'api_key', 'webhook', 'webhook_url', 'mfa_code'}

# Credentials that can end up inside exception text (webhook URLs, API keys)
SECRET_PATTERNS = (
    re.compile(r"https://hooks\.slack\.com/services/[A-Za-z0-9/_-]+"),
    re.compile(r"sk-ant-[A-Za-z0-9_-]+"),
)

# Client libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("anthropic", "httpx", "httpcore", "urllib3")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def mask_secrets(text: str) -> str:
    """Replace webhook URLs and API keys in text with a placeholder."""
    for pattern in SECRET_PATTERNS:
        text = pattern.sub("***", text)
    return text


def _sanitize_context(context: dict[str, object]) -> dict[str, object]:
    return {k: '***' if k.lower() in SENSITIVE_FIELDS else v for k, v in context.items()}


class SecretMaskingFilter(logging.Filter):
    """Masks credentials in fully formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Configure logging for the application.

    Handlers are attached to the application logger only. HTTP client
    libraries are held at WARNING unless DEBUG is requested.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses DEFAULT_LOG_FILE.
        console_output: Whether to also log to stderr.

    Returns:
        The application logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    masking = SecretMaskingFilter()

    handlers: list[logging.Handler] = [
        logging.FileHandler(Path(log_file or DEFAULT_LOG_FILE), encoding="utf-8")
    ]
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        handler.addFilter(masking)
        logger.addHandler(handler)

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__).

    Returns:
        A logger nested under the application logger.
    """
    if name == APP_LOGGER or name.startswith(f"{APP_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER}.{name}")


class LogContext:
    """Context manager logging the start, duration and failure of an operation."""

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        """Initialize log context.

        Args:
            logger: Logger instance to use.
            operation: Name of the operation being performed.
            **context: Key/value pairs logged with the start message.
                Sensitive keys are masked.
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.started: float | None = None

    @property
    def elapsed(self) -> float:
        """Seconds since the operation started (0 before entry)."""
        if self.started is None:
            return 0.0
        return time.monotonic() - self.started

    def __enter__(self) -> "LogContext":
        sanitized = _sanitize_context(self.context)
        context_str = ", ".join(f"{k}={v}" for k, v in sanitized.items())
        self.logger.info(f"Starting {self.operation}: {context_str}")
        self.started = time.monotonic()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {self.elapsed:.1f}s: "
                f"{exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        else:
            self.logger.info(f"Completed {self.operation} in {self.elapsed:.1f}s")
        return False
