"""Shared utilities."""

from feed_reconciler.utils.decimal_utils import format_currency, parse_amount
from feed_reconciler.utils.logging_config import LogContext, get_logger, setup_logging

__all__ = [
    "format_currency",
    "parse_amount",
    "LogContext",
    "get_logger",
    "setup_logging",
]
