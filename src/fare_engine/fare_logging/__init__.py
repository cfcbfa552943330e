"""Logging module with structured formatters, PII filtering, and context management."""

from .context import ContextFilter, LogContext, log_context, log_quote_context
from .filters import DefaultCorrelationFilter, PIIFilter
from .formatters import DevFormatter, JSONFormatter
from .setup import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "log_context",
    "log_quote_context",
    "JSONFormatter",
    "DevFormatter",
    "PIIFilter",
    "DefaultCorrelationFilter",
    "LogContext",
    "ContextFilter",
]
