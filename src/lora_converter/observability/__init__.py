"""Observability module for structured run logging."""

from .logging import bind_run_context, clear_run_context, get_run_logger, setup_structured_logging

__all__ = [
    "bind_run_context",
    "clear_run_context",
    "get_run_logger",
    "setup_structured_logging",
]
