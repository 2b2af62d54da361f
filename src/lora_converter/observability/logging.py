"""Structured logging with per-run context using structlog and contextvars."""

import logging
import sys

import structlog

_configured = False

# Dependency loggers that would otherwise echo every request
NOISY_LOGGERS = ("httpx", "httpcore", "keyring")


def setup_structured_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """Configure structlog on top of stdlib logging, writing to stderr.

    stdout is reserved for the descriptor document.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines instead of console text
    """
    global _configured
    if _configured:
        return

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # Inject run context
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers = [stderr_handler]
    root.setLevel(getattr(logging, level.upper()))

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    _configured = True


def bind_run_context(artifact: str) -> None:
    """Bind the artifact path for all subsequent logs in this context."""
    structlog.contextvars.bind_contextvars(artifact=artifact)


def clear_run_context() -> None:
    """Clear run context after the run completes."""
    structlog.contextvars.clear_contextvars()


def get_run_logger(name: str = "lora_converter") -> structlog.stdlib.BoundLogger:
    """Get a structlog logger carrying the run context."""
    return structlog.get_logger(name)
