"""
Structured Logging with structlog

Build progress and watch events are logged as structured events. Compiler
diagnostics are not logged; they are forwarded to the process streams as-is.
"""

import logging
import sys
import time
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars


def setup_logging(
    level: str = "INFO",
    format: str = "console",  # "json" or "console"
    include_timestamp: bool = True,
) -> None:
    """
    Setup structured logging for the build.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("console" for terminals, "json" for CI logs)
        include_timestamp: Include timestamp in logs
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Build logs go to stderr so compiler output on stdout stays readable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    shared_processors = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if include_timestamp:
        shared_processors.append(structlog.processors.TimeStamper(fmt="%H:%M:%S"))

    shared_processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )

    if format == "json":
        output_processors = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(),
            )
        ]

    structlog.configure(
        processors=shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("styles_written", path="app/styles.css")
        ```
    """
    return structlog.get_logger(name)


def log_error(
    logger: structlog.stdlib.BoundLogger,
    message: str,
    error: Exception | None = None,
    **extra: Any,
) -> None:
    """Log an error with consistent structure (error_type, error_message)."""
    error_data = extra.copy()

    if error:
        error_data.update(
            {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        )

    logger.error(message, **error_data)


class LogPerformance:
    """
    Context manager logging the start and completion of a build step.

    Emits ``<operation>_started`` on entry and ``<operation>_completed`` with
    ``elapsed_s`` on success, or ``<operation>_failed`` when the block raises.

    Example:
        ```python
        with LogPerformance(logger, "styles_build", files=3):
            await aggregate()
        # Logs: styles_build_completed elapsed_s=0.412 files=3
        ```
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **extra: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.start_time = 0.0

    @property
    def elapsed_s(self) -> float:
        return round(time.monotonic() - self.start_time, 3)

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.info(f"{self.operation}_started", **self.extra)
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        if exc_type is not None:
            log_error(
                self.logger,
                f"{self.operation}_failed",
                error=exc_val,
                elapsed_s=self.elapsed_s,
                **self.extra,
            )
        else:
            self.logger.info(f"{self.operation}_completed", elapsed_s=self.elapsed_s, **self.extra)

        # Don't suppress exceptions
        return False
