from app_compiler.infra.observability.logging import (
    LogPerformance,
    get_logger,
    log_error,
    setup_logging,
)

__all__ = [
    "LogPerformance",
    "get_logger",
    "log_error",
    "setup_logging",
]
