import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

SYNC_LOGGER_NAME = "widget_sync"


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        log_dir: Directory for log files (defaults to ./logs)
    """
    level = getattr(logging, log_level.upper())

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            # JSON formatting for file logs
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_to_file:
        logs_dir = Path(log_dir) if log_dir is not None else Path("logs")
        logs_dir.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "app.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        app_handler.setLevel(logging.INFO)
        app_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(app_handler)

        # Widget sync gets its own file; renderer issues are debugged from it
        sync_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "widget_sync.log", maxBytes=5 * 1024 * 1024, backupCount=5  # 5MB
        )
        sync_handler.setLevel(logging.DEBUG)
        sync_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        sync_logger = logging.getLogger(SYNC_LOGGER_NAME)
        for handler in list(sync_logger.handlers):
            sync_logger.removeHandler(handler)
            handler.close()
        sync_logger.addHandler(sync_handler)
        sync_logger.propagate = True

        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "errors.log", maxBytes=5 * 1024 * 1024, backupCount=10  # 5MB
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(error_handler)


def get_sync_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Get a structured logger for the widget sync bridge."""
    return structlog.get_logger(name or SYNC_LOGGER_NAME)


def log_sync_error(
    error: Exception,
    context: Dict[str, Any],
    logger: Optional[structlog.BoundLogger] = None,
) -> None:
    """Log a failed widget sync with its context.

    Context must not carry affirmation text.
    """
    if logger is None:
        logger = get_sync_logger()

    logger.error(
        "Widget sync failed",
        error_type=type(error).__name__,
        error_message=str(error),
        **context,
    )


class SyncLogContext:
    """Times one sync and logs its outcome.

    Exceptions are logged and re-raised; the caller decides whether to
    swallow them.
    """

    def __init__(self, operation: str, logger: Optional[structlog.BoundLogger] = None, **context):
        self.operation = operation
        self.context = context
        self.logger = logger or get_sync_logger()
        self.start_time: Optional[float] = None

    def __enter__(self) -> "SyncLogContext":
        self.start_time = time.monotonic()
        self.logger.debug(f"{self.operation} - START", **self.context)
        return self

    def add(self, **details: Any) -> None:
        self.context.update(details)

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed = time.monotonic() - self.start_time
        if exc_type is not None:
            log_sync_error(
                exc_val,
                {"operation": self.operation, "duration_seconds": elapsed, **self.context},
                self.logger,
            )
        else:
            self.logger.info(
                f"{self.operation} - done",
                duration_seconds=elapsed,
                **self.context,
            )
        return False
