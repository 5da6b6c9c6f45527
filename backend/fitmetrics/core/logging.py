"""
Structured logging configuration.
Designed for easy debugging without dumping whole record batches.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional

import structlog
from structlog.types import Processor

from fitmetrics.core.config import settings

HANDLER_NAME = "fitmetrics"


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structured logging for the application.

    Safe to call more than once; the handler from an earlier call is replaced.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    handler.set_name(HANDLER_NAME)

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Computation Tracking
# ========================================

@dataclass
class ComputationLog:
    """Log entry for a single analytics computation."""
    call_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    operation: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    # Input size
    batch_size: int = 0

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    # Status
    success: bool = True
    not_found: bool = False
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class ComputationTracker:
    """Tracker for a single calculator operation."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.log = ComputationLog(operation=operation, context=context)

    def start(self) -> None:
        """Mark the start of the computation."""
        self.log.start_time = time.perf_counter()
        self.logger.debug(
            "Computation started",
            call_id=self.log.call_id,
            operation=self.log.operation,
            **self.log.context,
        )

    def add_batch(self, records: Any) -> None:
        """Record the size of a fetched batch."""
        self.log.batch_size += len(records)

    def set_not_found(self) -> None:
        """Mark the subject of the computation as unresolved."""
        self.log.not_found = True

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the computation and log summary."""
        self.log.end_time = time.perf_counter()
        self.log.duration_ms = (self.log.end_time - self.log.start_time) * 1000

        if self.log.success:
            self.logger.info(
                "Computation completed",
                call_id=self.log.call_id,
                operation=self.log.operation,
                duration_ms=round(self.log.duration_ms, 2),
                batch_size=self.log.batch_size,
                not_found=self.log.not_found,
                **self.log.context,
            )
        else:
            self.logger.warning(
                "Computation failed",
                call_id=self.log.call_id,
                operation=self.log.operation,
                duration_ms=round(self.log.duration_ms, 2),
                error_type=self.log.error_type,
                error_message=self.log.error_message,
                **self.log.context,
            )


@contextmanager
def track_computation(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    **context: Any,
) -> Generator[ComputationTracker, None, None]:
    """
    Context manager for tracking a calculator operation.

    Usage:
        with track_computation(logger, "streak", username=username) as tracker:
            records = await source.personal_workouts(user_id)
            tracker.add_batch(records)
            ...
    """
    tracker = ComputationTracker(logger, operation, **context)
    tracker.start()
    try:
        yield tracker
    except Exception as e:
        tracker.set_error(type(e).__name__, str(e))
        raise
    finally:
        tracker.finish()
