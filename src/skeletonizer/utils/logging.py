"""Logging utilities for Skeletonizer."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    subtree_count: int = 0
    face_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    durations_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_duration_ms(self) -> float:
        if not self.durations_ms:
            return 0.0
        return sum(self.durations_ms) / len(self.durations_ms)

    @property
    def min_duration_ms(self) -> float:
        return min(self.durations_ms, default=0.0)

    @property
    def max_duration_ms(self) -> float:
        return max(self.durations_ms, default=0.0)


_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Rendered to JSON so log files can be filtered per polygon
_STRUCTLOG_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(),
]


def _level(name: str) -> int:
    return logging.getLevelName(name.upper())


def _attach(handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logging.getLogger().addHandler(handler)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Send structured logs to a file and plain messages to the console.

    Args:
        log_file: Log file path; a timestamped file in the working directory if None
        console_level: Minimum level shown on the console
        file_level: Minimum level written to the file
        quiet: Only errors reach the console

    Returns:
        Logger bound to the "skeletonizer" name
    """
    if log_file is None:
        log_file = Path(datetime.now().strftime("skeletonizer_%Y%m%d_%H%M%S.log"))

    logging.getLogger().setLevel(logging.DEBUG)
    _attach(logging.FileHandler(log_file, encoding="utf-8"), _level(file_level), _FILE_FORMAT)
    _attach(
        logging.StreamHandler(),
        logging.ERROR if quiet else _level(console_level),
        "%(message)s",
    )

    structlog.configure(
        processors=_STRUCTLOG_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("skeletonizer")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)
    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        stats: ProcessingStats | None = None,
    ) -> None:
        self._logger = logger
        self._stats = stats if stats is not None else ProcessingStats()

    def log_polygon_start(self, polygon_name: str, vertex_count: int) -> None:
        """Log start of polygon processing."""
        self._logger.debug("Processing polygon", polygon=polygon_name, vertices=vertex_count)

    def log_polygon_complete(
        self,
        polygon_name: str,
        subtree_count: int,
        face_count: int,
        duration_ms: float,
    ) -> None:
        """Log successful polygon processing."""
        self._logger.info(
            "Polygon processed",
            polygon=polygon_name,
            subtrees=subtree_count,
            faces=face_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.subtree_count += subtree_count
        self._stats.face_count += face_count
        self._stats.durations_ms.append(duration_ms)

    def log_polygon_skipped(self, polygon_name: str, reason: str) -> None:
        """Log skipped polygon."""
        self._logger.debug("Polygon skipped", polygon=polygon_name, reason=reason)
        self._stats.skipped_count += 1

    def log_polygon_error(
        self,
        polygon_name: str,
        error: Exception | str,
        error_type: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log polygon processing error."""
        self._logger.error(
            "Polygon processing failed",
            polygon=polygon_name,
            error=str(error),
            error_type=error_type or type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((polygon_name, str(error)))

    def log_cancelled(self, processed_count: int, pending_count: int) -> None:
        """Log a cancelled batch."""
        self._logger.warning(
            "Processing cancelled",
            processed=processed_count,
            pending=pending_count,
        )
        self._stats.was_cancelled = True
        self._stats.cancelled_count = pending_count

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
