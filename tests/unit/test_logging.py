"""Tests for batch statistics and the processing logger."""

from pathlib import Path
from unittest.mock import Mock

from skeletonizer.utils import ProcessingLogger, ProcessingStats, configure_logging


class TestProcessingStats:
    """Tests for ProcessingStats."""

    def test_defaults(self):
        stats = ProcessingStats()
        assert stats.duration_seconds == 0.0
        assert stats.avg_duration_ms == 0.0
        assert stats.min_duration_ms == 0.0
        assert stats.max_duration_ms == 0.0

    def test_durations(self):
        stats = ProcessingStats(start_time=10.0, end_time=12.5, durations_ms=[1.0, 2.0, 6.0])
        assert stats.duration_seconds == 2.5
        assert stats.avg_duration_ms == 3.0
        assert stats.min_duration_ms == 1.0
        assert stats.max_duration_ms == 6.0


class TestProcessingLogger:
    """Tests for ProcessingLogger counters."""

    def test_complete_updates_counts(self):
        logger = Mock()
        processing_logger = ProcessingLogger(logger)

        processing_logger.log_polygon_complete(
            "block", subtree_count=2, face_count=4, duration_ms=3.0
        )

        stats = processing_logger.stats
        assert stats.processed_count == 1
        assert stats.subtree_count == 2
        assert stats.face_count == 4
        assert stats.durations_ms == [3.0]
        logger.info.assert_called_once()

    def test_skipped_and_errors(self):
        stats = ProcessingStats()
        processing_logger = ProcessingLogger(Mock(), stats)

        processing_logger.log_polygon_skipped("sliver", "collinear")
        processing_logger.log_polygon_error("block", ValueError("bad ring"))
        processing_logger.log_polygon_error(
            "yard", "LAV 3 is not active", error_type="TopologyError"
        )

        assert stats.skipped_count == 1
        assert stats.error_count == 2
        assert stats.errors == [("block", "bad ring"), ("yard", "LAV 3 is not active")]

    def test_cancelled(self):
        stats = ProcessingStats()
        ProcessingLogger(Mock(), stats).log_cancelled(processed_count=3, pending_count=7)
        assert stats.was_cancelled
        assert stats.cancelled_count == 7


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_writes_log_file(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        logger = configure_logging(log_file=log_file, console_level="ERROR")

        logger.warning("Polygon checked", polygon="block")

        assert log_file.exists()
        assert "Polygon checked" in log_file.read_text(encoding="utf-8")
