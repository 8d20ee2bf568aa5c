"""Tests for parallel processing orchestration."""

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from skeletonizer.config import FacesConfig, GeometryConfig, SkeletonizerSettings
from skeletonizer.core.processor import SkeletonProcessor, process_polygon
from skeletonizer.domain import Polygon, SkeletonResult, Vec2
from skeletonizer.utils import ProcessingLogger, ProcessingStats


@pytest.fixture
def rectangle() -> Polygon:
    """Create a 20x10 rectangular footprint."""
    return Polygon(
        outer=[Vec2(0, 0), Vec2(20, 0), Vec2(20, 10), Vec2(0, 10)],
        name="block",
    )


@pytest.fixture
def degenerate() -> Polygon:
    """Create a polygon whose points all lie on one line."""
    return Polygon(outer=[Vec2(0, 0), Vec2(5, 0), Vec2(10, 0)], name="sliver")


@pytest.fixture
def settings() -> SkeletonizerSettings:
    """Create test skeletonizer settings."""
    return SkeletonizerSettings()


def _mock_reader(polygons: list[Polygon]) -> Mock:
    reader = Mock()
    reader.format = "native"
    reader.polygon_count = len(polygons)
    reader.iter_polygons.return_value = polygons
    return reader


def _mock_executor(outcome: dict) -> tuple[MagicMock, MagicMock]:
    executor = MagicMock()
    future = MagicMock()
    future.result.return_value = outcome
    executor.submit.return_value = future
    executor.__enter__.return_value = executor
    executor.__exit__.return_value = None
    return executor, future


class TestProcessPolygon:
    """Tests for process_polygon function."""

    def test_process_rectangle(self, rectangle: Polygon):
        """Test processing a plain rectangle."""
        result = process_polygon(
            rectangle.to_dict(), GeometryConfig().model_dump(), FacesConfig().model_dump()
        )

        assert "error" not in result
        assert result["subtree_count"] == 2
        assert result["face_count"] == 4
        assert result["duration_ms"] >= 0

        # Verify the result can be deserialized
        restored = SkeletonResult.from_dict(result["result"])
        assert restored.name == "block"
        assert restored.max_height == 5.0

    def test_process_without_faces(self, rectangle: Polygon):
        result = process_polygon(
            rectangle.to_dict(),
            GeometryConfig().model_dump(),
            FacesConfig(enabled=False).model_dump(),
        )

        assert result["face_count"] == 0
        assert result["result"]["faces"] == []

    def test_process_degenerate_polygon(self, degenerate: Polygon):
        """Test that a collapsed polygon is reported with its name."""
        result = process_polygon(
            degenerate.to_dict(), GeometryConfig().model_dump(), FacesConfig().model_dump()
        )

        assert result["error_type"] == "InvalidPolygonError"
        assert result["polygon_name"] == "sliver"
        assert "sliver" in result["error"]
        assert "traceback" in result

    def test_process_handles_error(self):
        """Test that process_polygon handles malformed input gracefully."""
        result = process_polygon(
            {"name": "broken"}, GeometryConfig().model_dump(), FacesConfig().model_dump()
        )

        assert "error" in result
        assert result["polygon_name"] == "broken"
        assert "traceback" in result


class TestSkeletonProcessor:
    """Tests for SkeletonProcessor class."""

    def test_init(self, settings: SkeletonizerSettings):
        """Test SkeletonProcessor initialization."""
        with patch('skeletonizer.core.processor.configure_logging') as mock_logging:
            mock_logging.return_value = Mock()
            processor = SkeletonProcessor(settings)

            assert processor.config == settings
            mock_logging.assert_called_once()

    @patch('skeletonizer.core.processor.configure_logging')
    def test_filter_polygons(
        self,
        mock_logging,
        settings: SkeletonizerSettings,
        rectangle: Polygon,
        degenerate: Polygon,
    ):
        """Test that empty and degenerate polygons are skipped."""
        mock_logging.return_value = Mock()
        stats = ProcessingStats()
        processor = SkeletonProcessor(settings)

        usable = processor.filter_polygons(
            [rectangle, degenerate, Polygon(outer=[], name="empty")],
            ProcessingLogger(Mock(), stats),
        )

        assert usable == [rectangle]
        assert stats.skipped_count == 2
        assert stats.error_count == 0

    @patch('skeletonizer.core.processor.configure_logging')
    def test_filter_polygons_strict(
        self, mock_logging, settings: SkeletonizerSettings, degenerate: Polygon
    ):
        """Test that degenerate polygons count as errors when not skipped."""
        mock_logging.return_value = Mock()
        settings.processing.skip_invalid = False
        stats = ProcessingStats()
        processor = SkeletonProcessor(settings)

        usable = processor.filter_polygons([degenerate], ProcessingLogger(Mock(), stats))

        assert usable == []
        assert stats.error_count == 1
        assert stats.errors[0][0] == "sliver"

    @patch('skeletonizer.core.processor.PolygonReader')
    @patch('skeletonizer.core.processor.ResultWriter')
    @patch('skeletonizer.core.processor.configure_logging')
    def test_process_nothing_to_do(
        self,
        mock_logging,
        mock_writer_class,
        mock_reader_class,
        settings: SkeletonizerSettings,
        degenerate: Polygon,
    ):
        """Test processing a document with no usable polygons."""
        mock_logging.return_value = Mock()
        mock_reader_class.return_value = _mock_reader([degenerate])
        mock_writer = Mock()
        mock_writer_class.return_value = mock_writer
        mock_writer_class.get_output_path.return_value = Path("output.json")

        processor = SkeletonProcessor(settings)
        stats = processor.process(Path("input.json"))

        assert stats.processed_count == 0
        assert stats.skipped_count == 1
        assert stats.error_count == 0
        assert stats.duration_seconds >= 0
        mock_writer.write.assert_called_once_with([])

    @patch('skeletonizer.core.processor.PolygonReader')
    @patch('skeletonizer.core.processor.ResultWriter')
    @patch('skeletonizer.core.processor.configure_logging')
    @patch('skeletonizer.core.processor.ProcessPoolExecutor')
    def test_process_with_polygons(
        self,
        mock_executor_class,
        mock_logging,
        mock_writer_class,
        mock_reader_class,
        settings: SkeletonizerSettings,
        rectangle: Polygon,
    ):
        """Test processing a document with one usable polygon."""
        mock_logging.return_value = Mock()
        mock_reader_class.return_value = _mock_reader([rectangle])
        mock_writer = Mock()
        mock_writer_class.return_value = mock_writer
        mock_writer_class.get_output_path.return_value = Path("output.json")

        outcome = process_polygon(
            rectangle.to_dict(), settings.geometry.model_dump(), settings.faces.model_dump()
        )
        executor, future = _mock_executor(outcome)
        mock_executor_class.return_value = executor
        progress = Mock()

        # Mock as_completed to return futures immediately
        with patch('skeletonizer.core.processor.as_completed') as mock_as_completed:
            mock_as_completed.return_value = [future]

            processor = SkeletonProcessor(settings)
            stats = processor.process(
                Path("input.json"), max_workers=1, progress_callback=progress
            )

        assert stats.processed_count == 1
        assert stats.subtree_count == 2
        assert stats.face_count == 4
        assert stats.error_count == 0
        progress.assert_called_once_with(1, 1, "block", True)

        written = mock_writer.write.call_args[0][0]
        assert [r.name for r in written] == ["block"]

    @patch('skeletonizer.core.processor.PolygonReader')
    @patch('skeletonizer.core.processor.ResultWriter')
    @patch('skeletonizer.core.processor.configure_logging')
    @patch('skeletonizer.core.processor.ProcessPoolExecutor')
    def test_process_handles_errors(
        self,
        mock_executor_class,
        mock_logging,
        mock_writer_class,
        mock_reader_class,
        settings: SkeletonizerSettings,
        rectangle: Polygon,
    ):
        """Test that processing errors are handled gracefully."""
        mock_logging.return_value = Mock()
        mock_reader_class.return_value = _mock_reader([rectangle])
        mock_writer = Mock()
        mock_writer_class.return_value = mock_writer
        mock_writer_class.get_output_path.return_value = Path("output.json")

        # Mock executor to return error
        executor, future = _mock_executor(
            {
                "error": "LAV 0 is not active",
                "error_type": "TopologyError",
                "polygon_name": "block",
                "traceback": "Traceback...",
                "duration_ms": 1.0,
            }
        )
        mock_executor_class.return_value = executor

        with patch('skeletonizer.core.processor.as_completed') as mock_as_completed:
            mock_as_completed.return_value = [future]

            processor = SkeletonProcessor(settings)
            stats = processor.process(Path("input.json"), max_workers=1)

        assert stats.processed_count == 0
        assert stats.error_count == 1
        assert stats.errors == [("block", "LAV 0 is not active")]
        mock_writer.write.assert_called_once_with([])

    @patch('skeletonizer.core.processor.PolygonReader')
    @patch('skeletonizer.core.processor.ResultWriter')
    @patch('skeletonizer.core.processor.configure_logging')
    def test_process_custom_output_path(
        self,
        mock_logging,
        mock_writer_class,
        mock_reader_class,
        settings: SkeletonizerSettings,
    ):
        """Test that an explicit output path is passed to the writer."""
        mock_logging.return_value = Mock()
        mock_reader_class.return_value = _mock_reader([])

        processor = SkeletonProcessor(settings)
        processor.process(Path("input.json"), output_path=Path("custom.json"))

        mock_writer_class.assert_called_once()
        assert mock_writer_class.call_args[0][0] == Path("custom.json")
        mock_writer_class.get_output_path.assert_not_called()
