"""Parallel processing orchestration for polygon documents.

This module coordinates skeleton computation for every polygon of a document.
A single skeleton is strictly sequential, so parallelism is applied across
independent polygons using ProcessPoolExecutor.

process_polygon is the unit of work shipped to worker processes; SkeletonProcessor
owns the document from load to save.
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from skeletonizer.config import FacesConfig, GeometryConfig, SkeletonizerSettings
from skeletonizer.core.faces import faces_from_skeleton
from skeletonizer.core.skeleton import prepare_contours, skeleton
from skeletonizer.domain import Polygon, SkeletonResult
from skeletonizer.exceptions import InvalidPolygonError
from skeletonizer.io import PolygonReader, ResultWriter
from skeletonizer.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_polygon(
    polygon_dict: dict[str, Any],
    geometry_dict: dict[str, Any],
    faces_dict: dict[str, Any],
) -> dict[str, Any]:
    """Compute the skeleton and roof faces of a single polygon.

    Runs in a worker process, so everything crosses the boundary as plain dicts.
    Failures are returned rather than raised.

    Args:
        polygon_dict: Serialized polygon (from Polygon.to_dict())
        geometry_dict: Serialized geometry configuration
        faces_dict: Serialized face reconstruction configuration

    Returns:
        One of:
        - Success: {"result": result_dict, "subtree_count": int, "face_count": int,
          "duration_ms": float}
        - Error: {"error": str, "error_type": str, "polygon_name": str,
          "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        polygon = Polygon.from_dict(polygon_dict)
        geometry = GeometryConfig(**geometry_dict)
        faces_config = FacesConfig(**faces_dict)

        try:
            subtrees = skeleton(polygon.outer, polygon.holes, geometry)
        except InvalidPolygonError as e:
            raise InvalidPolygonError(polygon.name, e.reason) from e

        faces = []
        if faces_config.enabled:
            faces = faces_from_skeleton(polygon.outer, subtrees, polygon.holes, geometry)

        result = SkeletonResult(name=polygon.name, subtrees=subtrees, faces=faces)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "result": result.to_dict(),
            "subtree_count": len(subtrees),
            "face_count": len(faces),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "error_type": type(e).__name__,
            "polygon_name": polygon_dict.get("name", "unknown"),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class SkeletonProcessor:
    """Orchestrates parallel skeleton computation for polygon documents.

    Polygons are loaded, filtered for degenerate outlines, skeletonized in
    worker processes and written back in document order.

    Example:
        settings = SkeletonizerSettings()
        processor = SkeletonProcessor(settings)
        stats = processor.process(
            input_path=Path("footprints.geojson"),
            output_path=Path("footprints-skeleton.json"),
            max_workers=4
        )
    """

    def __init__(self, config: SkeletonizerSettings) -> None:
        """Initialize processor with configuration.

        Args:
            config: Skeletonizer settings
        """
        self.config = config
        self.stats = ProcessingStats()
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )

    def filter_polygons(
        self, polygons: list[Polygon], processing_logger: ProcessingLogger
    ) -> list[Polygon]:
        """Drop polygons without at least 3 distinct outer points.

        Depending on ``processing.skip_invalid`` unusable polygons are either
        counted as skipped or as errors.

        Args:
            polygons: All polygons of the document
            processing_logger: Logger updating the run statistics

        Returns:
            Polygons worth processing, in document order
        """
        usable = []
        for polygon in polygons:
            if polygon.is_empty():
                processing_logger.log_polygon_skipped(polygon.name, "empty polygon")
                continue

            outer, _ = prepare_contours(polygon.outer, (), self.config.geometry)
            if len(outer) < 3:
                reason = f"outer boundary has {len(outer)} distinct points"
                if self.config.processing.skip_invalid:
                    processing_logger.log_polygon_skipped(polygon.name, reason)
                else:
                    processing_logger.log_polygon_error(
                        polygon.name, InvalidPolygonError(polygon.name, reason)
                    )
                continue

            usable.append(polygon)
        return usable

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Process a polygon document with parallel skeleton computation.

        Args:
            input_path: Path to input JSON or GeoJSON document
            output_path: Path for the result document (auto-generated if None)
            max_workers: Maximum worker processes (None = auto-detect)
            progress_callback: Optional callback(completed, total, polygon_name, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            PolygonLoadError: If the document cannot be read
            PolygonFormatError: If the document does not describe polygons
            PolygonSaveError: If the result document cannot be written
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = self.stats = ProcessingStats()
        stats.start_time = time.time()
        processing_logger = ProcessingLogger(self.logger, stats)

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        output_format = self.config.processing.output_format
        if output_path is None:
            output_path = ResultWriter.get_output_path(input_path, output_format)

        self.logger.info(
            "Starting document processing",
            input=str(input_path),
            output=str(output_path),
            max_workers=max_workers,
        )

        reader = PolygonReader(input_path)
        reader.load()
        polygons = list(reader.iter_polygons())

        self.logger.info(
            "Document loaded",
            format=reader.format,
            polygon_count=reader.polygon_count,
        )

        to_process = self.filter_polygons(polygons, processing_logger)

        self.logger.info(
            "Filtered polygons",
            total=len(polygons),
            to_process=len(to_process),
            skipped=stats.skipped_count,
        )

        results: list[SkeletonResult] = []
        if to_process:
            results = self._process_polygons_parallel(
                polygons=to_process,
                max_workers=max_workers,
                processing_logger=processing_logger,
                progress_callback=progress_callback,
            )
        else:
            self.logger.info("No polygons to process")

        writer = ResultWriter(output_path, output_format, self.config.faces.height_scale)
        writer.write(results)
        self.logger.info("Results saved", output=str(output_path), results=len(results))

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            subtrees=stats.subtree_count,
            faces=stats.face_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _process_polygons_parallel(
        self,
        polygons: list[Polygon],
        max_workers: int | None,
        processing_logger: ProcessingLogger,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> list[SkeletonResult]:
        """Process polygons in parallel using ProcessPoolExecutor.

        Args:
            polygons: Polygons to process
            max_workers: Maximum worker processes
            processing_logger: Logger updating the run statistics
            progress_callback: Optional callback(completed, total, polygon_name, success)
                for progress updates

        Returns:
            Successful results in document order
        """
        geometry_dict = self.config.geometry.model_dump()
        faces_dict = self.config.faces.model_dump()

        self.logger.info(
            "Starting parallel processing",
            polygon_count=len(polygons),
            max_workers=max_workers,
        )

        total = len(polygons)
        completed = 0
        results: dict[int, SkeletonResult] = {}
        pending_futures: dict[Future, int] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, polygon in enumerate(polygons):
                processing_logger.log_polygon_start(polygon.name, polygon.vertex_count)
                future = executor.submit(
                    process_polygon,
                    polygon.to_dict(),
                    geometry_dict,
                    faces_dict,
                )
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)
                    polygon_name = polygons[index].name
                    success = False

                    try:
                        outcome = future.result()

                        if "error" in outcome:
                            processing_logger.log_polygon_error(
                                polygon_name=outcome["polygon_name"],
                                error=outcome["error"],
                                error_type=outcome["error_type"],
                                traceback=outcome.get("traceback"),
                            )
                        else:
                            success = True
                            results[index] = SkeletonResult.from_dict(outcome["result"])
                            processing_logger.log_polygon_complete(
                                polygon_name=polygon_name,
                                subtree_count=outcome["subtree_count"],
                                face_count=outcome["face_count"],
                                duration_ms=outcome.get("duration_ms", 0.0),
                            )

                    except Exception as e:
                        # Worker died or the result could not be unpickled
                        processing_logger.log_polygon_error(
                            polygon_name=polygon_name,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, polygon_name, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()
                processing_logger.log_cancelled(completed, len(pending_futures))
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return [results[i] for i in sorted(results)]
