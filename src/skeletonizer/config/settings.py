"""Configuration settings for Skeletonizer."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Result document format."""

    JSON = "json"
    OBJ = "obj"


class GeometryConfig(BaseModel):
    """Tolerances used by the skeleton predicates.

    Input coordinates are used as given; the relative tolerance makes point
    equality independent of the coordinate scale.
    """

    relative_tolerance: float = Field(
        default=0.001,
        gt=0.0,
        le=0.1,
        description="Relative componentwise tolerance for point and direction equality",
    )
    epsilon: float = Field(
        default=1e-5,
        gt=0.0,
        le=0.01,
        description="Slack for half-plane tests on unit vectors",
    )
    parallel_epsilon: float = Field(
        default=1e-10,
        gt=0.0,
        le=1e-3,
        description="Relative determinant below which two directions are parallel",
    )
    infinity_threshold: float = Field(
        default=1e10,
        gt=0.0,
        description="Squared magnitude above which a point is a point at infinity",
    )
    max_events_per_vertex: int = Field(
        default=200,
        ge=10,
        description="Event budget per input vertex before the event loop gives up",
    )

    def event_budget(self, vertex_count: int) -> int:
        """Get the maximum number of events popped for a polygon.

        Args:
            vertex_count: Number of vertices after normalization

        Returns:
            Event budget for the driving loop
        """
        return max(1000, self.max_events_per_vertex * vertex_count)


class FacesConfig(BaseModel):
    """Configuration for roof face reconstruction and export."""

    enabled: bool = Field(
        default=True,
        description="Reconstruct faces from the skeleton",
    )
    height_scale: float = Field(
        default=1.0,
        gt=0.0,
        le=100.0,
        description="Multiplier applied to heights when exporting faces (roof pitch)",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    skip_invalid: bool = Field(
        default=True,
        description="Skip polygons with fewer than 3 points instead of reporting errors",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.JSON,
        description="Result document format",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SkeletonizerSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    faces: FacesConfig = Field(default_factory=FacesConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> SkeletonizerSettings:
    """Get default application settings."""
    return SkeletonizerSettings()
