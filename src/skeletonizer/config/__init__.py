"""Configuration management for skeletonizer.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances for the skeleton predicates
- FacesConfig: Face reconstruction and export settings
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- SkeletonizerSettings: Main application settings
"""

from skeletonizer.config.settings import (
    FacesConfig,
    GeometryConfig,
    LoggingConfig,
    OutputFormat,
    ProcessingConfig,
    SkeletonizerSettings,
    get_default_settings,
)

__all__ = [
    "FacesConfig",
    "GeometryConfig",
    "LoggingConfig",
    "OutputFormat",
    "ProcessingConfig",
    "SkeletonizerSettings",
    "get_default_settings",
]
