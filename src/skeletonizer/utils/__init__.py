"""Utility functions for skeletonizer.

This module provides utility functions including:

- Logging setup and configuration
- Batch statistics
"""

from skeletonizer.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
