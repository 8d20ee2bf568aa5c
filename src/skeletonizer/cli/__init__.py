"""Command-line interface for skeletonizer.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for polygon processing
- Verbose/quiet output modes
- Listing and dry-run modes
- Detailed error reporting
"""

from skeletonizer.cli.app import cli

__all__ = ["cli"]
