"""Polygon document I/O layer for skeletonizer.

This module handles reading polygon documents and writing skeleton results.
It provides a clean abstraction layer between file formats and the domain
models.

Key responsibilities:
- Load native JSON and GeoJSON polygon documents
- Write results as JSON or Wavefront OBJ
- Output path derivation

Key classes:
- PolygonReader: Load documents and extract polygons
- ResultWriter: Save skeleton results
"""

from skeletonizer.io.reader import PolygonReader
from skeletonizer.io.writer import ResultWriter

__all__ = [
    "PolygonReader",
    "ResultWriter",
]
