"""Polygon document reader.

This module provides the PolygonReader class for loading polygon documents
and extracting polygons into domain models. Two document formats are
understood:

- Native JSON: ``{"polygons": [{"name": ..., "outer": [[x, y], ...], "holes": [...]}]}``
- GeoJSON: FeatureCollection, Feature, Polygon or MultiPolygon
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from skeletonizer.domain import Polygon, Vec2
from skeletonizer.exceptions import PolygonFormatError, PolygonLoadError

FORMAT_NATIVE = "native"
FORMAT_GEOJSON = "geojson"

GEOJSON_TYPES = ("FeatureCollection", "Feature", "Polygon", "MultiPolygon")


def _ring_to_points(ring: list[Any]) -> list[Vec2]:
    """Convert a GeoJSON linear ring, dropping its repeated closing point."""
    points = [Vec2(float(c[0]), float(c[1])) for c in ring]
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def geojson_to_polygons(document: dict[str, Any], base_name: str = "polygon") -> list[Polygon]:
    """Flatten a GeoJSON object into polygons.

    Features without a polygonal geometry are ignored. Polygons are named
    after ``properties.name`` when present, otherwise ``{base_name}-{index}``;
    MultiPolygon members get a ``.{part}`` suffix.

    Args:
        document: Parsed GeoJSON object
        base_name: Prefix for generated names

    Returns:
        Polygons in document order

    Raises:
        ValueError: If the object type is not supported
    """
    gtype = document.get("type")

    if gtype == "FeatureCollection":
        features = document.get("features", [])
    elif gtype == "Feature":
        features = [document]
    elif gtype in ("Polygon", "MultiPolygon"):
        features = [{"type": "Feature", "geometry": document, "properties": {}}]
    else:
        raise ValueError(f"Unsupported GeoJSON type: {gtype}")

    polygons: list[Polygon] = []
    for index, feature in enumerate(features):
        geometry = feature.get("geometry") or {}
        props = feature.get("properties") or {}
        name = str(props.get("name") or f"{base_name}-{index}")

        geometry_type = geometry.get("type")
        if geometry_type == "Polygon":
            parts = [geometry.get("coordinates", [])]
        elif geometry_type == "MultiPolygon":
            parts = geometry.get("coordinates", [])
        else:
            continue

        for part_index, rings in enumerate(parts):
            if not rings:
                continue
            part_name = name if len(parts) == 1 else f"{name}.{part_index}"
            polygons.append(
                Polygon(
                    outer=_ring_to_points(rings[0]),
                    holes=[_ring_to_points(ring) for ring in rings[1:]],
                    name=part_name,
                )
            )
    return polygons


class PolygonReader:
    """Loads polygon documents and extracts polygon data.

    Example:
        reader = PolygonReader(Path("footprints.geojson"))
        reader.load()
        for polygon in reader.iter_polygons():
            print(polygon.name)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the polygon reader.

        Args:
            path: Path to the JSON or GeoJSON document
        """
        self._path = path
        self._format: str | None = None
        self._polygons: list[Polygon] | None = None

    def load(self) -> None:
        """Load and parse the document.

        Raises:
            PolygonLoadError: If the file is missing or is not valid JSON
            PolygonFormatError: If the JSON does not describe polygons
        """
        if not self._path.exists():
            raise PolygonLoadError(str(self._path), "file not found")

        try:
            with open(self._path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PolygonLoadError(str(self._path), str(e)) from e

        if not isinstance(document, dict):
            raise PolygonFormatError(str(self._path), "top-level value must be an object")

        try:
            if "polygons" in document:
                self._format = FORMAT_NATIVE
                self._polygons = self._parse_native(document["polygons"])
            elif document.get("type") in GEOJSON_TYPES:
                self._format = FORMAT_GEOJSON
                self._polygons = geojson_to_polygons(document, base_name=self._path.stem)
            else:
                raise ValueError("expected a 'polygons' list or a GeoJSON object")
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise PolygonFormatError(str(self._path), str(e)) from e

    def _parse_native(self, entries: list[dict[str, Any]]) -> list[Polygon]:
        polygons = []
        for index, entry in enumerate(entries):
            polygon = Polygon.from_dict(entry)
            if not polygon.name:
                polygon.name = f"{self._path.stem}-{index}"
            polygons.append(polygon)
        return polygons

    @property
    def format(self) -> str:
        """Return the document format ('native' or 'geojson').

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._format is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        return self._format

    @property
    def polygon_count(self) -> int:
        """Return the number of polygons in the document.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._polygons is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        return len(self._polygons)

    def iter_polygons(self) -> Iterator[Polygon]:
        """Iterate over all polygons in document order.

        Yields:
            Polygon domain models

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._polygons is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        yield from self._polygons

    def get_polygon(self, name: str) -> Polygon | None:
        """Get a specific polygon by name.

        Args:
            name: Name of the polygon to retrieve

        Returns:
            Polygon domain model, or None if not found
        """
        for polygon in self.iter_polygons():
            if polygon.name == name:
                return polygon
        return None
