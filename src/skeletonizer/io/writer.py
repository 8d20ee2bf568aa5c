"""Result writer for skeleton documents.

This module provides the ResultWriter class for saving skeleton results as a
JSON document or as a Wavefront OBJ mesh of the roof faces.
"""

import json
from pathlib import Path
from typing import Any

from skeletonizer.config import OutputFormat
from skeletonizer.domain import SkeletonResult, Vec3
from skeletonizer.exceptions import PolygonSaveError


def _scale_face(face: list[Vec3], height_scale: float) -> list[Vec3]:
    return [Vec3(p.x, p.y, p.z * height_scale) for p in face]


def results_to_json(results: list[SkeletonResult], height_scale: float = 1.0) -> dict[str, Any]:
    """Build the JSON result document.

    Subtree heights are kept as computed; face heights are multiplied by
    ``height_scale``.

    Args:
        results: Per-polygon results
        height_scale: Roof pitch multiplier for faces

    Returns:
        Document of the form ``{"results": [{"name", "subtrees", "faces"}]}``
    """
    documents = []
    for result in results:
        data = result.to_dict()
        data["faces"] = [
            [p.to_list() for p in _scale_face(face, height_scale)] for face in result.faces
        ]
        documents.append(data)
    return {"results": documents}


def results_to_obj(results: list[SkeletonResult], height_scale: float = 1.0) -> str:
    """Build a Wavefront OBJ mesh with one object per polygon.

    Vertices are shared within an object; indices are global and 1-based as
    OBJ requires.

    Args:
        results: Per-polygon results
        height_scale: Roof pitch multiplier

    Returns:
        OBJ file content
    """
    lines = ["# skeletonizer roof faces"]
    offset = 0
    for result in results:
        if not result.faces:
            continue
        lines.append(f"o {result.name or 'polygon'}")
        indices: dict[Vec3, int] = {}
        face_lines = []
        for face in result.faces:
            refs = []
            for point in _scale_face(face, height_scale):
                if point not in indices:
                    indices[point] = offset + len(indices) + 1
                    lines.append(f"v {point.x:.6f} {point.y:.6f} {point.z:.6f}")
                refs.append(str(indices[point]))
            face_lines.append("f " + " ".join(refs))
        lines.extend(face_lines)
        offset += len(indices)
    return "\n".join(lines) + "\n"


class ResultWriter:
    """Saves skeleton results to disk.

    Example:
        writer = ResultWriter(Path("out-skeleton.json"))
        writer.write(results)
    """

    def __init__(
        self,
        output_path: Path,
        output_format: OutputFormat = OutputFormat.JSON,
        height_scale: float = 1.0,
    ) -> None:
        """Initialize the result writer.

        Args:
            output_path: Destination file
            output_format: JSON or OBJ
            height_scale: Roof pitch multiplier applied to face heights
        """
        self._output_path = output_path
        self._format = output_format
        self._height_scale = height_scale

    def write(self, results: list[SkeletonResult]) -> None:
        """Write the results.

        Args:
            results: Per-polygon results

        Raises:
            PolygonSaveError: If the file cannot be written
        """
        if self._format == OutputFormat.OBJ:
            content = results_to_obj(results, self._height_scale)
        else:
            content = json.dumps(results_to_json(results, self._height_scale), indent=2)

        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PolygonSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path, output_format: OutputFormat = OutputFormat.JSON) -> Path:
        """Generate output path with the skeleton suffix.

        Args:
            input_path: Path to the input document
            output_format: Output format, selects the extension

        Returns:
            Path to ``{stem}-skeleton.{json|obj}`` beside the input

        Examples:
            >>> ResultWriter.get_output_path(Path("city.geojson"))
            PosixPath('city-skeleton.json')
        """
        return input_path.parent / f"{input_path.stem}-skeleton.{output_format.value}"
