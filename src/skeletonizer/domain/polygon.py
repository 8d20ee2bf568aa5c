"""Polygon input record.

A polygon is one outer boundary plus zero or more holes, each an ordered
sequence of points. This is the unit of work for the skeleton computation
and for batch processing.
"""

from dataclasses import dataclass, field
from typing import Any

from skeletonizer.domain.primitives import Vec2


@dataclass
class Polygon:
    """A simple polygon with optional holes.

    Designed for efficient serialization for parallel processing.

    Attributes:
        outer: Outer boundary points (counter-clockwise expected, either accepted)
        holes: Hole boundaries (clockwise expected, either accepted)
        name: Identifier used in logs and output documents
    """

    outer: list[Vec2]
    holes: list[list[Vec2]] = field(default_factory=list)
    name: str = ""

    def is_empty(self) -> bool:
        """Check if polygon has no boundary points.

        Returns:
            True if the outer boundary is empty
        """
        return len(self.outer) == 0

    def has_holes(self) -> bool:
        return len(self.holes) > 0

    @property
    def vertex_count(self) -> int:
        """Total number of boundary points across outer boundary and holes."""
        return len(self.outer) + sum(len(hole) for hole in self.holes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with name, outer and holes as nested coordinate lists
        """
        return {
            "name": self.name,
            "outer": [p.to_list() for p in self.outer],
            "holes": [[p.to_list() for p in hole] for hole in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with ``outer`` and optional ``holes`` and ``name``

        Returns:
            Polygon instance
        """
        return cls(
            outer=[Vec2.of(p) for p in data["outer"]],
            holes=[[Vec2.of(p) for p in hole] for hole in data.get("holes", [])],
            name=data.get("name", ""),
        )
