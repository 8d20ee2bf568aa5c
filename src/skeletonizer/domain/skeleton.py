"""Skeleton output records.

This module defines what a skeleton computation emits:
- Subtree: one convergence point of the shrinking boundary and the points feeding it
- SkeletonResult: the subtrees and reconstructed roof faces of one polygon
"""

from dataclasses import dataclass, field
from typing import Any

from skeletonizer.domain.primitives import Vec2, Vec3


@dataclass
class Subtree:
    """One fragment of a straight skeleton.

    The full skeleton is an unordered collection of subtrees. Each sink is
    joined to the source by a skeleton arc.

    Attributes:
        source: Point where one or more bisectors converge
        height: Shrink distance at which the convergence happens
        sinks: Points whose bisectors end at the source
    """

    source: Vec2
    height: float
    sinks: list[Vec2] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with source, height and sinks
        """
        return {
            "source": self.source.to_list(),
            "height": self.height,
            "sinks": [s.to_list() for s in self.sinks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subtree":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a subtree

        Returns:
            Subtree instance
        """
        return cls(
            source=Vec2.of(data["source"]),
            height=float(data["height"]),
            sinks=[Vec2.of(s) for s in data["sinks"]],
        )


@dataclass
class SkeletonResult:
    """Skeleton and roof faces computed for one named polygon.

    Attributes:
        name: Name of the polygon the result belongs to
        subtrees: Skeleton subtrees
        faces: Closed 3D loops, empty when faces were not requested or
            reconstruction was aborted
    """

    name: str
    subtrees: list[Subtree]
    faces: list[list[Vec3]] = field(default_factory=list)

    @property
    def max_height(self) -> float:
        """Highest subtree height, 0.0 for an empty skeleton."""
        return max((tree.height for tree in self.subtrees), default=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "subtrees": [tree.to_dict() for tree in self.subtrees],
            "faces": [[p.to_list() for p in face] for face in self.faces],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkeletonResult":
        return cls(
            name=data["name"],
            subtrees=[Subtree.from_dict(t) for t in data["subtrees"]],
            faces=[[Vec3.from_list(p) for p in face] for face in data.get("faces", [])],
        )
