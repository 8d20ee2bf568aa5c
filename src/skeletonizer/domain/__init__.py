"""Domain models for skeletonizer.

This module contains the value types the skeleton computation consumes and
produces. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of any file format

Key classes:
- Vec2, Vec3: Planar and lifted points
- Segment, Ray: Directed segment and half-line
- Polygon: Outer boundary with optional holes
- Subtree: One skeleton fragment (source, height, sinks)
- SkeletonResult: Subtrees and faces computed for one polygon
"""

from skeletonizer.domain.polygon import Polygon
from skeletonizer.domain.primitives import Ray, Segment, Vec2, Vec3
from skeletonizer.domain.skeleton import SkeletonResult, Subtree

__all__: list[str] = [
    # Primitives
    "Vec2",
    "Vec3",
    "Segment",
    "Ray",
    # Core types
    "Polygon",
    "Subtree",
    "SkeletonResult",
]
