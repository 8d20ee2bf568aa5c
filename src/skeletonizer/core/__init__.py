"""Core skeleton logic for skeletonizer.

This module contains the straight skeleton engine:
- Geometric predicates and contour preparation
- Vertex store, active vertex lists and the shrinking polygon set
- Event generation, ordering and resolution
- Roof face reconstruction
- Parallel processing orchestration

Key functions and classes:
- skeleton: Compute the straight skeleton of a polygon with holes
- faces_from_skeleton: Trace roof faces from a skeleton
- skeleton_edges: Flatten a skeleton into segments
- SkeletonProcessor: Main orchestrator for document processing
"""

from skeletonizer.core.faces import faces_from_skeleton
from skeletonizer.core.processor import SkeletonProcessor, process_polygon
from skeletonizer.core.skeleton import merge_sources, skeleton, skeleton_edges

__all__ = [
    "SkeletonProcessor",
    "faces_from_skeleton",
    "merge_sources",
    "process_polygon",
    "skeleton",
    "skeleton_edges",
]
