"""Roof face reconstruction from a straight skeleton.

The polygon boundary and the skeleton arcs form a planar straight-line graph.
Tracing that graph's faces yields one sloped face per input edge; lifting each
node to its skeleton height turns them into a roof ready for extrusion.
"""

import logging
import math
from collections.abc import Iterable, Sequence

from skeletonizer.config import GeometryConfig
from skeletonizer.core.geometry import is_point_at_infinity, window
from skeletonizer.core.skeleton import PointLike, prepare_contours
from skeletonizer.domain import Subtree, Vec2, Vec3

logger = logging.getLogger(__name__)

Graph = dict[Vec2, list[Vec2]]


def _connect(graph: Graph, a: Vec2, b: Vec2) -> None:
    if a == b:
        return
    neighbours = graph.setdefault(a, [])
    if b not in neighbours:
        neighbours.append(b)
    neighbours = graph.setdefault(b, [])
    if a not in neighbours:
        neighbours.append(a)


def build_graph(
    contours: Sequence[Sequence[Vec2]], subtrees: Sequence[Subtree]
) -> tuple[Graph, dict[Vec2, float]]:
    """Build the planar graph of boundary edges and skeleton arcs.

    Args:
        contours: Prepared boundary contours (outer first, then holes)
        subtrees: Skeleton subtrees

    Returns:
        Tuple of (adjacency lists sorted counter-clockwise, node heights)
    """
    graph: Graph = {}
    heights: dict[Vec2, float] = {}

    for contour in contours:
        for prev, point, _ in window(contour):
            _connect(graph, prev, point)
            heights[point] = 0.0

    for tree in subtrees:
        heights[tree.source] = tree.height
        for sink in tree.sinks:
            _connect(graph, tree.source, sink)

    for node, neighbours in graph.items():
        neighbours.sort(key=lambda p, r=node: math.atan2(p.y - r.y, p.x - r.x))

    return graph, heights


def _turn(graph: Graph, cur: Vec2, nxt: Vec2) -> Vec2:
    """Pick the neighbour of ``nxt`` immediately clockwise from ``cur``."""
    neighbours = graph[nxt]
    i = neighbours.index(cur)
    return neighbours[i - 1]


def trace_faces(graph: Graph, heights: dict[Vec2, float]) -> list[list[Vec3]]:
    """Walk every half-edge once, collecting the faces of a planar graph.

    Faces come out counter-clockwise; faces lying entirely at height 0 (the
    ground and hole floors) are discarded.

    Args:
        graph: Adjacency lists sorted counter-clockwise around each node
        heights: Node heights; missing nodes sit at 0

    Returns:
        Closed loops of lifted points
    """
    visited: set[tuple[Vec2, Vec2]] = set()
    faces: list[list[Vec3]] = []

    for node, neighbours in graph.items():
        for first in neighbours:
            if (node, first) in visited:
                continue

            face: list[Vec3] = []
            cur, nxt = node, first
            while True:
                visited.add((cur, nxt))
                face.append(cur.with_z(heights.get(cur, 0.0)))
                cur, nxt = nxt, _turn(graph, cur, nxt)
                if cur == node and nxt == first:
                    break

            if all(p.z == 0.0 for p in face):
                continue
            faces.append(face)

    return faces


def faces_from_skeleton(
    polygon: Iterable[PointLike],
    subtrees: Sequence[Subtree],
    holes: Iterable[Iterable[PointLike]] = (),
    config: GeometryConfig | None = None,
) -> list[list[Vec3]]:
    """Reconstruct roof faces from a polygon and its skeleton.

    The polygon and holes must be the same input given to ``skeleton`` so
    their normalized points coincide exactly with the skeleton's sinks.

    Args:
        polygon: Outer boundary points
        subtrees: Output of ``skeleton`` for the same input
        holes: Hole boundaries
        config: Geometry tolerances (defaults if None)

    Returns:
        Faces as closed loops of (x, y, height) points, or an empty list if
        any point is a point at infinity
    """
    config = config or GeometryConfig()
    outer, prepared_holes = prepare_contours(polygon, holes, config)
    contours = [outer, *prepared_holes]

    points = [p for contour in contours for p in contour]
    for tree in subtrees:
        points.append(tree.source)
        points.extend(tree.sinks)
    if any(is_point_at_infinity(p, config.infinity_threshold) for p in points):
        logger.debug("Point at infinity in skeleton, skipping face reconstruction")
        return []

    graph, heights = build_graph(contours, subtrees)
    faces = trace_faces(graph, heights)
    logger.debug("Traced %d faces from %d subtrees", len(faces), len(subtrees))
    return faces
