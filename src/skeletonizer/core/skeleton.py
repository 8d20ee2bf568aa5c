"""Straight skeleton computation.

The boundary of a polygon is shrunk inward at uniform speed. Every time two
vertices meet (edge event), a reflex vertex hits an opposite edge (split
event), or a contour collapses to a point (peak event), a subtree is emitted
recording where the bisectors converged and at which height.
"""

import logging
from collections.abc import Iterable, Sequence

from skeletonizer.config import GeometryConfig
from skeletonizer.core.events import EdgeEvent, EventQueue, next_event
from skeletonizer.core.geometry import prepare_contour
from skeletonizer.core.slav import SLAV
from skeletonizer.domain import Segment, Subtree, Vec2
from skeletonizer.exceptions import InvalidPolygonError

logger = logging.getLogger(__name__)

PointLike = Vec2 | tuple[float, float]


def prepare_contours(
    polygon: Iterable[PointLike],
    holes: Iterable[Iterable[PointLike]] = (),
    config: GeometryConfig | None = None,
) -> tuple[list[Vec2], list[list[Vec2]]]:
    """Orient and normalize an outer boundary and its holes.

    Holes reduced below 3 points are dropped.

    Args:
        polygon: Outer boundary in either winding
        holes: Hole boundaries in either winding
        config: Geometry tolerances (defaults if None)

    Returns:
        Tuple of (outer contour, hole contours), ready for LAV construction
    """
    config = config or GeometryConfig()
    outer = prepare_contour(polygon, True, config.relative_tolerance)
    prepared_holes = []
    for hole in holes:
        contour = prepare_contour(hole, False, config.relative_tolerance)
        if len(contour) < 3:
            logger.debug("Dropping degenerate hole with %d points", len(contour))
            continue
        prepared_holes.append(contour)
    return outer, prepared_holes


def merge_sources(subtrees: list[Subtree]) -> list[Subtree]:
    """Merge subtrees that share exactly the same source point.

    Highly symmetric shapes make several events converge on one location.
    The first subtree at a location keeps its position and receives the
    missing sinks of the later ones.

    Args:
        subtrees: Subtrees in emission order

    Returns:
        Merged subtrees, in order of first occurrence
    """
    by_source: dict[Vec2, Subtree] = {}
    for tree in subtrees:
        kept = by_source.get(tree.source)
        if kept is None:
            by_source[tree.source] = Subtree(tree.source, tree.height, list(tree.sinks))
            continue
        for sink in tree.sinks:
            if sink not in kept.sinks:
                kept.sinks.append(sink)
    return list(by_source.values())


def skeleton(
    polygon: Iterable[PointLike],
    holes: Iterable[Iterable[PointLike]] = (),
    config: GeometryConfig | None = None,
) -> list[Subtree]:
    """Compute the straight skeleton of a polygon with optional holes.

    The polygon should be simple and the holes should lie strictly inside it;
    other input gives meaningless but finite output.

    Args:
        polygon: Outer boundary points (counter-clockwise with y up; the
            winding is corrected if needed)
        holes: Hole boundaries
        config: Geometry tolerances (defaults if None)

    Returns:
        Skeleton subtrees (source, height, sinks)

    Raises:
        InvalidPolygonError: If the outer boundary has fewer than 3 distinct points
        TopologyError: If LAV maintenance reaches an impossible state
    """
    config = config or GeometryConfig()
    outer, prepared_holes = prepare_contours(polygon, holes, config)
    if len(outer) < 3:
        raise InvalidPolygonError("", f"outer boundary has {len(outer)} distinct points")

    slav = SLAV([outer, *prepared_holes], config)
    vertex_count = len(slav.store)
    budget = config.event_budget(vertex_count)

    queue = EventQueue()
    for lav_id in slav.active:
        for vertex_id in slav.lavs[lav_id].iter_ids(slav.store):
            event = next_event(slav, vertex_id)
            if event is not None:
                queue.push(event)

    output: list[Subtree] = []
    popped = 0
    while queue and slav.active:
        if popped >= budget:
            logger.warning(
                "Event budget of %d exhausted with %d events queued, returning partial skeleton",
                budget, len(queue)
            )
            break
        popped += 1

        event = queue.pop()
        if slav.is_outdated(event):
            logger.debug("Discarded outdated event at height %.4f", event.distance)
            continue

        if isinstance(event, EdgeEvent):
            subtree, events = slav.handle_edge_event(event)
        else:
            subtree, events = slav.handle_split_event(event)

        queue.extend(events)
        if subtree is not None:
            output.append(subtree)

    logger.debug(
        "Skeleton of %d vertices finished after %d events with %d subtrees, %d vertices live",
        vertex_count, popped, len(output), slav.store.live_count()
    )
    return merge_sources(output)


def skeleton_edges(subtrees: Sequence[Subtree]) -> list[Segment]:
    """Flatten subtrees into source-to-sink segments.

    Args:
        subtrees: Skeleton subtrees

    Returns:
        One segment per (source, sink) pair, self-loops excluded
    """
    return [
        Segment(tree.source, sink)
        for tree in subtrees
        for sink in tree.sinks
        if sink != tree.source
    ]
