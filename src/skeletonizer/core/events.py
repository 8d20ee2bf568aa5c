"""Skeleton events and the queue that orders them.

Each live vertex contributes at most one event to the queue: the nearest of
its edge candidates (its bisector meeting a neighbour's) and, for reflex
vertices, its split candidates (its bisector reaching an opposite edge).
"""

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skeletonizer.core.geometry import (
    approx_equal_vec,
    line_distance,
    line_intersection,
    ray_intersection,
)
from skeletonizer.core.vertex import VertexId
from skeletonizer.domain import Ray, Segment, Vec2

if TYPE_CHECKING:
    from skeletonizer.core.slav import SLAV


@dataclass(frozen=True, slots=True)
class EdgeEvent:
    """Bisectors of two LAV-adjacent vertices meet.

    Attributes:
        distance: Shrink distance at which the event happens
        intersection_point: Where the bisectors meet
        vertex_a: First vertex (``vertex_a.next == vertex_b`` when queued)
        vertex_b: Second vertex
    """

    distance: float
    intersection_point: Vec2
    vertex_a: VertexId
    vertex_b: VertexId

    @property
    def vertices(self) -> tuple[VertexId, ...]:
        return (self.vertex_a, self.vertex_b)


@dataclass(frozen=True, slots=True)
class SplitEvent:
    """A reflex vertex's bisector reaches a non-adjacent edge.

    Attributes:
        distance: Shrink distance at which the event happens
        intersection_point: Where the bisector meets the opposite edge's wavefront
        vertex: The reflex vertex
        opposite_edge: Original edge being hit
    """

    distance: float
    intersection_point: Vec2
    vertex: VertexId
    opposite_edge: Segment

    @property
    def vertices(self) -> tuple[VertexId, ...]:
        return (self.vertex,)


Event = EdgeEvent | SplitEvent


class EventQueue:
    """Min-priority queue of events ordered by shrink distance.

    NaN distances sort as +inf so they never preempt a real event; events with
    equal distance pop in insertion order.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Event]] = []
        self._counter = itertools.count()

    def push(self, event: Event) -> None:
        priority = math.inf if math.isnan(event.distance) else event.distance
        heapq.heappush(self._heap, (priority, next(self._counter), event))

    def extend(self, events: list[Event]) -> None:
        for event in events:
            self.push(event)

    def pop(self) -> Event:
        """Remove and return the nearest event.

        Raises:
            IndexError: If the queue is empty
        """
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


def split_candidates(slav: "SLAV", vertex_id: VertexId) -> list[SplitEvent]:
    """Find every opposite edge a reflex vertex's bisector can reach.

    For each original edge, the vertex edge less parallel to it is intersected
    with it; the bisector of the angle formed there is intersected with the
    vertex bisector to get a candidate point ``b``. The candidate survives only
    if ``b`` lies inside the wedge bounded by the edge's endpoint bisectors and
    on the inner side of the edge.

    Args:
        slav: Shrinking polygon set holding the original edges
        vertex_id: Vertex to generate candidates for

    Returns:
        Accepted split events, possibly empty
    """
    config = slav.config
    vertex = slav.store[vertex_id]
    events: list[SplitEvent] = []

    for original in slav.original_edges:
        edge = original.edge
        if edge == vertex.edge_left or edge == vertex.edge_right:
            continue

        edge_dir = edge.vec().normalize()
        left_dot = abs(vertex.edge_left.vec().normalize().dot(edge_dir))
        right_dot = abs(vertex.edge_right.vec().normalize().dot(edge_dir))
        self_edge = vertex.edge_left if left_dot < right_dot else vertex.edge_right

        i = line_intersection(self_edge, edge, config.parallel_epsilon)
        if i is None or approx_equal_vec(i, vertex.point, config.relative_tolerance):
            continue

        lin_vec = (vertex.point - i).normalize()
        ed_vec = edge_dir
        if lin_vec.dot(ed_vec) < 0.0:
            ed_vec = -ed_vec

        bisect_vec = ed_vec + lin_vec
        if bisect_vec.x == 0.0 and bisect_vec.y == 0.0:
            continue

        b = ray_intersection(Ray(i, bisect_vec), vertex.bisector, config.parallel_epsilon)
        if b is None:
            continue

        eps = config.epsilon
        left = (
            original.bisector_left.direction.normalize().cross(
                (b - original.bisector_left.origin).normalize()
            )
            > -eps
        )
        right = (
            original.bisector_right.direction.normalize().cross(
                (b - original.bisector_right.origin).normalize()
            )
            < eps
        )
        on_edge = edge_dir.cross((b - edge.src).normalize()) < eps

        if not (left and right and on_edge):
            continue

        events.append(SplitEvent(line_distance(edge, b), b, vertex_id, edge))

    return events


def next_event(slav: "SLAV", vertex_id: VertexId) -> Event | None:
    """Compute the single nearest upcoming event of a live vertex.

    Args:
        slav: Shrinking polygon set the vertex lives in
        vertex_id: Vertex to generate an event for

    Returns:
        The candidate whose point is closest to the vertex, or None if no
        candidate could be solved
    """
    store = slav.store
    parallel_epsilon = slav.config.parallel_epsilon
    vertex = store[vertex_id]

    candidates: list[Event] = []
    if vertex.is_reflex:
        candidates.extend(split_candidates(slav, vertex_id))

    i_prev = ray_intersection(vertex.bisector, store[vertex.prev].bisector, parallel_epsilon)
    if i_prev is not None:
        candidates.append(
            EdgeEvent(line_distance(vertex.edge_left, i_prev), i_prev, vertex.prev, vertex_id)
        )

    i_next = ray_intersection(vertex.bisector, store[vertex.next].bisector, parallel_epsilon)
    if i_next is not None:
        candidates.append(
            EdgeEvent(line_distance(vertex.edge_right, i_next), i_next, vertex_id, vertex.next)
        )

    best: Event | None = None
    best_distance2 = math.inf
    for candidate in candidates:
        d = vertex.point.distance2(candidate.intersection_point)
        if d < best_distance2:
            best_distance2 = d
            best = candidate
    return best
