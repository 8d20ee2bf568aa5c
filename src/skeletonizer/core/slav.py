"""Shrinking polygon set (SLAV).

The SLAV owns every vertex and LAV of one skeleton computation, the list of
currently active LAVs, and the frozen list of original edges used to test
split candidates. Edge, peak and split events are resolved here.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from skeletonizer.config import GeometryConfig
from skeletonizer.core.events import EdgeEvent, Event, SplitEvent, next_event
from skeletonizer.core.geometry import approx_equal_vec
from skeletonizer.core.lav import LAV
from skeletonizer.core.vertex import LavId, VertexId, VertexStore
from skeletonizer.domain import Ray, Segment, Subtree, Vec2
from skeletonizer.exceptions import TopologyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OriginalEdge:
    """An input edge with the bisectors of its two endpoints.

    Attributes:
        edge: Edge of the input contour
        bisector_left: Bisector of the edge's start vertex
        bisector_right: Bisector of the edge's end vertex
    """

    edge: Segment
    bisector_left: Ray
    bisector_right: Ray


class SLAV:
    """All contours of one skeleton computation.

    Example:
        slav = SLAV([outer, hole])
        for lav_id in slav.active:
            ...
    """

    def __init__(
        self, contours: Sequence[Sequence[Vec2]], config: GeometryConfig | None = None
    ) -> None:
        """Build one LAV per normalized contour.

        Args:
            contours: Normalized contours, outer boundary first
            config: Geometry tolerances (defaults if None)
        """
        self.config = config or GeometryConfig()
        self.store = VertexStore()
        self.lavs: list[LAV] = []
        self.active: list[LavId] = []

        for contour in contours:
            lav = LAV.from_polygon(len(self.lavs), self.store, contour)
            self.lavs.append(lav)
            self.active.append(lav.id)

        edges = []
        for lav in self.lavs:
            for vertex_id in lav.iter_ids(self.store):
                vertex = self.store[vertex_id]
                prev = self.store[vertex.prev]
                edges.append(
                    OriginalEdge(Segment(prev.point, vertex.point), prev.bisector, vertex.bisector)
                )
        self.original_edges: tuple[OriginalEdge, ...] = tuple(edges)

    def __len__(self) -> int:
        return len(self.active)

    def live_vertices(self) -> list[VertexId]:
        """Vertex identities of every active LAV."""
        return [v for lav_id in self.active for v in self.lavs[lav_id].iter_ids(self.store)]

    def new_lav_from_chain(self, head: VertexId) -> LAV:
        lav = LAV.from_chain(len(self.lavs), self.store, head)
        self.lavs.append(lav)
        return lav

    def remove_lav(self, lav_id: LavId) -> None:
        """Drop a LAV from the active set.

        Raises:
            TopologyError: If the LAV is not active
        """
        try:
            self.active.remove(lav_id)
        except ValueError:
            raise TopologyError(f"LAV {lav_id} is not active") from None

    def invalidate(self, vertex_id: VertexId) -> None:
        """Mark a vertex as consumed and detach it from whatever LAV holds it."""
        vertex = self.store[vertex_id]
        vertex.valid = False
        if vertex.lav is not None:
            lav = self.lavs[vertex.lav]
            if lav.head == vertex_id:
                lav.head = vertex.next
            vertex.lav = None

    def is_outdated(self, event: Event) -> bool:
        """Whether a queued event no longer describes the live contours.

        Any consumed vertex outdates an event. An edge event is also outdated
        once a split has put another vertex between its two vertices.
        """
        store = self.store
        if not all(store[v].valid for v in event.vertices):
            return True
        return isinstance(event, EdgeEvent) and store[event.vertex_a].next != event.vertex_b

    def owner(self, vertex_id: VertexId) -> LAV:
        """Get the LAV a live vertex belongs to.

        Raises:
            TopologyError: If the vertex is detached
        """
        lav_id = self.store[vertex_id].lav
        if lav_id is None:
            raise TopologyError(f"live vertex {vertex_id} has no LAV")
        return self.lavs[lav_id]

    def handle_edge_event(self, event: EdgeEvent) -> tuple[Subtree | None, list[Event]]:
        """Resolve an edge event as a peak or a unify.

        Args:
            event: Edge event whose vertices are both valid

        Returns:
            Tuple of (emitted subtree, newly generated events)
        """
        store = self.store
        va = store[event.vertex_a]
        vb = store[event.vertex_b]
        lav = self.owner(event.vertex_a)
        sinks: list[Vec2] = []
        events: list[Event] = []

        if va.prev == vb.next:
            logger.debug(
                "Peak event at (%.4f, %.4f) height %.4f in LAV %d",
                event.intersection_point.x, event.intersection_point.y, event.distance, lav.id
            )
            self.remove_lav(lav.id)
            for vertex_id in lav.iter_ids(store):
                sinks.append(store[vertex_id].point)
                lav.invalidate(store, vertex_id)
        else:
            logger.debug(
                "Edge event at (%.4f, %.4f) height %.4f between %d and %d",
                event.intersection_point.x, event.intersection_point.y, event.distance,
                event.vertex_a, event.vertex_b
            )
            replacement = lav.unify(store, event.vertex_a, event.vertex_b, event.intersection_point)
            sinks.append(va.point)
            sinks.append(vb.point)
            follow_up = next_event(self, replacement)
            if follow_up is not None:
                events.append(follow_up)

        return Subtree(event.intersection_point, event.distance, sinks), events

    def find_opposite_pair(self, event: SplitEvent) -> tuple[VertexId, VertexId] | None:
        """Locate the live vertices bounding the edge a split event hits.

        ``x`` holds the opposite edge as its left edge and ``y`` is ``x.prev``.
        The split point must lie between ``y``'s and ``x``'s bisectors.

        Args:
            event: Split event being resolved

        Returns:
            Tuple of (x, y), or None if no live pair brackets the split point
        """
        store = self.store
        tolerance = self.config.relative_tolerance
        eps = self.config.epsilon
        point = event.intersection_point
        norm = event.opposite_edge.vec().normalize()

        for lav_id in self.active:
            for vertex_id in self.lavs[lav_id].iter_ids(store):
                vertex = store[vertex_id]
                if approx_equal_vec(
                    norm, vertex.edge_left.vec().normalize(), tolerance
                ) and approx_equal_vec(event.opposite_edge.src, vertex.edge_left.src, tolerance):
                    x, y = vertex_id, vertex.prev
                elif approx_equal_vec(
                    norm, vertex.edge_right.vec().normalize(), tolerance
                ) and approx_equal_vec(event.opposite_edge.src, vertex.edge_right.src, tolerance):
                    x, y = vertex.next, vertex_id
                else:
                    continue

                xx = store[x]
                yy = store[y]
                left = yy.bisector.direction.normalize().cross((point - yy.point).normalize())
                right = xx.bisector.direction.normalize().cross((point - xx.point).normalize())
                if left >= -eps and right <= eps:
                    return x, y
        return None

    def handle_split_event(self, event: SplitEvent) -> tuple[Subtree | None, list[Event]]:
        """Resolve a split event, splitting or merging LAVs.

        A split whose point is not bracketed by any live edge is abandoned
        silently; the symmetric edge event resolves that geometry instead.

        Args:
            event: Split event whose vertex is valid

        Returns:
            Tuple of (emitted subtree or None, newly generated events)
        """
        store = self.store
        v = store[event.vertex]
        v_lav = self.owner(event.vertex).id

        pair = self.find_opposite_pair(event)
        if pair is None:
            logger.debug(
                "Abandoned split event at (%.4f, %.4f) for vertex %d",
                event.intersection_point.x, event.intersection_point.y, event.vertex
            )
            return None, []
        x, y = pair

        logger.debug(
            "Split event at (%.4f, %.4f) height %.4f from vertex %d between %d and %d",
            event.intersection_point.x, event.intersection_point.y, event.distance,
            event.vertex, y, x
        )

        sinks = [v.point]

        v1 = store.create(event.intersection_point, v.edge_left, event.opposite_edge)
        store[v1].prev = v.prev
        store[v1].next = x
        store[v.prev].next = v1
        store[x].prev = v1

        v2 = store.create(event.intersection_point, event.opposite_edge, v.edge_right)
        store[v2].prev = y
        store[v2].next = v.next
        store[v.next].prev = v2
        store[y].next = v2

        x_lav = store[x].lav
        self.remove_lav(v_lav)
        if x_lav != v_lav:
            self.remove_lav(x_lav)
            new_lavs = [self.new_lav_from_chain(v1)]
        else:
            new_lavs = [self.new_lav_from_chain(v1), self.new_lav_from_chain(v2)]

        heads: list[VertexId] = []
        for lav in new_lavs:
            if lav.length > 2:
                self.active.append(lav.id)
                heads.append(lav.head)
            else:
                logger.debug("LAV %d collapsed into a line", lav.id)
                sinks.append(store[store[lav.head].next].point)
                for vertex_id in lav.iter_ids(store):
                    lav.invalidate(store, vertex_id)

        events: list[Event] = []
        for head in heads:
            follow_up = next_event(self, head)
            if follow_up is not None:
                events.append(follow_up)

        self.invalidate(event.vertex)

        return Subtree(event.intersection_point, event.distance, sinks), events
