"""Active vertex lists (LAVs).

A LAV is one shrinking contour: a circular doubly-linked chain of live
vertices threaded through a ``VertexStore`` by identity. The LAV itself only
records its head and live length.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from skeletonizer.core.geometry import window
from skeletonizer.core.vertex import LavId, VertexId, VertexStore
from skeletonizer.domain import Segment, Vec2
from skeletonizer.exceptions import TopologyError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LAV:
    """One shrinking contour.

    Attributes:
        id: Identity of this LAV in its SLAV's arena
        head: Any live vertex of the chain, None once collapsed
        length: Number of live vertices in the chain
    """

    id: LavId
    head: VertexId | None = None
    length: int = 0

    def iter_ids(self, store: VertexStore) -> list[VertexId]:
        """Collect the chain's vertex identities starting at the head.

        The identities are collected eagerly so callers may invalidate
        vertices while looping over the result.

        Args:
            store: Vertex arena the chain lives in

        Returns:
            Vertex identities in ``next`` order

        Raises:
            TopologyError: If the chain is broken or never returns to the head
        """
        if self.head is None:
            return []

        ids = [self.head]
        current = store[self.head].next
        while current != self.head:
            if current is None or len(ids) > len(store):
                raise TopologyError(f"LAV {self.id} chain does not close at vertex {self.head}")
            ids.append(current)
            current = store[current].next
        return ids

    @classmethod
    def from_polygon(cls, lav_id: LavId, store: VertexStore, contour: Sequence[Vec2]) -> "LAV":
        """Create vertices for a normalized contour and link them into a LAV.

        Args:
            lav_id: Identity for the new LAV
            store: Vertex arena receiving the new vertices
            contour: Normalized contour points

        Returns:
            New LAV owning one vertex per contour point
        """
        lav = cls(id=lav_id)
        for prev, point, nxt in window(contour):
            vertex_id = store.create(point, Segment(prev, point), Segment(point, nxt))
            vertex = store[vertex_id]
            vertex.lav = lav_id
            if lav.head is None:
                lav.head = vertex_id
                vertex.prev = vertex_id
                vertex.next = vertex_id
            else:
                head = store[lav.head]
                tail_id = head.prev
                vertex.next = lav.head
                vertex.prev = tail_id
                store[tail_id].next = vertex_id
                head.prev = vertex_id
            lav.length += 1
        return lav

    @classmethod
    def from_chain(cls, lav_id: LavId, store: VertexStore, head: VertexId) -> "LAV":
        """Adopt an already-linked chain as a new LAV.

        Every vertex reachable from ``head`` is reassigned to the new LAV.

        Args:
            lav_id: Identity for the new LAV
            store: Vertex arena the chain lives in
            head: Any vertex of the chain

        Returns:
            New LAV with its length counted from the chain
        """
        lav = cls(id=lav_id, head=head)
        for vertex_id in lav.iter_ids(store):
            store[vertex_id].lav = lav_id
            lav.length += 1
        return lav

    def invalidate(self, store: VertexStore, vertex_id: VertexId) -> None:
        """Mark a vertex of this LAV as consumed and detach it.

        Args:
            store: Vertex arena
            vertex_id: Vertex to invalidate

        Raises:
            TopologyError: If the vertex belongs to another LAV
        """
        vertex = store[vertex_id]
        vertex.valid = False
        if vertex.lav is None:
            return
        if vertex.lav != self.id:
            raise TopologyError(
                f"vertex {vertex_id} belongs to LAV {vertex.lav}, not LAV {self.id}"
            )
        if self.head == vertex_id:
            self.head = vertex.next
        vertex.lav = None

    def unify(
        self, store: VertexStore, vertex_a: VertexId, vertex_b: VertexId, point: Vec2
    ) -> VertexId:
        """Replace two adjacent vertices by one new vertex at ``point``.

        The replacement keeps A's left edge and B's right edge; its reflex
        test uses B's and A's bisector directions so the bend survives even
        when those edges are far apart in angle.

        Args:
            store: Vertex arena
            vertex_a: First vertex, ``vertex_a.next == vertex_b``
            vertex_b: Second vertex
            point: Position where their bisectors meet

        Returns:
            Identity of the replacement vertex
        """
        va = store[vertex_a]
        vb = store[vertex_b]

        replacement = store.create(
            point,
            va.edge_left,
            vb.edge_right,
            (vb.bisector.direction.normalize(), va.bisector.direction.normalize()),
        )
        vertex = store[replacement]
        vertex.lav = self.id

        if self.head in (vertex_a, vertex_b):
            self.head = replacement

        store[va.prev].next = replacement
        store[vb.next].prev = replacement
        vertex.prev = va.prev
        vertex.next = vb.next

        self.invalidate(store, vertex_a)
        self.invalidate(store, vertex_b)
        self.length -= 1

        logger.debug(
            "Unified vertices %d and %d into %d in LAV %d",
            vertex_a, vertex_b, replacement, self.id
        )
        return replacement
