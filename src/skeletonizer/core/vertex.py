"""Vertex records and the arena that owns them.

Vertices are referenced everywhere by their integer identity (index into the
store). ``prev``/``next``/``lav`` are identities too, so the circular lists built
over the store are plain index links with O(1) splicing. Vertices are never
removed from the store during a computation; consumed vertices are marked
invalid and detached from their LAV instead.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from skeletonizer.domain import Ray, Segment, Vec2

VertexId = int
LavId = int


@dataclass(slots=True)
class Vertex:
    """A vertex of a currently shrinking contour.

    Attributes:
        id: Identity of this vertex in its store
        point: Position at creation time; the vertex moves along its bisector
        edge_left: Original-direction edge arriving at this vertex
        edge_right: Original-direction edge leaving this vertex
        bisector: Ray along which the vertex travels as the contour shrinks
        is_reflex: True if the interior angle exceeds a straight angle
        prev: Previous vertex in the owning LAV
        next: Next vertex in the owning LAV
        lav: Owning LAV, None once detached
        valid: False once consumed by an event
    """

    id: VertexId
    point: Vec2
    edge_left: Segment
    edge_right: Segment
    bisector: Ray
    is_reflex: bool
    prev: VertexId | None = None
    next: VertexId | None = None
    lav: LavId | None = None
    valid: bool = True


def compute_bisector(
    point: Vec2,
    edge_left: Segment,
    edge_right: Segment,
    direction_vectors: tuple[Vec2, Vec2] | None = None,
) -> tuple[Ray, bool]:
    """Compute a vertex's interior bisector and reflex flag.

    The reflex test uses ``direction_vectors`` when given (the bisector
    directions of the vertices a new vertex replaces), which keeps the bend
    correct after a unify even when the new vertex's edges are far apart in
    angle. The bisector direction itself always comes from the edges.

    Args:
        point: Vertex position
        edge_left: Edge arriving at the vertex
        edge_right: Edge leaving the vertex
        direction_vectors: Optional substitute vectors for the reflex test

    Returns:
        Tuple of (bisector ray, is_reflex)
    """
    creator_vectors = (-edge_left.vec().normalize(), edge_right.vec().normalize())
    if direction_vectors is None:
        direction_vectors = creator_vectors

    is_reflex = direction_vectors[0].cross(direction_vectors[1]) < 0.0
    direction = creator_vectors[0] + creator_vectors[1]
    if is_reflex:
        direction = -direction
    return Ray(point, direction), is_reflex


class VertexStore:
    """Arena of vertex records with stable integer identities.

    Example:
        store = VertexStore()
        vid = store.create(point, edge_left, edge_right)
        store[vid].next = vid
    """

    def __init__(self) -> None:
        self._vertices: list[Vertex] = []

    def create(
        self,
        point: Vec2,
        edge_left: Segment,
        edge_right: Segment,
        direction_vectors: tuple[Vec2, Vec2] | None = None,
    ) -> VertexId:
        """Create a detached vertex and return its identity.

        Args:
            point: Vertex position
            edge_left: Edge arriving at the vertex
            edge_right: Edge leaving the vertex
            direction_vectors: Optional substitute vectors for the reflex test

        Returns:
            Identity of the new vertex
        """
        bisector, is_reflex = compute_bisector(point, edge_left, edge_right, direction_vectors)
        vertex_id = len(self._vertices)
        self._vertices.append(
            Vertex(
                id=vertex_id,
                point=point,
                edge_left=edge_left,
                edge_right=edge_right,
                bisector=bisector,
                is_reflex=is_reflex,
            )
        )
        return vertex_id

    def __getitem__(self, vertex_id: VertexId) -> Vertex:
        return self._vertices[vertex_id]

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def live_count(self) -> int:
        """Number of vertices not yet consumed by an event."""
        return sum(1 for v in self._vertices if v.valid)
