"""Tests for the vertex store, active vertex lists and the shrinking polygon set."""

import pytest

from skeletonizer.core.geometry import prepare_contour
from skeletonizer.core.lav import LAV
from skeletonizer.core.slav import SLAV
from skeletonizer.core.vertex import VertexStore, compute_bisector
from skeletonizer.domain import Segment, Vec2
from skeletonizer.exceptions import TopologyError


@pytest.fixture
def rectangle_contour() -> list[Vec2]:
    """Prepared 20x10 rectangle: (0,10), (20,10), (20,0), (0,0)."""
    return prepare_contour([(0, 0), (20, 0), (20, 10), (0, 10)])


class TestBisector:
    """Tests for bisector and reflex computation."""

    def test_convex_vertex(self):
        """Test a convex corner of a clockwise contour."""
        point = Vec2(0, 10)
        bisector, is_reflex = compute_bisector(
            point, Segment(Vec2(0, 0), point), Segment(point, Vec2(20, 10))
        )
        assert not is_reflex
        assert bisector.origin == point
        assert bisector.direction == Vec2(1, -1)

    def test_reflex_vertex(self):
        """Test that a reflex corner flips its bisector."""
        point = Vec2(10, 5)
        bisector, is_reflex = compute_bisector(
            point, Segment(Vec2(20, 5), point), Segment(point, Vec2(10, 0))
        )
        assert is_reflex
        assert bisector.direction == Vec2(-1, 1)

    def test_direction_vectors_override_reflex_test(self):
        """Test that substitute vectors decide reflexness but not direction."""
        point = Vec2(0, 10)
        edges = (Segment(Vec2(0, 0), point), Segment(point, Vec2(20, 10)))
        bisector, is_reflex = compute_bisector(point, *edges, (Vec2(1, 0), Vec2(0, -1)))
        assert is_reflex
        assert bisector.direction == Vec2(-1, 1)


class TestVertexStore:
    """Tests for the vertex arena."""

    def test_create_assigns_sequential_ids(self):
        store = VertexStore()
        a = Vec2(0, 0)
        b = Vec2(1, 0)
        c = Vec2(0, 1)
        first = store.create(a, Segment(c, a), Segment(a, b))
        second = store.create(b, Segment(a, b), Segment(b, c))
        assert (first, second) == (0, 1)
        assert len(store) == 2
        assert store[first].point == a

    def test_new_vertex_is_detached(self):
        store = VertexStore()
        a = Vec2(0, 0)
        vid = store.create(a, Segment(Vec2(0, 1), a), Segment(a, Vec2(1, 0)))
        vertex = store[vid]
        assert vertex.valid
        assert vertex.prev is None
        assert vertex.next is None
        assert vertex.lav is None
        assert store.live_count() == 1


class TestLAV:
    """Tests for LAV construction and maintenance."""

    def test_from_polygon_links_circularly(self, rectangle_contour):
        store = VertexStore()
        lav = LAV.from_polygon(0, store, rectangle_contour)

        assert lav.length == 4
        ids = lav.iter_ids(store)
        assert ids == [0, 1, 2, 3]
        for vid in ids:
            vertex = store[vid]
            assert vertex.lav == 0
            assert store[vertex.next].prev == vid
        assert [store[v].point for v in ids] == rectangle_contour

    def test_edges_follow_contour(self, rectangle_contour):
        store = VertexStore()
        LAV.from_polygon(0, store, rectangle_contour)
        vertex = store[0]
        assert vertex.edge_left == Segment(Vec2(0, 0), Vec2(0, 10))
        assert vertex.edge_right == Segment(Vec2(0, 10), Vec2(20, 10))

    def test_empty_lav(self):
        assert LAV(id=0).iter_ids(VertexStore()) == []

    def test_unify_replaces_two_vertices(self, rectangle_contour):
        store = VertexStore()
        lav = LAV.from_polygon(0, store, rectangle_contour)

        replacement = lav.unify(store, 3, 0, Vec2(5, 5))

        assert lav.length == 3
        assert not store[0].valid
        assert not store[3].valid
        assert store[0].lav is None
        assert lav.head == replacement
        assert set(lav.iter_ids(store)) == {replacement, 1, 2}
        new_vertex = store[replacement]
        assert new_vertex.edge_left == store[3].edge_left
        assert new_vertex.edge_right == store[0].edge_right
        assert not new_vertex.is_reflex
        assert new_vertex.bisector.direction == Vec2(2, 0)

    def test_from_chain_adopts_vertices(self, rectangle_contour):
        store = VertexStore()
        LAV.from_polygon(0, store, rectangle_contour)
        lav = LAV.from_chain(7, store, 2)
        assert lav.head == 2
        assert lav.length == 4
        assert all(store[v].lav == 7 for v in lav.iter_ids(store))

    def test_invalidate_foreign_vertex_raises(self, rectangle_contour):
        """Test that invalidating through the wrong LAV is fatal."""
        store = VertexStore()
        LAV.from_polygon(0, store, rectangle_contour)
        other = LAV(id=5, head=None)
        with pytest.raises(TopologyError):
            other.invalidate(store, 0)

    def test_broken_chain_raises(self, rectangle_contour):
        store = VertexStore()
        lav = LAV.from_polygon(0, store, rectangle_contour)
        store[1].next = None
        with pytest.raises(TopologyError):
            lav.iter_ids(store)


class TestSLAV:
    """Tests for the shrinking polygon set."""

    def test_original_edges(self, rectangle_contour):
        slav = SLAV([rectangle_contour])
        assert len(slav) == 1
        assert len(slav.original_edges) == 4
        first = slav.original_edges[0]
        assert first.edge == Segment(Vec2(0, 0), Vec2(0, 10))
        assert first.bisector_left == slav.store[3].bisector
        assert first.bisector_right == slav.store[0].bisector

    def test_holes_become_lavs(self, rectangle_contour):
        hole = prepare_contour([(8, 4), (8, 6), (12, 6), (12, 4)], counter_clockwise=False)
        slav = SLAV([rectangle_contour, hole])
        assert slav.active == [0, 1]
        assert len(slav.original_edges) == 8
        assert len(slav.live_vertices()) == 8

    def test_remove_inactive_lav_raises(self, rectangle_contour):
        slav = SLAV([rectangle_contour])
        slav.remove_lav(0)
        with pytest.raises(TopologyError):
            slav.remove_lav(0)

    def test_invalidate_moves_head(self, rectangle_contour):
        slav = SLAV([rectangle_contour])
        slav.invalidate(0)
        assert not slav.store[0].valid
        assert slav.lavs[0].head == 1
