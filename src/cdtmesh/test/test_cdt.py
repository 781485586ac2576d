import unittest
from random import Random

from cdtmesh.delaunay.tds import Triangulation, INF, REAL
from cdtmesh.delaunay.conflicts import ConflictGraph
from cdtmesh.delaunay.insert_bw import BowyerWatsonInserter
from cdtmesh.delaunay.cdt import ConstraintInserter, straight_walk
from cdtmesh.delaunay.preds import orientation, in_circle, INSIDE
from cdtmesh.delaunay.errors import SegmentRecoveryFailed

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 5), (10, 5),
          (5, 2), (5, 8), (3, 4), (7, 6), (2, 6), (8, 4)]


def triangulate(points, seed=1):
    tds = Triangulation(Random(seed))
    for x, y in points:
        tds.add_vertex(x, y)
    BowyerWatsonInserter(tds, ConflictGraph()).insert_points(
        range(1, len(points) + 1))
    return tds


def is_constrained_delaunay(tds):
    for t in tds.alive_triangles(REAL):
        tri = tds.triangles[t]
        a, b, c = tds.corners(t)
        for side in range(3):
            n = tri.neighbours[side]
            if tri.constrained[side] or tds.triangles[n].kind != REAL:
                continue
            opposite = tds.triangles[n].vertices[tds.opposite_side(t, side)]
            if in_circle(a, b, c, tds.point(opposite)) == INSIDE:
                return False
    return True


class TestStraightWalk(unittest.TestCase):

    def test_crossed_edges(self):
        tds = triangulate(SQUARE)
        pa, pb = tds.point(5), tds.point(6)
        crossed = straight_walk(tds, 5, 6)
        assert len(crossed) > 0
        for r, l in crossed:
            assert orientation(pa, pb, tds.point(r)) * \
                orientation(pa, pb, tds.point(l)) == -1

    def test_vertex_on_segment(self):
        tds = triangulate(SQUARE + [(5, 5)])
        with self.assertRaises(SegmentRecoveryFailed):
            straight_walk(tds, 5, 6)


class TestConstraintInserter(unittest.TestCase):

    def setUp(self):
        self.tds = triangulate(SQUARE)
        self.inserter = ConstraintInserter(self.tds)

    def test_insert(self):
        tds = self.tds
        self.inserter.insert(5, 6)
        assert tds.check_consistency()
        found = tds.edge_of(5, 6)
        assert found is not None
        t, side = found
        assert tds.triangles[t].constrained[side]
        assert tds.segments == {(5, 6): 'segment'}
        assert is_constrained_delaunay(tds)

    def test_insert_existing_edge(self):
        tds = self.tds
        self.inserter.insert(1, 2, 'boundary')
        t, side = tds.edge_of(1, 2)
        assert tds.triangles[t].constrained[side]
        assert tds.segments == {(1, 2): 'boundary'}
        assert tds.flips == 0

    def test_insert_segments(self):
        tds = self.tds
        # (10, 5) and (0, 5) lie on the sides of the square
        self.inserter.insert_segments(
            [(1, 2), (2, 6), (6, 3), (3, 4), (4, 5), (5, 1)], 'boundary')
        self.inserter.insert_segments([(7, 8)], 'segment')
        assert tds.check_consistency()
        assert len(tds.segments) == 7
        assert is_constrained_delaunay(tds)

    def test_vertex_on_segment(self):
        tds = triangulate(SQUARE + [(5, 5)])
        inserter = ConstraintInserter(tds)
        with self.assertRaises(SegmentRecoveryFailed):
            inserter.insert(5, 6)
        assert tds.check_consistency()
        assert tds.segments == {}

    def test_crossing_constraint(self):
        tds = self.tds
        self.inserter.insert(7, 8)
        with self.assertRaises(SegmentRecoveryFailed):
            self.inserter.insert(5, 6)
        assert tds.check_consistency()
        assert tds.segments == {(7, 8): 'segment'}
        t, side = tds.edge_of(7, 8)
        assert tds.triangles[t].constrained[side]

    def test_same_vertex(self):
        with self.assertRaises(SegmentRecoveryFailed):
            self.inserter.insert(5, 5)

    def test_infinite_vertex(self):
        with self.assertRaises(SegmentRecoveryFailed):
            self.inserter.insert(INF, 5)

    def test_flips_stalled(self):
        # (2, 1) lies inside the other three, so the quadrilateral around
        # edge 4-3 has a reflex corner and the edge cannot be flipped
        tds = triangulate([(0, 0), (4, 0), (2, 3), (2, 1)])
        inserter = ConstraintInserter(tds)
        with self.assertRaises(SegmentRecoveryFailed):
            inserter.flip_crossed(1, 2, [(4, 3)])
        assert tds.flips == 0
        assert tds.check_consistency()
        assert tds.edge_of(4, 3) is not None
        assert is_constrained_delaunay(tds)


if __name__ == "__main__":
    unittest.main()
