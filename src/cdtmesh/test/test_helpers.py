import unittest
from random import Random

from cdtmesh.delaunay.helpers import ToPointsAndSegments, \
    random_sorted_vertices, random_circle_vertices
from cdtmesh.delaunay.errors import SegmentRecoveryFailed


class TestToPointsAndSegments(unittest.TestCase):

    def test_rings(self):
        helper = ToPointsAndSegments()
        outer = helper.add_ring([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)],
                                'boundary')
        inner = helper.add_ring([(2, 2), (2, 4), (4, 4), (4, 2)], 'hole')
        assert outer == [0, 1, 2, 3]
        assert inner == [4, 5, 6, 7]
        assert len(helper.points) == 8
        assert len(helper.segments) == 8
        assert helper.segments_labeled('boundary') == \
            [(0, 1), (1, 2), (2, 3), (0, 3)]
        assert len(helper.segments_labeled('hole')) == 4

    def test_dedup(self):
        helper = ToPointsAndSegments()
        assert helper.add_point((1, 2)) == 0
        assert helper.add_point((1., 2.)) == 0
        assert helper.add_point((2, 2)) == 1
        assert helper.points == [(1., 2.), (2., 2.)]

    def test_segment_dedup(self):
        helper = ToPointsAndSegments()
        helper.add_point((0, 0))
        helper.add_point((1, 0))
        assert helper.add_segment((0, 0), (1, 0), 'boundary') == (0, 1)
        assert helper.add_segment((1, 0), (0, 0), 'segment') == (0, 1)
        assert helper.segments == [(0, 1)]
        assert helper.labels == ['boundary']

    def test_same_start_end(self):
        helper = ToPointsAndSegments()
        helper.add_point((0, 0))
        with self.assertRaises(SegmentRecoveryFailed):
            helper.add_segment((0, 0), (0, 0))


class TestRandomVertices(unittest.TestCase):

    def test_repeatable(self):
        assert random_circle_vertices(20, rng=Random(1)) == \
            random_circle_vertices(20, rng=Random(1))
        assert random_sorted_vertices(20, rng=Random(1)) == \
            random_sorted_vertices(20, rng=Random(1))

    def test_in_circle(self):
        for x, y in random_circle_vertices(50, 3, 4, rng=Random(2)):
            assert (x - 3) ** 2 + (y - 4) ** 2 <= 1. + 1e-9

    def test_sorted_unique(self):
        vertices = random_sorted_vertices(50, rng=Random(2))
        assert vertices == sorted(set(vertices))
        for x, y in vertices:
            assert 0 <= x <= 1 and 0 <= y <= 1


if __name__ == "__main__":
    unittest.main()
