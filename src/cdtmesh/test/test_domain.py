import unittest

from cdtmesh.delaunay.domain import validate_ring, validate_holes, \
    ccw_ring, ring_area, point_in_ring, in_domain
from cdtmesh.delaunay.preds import INSIDE, OUTSIDE, ON
from cdtmesh.delaunay.errors import InvalidBoundary, HoleOutsideBoundary

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


class TestRing(unittest.TestCase):

    def test_closed_ring(self):
        ring = validate_ring(SQUARE + [(0, 0)])
        assert ring == [(0., 0.), (10., 0.), (10., 10.), (0., 10.)]

    def test_too_few_points(self):
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (1, 0)])
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (1, 0), (0, 0)])

    def test_repeated_point(self):
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (1, 0), (1, 1), (1, 0), (0, 1)])

    def test_no_area(self):
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (1, 1), (2, 2)])

    def test_bowtie(self):
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (1, 1), (1, 0), (0, 1)])

    def test_fold_back(self):
        with self.assertRaises(InvalidBoundary):
            validate_ring([(0, 0), (2, 0), (1, 0), (1, 1)])

    def test_collinear_corner_allowed(self):
        ring = validate_ring([(0, 0), (1, 0), (2, 0), (2, 2)])
        assert len(ring) == 4

    def test_orientation(self):
        cw = list(reversed(SQUARE))
        assert ring_area(cw) == -100.
        assert ring_area(ccw_ring(cw)) == 100.
        assert ccw_ring(SQUARE) == SQUARE


class TestPointInRing(unittest.TestCase):

    def test_square(self):
        assert point_in_ring((5, 5), SQUARE) == INSIDE
        assert point_in_ring((15, 5), SQUARE) == OUTSIDE
        assert point_in_ring((10, 5), SQUARE) == ON
        assert point_in_ring((0, 0), SQUARE) == ON
        # on the line through an edge, outside
        assert point_in_ring((-5, 0), SQUARE) == OUTSIDE

    def test_concave(self):
        ring = [(0, 0), (4, 0), (4, 4), (2, 1), (0, 4)]
        assert point_in_ring((2, 0.5), ring) == INSIDE
        assert point_in_ring((2, 3), ring) == OUTSIDE
        assert point_in_ring((1, 2), ring) == INSIDE
        # same height as the reflex vertex
        assert point_in_ring((3.5, 1), ring) == INSIDE
        assert point_in_ring((5, 1), ring) == OUTSIDE


class TestHoles(unittest.TestCase):

    def test_valid(self):
        validate_holes(SQUARE, [[(1, 1), (2, 1), (2, 2), (1, 2)],
                                [(5, 5), (6, 5), (6, 6)]])

    def test_hole_outside(self):
        with self.assertRaises(HoleOutsideBoundary):
            validate_holes(SQUARE, [[(11, 1), (12, 1), (12, 2)]])

    def test_hole_crossing(self):
        with self.assertRaises(HoleOutsideBoundary):
            validate_holes(SQUARE, [[(8, 1), (12, 1), (8, 2)]])

    def test_hole_touching_boundary(self):
        with self.assertRaises(HoleOutsideBoundary):
            validate_holes(SQUARE, [[(0, 1), (2, 1), (2, 2)]])

    def test_holes_touching(self):
        with self.assertRaises(InvalidBoundary):
            validate_holes(SQUARE, [[(1, 1), (2, 1), (2, 2)],
                                    [(2, 2), (3, 2), (3, 3)]])

    def test_holes_crossing(self):
        with self.assertRaises(InvalidBoundary):
            validate_holes(SQUARE, [[(1, 1), (3, 1), (3, 3), (1, 3)],
                                    [(2, 2), (4, 2), (4, 4), (2, 4)]])

    def test_nested_holes(self):
        with self.assertRaises(InvalidBoundary):
            validate_holes(SQUARE, [[(1, 1), (9, 1), (9, 9), (1, 9)],
                                    [(4, 4), (5, 4), (5, 5)]])

    def test_in_domain(self):
        holes = [[(4, 4), (6, 4), (6, 6), (4, 6)]]
        assert in_domain((1, 1), SQUARE, holes) == INSIDE
        assert in_domain((5, 5), SQUARE, holes) == OUTSIDE
        assert in_domain((4, 5), SQUARE, holes) == ON
        assert in_domain((0, 5), SQUARE, holes) == ON
        assert in_domain((-1, 5), SQUARE, holes) == OUTSIDE


if __name__ == "__main__":
    unittest.main()
