'''
Created on Nov 13, 2018

@author: martijn
'''
from math import sqrt, pi, cos, sin
from random import Random

from cdtmesh.delaunay.errors import SegmentRecoveryFailed
# ------------------------------------------------------------------------------
# Generate randomized point sets (for testing purposes)
#


def random_sorted_vertices(n=10, rng=None):
    """Returns a list with n random vertices on a grid in the unit square
    """
    rng = rng if rng is not None else Random()
    W = float(n)
    vertices = []
    for _ in range(n):
        x = rng.randint(0, n)
        y = rng.randint(0, n)
        x /= W
        y /= W
        vertices.append((x, y))
    vertices = list(set(vertices))
    vertices.sort()
    return vertices


def random_circle_vertices(n=10, cx=0, cy=0, rng=None):
    """Returns a list with n random vertices in a circle

    Method according to:

    http://www.anderswallin.net/2009/05/uniform-random-points-in-a-circle-using-polar-coordinates/
    """
    rng = rng if rng is not None else Random()
    vertices = []
    for _ in range(n):
        r = sqrt(rng.random())
        t = 2 * pi * rng.random()
        x = r * cos(t)
        y = r * sin(t)
        vertices.append((x + cx, y + cy))
    vertices = list(set(vertices))
    vertices.sort()
    return vertices


class ToPointsAndSegments(object):
    """Helper class to convert rings and loose points to points and
    labeled segments.
    De-dups duplicate points and segments.
    """

    def __init__(self):
        self.points = []
        self.segments = []
        self.labels = []
        self._points_idx = {}
        self._segments_idx = {}

    def add_ring(self, ring, label):
        """Add a closed ring, returns the indices of its points (in order,
        without repeating the first point)"""
        ring = list(ring)
        if len(ring) > 1 and \
                tuple(map(float, ring[0])) == tuple(map(float, ring[-1])):
            # skip last point of ring; duplicate of first
            ring = ring[:-1]
        indices = [self.add_point(pt) for pt in ring]
        for start, end in zip(ring, ring[1:] + ring[:1]):
            self.add_segment(start, end, label)
        return indices

    def add_point(self, point):
        """Add a point, returns its index.
        """
        point = tuple(map(float, point))
        if point not in self._points_idx:
            self._points_idx[point] = len(self.points)
            self.points.append(point)
        return self._points_idx[point]

    def add_segment(self, start, end, label='segment'):
        """Add a segment between two points added before, returns the
        pair of point indices (lowest first).

        A segment that is already present keeps its first label.
        """
        start_idx = self._points_idx[tuple(map(float, start))]
        end_idx = self._points_idx[tuple(map(float, end))]
        if start_idx == end_idx:
            raise SegmentRecoveryFailed('same start as end point')
        seg = (min(start_idx, end_idx), max(start_idx, end_idx))
        if seg not in self._segments_idx:
            self._segments_idx[seg] = len(self.segments)
            self.segments.append(seg)
            self.labels.append(label)
        return seg

    def segments_labeled(self, label):
        """Segments (point index pairs) that carry label"""
        return [seg for seg, lbl in zip(self.segments, self.labels)
                if lbl == label]
