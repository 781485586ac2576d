'''
Created on Nov 13, 2018

@author: martijn
'''
import logging
import time
from collections import deque

from cdtmesh.delaunay.preds import orientation, in_circle_perturbed, \
    strictly_between, LEFT, RIGHT, COLLINEAR, INSIDE
from cdtmesh.delaunay.tds import ccw, cw, INF, REAL, GHOST
from cdtmesh.delaunay.iter import StarEdgeIterator
from cdtmesh.delaunay.errors import InvalidFlip, SegmentRecoveryFailed

# -----------------------------------------------------------------------------
# Constraints
#     The edges crossed by a segment are removed one by one by flipping
#     them, as described in:
#         An algorithm for generating constrained Delaunay triangulations
#         S.W. Sloan
#
# @article{Sloan1993,
#   doi = {10.1016/0045-7949(93)90239-a},
#   year = {1993},
#   volume = {47},
#   number = {3},
#   pages = {441--450},
#   author = {S.W. Sloan},
#   title = {A fast algorithm for generating constrained Delaunay
#            triangulations},
#   journal = {Computers {\&} Structures}
# }


def wedge_towards(tds, P, Q):
    """Returns (triangle, side) of the triangle around vertex P whose
    interior is entered by the segment that goes from P to Q; side is the
    edge opposite P, that the segment crosses next.

    It's a SegmentRecoveryFailed if a vertex lies on the segment.
    """
    pp, pq = tds.point(P), tds.point(Q)
    for edge in StarEdgeIterator(tds, P):
        L, R = edge.segment
        if INF in (L, R):
            continue
        ol = orientation(pp, tds.point(L), pq)
        orr = orientation(pp, tds.point(R), pq)
        for corner, o in ((L, ol), (R, orr)):
            if o == COLLINEAR and \
                    strictly_between(pp, pq, tds.point(corner)):
                raise SegmentRecoveryFailed(
                    "Unwanted vertex collision detected - inserting: "
                    "{} -> {} | vertex {} on segment".format(P, Q, corner))
        if ol == LEFT and orr == RIGHT:
            return edge.triangle, edge.side
    raise SegmentRecoveryFailed(
        "No overlap found (towards outside triangulated convex hull?) "
        "- inserting: {} -> {}".format(P, Q))


def straight_walk(tds, P, Q, domain_only=False):
    """Obtain the list of edges (as vertex pairs) that are crossed by
    the line segment that goes from Vertex P to Q.

    Note that P and Q must be vertices that are in the Triangulation
    already and that the triangulation is not changed.

    Raises a SegmentRecoveryFailed when either a constrained edge is
    crossed in the interior of the line segment or when another vertex
    lies on the segment. With domain_only only triangles inside the domain
    may be crossed.
    """
    pp, pq = tds.point(P), tds.point(Q)
    t, side = wedge_towards(tds, P, Q)
    out = []
    while True:
        tri = tds.triangles[t]
        if domain_only and tri.kind != REAL:
            raise SegmentRecoveryFailed(
                "Segment {} -> {} leaves the domain".format(P, Q))
        R, L = tri.vertices[ccw(side)], tri.vertices[cw(side)]
        if tri.constrained[side]:
            raise SegmentRecoveryFailed(
                "Unwanted constrained segment collision detected - "
                "inserting: {} -> {} | crossing: {} -> {}".format(P, Q, R, L))
        out.append((R, L))
        t = tri.neighbours[side]
        neighbour = tds.triangles[t]
        if domain_only and neighbour.kind != REAL:
            raise SegmentRecoveryFailed(
                "Segment {} -> {} leaves the domain".format(P, Q))
        # vertex of the neighbour opposite the crossed edge
        S = neighbour.vertices[ccw(neighbour.vertices.index(R))]
        if S == Q:
            return out
        ori = orientation(pp, pq, tds.point(S))
        if ori == COLLINEAR:
            raise SegmentRecoveryFailed(
                "Unwanted vertex collision detected - inserting: "
                "{} -> {} | vertex {} on segment".format(P, Q, S))
        elif ori == LEFT:
            # next crossed edge is R -> S, opposite L
            side = neighbour.vertices.index(L)
        else:
            # next crossed edge is S -> L, opposite R
            side = neighbour.vertices.index(R)


class ConstraintInserter(object):
    """Constraint Inserter

    Insert segments into a (constrained) Delaunay Triangulation, by
    flipping the edges the segment crosses, followed by restoring the
    Delaunay criterion for the edges that were made.
    """

    def __init__(self, triangulation):
        self.triangulation = triangulation
        self.queue = []

    def insert_segments(self, segments, label):
        """Insert constraints into triangulation

        Parameter: segments - list of 2-tuples, with vertex indices
        """
        start = time.perf_counter()
        for j, (a, b) in enumerate(segments):
            self.insert(a, b, label)
            if (j % 10000) == 0:
                logging.debug(" inserted {} constraints".format(j))
        end = time.perf_counter()
        logging.debug(" {time} secs for {count} {label} constraints".format(
            time=end - start, count=len(segments), label=label))
        logging.debug(" {} flips so far".format(self.triangulation.flips))

    def insert(self, a, b, label='segment', domain_only=False):
        """Make the segment between vertex a and b a constrained edge of the
        triangulation.
        """
        tds = self.triangulation
        logging.debug(" constraint {} -> {}".format(a, b))
        if a == b:
            raise SegmentRecoveryFailed(
                "Equal points found inserting constraint: {} {}".format(a, b))
        if INF in (a, b):
            raise SegmentRecoveryFailed("Infinite vertex in constraint")
        if tds.edge_of(a, b) is None:
            crossed = straight_walk(tds, a, b, domain_only)
            made = self.flip_crossed(a, b, crossed)
        else:
            made = []
        tds.set_constrained(a, b)
        tds.add_segment(a, b, label)
        self.legalize(made)

    def flip_crossed(self, a, b, crossed):
        """Flip the crossed edges until none of the edges crosses segment ab

        Returns the edges made that do not cross ab
        """
        tds = self.triangulation
        pa, pb = tds.point(a), tds.point(b)
        queue = deque(crossed)
        made = []
        failures = 0
        while queue:
            if failures > len(queue):
                # every edge left has a reflex quadrilateral
                self.legalize(made + list(queue))
                raise SegmentRecoveryFailed(
                    "Cannot recover {} -> {}, flips stalled".format(a, b))
            u, w = queue.popleft()
            t, side = tds.edge_of(u, w)
            try:
                t0, t1 = tds.flip22(t, side)
            except InvalidFlip:
                queue.append((u, w))
                failures += 1
                continue
            failures = 0
            # new diagonal runs from apex of t0 to apex of t1
            C, A = tds.triangles[t0].vertices[2], tds.triangles[t0].vertices[0]
            if a in (A, C) or b in (A, C):
                made.append((A, C))
                continue
            oa = orientation(pa, pb, tds.point(A))
            oc = orientation(pa, pb, tds.point(C))
            if oa * oc == -1:
                queue.append((A, C))
            else:
                made.append((A, C))
        return made

    def legalize(self, edges):
        """Queue the given edges (vertex pairs) and flip until Delaunay"""
        tds = self.triangulation
        for u, w in edges:
            found = tds.edge_of(u, w)
            if found is not None:
                self.queue.append(found)
        self.delaunay()

    def delaunay(self):
        """Performs Flip22 for triangles if Delaunay criterion does not hold.

        If 2 triangles were flipped, the 4 triangles around the quadrilateral
        are queued for checking if these are Delaunay.
        """
        tds = self.triangulation
        triangles = tds.triangles
        while self.queue:
            t0, side0 = self.queue.pop()
            tri0 = triangles[t0]
            if tri0.vertices is None:
                continue
            # -- skip constrained edge - these should not be flipped
            if tri0.constrained[side0]:
                continue
            t1 = tri0.neighbours[side0]
            tri1 = triangles[t1]
            # -- skip edges on the convex hull and between different regions
            if tri0.kind == GHOST or tri1.kind == GHOST or \
                    tri0.kind != tri1.kind:
                continue
            side1 = tds.opposite_side(t0, side0)
            a, b, c = tds.corners(t0)
            if in_circle_perturbed(
                    a, b, c, tds.point(tri1.vertices[side1])) == INSIDE:
                try:
                    tds.flip22(t0, side0)
                except InvalidFlip:
                    continue
                # check if all 4 edges around quadrilateral just flipped
                # are now good: i.e. delaunay criterion applies
                self.queue.append((t0, 0))
                self.queue.append((t0, 2))
                self.queue.append((t1, 0))
                self.queue.append((t1, 2))
