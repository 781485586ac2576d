"""Quality refinement of a constrained Delaunay triangulation, after
Ruppert's algorithm:

    A Delaunay refinement algorithm for quality 2-dimensional mesh generation
    Jim Ruppert, Journal of Algorithms 18(3), 1995, pp. 548--585

Encroached segments are split at their midpoint, bad triangles get their
circumcenter inserted, unless that circumcenter would encroach upon a
segment, which is then split instead.
"""
import heapq
import logging
import time
from collections import deque
from itertools import count

from cdtmesh.delaunay.tds import box, ccw, cw, segment_key, \
    REAL, ON_EDGE, ON_VERTEX, Location
from cdtmesh.delaunay.preds import angles, area, circumcenter, distance, \
    in_diametral_circle
from cdtmesh.delaunay.errors import InsertionFailed, RefinementIncomplete

# smallest relative length of a subsegment that is still split
RESOLUTION = 2. ** -40


class RefinementReport(object):
    """Outcome of a refinement run"""

    __slots__ = ('completed', 'steiner_points_added', 'iterations',
                 'unresolved')

    def __init__(self, completed, steiner_points_added, iterations,
                 unresolved=0):
        self.completed = completed
        self.steiner_points_added = steiner_points_added
        self.iterations = iterations
        self.unresolved = unresolved

    def __repr__(self):
        return ("RefinementReport(completed={0}, steiner_points_added={1}, "
                "iterations={2}, unresolved={3})").format(
                    self.completed, self.steiner_points_added,
                    self.iterations, self.unresolved)

    def check(self):
        """Raise RefinementIncomplete if the quality bounds are not met"""
        if not self.completed:
            raise RefinementIncomplete(
                "Refinement incomplete after {} iterations, {} items "
                "unresolved".format(self.iterations, self.unresolved),
                report=self)
        return self


def validate_bounds(min_angle, max_area=None, max_iterations=None,
                    max_vertices=None):
    """Raises ValueError for refinement parameters out of range"""
    if not 0. <= min_angle < 60.:
        raise ValueError(
            "min_angle should be in [0, 60), got {}".format(min_angle))
    if max_area is not None and not max_area > 0.:
        raise ValueError("max_area should be > 0, got {}".format(max_area))
    if max_iterations is not None and max_iterations < 0:
        raise ValueError(
            "max_iterations should be >= 0, got {}".format(max_iterations))
    if max_vertices is not None and max_vertices < 0:
        raise ValueError(
            "max_vertices should be >= 0, got {}".format(max_vertices))


class Refiner(object):
    """Refines the triangles inside the domain of a mesh until none of
    them has a minimum angle below min_angle (degrees) or an area larger
    than max_area, or until the budget is used up.
    """

    def __init__(self, mesh, min_angle, max_area=None, max_iterations=None,
                 max_vertices=None):
        validate_bounds(min_angle, max_area, max_iterations, max_vertices)
        self.triangulation = mesh.triangulation
        self.inserter = mesh.inserter
        self.min_angle = float(min_angle)
        self.max_area = max_area
        self.max_iterations = max_iterations
        self.max_vertices = max_vertices
        (xmin, ymin), (xmax, ymax) = box(mesh.boundary)
        self.floor = distance((xmin, ymin), (xmax, ymax)) * RESOLUTION
        self.encroached = deque()
        self.queued = set()
        self.bad = []
        self.counter = count()
        self.unresolved = set()
        self.steiner = 0
        self.iterations = 0

    # -- tests
    def is_encroached(self, key):
        """Does a vertex lie inside or on the diametral circle of the
        segment; the apexes of the triangles in the domain at both sides
        of the segment are tested"""
        tds = self.triangulation
        a, b = key
        found = tds.edge_of(a, b)
        if found is None:
            return False
        t, side = found
        pa, pb = tds.point(a), tds.point(b)
        for t, side in ((t, side),
                        (tds.triangles[t].neighbours[side],
                         tds.opposite_side(t, side))):
            tri = tds.triangles[t]
            if tri.kind != REAL:
                continue
            if in_diametral_circle(pa, pb, tds.point(tri.vertices[side])):
                return True
        return False

    def quality(self, t):
        """Smallest angle of triangle t, None if t is good enough"""
        tds = self.triangulation
        tri = tds.triangles[t]
        corners = tds.corners(t)
        corner_angles = angles(*corners)
        smallest = min(corner_angles)
        if self.max_area is not None and area(*corners) > self.max_area:
            return smallest
        if smallest < self.min_angle:
            k = corner_angles.index(smallest)
            # angle between two segments cannot be improved
            if tri.constrained[ccw(k)] and tri.constrained[cw(k)]:
                return None
            return smallest
        return None

    # -- queues
    def enqueue_segment(self, key):
        if key in self.queued or key in self.unresolved:
            return
        self.queued.add(key)
        self.encroached.append(key)

    def enqueue_triangle(self, t):
        tds = self.triangulation
        tri = tds.triangles[t]
        if tri.vertices is None or tri.kind != REAL:
            return
        vertices = tuple(tri.vertices)
        if vertices in self.unresolved:
            return
        smallest = self.quality(t)
        if smallest is not None:
            heapq.heappush(self.bad,
                           (smallest, next(self.counter), t, vertices))

    def examine(self, triangles):
        """Queue the encroached segments and bad triangles amongst the
        given triangles and their edges"""
        tds = self.triangulation
        for t in triangles:
            tri = tds.triangles[t]
            if tri.vertices is None or tri.kind != REAL:
                continue
            for side in range(3):
                if tri.constrained[side]:
                    key = segment_key(tri.vertices[ccw(side)],
                                      tri.vertices[cw(side)])
                    if self.is_encroached(key):
                        self.enqueue_segment(key)
            self.enqueue_triangle(t)

    def current(self, item):
        """Is the queued bad triangle still present (and still bad)"""
        _, _, t, vertices = item
        tds = self.triangulation
        tri = tds.triangles[t]
        if tri.vertices is None or tuple(tri.vertices) != vertices or \
                tri.kind != REAL or vertices in self.unresolved:
            return False
        return self.quality(t) is not None

    def pending(self):
        """Drop stale items from the queues, True if work is left"""
        self.encroached = deque(
            key for key in self.encroached
            if key in self.triangulation.segments and
            key not in self.unresolved and self.is_encroached(key))
        self.queued = set(self.encroached)
        self.bad = [item for item in self.bad if self.current(item)]
        heapq.heapify(self.bad)
        return bool(self.encroached or self.bad)

    # -- operations
    def split_segment(self, key):
        """Split a segment at its midpoint, False if it cannot be split"""
        tds = self.triangulation
        a, b = key
        pa, pb = tds.point(a), tds.point(b)
        mid = (0.5 * (pa[0] + pb[0]), 0.5 * (pa[1] + pb[1]))
        if 0.5 * distance(pa, pb) < self.floor or mid == pa or mid == pb:
            logging.warning("Segment {} too short to split".format(key))
            self.unresolved.add(key)
            return False
        t, side = tds.edge_of(a, b)
        v = tds.add_vertex(mid[0], mid[1], steiner=True)
        try:
            self.inserter.insert(v, Location(ON_EDGE, t, side=side))
        except InsertionFailed as err:
            tds.vertices.pop()
            logging.warning("Cannot split {}: {}".format(key, err))
            self.unresolved.add(key)
            return False
        self.steiner += 1
        self.examine(self.inserter.created)
        return True

    def defer(self, t, vertices, keys):
        """Split segments instead of inserting the circumcenter of t"""
        split = False
        for key in keys:
            if key in self.triangulation.segments and \
                    key not in self.unresolved:
                if not split:
                    split = self.split_segment(key)
                else:
                    self.enqueue_segment(key)
        if split:
            if self.triangulation.triangles[t].vertices is not None:
                self.enqueue_triangle(t)
        else:
            self.unresolved.add(vertices)
        return split

    def split_triangle(self, t):
        """Insert the circumcenter of triangle t"""
        tds = self.triangulation
        tri = tds.triangles[t]
        vertices = tuple(tri.vertices)
        center = circumcenter(*tds.corners(t))
        found = tds.walk_constrained(t, center)
        if found is None:
            self.unresolved.add(vertices)
            return False
        landing, blocked = found
        if blocked is not None:
            side = blocked
            other = tds.triangles[landing].vertices
            return self.defer(t, vertices, [
                segment_key(other[ccw(side)], other[cw(side)])])
        location = tds.classify_point(landing, center)
        if location.kind == ON_VERTEX or \
                tds.triangles[landing].kind != REAL:
            self.unresolved.add(vertices)
            return False
        if location.kind == ON_EDGE:
            other = tds.triangles[landing]
            if other.constrained[location.side]:
                return self.defer(t, vertices, [segment_key(
                    other.vertices[ccw(location.side)],
                    other.vertices[cw(location.side)])])
        cavity, boundary = self.inserter.cavity(center, location)
        keys = []
        for c, side in boundary:
            ctri = tds.triangles[c]
            if not ctri.constrained[side]:
                continue
            a, b = ctri.vertices[ccw(side)], ctri.vertices[cw(side)]
            if in_diametral_circle(tds.point(a), tds.point(b), center):
                keys.append(segment_key(a, b))
        if keys:
            return self.defer(t, vertices, keys)
        v = tds.add_vertex(center[0], center[1], steiner=True)
        try:
            self.inserter.insert(v, location)
        except InsertionFailed as err:
            tds.vertices.pop()
            logging.warning("Cannot insert circumcenter of {}: {}".format(
                vertices, err))
            self.unresolved.add(vertices)
            return False
        self.steiner += 1
        self.examine(self.inserter.created)
        return True

    def budget_left(self):
        if self.max_iterations is not None and \
                self.iterations >= self.max_iterations:
            return False
        if self.max_vertices is not None and \
                self.triangulation.finite_vertex_count >= self.max_vertices:
            return False
        return True

    def run(self):
        """Refine, returns a RefinementReport"""
        tds = self.triangulation
        start = time.perf_counter()
        for key in sorted(tds.segments):
            if self.is_encroached(key):
                self.enqueue_segment(key)
        for t in tds.alive_triangles(REAL):
            self.enqueue_triangle(t)
        logging.debug("{} encroached segments, {} bad triangles".format(
            len(self.encroached), len(self.bad)))
        while self.encroached or self.bad:
            if not self.budget_left():
                break
            if self.encroached:
                key = self.encroached.popleft()
                self.queued.discard(key)
                if key not in tds.segments or key in self.unresolved or \
                        not self.is_encroached(key):
                    continue
                self.iterations += 1
                self.split_segment(key)
                continue
            item = heapq.heappop(self.bad)
            if not self.current(item):
                continue
            self.iterations += 1
            self.split_triangle(item[2])
        completed = not self.pending() and not self.unresolved
        end = time.perf_counter()
        logging.debug("Refining took: " + str(end - start) + " secs")
        logging.debug("{} iterations, {} steiner points".format(
            self.iterations, self.steiner))
        if not completed:
            logging.warning(
                "Refinement incomplete: {} iterations, {} unresolved".format(
                    self.iterations, len(self.unresolved)))
        return RefinementReport(completed, self.steiner, self.iterations,
                                len(self.unresolved))
