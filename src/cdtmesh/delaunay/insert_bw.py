'''
Created on Nov 14, 2018

@author: martijn
'''
import logging
import time
from collections import deque

from cdtmesh.delaunay.tds import ccw, cw, INF, REAL, GHOST, \
    ON_EDGE, ON_VERTEX, Location, segment_key
from cdtmesh.delaunay.preds import orientation, in_circle_perturbed, \
    strictly_between, LEFT, COLLINEAR, INSIDE
from cdtmesh.delaunay.errors import InsertionFailed


class BowyerWatsonInserter(object):
    """Class to insert points into a Triangulation.

    For every point the cavity (the triangles whose circumcircle contains
    the new point) is removed and retriangulated by connecting the new
    point with the edges on the boundary of the cavity (Bowyer-Watson
    algorithm). Outside the convex hull, ghost triangles (triangles with
    the infinite vertex as one of their corners) play the role of the
    triangles in conflict.

    Points that still have to be inserted are kept in the conflict graph,
    which gives a triangle to start the point location from.

    Constrained edges bound the cavity, unless the new point lies on such
    an edge, then the edge is split in two constrained halves.
    """

    __slots__ = ('triangulation', 'conflicts', 'created', 'last')

    def __init__(self, triangulation, conflicts):
        self.triangulation = triangulation
        self.conflicts = conflicts
        self.created = []
        self.last = None

    def insert_points(self, vids):
        """Insert the vertices with the given indices (already added to the
        arena) into an empty triangulation, in random order.
        """
        tds = self.triangulation
        start = time.perf_counter()
        vids = list(vids)
        tds.random.shuffle(vids)
        end = time.perf_counter()
        logging.debug("Shuffling points: " + str(end - start) + " secs")

        start = time.perf_counter()
        first = self.initialize(vids)
        remaining = [v for v in vids if v not in first]
        # every point conflicts with at least one of the initial triangles
        initial = list(tds.alive_triangles())
        for v in remaining:
            p = tds.point(v)
            for t in initial:
                if self.in_conflict(t, p):
                    self.conflicts.register(v, t)
        for j, v in enumerate(remaining):
            self.insert(v)
            if (j % 10000) == 0:
                logging.debug(" inserted {}".format(j))
        end = time.perf_counter()
        logging.debug("Triangulating took: " + str(end - start) + " secs")
        logging.debug("{} triangles".format(
            sum(1 for _ in tds.alive_triangles())))
        logging.debug("{} vertices".format(tds.finite_vertex_count))
        logging.debug(str(tds.visits) + " visits")
        logging.debug("{} points left pending".format(len(self.conflicts)))

    def initialize(self, vids):
        """Make the first triangle from the first three non-collinear points,
        surrounded by three ghost triangles.

        Returns the indices of the three vertices used.
        """
        tds = self.triangulation
        if len(vids) < 3:
            raise ValueError("At least 3 points needed to triangulate")
        a, b = vids[0], vids[1]
        pa, pb = tds.point(a), tds.point(b)
        for c in vids[2:]:
            o = orientation(pa, pb, tds.point(c))
            if o != COLLINEAR:
                break
        else:
            raise ValueError("All points are collinear")
        if o != LEFT:
            b, c = c, b
        t = tds.new_triangle(a, b, c, REAL)
        triangles = [t]
        for u, w in ((a, b), (b, c), (c, a)):
            # exterior lies left of the hull edge as seen in the ghost
            triangles.append(tds.new_triangle(w, u, INF, GHOST))
        self.link_all(triangles)
        for v in (a, b, c):
            tds.vertices[v].triangle = t
        tds.vertices[INF].triangle = triangles[1]
        self.last = t
        return (a, b, c)

    def link_all(self, triangles):
        """Link the given triangles to each other over their common sides"""
        tds = self.triangulation
        directed = {}
        for t in triangles:
            vertices = tds.triangles[t].vertices
            for side in range(3):
                directed[(vertices[ccw(side)], vertices[cw(side)])] = (t, side)
        for (u, w), (t, side) in directed.items():
            other = directed.get((w, u))
            if other is not None:
                tds.link_2dir(t, side, other[0], other[1])

    def in_conflict(self, t, p):
        """Is point p in conflict with triangle t

        For a finite triangle: p lies inside its circumcircle (cocircular
        points resolved by perturbation). For a ghost triangle: p lies
        strictly left of the hull edge (i.e. outside the hull), or on the
        open hull edge.
        """
        tds = self.triangulation
        tri = tds.triangles[t]
        if tri.kind == GHOST:
            u, w = tds.ghost_edge(t)
            pu, pw = tds.point(u), tds.point(w)
            o = orientation(pu, pw, p)
            if o == LEFT:
                return True
            return o == COLLINEAR and strictly_between(pu, pw, p)
        a, b, c = tds.corners(t)
        return in_circle_perturbed(a, b, c, p) == INSIDE

    def locate(self, v):
        """Find where vertex v (not yet inserted) lies"""
        tds = self.triangulation
        ini = self.last
        if v in self.conflicts:
            ini = self.conflicts.next_conflict(v)
        if not tds.alive(ini):
            ini = tds.any_triangle()
        return tds.locate(tds.point(v), ini)

    def cavity(self, p, location):
        """Collect the triangles that conflict with p (the cavity) and the
        edges on its boundary, as (triangle, side) pairs seen from inside.

        Does not modify the triangulation.
        """
        tds = self.triangulation
        triangles = tds.triangles
        first = location.triangle
        cavity = [first]
        seen = set(cavity)
        if location.kind == ON_EDGE:
            # both triangles sharing the edge are in the cavity
            other = triangles[first].neighbours[location.side]
            cavity.append(other)
            seen.add(other)
        boundary = []
        queue = deque(cavity)
        while queue:
            t = queue.popleft()
            tri = triangles[t]
            for side in range(3):
                n = tri.neighbours[side]
                if n in seen:
                    continue
                if tri.constrained[side]:
                    boundary.append((t, side))
                    continue
                u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
                if INF not in (u, w) and \
                        orientation(tds.point(u), tds.point(w), p) != LEFT:
                    boundary.append((t, side))
                    continue
                if self.in_conflict(n, p):
                    seen.add(n)
                    cavity.append(n)
                    queue.append(n)
                else:
                    boundary.append((t, side))
        return cavity, boundary

    def insert(self, v, location=None):
        """Insert vertex v (already in the arena) into the triangulation.

        Returns the location of the vertex. When it lies on an existing
        vertex, nothing is changed and the location tells which vertex.

        If location is given, it is used as is (this way a point can be
        forced on an edge). A point on a constrained edge splits the edge.
        """
        tds = self.triangulation
        triangles = tds.triangles
        if location is None:
            location = self.locate(v)
        if location.kind == ON_VERTEX:
            self.conflicts.discard(v)
            return location
        p = tds.point(v)
        cavity, boundary = self.cavity(p, location)

        # -- the edge that is split, if any
        split = None
        if location.kind == ON_EDGE:
            tri = triangles[location.triangle]
            if tri.constrained[location.side]:
                split = (tri.vertices[ccw(location.side)],
                         tri.vertices[cw(location.side)])

        # -- check that the cavity is star shaped wrt p, before any change
        ring = []
        for t, side in boundary:
            tri = triangles[t]
            u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
            if INF not in (u, w) and \
                    orientation(tds.point(u), tds.point(w), p) != LEFT:
                raise InsertionFailed(
                    "Cavity of {} is not star-shaped".format(p))
            kind = tri.kind
            if kind == GHOST:
                kind = REAL
            if INF in (u, w):
                kind = GHOST
            ring.append((u, w, tri.neighbours[side], tri.constrained[side],
                         kind))

        # -- candidates for the conflicts of the new triangles
        candidates = set()
        for t in cavity:
            candidates.update(self.conflicts.vertices_of(t))
        for t, side in boundary:
            candidates.update(
                self.conflicts.vertices_of(triangles[t].neighbours[side]))
        candidates.discard(v)
        self.conflicts.discard(v)

        for t in cavity:
            self.conflicts.release(t)
            tds.delete_triangle(t)

        # -- retriangulate the cavity
        created = []
        spokes_out = {}
        spokes_in = {}
        for u, w, n, constrained, kind in ring:
            t = tds.new_triangle(u, w, v, kind)
            created.append(t)
            tri = triangles[t]
            tri.constrained[2] = constrained
            tds.link_2dir(t, 2, n, cw(triangles[n].vertices.index(w)))
            spokes_out[w] = (t, 0)
            spokes_in[u] = (t, 1)
            if split is not None:
                if w in split:
                    tri.constrained[0] = True
                if u in split:
                    tri.constrained[1] = True
            tds.vertices[u].triangle = t
            tds.vertices[w].triangle = t
        for corner, (t, side) in spokes_out.items():
            other, oside = spokes_in[corner]
            tds.link_2dir(t, side, other, oside)
        tds.vertices[v].triangle = created[0]

        if split is not None:
            key = segment_key(*split)
            if key in tds.segments:
                tds.split_segment(key, v)

        # -- conflicts of the pending vertices with the new triangles
        for q in sorted(candidates):
            pq = tds.point(q)
            for t in created:
                if self.in_conflict(t, pq):
                    self.conflicts.register(q, t)

        self.created = created
        for t in created:
            if triangles[t].kind != GHOST:
                self.last = t
                break
        else:
            self.last = created[0]
        return location

    def insert_at(self, v, t, side):
        """Insert vertex v on the edge at side of triangle t"""
        return self.insert(v, Location(ON_EDGE, t, side=side))
