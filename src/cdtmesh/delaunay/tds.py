'''
Created on Nov 13, 2018

@author: martijn
'''
from random import Random

from cdtmesh.delaunay.preds import orientation, strictly_between, \
    LEFT, RIGHT, COLLINEAR
from cdtmesh.delaunay.errors import InvalidFlip
# ------------------------------------------------------------------------------
# Helpers
#

# index of the vertex at infinity, shared by all ghost triangles
INF = 0

# -- kinds of triangles
REAL = 'real'
GHOST = 'ghost'
HOLE = 'hole'

# -- kinds of point locations
INTERIOR = 'interior'
ON_EDGE = 'on_edge'
ON_VERTEX = 'on_vertex'


def box(points):
    """Obtain a tight fitting axis-aligned box around point set"""
    xmin = min(points, key=lambda x: x[0])[0]
    ymin = min(points, key=lambda x: x[1])[1]
    xmax = max(points, key=lambda x: x[0])[0]
    ymax = max(points, key=lambda x: x[1])[1]
    return (xmin, ymin), (xmax, ymax)


def ccw(i):
    """Get index (0, 1 or 2) increased with one (ccw)"""
    return (i + 1) % 3


def cw(i):
    """Get index (0, 1 or 2) decreased with one (cw)"""
    return (i - 1) % 3


def apex(side):
    """Given a side, give the apex of the triangle """
    return side % 3


def orig(side):
    """Given a side, give the origin of the triangle """
    return (side + 1) % 3  # ccw(side)


def dest(side):
    """Given a side, give the destination of the triangle """
    return (side - 1) % 3  # cw(side)


def segment_key(a, b):
    """Key of the (unordered) segment between vertex a and b"""
    return (a, b) if a < b else (b, a)


class Vertex(object):
    """A vertex in the triangulation.

    Steiner vertices are the ones added by refinement; segments lists the
    keys of the constrained segments this vertex is an end point of.
    """
    __slots__ = ('x', 'y', 'steiner', 'triangle', 'segments')

    def __init__(self, x, y, steiner=False):
        self.x = x
        self.y = y
        self.steiner = steiner
        self.triangle = None
        self.segments = []

    def __str__(self):
        return "{0} {1}".format(self.x, self.y)

    def __getitem__(self, i):
        if i == 0:
            return self.x
        elif i == 1:
            return self.y
        else:
            raise IndexError("No such ordinate: {}".format(i))

    @property
    def point(self):
        return (self.x, self.y)

    @property
    def is_finite(self):
        return True


class InfiniteVertex(Vertex):
    """The point at infinity, apex of every ghost triangle"""
    __slots__ = ()

    def __init__(self):
        super(InfiniteVertex, self).__init__(None, None)

    def __str__(self):
        return "Inf Inf"

    def __getitem__(self, i):
        raise ValueError("Infinite vertex has no geometric embedding")

    @property
    def point(self):
        raise ValueError("Infinite vertex has no geometric embedding")

    @property
    def is_finite(self):
        return False


class Triangle(object):
    """Triangle for which its vertices should be oriented CCW

    vertices and neighbours hold indices into the arena of the
    Triangulation; neighbour i lies across the side opposite vertex i.
    A slot that is not in use has its vertices set to None.
    """

    __slots__ = ('vertices', 'neighbours', 'constrained', 'kind')

    def __init__(self, a, b, c, kind=REAL):
        self.vertices = [a, b, c]  # orig, dest, apex -- ccw
        self.neighbours = [None] * 3
        self.constrained = [False] * 3
        self.kind = kind

    def __str__(self):
        return "Triangle({0[0]}, {0[1]}, {0[2]}; {1})".format(
            self.vertices, self.kind)

    @property
    def is_finite(self):
        return INF not in self.vertices


class Edge(object):
    """An edge is a Triangle and an integer [0, 1, 2] that indicates the
    side of the triangle to use as the Edge"""

    __slots__ = ('triangulation', 'triangle', 'side')

    def __init__(self, triangulation, triangle, side):
        self.triangulation = triangulation
        self.triangle = triangle
        self.side = side

    def __eq__(self, other):
        return self.triangle == other.triangle and self.side == other.side

    def __hash__(self):
        return hash((self.triangle, self.side))

    @property
    def segment(self):
        """Vertex indices (origin, destination) of the edge, ccw with
        respect to the triangle"""
        vertices = self.triangulation.triangles[self.triangle].vertices
        return (vertices[ccw(self.side)], vertices[cw(self.side)])


class Location(object):
    """Where a point lies with respect to the triangulation

    kind is INTERIOR, ON_EDGE or ON_VERTEX; for ON_EDGE side tells on
    which side of triangle the point lies, for ON_VERTEX vertex is the
    index of the coinciding vertex.
    """
    __slots__ = ('kind', 'triangle', 'side', 'vertex')

    def __init__(self, kind, triangle, side=None, vertex=None):
        self.kind = kind
        self.triangle = triangle
        self.side = side
        self.vertex = vertex

    def __repr__(self):
        return "Location({0}, triangle={1}, side={2}, vertex={3})".format(
            self.kind, self.triangle, self.side, self.vertex)


class Triangulation(object):
    """Triangulation data structure

    An arena of vertices and triangles, addressed by index. Index 0 of the
    vertices is the infinite vertex. Triangle slots that are deleted are
    kept on a free list and recycled by new_triangle.

    The registry of constrained segments (key -> label) is kept here too,
    so that every component splitting or adding segments keeps the
    constrained flags and the registry in sync.
    """

    def __init__(self, random=None):
        self.vertices = [InfiniteVertex()]
        self.triangles = []
        self.free = []
        self.segments = {}
        self.random = random if random is not None else Random()
        self.flips = 0
        self.visits = 0

    # -- vertices
    def add_vertex(self, x, y, steiner=False):
        """Append a vertex to the arena (not yet linked to any triangle)"""
        self.vertices.append(Vertex(float(x), float(y), steiner))
        return len(self.vertices) - 1

    def point(self, v):
        vertex = self.vertices[v]
        return (vertex.x, vertex.y)

    @property
    def finite_vertex_count(self):
        return len(self.vertices) - 1

    # -- triangles
    def new_triangle(self, a, b, c, kind=REAL):
        """Make a triangle, reusing a free slot if there is one"""
        if self.free:
            t = self.free.pop()
            tri = self.triangles[t]
            tri.vertices = [a, b, c]
            tri.neighbours = [None] * 3
            tri.constrained = [False] * 3
            tri.kind = kind
        else:
            t = len(self.triangles)
            self.triangles.append(Triangle(a, b, c, kind))
        return t

    def delete_triangle(self, t):
        """Invalidate the slot of triangle t and put it on the free list"""
        tri = self.triangles[t]
        tri.vertices = None
        tri.neighbours = None
        tri.constrained = None
        self.free.append(t)

    def alive(self, t):
        return t is not None and self.triangles[t].vertices is not None

    def alive_triangles(self, kind=None):
        """Indices of triangles in use, optionally only of given kind"""
        for t, tri in enumerate(self.triangles):
            if tri.vertices is None:
                continue
            if kind is None or tri.kind == kind:
                yield t

    def corners(self, t):
        """Coordinates of the 3 corners of a finite triangle"""
        vertices = self.vertices
        return tuple((vertices[v].x, vertices[v].y)
                     for v in self.triangles[t].vertices)

    def link_2dir(self, t0, side0, t1, side1):
        """Links two triangles to each other over their common side
        """
        assert t0 is not None
        assert t1 is not None
        self.triangles[t0].neighbours[side0] = t1
        self.triangles[t1].neighbours[side1] = t0

    def link_1dir(self, t0, side0, t1):
        """Links triangle t0 to t1 for side0"""
        self.triangles[t0].neighbours[side0] = t1

    def opposite_side(self, t, side):
        """Side index, in the neighbour over side of t, of the same edge"""
        tri = self.triangles[t]
        neighbour = self.triangles[tri.neighbours[side]]
        # origin of the edge in t is its destination in the neighbour
        return ccw(neighbour.vertices.index(tri.vertices[ccw(side)]))

    def ghost_edge(self, t):
        """Hull edge (u, w) of ghost triangle t; the exterior of the
        convex hull lies left of u -> w"""
        vertices = self.triangles[t].vertices
        side = vertices.index(INF)
        return vertices[ccw(side)], vertices[cw(side)]

    def edge_of(self, a, b):
        """Triangle and side for which the directed edge a -> b is a side
        (the triangle lies left of a -> b), None if not an edge"""
        for t in self.star(a):
            vertices = self.triangles[t].vertices
            i = vertices.index(a)
            if vertices[ccw(i)] == b:
                return t, cw(i)
        return None

    def star(self, v):
        """Triangles around vertex v (ccw order)"""
        start = self.vertices[v].triangle
        t = start
        while True:
            yield t
            tri = self.triangles[t]
            # rotate ccw: cross the side from v to its cw neighbour
            t = tri.neighbours[ccw(tri.vertices.index(v))]
            if t == start:
                break

    def set_constrained(self, a, b, constrained=True):
        """Set the constrained flag of edge ab, at both sides"""
        found = self.edge_of(a, b)
        if found is None:
            raise ValueError("{} -> {} is not an edge".format(a, b))
        t, side = found
        self.triangles[t].constrained[side] = constrained
        neighbour = self.triangles[t].neighbours[side]
        self.triangles[neighbour].constrained[
            self.opposite_side(t, side)] = constrained

    # -- segment registry
    def add_segment(self, a, b, label):
        key = segment_key(a, b)
        self.segments[key] = label
        for v in key:
            if key not in self.vertices[v].segments:
                self.vertices[v].segments.append(key)
        return key

    def remove_segment(self, key):
        label = self.segments.pop(key)
        for v in key:
            self.vertices[v].segments.remove(key)
        return label

    def split_segment(self, key, v):
        """Replace segment by the two halves that meet at vertex v"""
        label = self.remove_segment(key)
        a, b = key
        return self.add_segment(a, v, label), self.add_segment(v, b, label)

    # -- flip
    def flip22(self, t0, side0):
        """Performs the flip of the edge at side0 of t0 and its neighbour

        If t0 and t1 are two triangles sharing a common edge BD,
        the method replaces ABD and CDB triangles by ABC and CDA,
        respectively (A is apex of t0, C is apex of t1).

        Raises InvalidFlip if the edge is constrained, is next to a ghost
        triangle or if the quadrilateral ABCD is not strictly convex. In
        that case nothing changes.

        Post-conditions:
        - t0 / t1 are rotated *ccw*
        - t0 / t1 are linked correctly within the quad (vertices/neighbouring
          triangles) and wrt each other
        - the vertices point to the correct triangle
        """
        triangles = self.triangles
        tri0 = triangles[t0]
        t1 = tri0.neighbours[side0]
        tri1 = triangles[t1]
        if tri0.constrained[side0]:
            raise InvalidFlip("Constrained edge cannot be flipped")
        if tri0.kind == GHOST or tri1.kind == GHOST:
            raise InvalidFlip("Edge on convex hull cannot be flipped")
        side1 = self.opposite_side(t0, side0)

        apex0, orig0, dest0 = apex(side0), orig(side0), dest(side0)
        apex1, orig1, dest1 = apex(side1), orig(side1), dest(side1)

        # side0 and side1 should be same edge
        assert tri0.vertices[orig0] == tri1.vertices[dest1]
        assert tri0.vertices[dest0] == tri1.vertices[orig1]

        # -- vertices around quadrilateral in ccw order starting at apex of t0
        A, B = tri0.vertices[apex0], tri0.vertices[orig0]
        C, D = tri1.vertices[apex1], tri0.vertices[dest0]
        pa, pb, pc, pd = (self.point(v) for v in (A, B, C, D))
        if orientation(pa, pb, pc) != LEFT or orientation(pc, pd, pa) != LEFT:
            raise InvalidFlip("Quadrilateral is not strictly convex")
        self.flips += 1
        # -- triangles around quadrilateral in ccw order, starting at A
        AB, BC = tri0.neighbours[dest0], tri1.neighbours[orig1]
        CD, DA = tri1.neighbours[dest1], tri0.neighbours[orig0]
        cAB, cBC = tri0.constrained[dest0], tri1.constrained[orig1]
        cCD, cDA = tri1.constrained[dest1], tri0.constrained[orig0]

        # link neighbours around quadrilateral to triangles as after the flip
        # -- the sides of the triangles around are stored in apex_around
        apex_around = []
        for neighbour, corner in zip([AB, BC, CD, DA],
                                     [A, B, C, D]):
            apex_around.append(
                ccw(triangles[neighbour].vertices.index(corner)))
        # the triangles around we link to the correct triangle *after* the flip
        for neighbour, side, t in zip([AB, BC, CD, DA],
                                      apex_around,
                                      [t0, t0, t1, t1]):
            self.link_1dir(neighbour, side, t)

        # -- set new vertices, neighbours and constrained flags
        # for t0
        tri0.vertices = [A, B, C]
        tri0.neighbours = [BC, t1, AB]
        tri0.constrained = [cBC, False, cAB]
        # for t1
        tri1.vertices = [C, D, A]
        tri1.neighbours = [DA, t0, CD]
        tri1.constrained = [cDA, False, cCD]
        # -- update coordinate to triangle pointers
        for v in tri0.vertices:
            self.vertices[v].triangle = t0
        for v in tri1.vertices:
            self.vertices[v].triangle = t1
        return t0, t1

    # -- point location
    def walk(self, ini, p):
        """Walk from triangle ini to triangle containing p

        Note, because this walk can cycle for a non-Delaunay triangulation
        we pick a random edge to continue the walk
        (this is a remembering stochastic walk, see RR-4120.pdf,
        Technical report from HAL-Inria by
        Olivier Devillers, Sylvain Pion, Monique Teillaud.
        Walking in a triangulation,
        https://hal.inria.fr/inria-00072509)

        If p lies outside the convex hull, a ghost triangle whose hull edge
        sees p is returned. The walk is guaranteed to terminate: after as
        many steps as there are triangles, the triangles are scanned.
        """
        t = ini
        if self.triangles[t].kind == GHOST:
            t = self._step_inward(t, p)
            if self.triangles[t].kind == GHOST:
                return t
        previous = None
        for ct in range(len(self.triangles)):
            tri = self.triangles[t]
            # get random side to continue walk, this way the walk cannot get
            # stuck by always picking triangles in the same order
            e = self.random.randint(0, 2)
            for side in (e, ccw(e), cw(e)):
                neighbour = tri.neighbours[side]
                if neighbour == previous:
                    continue
                u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
                if orientation(self.point(u), self.point(w), p) == RIGHT:
                    previous = t
                    t = neighbour
                    break
            else:
                self.visits += ct
                return t
            if self.triangles[t].kind == GHOST:
                self.visits += ct
                return t
        self.visits += len(self.triangles)
        return self._scan(p)

    def _step_inward(self, t, p):
        """From ghost triangle t go to the finite triangle on the other side
        of its hull edge, unless that edge sees p"""
        u, w = self.ghost_edge(t)
        if orientation(self.point(u), self.point(w), p) == LEFT:
            return t
        return self.triangles[t].neighbours[self.triangles[t].vertices.index(
            INF)]

    def _scan(self, p):
        """Linear scan for the triangle that contains p"""
        ghosts = []
        for t in self.alive_triangles():
            tri = self.triangles[t]
            if tri.kind == GHOST:
                ghosts.append(t)
                continue
            a, b, c = self.corners(t)
            if orientation(a, b, p) != RIGHT and \
                    orientation(b, c, p) != RIGHT and \
                    orientation(c, a, p) != RIGHT:
                return t
        for t in ghosts:
            u, w = self.ghost_edge(t)
            if orientation(self.point(u), self.point(w), p) == LEFT:
                return t
        raise ValueError("No triangle found that contains {}".format(p))

    def walk_constrained(self, ini, p):
        """Walk from triangle ini towards p, without crossing constrained
        edges.

        Returns (triangle, None) when the triangle containing p is found,
        (triangle, side) when the walk is blocked by the constrained edge
        at side of triangle and None if the walk did not finish.
        """
        t = ini
        for _ in range(len(self.triangles)):
            tri = self.triangles[t]
            e = self.random.randint(0, 2)
            for side in (e, ccw(e), cw(e)):
                u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
                if orientation(self.point(u), self.point(w), p) == RIGHT:
                    if tri.constrained[side]:
                        return t, side
                    t = tri.neighbours[side]
                    break
            else:
                return t, None
            if self.triangles[t].kind == GHOST:
                return None
        return None

    def classify_point(self, t, p):
        """Location of p, given that triangle t contains p"""
        tri = self.triangles[t]
        if tri.kind == GHOST:
            side = tri.vertices.index(INF)
            u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
            pu, pw = self.point(u), self.point(w)
            if (p[0], p[1]) == pu:
                return Location(ON_VERTEX, t, vertex=u)
            if (p[0], p[1]) == pw:
                return Location(ON_VERTEX, t, vertex=w)
            if orientation(pu, pw, p) == COLLINEAR and \
                    strictly_between(pu, pw, p):
                return Location(ON_EDGE, t, side=side)
            return Location(INTERIOR, t)
        zeros = []
        for side in range(3):
            u, w = tri.vertices[ccw(side)], tri.vertices[cw(side)]
            if orientation(self.point(u), self.point(w), p) == COLLINEAR:
                zeros.append(side)
        if len(zeros) == 0:
            return Location(INTERIOR, t)
        elif len(zeros) == 1:
            return Location(ON_EDGE, t, side=zeros[0])
        # p lies on the vertex shared by both sides
        corner = 3 - zeros[0] - zeros[1]
        return Location(ON_VERTEX, t, vertex=tri.vertices[corner])

    def locate(self, p, ini):
        """Location of p, found by walking from triangle ini"""
        t = self.walk(ini, p)
        location = self.classify_point(t, p)
        tri = self.triangles[t]
        # on the line of a hull edge, but not on the edge: the ghost does not
        # see p, move along the hull in the direction of p
        while tri.kind == GHOST and location.kind == INTERIOR:
            u, w = self.ghost_edge(t)
            pu, pw = self.point(u), self.point(w)
            if orientation(pu, pw, p) == LEFT:
                break
            dx, dy = pw[0] - pu[0], pw[1] - pu[1]
            if (p[0] - pu[0]) * dx + (p[1] - pu[1]) * dy > 0:
                # beyond w: neighbour opposite u shares (w, inf)
                t = tri.neighbours[tri.vertices.index(u)]
            else:
                t = tri.neighbours[tri.vertices.index(w)]
            tri = self.triangles[t]
            location = self.classify_point(t, p)
        return location

    def any_triangle(self):
        """Some triangle that is in use (finite if possible)"""
        fallback = None
        for t in self.alive_triangles():
            if self.triangles[t].kind != GHOST:
                return t
            fallback = t
        return fallback

    def check_consistency(self):
        """Assert that all neighbour links and constrained flags are mutual
        and that all finite triangles are ccw"""
        for t in self.alive_triangles():
            tri = self.triangles[t]
            for side in range(3):
                neighbour = tri.neighbours[side]
                assert neighbour is not None, "{} has no neighbour".format(t)
                assert self.alive(neighbour), \
                    "{} links to deleted {}".format(t, neighbour)
                other = self.triangles[neighbour]
                oside = self.opposite_side(t, side)
                assert other.neighbours[oside] == t, \
                    "{} <-> {} not mutual".format(t, neighbour)
                assert other.constrained[oside] == tri.constrained[side], \
                    "constrained flag of {} <-> {} differs".format(
                        t, neighbour)
            if tri.kind != GHOST:
                assert INF not in tri.vertices
                a, b, c = self.corners(t)
                assert orientation(a, b, c) == LEFT, \
                    "{} is not ccw".format(t)
            else:
                assert INF in tri.vertices
        for v, vertex in enumerate(self.vertices):
            if vertex.triangle is None:
                continue
            assert v in self.triangles[vertex.triangle].vertices
        return True
