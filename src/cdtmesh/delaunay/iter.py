'''
Created on Nov 13, 2018

@author: martijn
'''

# ------------------------------------------------------------------------------
# Iterators
#
from cdtmesh.delaunay.tds import Edge, ccw, cw, segment_key, INF, REAL


class FiniteEdgeIterator(object):
    """Iterator over the edges of the triangulation that do not have the
    infinite vertex as end point, every edge is given once.
    """

    def __init__(self, triangulation, constraints_only=False):
        self.triangulation = triangulation
        self.constraints_only = constraints_only
        self.current_idx = 0  # this is index in the list
        self.pos = -1  # this is index in the triangle (side)

    def __iter__(self):
        return self

    def __next__(self):
        triangles = self.triangulation.triangles
        while self.current_idx < len(triangles):
            triangle = triangles[self.current_idx]
            # skip this triangle if it is a dead slot or an infinite triangle
            if triangle.vertices is None or not triangle.is_finite:
                self.pos = -1
                self.current_idx += 1
                continue
            self.pos += 1
            ret = None
            neighbour = triangle.neighbours[self.pos]
            # output edges only once:
            # inside the triangulation only the triangle
            # with lowest index its edge is output
            # along the convex hull we always output the edge
            if self.current_idx < neighbour or \
                    not triangles[neighbour].is_finite:
                if not self.constraints_only or \
                        triangle.constrained[self.pos]:
                    ret = Edge(self.triangulation, self.current_idx, self.pos)
            if self.pos == 2:
                self.pos = -1
                self.current_idx += 1
            if ret is not None:
                return ret
        raise StopIteration()


class StarEdgeIterator(object):
    """Returns iterator over edges in the star of the vertex

    The edges are returned in counterclockwise order around the vertex.
    The triangles that the edges are associated with share the vertex
    that this iterator is constructed with; the side of each edge is the
    index of the vertex (so the edge given is the one opposite the vertex).
    """

    def __init__(self, triangulation, vertex):
        self.triangulation = triangulation
        self.vertex = vertex
        self.start = triangulation.vertices[vertex].triangle
        self.triangle = self.start
        start = triangulation.triangles[self.start]
        self.side = ccw(start.vertices.index(self.vertex))
        self.done = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.done:
            # we are at start again
            raise StopIteration()
        triangles = self.triangulation.triangles
        self.triangle = triangles[self.triangle].neighbours[self.side]
        assert self.triangle is not None
        side = triangles[self.triangle].vertices.index(self.vertex)
        e = Edge(self.triangulation, self.triangle, side)
        self.side = ccw(side)
        if self.triangle == self.start:
            self.done = True
        return e


class OutputTriangle(object):
    """Triangle as given to the outside: 3 vertex indices (ccw) and whether
    one of its edges lies on the outer boundary or on a hole ring."""

    __slots__ = ('a', 'b', 'c', 'is_boundary')

    def __init__(self, a, b, c, is_boundary):
        self.a = a
        self.b = b
        self.c = c
        self.is_boundary = is_boundary

    def __iter__(self):
        return iter((self.a, self.b, self.c, self.is_boundary))

    def __eq__(self, other):
        return tuple(self) == tuple(other)

    def __hash__(self):
        return hash(tuple(self))

    def __repr__(self):
        return "OutputTriangle({0}, {1}, {2}, {3})".format(
            self.a, self.b, self.c, self.is_boundary)

    @property
    def vertices(self):
        return (self.a, self.b, self.c)


class InteriorTriangleIterator(object):
    """Iterator over all triangles inside the domain (the real triangles),
    in order of their index in the arena.
    """

    def __init__(self, triangulation, boundary_labels=('boundary', 'hole')):
        self.triangulation = triangulation
        self.boundary_labels = boundary_labels
        self.current_idx = 0

    def __iter__(self):
        return self

    def __next__(self):
        tds = self.triangulation
        while self.current_idx < len(tds.triangles):
            triangle = tds.triangles[self.current_idx]
            self.current_idx += 1
            if triangle.vertices is None or triangle.kind != REAL:
                continue
            a, b, c = triangle.vertices
            is_boundary = False
            for side in range(3):
                if not triangle.constrained[side]:
                    continue
                key = segment_key(triangle.vertices[ccw(side)],
                                  triangle.vertices[cw(side)])
                if tds.segments.get(key) in self.boundary_labels:
                    is_boundary = True
                    break
            return OutputTriangle(a, b, c, is_boundary)
        raise StopIteration()


class OutputTriangles(object):
    """The triangles of a mesh, excluding ghost triangles and triangles
    outside the domain. Can be iterated over more than once.
    """

    def __init__(self, triangulation):
        self.triangulation = triangulation

    def __iter__(self):
        return InteriorTriangleIterator(self.triangulation)

    def __len__(self):
        return sum(1 for _ in self)

    @property
    def points(self):
        """Coordinates of the vertices, by vertex index (None at index 0,
        the infinite vertex)"""
        return [None if v == INF else vertex.point
                for v, vertex in enumerate(self.triangulation.vertices)]
