"""Conflict graph, relating vertices that still have to be inserted to the
triangles whose circumcircle (or, for a ghost triangle, outer half plane)
contains them.
"""


class ConflictGraph(object):
    """Bipartite relation pending vertex <-> triangle, kept in both
    directions so that both a vertex and a triangle can be looked up fast.
    """

    __slots__ = ('by_vertex', 'by_triangle')

    def __init__(self):
        self.by_vertex = {}
        self.by_triangle = {}

    def __len__(self):
        return len(self.by_vertex)

    def __contains__(self, vertex):
        return vertex in self.by_vertex

    def register(self, vertex, triangle):
        self.by_vertex.setdefault(vertex, set()).add(triangle)
        self.by_triangle.setdefault(triangle, set()).add(vertex)

    def vertices_of(self, triangle):
        """Pending vertices in conflict with triangle"""
        return self.by_triangle.get(triangle, ())

    def release(self, triangle):
        """Drop all associations of a triangle that is about to be
        destroyed, returns the vertices that were in conflict with it"""
        vertices = self.by_triangle.pop(triangle, set())
        for vertex in vertices:
            triangles = self.by_vertex[vertex]
            triangles.discard(triangle)
            if not triangles:
                del self.by_vertex[vertex]
        return vertices

    def next_conflict(self, vertex):
        """Triangle in conflict with vertex (the one with lowest index),
        None if the vertex is not pending"""
        triangles = self.by_vertex.get(vertex)
        if not triangles:
            return None
        return min(triangles)

    def discard(self, vertex):
        """Forget vertex (it has been inserted)"""
        for triangle in self.by_vertex.pop(vertex, ()):
            vertices = self.by_triangle[triangle]
            vertices.discard(vertex)
            if not vertices:
                del self.by_triangle[triangle]
