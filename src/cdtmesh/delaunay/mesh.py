"""Building, changing and querying a mesh of a polygonal domain.
"""
import logging
import time
from random import Random

from cdtmesh.delaunay.tds import Triangulation, ON_VERTEX, segment_key
from cdtmesh.delaunay.preds import min_angle as smallest_angle, \
    OUTSIDE, INSIDE
from cdtmesh.delaunay.conflicts import ConflictGraph
from cdtmesh.delaunay.insert_bw import BowyerWatsonInserter
from cdtmesh.delaunay.cdt import ConstraintInserter
from cdtmesh.delaunay.domain import validate_ring, validate_holes, \
    ccw_ring, in_domain, classify
from cdtmesh.delaunay.refine import Refiner
from cdtmesh.delaunay.helpers import ToPointsAndSegments
from cdtmesh.delaunay.iter import FiniteEdgeIterator, OutputTriangles
from cdtmesh.delaunay.errors import PointOutsideDomain, DuplicatePoint, \
    SegmentRecoveryFailed, InsertionFailed


class Mesh(object):
    """A triangulated domain: the triangulation, the structures to change it
    and the rings that bound the domain.

    The rings are kept as counterclockwise lists of coordinates
    (boundary, holes) and of vertex indices (boundary_vertices,
    hole_vertices).
    """

    def __init__(self, seed=None):
        self.random = Random(seed)
        self.triangulation = Triangulation(self.random)
        self.conflicts = ConflictGraph()
        self.inserter = BowyerWatsonInserter(self.triangulation,
                                             self.conflicts)
        self.constraints = ConstraintInserter(self.triangulation)
        self.boundary = []
        self.holes = []
        self.boundary_vertices = []
        self.hole_vertices = []
        self.point_vertices = []
        self.classified = False

    def point(self, vertex):
        """Coordinates of a vertex"""
        return self.triangulation.point(vertex)

    @property
    def segments(self):
        """Constrained segments: sorted vertex index pair -> label"""
        return self.triangulation.segments

    @property
    def vertex_count(self):
        return self.triangulation.finite_vertex_count

    def has_vertex(self, vertex):
        return isinstance(vertex, int) and \
            0 < vertex < len(self.triangulation.vertices)


class MeshStats(object):
    """Summary of a mesh"""

    __slots__ = ('vertex_count', 'triangle_count', 'min_angle_achieved')

    def __init__(self, vertex_count, triangle_count, min_angle_achieved):
        self.vertex_count = vertex_count
        self.triangle_count = triangle_count
        self.min_angle_achieved = min_angle_achieved

    def __repr__(self):
        return ("MeshStats(vertex_count={0}, triangle_count={1}, "
                "min_angle_achieved={2})").format(
                    self.vertex_count, self.triangle_count,
                    self.min_angle_achieved)


def new_mesh(boundary, holes=(), points=(), segments=(), seed=None):
    """Triangulate the domain given by the boundary ring and hole rings.

    points are extra vertices, strictly inside the domain; segments are
    pairs of indices into points that will be edges of the mesh. With the
    same seed, the same mesh is made.

    A point on a ring would lie on a boundary segment that still has to be
    recovered, so it is refused here (PointOutsideDomain). Once the mesh
    exists, insert_vertex accepts such a point and splits the segment.
    """
    start = time.perf_counter()
    ring = ccw_ring(validate_ring(boundary))
    hole_rings = [ccw_ring(validate_ring(hole)) for hole in holes]
    validate_holes(ring, hole_rings)
    points = [(float(pt[0]), float(pt[1])) for pt in points]
    for pt in points:
        if in_domain(pt, ring, hole_rings) != INSIDE:
            raise PointOutsideDomain(
                "Point {} not strictly inside domain".format(pt))
    helper = ToPointsAndSegments()
    boundary_idx = helper.add_ring(ring, 'boundary')
    holes_idx = [helper.add_ring(hole, 'hole') for hole in hole_rings]
    points_idx = [helper.add_point(pt) for pt in points]
    for i, j in segments:
        if not (0 <= i < len(points) and 0 <= j < len(points)):
            raise SegmentRecoveryFailed(
                "Segment ({}, {}) refers to unknown point".format(i, j))
        helper.add_segment(points[i], points[j], 'segment')
    end = time.perf_counter()
    logging.debug("Validating input: " + str(end - start) + " secs")

    mesh = Mesh(seed)
    tds = mesh.triangulation
    # vertex index = point index + 1, index 0 is the infinite vertex
    for x, y in helper.points:
        tds.add_vertex(x, y)
    mesh.boundary = ring
    mesh.holes = hole_rings
    mesh.boundary_vertices = [i + 1 for i in boundary_idx]
    mesh.hole_vertices = [[i + 1 for i in idx] for idx in holes_idx]
    mesh.point_vertices = [i + 1 for i in points_idx]
    mesh.inserter.insert_points(range(1, len(helper.points) + 1))

    logging.debug("")
    logging.debug("inserting " + str(len(helper.segments)) + " constraints")
    for label in ('boundary', 'hole', 'segment'):
        mesh.constraints.insert_segments(
            [(a + 1, b + 1) for a, b in helper.segments_labeled(label)],
            label)
    # Keep FiniteEdgeIterator as iterator (do not read it to memory)
    edge_it = FiniteEdgeIterator(tds, constraints_only=True)
    constraint_ct = sum(1 for _ in edge_it)
    logging.debug(" {count} constraints".format(count=constraint_ct))

    start = time.perf_counter()
    marked = classify(tds, mesh.hole_vertices)
    mesh.classified = True
    end = time.perf_counter()
    logging.debug("Classifying took: " + str(end - start) + " secs")
    logging.debug("{} triangles outside domain".format(marked))
    return mesh


def insert_vertex(mesh, point):
    """Insert a point inside (or on the boundary of) the domain, returns
    the index of the new vertex.

    A point on a segment splits the segment. A point on an existing
    vertex raises DuplicatePoint, leaving the mesh unchanged.
    """
    tds = mesh.triangulation
    p = (float(point[0]), float(point[1]))
    if in_domain(p, mesh.boundary, mesh.holes) == OUTSIDE:
        raise PointOutsideDomain("Point {} outside domain".format(p))
    ini = mesh.inserter.last
    if not tds.alive(ini):
        ini = tds.any_triangle()
    location = tds.locate(p, ini)
    if location.kind == ON_VERTEX:
        raise DuplicatePoint(
            "Point {} coincides with vertex {}".format(p, location.vertex),
            vertex=location.vertex)
    v = tds.add_vertex(p[0], p[1])
    try:
        mesh.inserter.insert(v, location)
    except InsertionFailed:
        tds.vertices.pop()
        raise
    return v


def insert_segment(mesh, vertex_a, vertex_b):
    """Make the segment between two vertices an edge of the mesh"""
    if not (mesh.has_vertex(vertex_a) and mesh.has_vertex(vertex_b)):
        raise SegmentRecoveryFailed(
            "Unknown vertex in segment ({}, {})".format(vertex_a, vertex_b))
    if segment_key(vertex_a, vertex_b) in mesh.segments:
        return
    mesh.constraints.insert(vertex_a, vertex_b, 'segment', domain_only=True)


def refine(mesh, min_angle, max_area=None, max_iterations=None,
           max_vertices=None):
    """Refine the mesh until all triangles inside the domain have angles of
    at least min_angle degrees (and areas of at most max_area), or until
    the budget runs out.
    """
    return Refiner(mesh, min_angle, max_area, max_iterations,
                   max_vertices).run()


def triangles(mesh):
    """The triangles inside the domain, as OutputTriangles"""
    return OutputTriangles(mesh.triangulation)


def mesh_stats(mesh):
    """Counts and the smallest angle of the triangles inside the domain"""
    tds = mesh.triangulation
    count = 0
    smallest = None
    for tri in triangles(mesh):
        count += 1
        angle = smallest_angle(*(tds.point(v) for v in tri.vertices))
        if smallest is None or angle < smallest:
            smallest = angle
    return MeshStats(tds.finite_vertex_count, count, smallest)
