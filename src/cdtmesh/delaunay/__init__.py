"""cdtmesh - Constrained Delaunay Triangulation and quality meshing of
polygonal domains
"""

import logging

from cdtmesh.delaunay.mesh import Mesh, MeshStats, new_mesh, insert_vertex, \
    insert_segment, refine, triangles, mesh_stats
from cdtmesh.delaunay.refine import RefinementReport
from cdtmesh.delaunay.iter import OutputTriangle, OutputTriangles
from cdtmesh.delaunay.errors import MeshError, InvalidBoundary, \
    HoleOutsideBoundary, PointOutsideDomain, DuplicatePoint, InvalidFlip, \
    SegmentRecoveryFailed, InsertionFailed, RefinementIncomplete


__version__ = '0.1.0.dev0'
__license__ = 'MIT License'
__author__ = 'Martijn Meijers'
__all__ = ("Mesh", "MeshStats", "new_mesh", "insert_vertex",
           "insert_segment", "refine", "triangles", "mesh_stats",
           "RefinementReport", "OutputTriangle", "OutputTriangles",
           "MeshError", "InvalidBoundary", "HoleOutsideBoundary",
           "PointOutsideDomain", "DuplicatePoint", "InvalidFlip",
           "SegmentRecoveryFailed", "InsertionFailed",
           "RefinementIncomplete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    from cdtmesh.delaunay.helpers import random_circle_vertices
    square = [(-1, -1), (1, -1), (1, 1), (-1, 1)]
    pts = [pt for pt in random_circle_vertices(1500)
           if max(abs(pt[0]), abs(pt[1])) < 1]
    mesh = new_mesh(square, points=pts)
    refine(mesh, 20)
    print(mesh_stats(mesh))
