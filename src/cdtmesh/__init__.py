"""cdtmesh - Constrained Delaunay Triangulation and quality meshing of
polygonal domains
"""

__version__ = '0.1.0.dev0'
__license__ = 'MIT License'
__author__ = 'Martijn Meijers'

from cdtmesh.delaunay import Mesh, MeshStats, new_mesh, insert_vertex, \
    insert_segment, refine, triangles, mesh_stats, RefinementReport, \
    OutputTriangle, OutputTriangles, MeshError, \
    InvalidBoundary, HoleOutsideBoundary, PointOutsideDomain, \
    DuplicatePoint, InvalidFlip, SegmentRecoveryFailed, InsertionFailed, \
    RefinementIncomplete

__all__ = ["new_mesh", "insert_vertex", "insert_segment", "refine",
           "triangles", "mesh_stats", "Mesh", "MeshStats",
           "RefinementReport", "OutputTriangle", "OutputTriangles",
           "MeshError", "InvalidBoundary",
           "HoleOutsideBoundary", "PointOutsideDomain", "DuplicatePoint",
           "InvalidFlip", "SegmentRecoveryFailed", "InsertionFailed",
           "RefinementIncomplete"]
