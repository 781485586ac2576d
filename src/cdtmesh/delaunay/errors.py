"""Errors raised while building or refining a mesh.

All of them are ValueErrors: they signal a problem with the input or with
the topology that the input would lead to.
"""


class MeshError(ValueError):
    """Base class for all mesh errors"""


class InvalidBoundary(MeshError):
    """Boundary (or hole) ring self-intersects, is degenerate or has fewer
    than 3 points, or hole rings intersect each other"""


class HoleOutsideBoundary(MeshError):
    """Hole ring not fully contained in the outer boundary"""


class PointOutsideDomain(MeshError):
    """Point lies outside the boundary or inside a hole"""


class DuplicatePoint(MeshError):
    """Point coincides with a vertex already in the mesh"""

    def __init__(self, message, vertex=None):
        super(DuplicatePoint, self).__init__(message)
        self.vertex = vertex


class InvalidFlip(MeshError):
    """Edge cannot be flipped (constrained, on the hull or the
    quadrilateral is not strictly convex)"""


class SegmentRecoveryFailed(MeshError):
    """Constrained segment cannot be made an edge of the mesh"""


class InsertionFailed(MeshError):
    """Cavity for a new vertex is not star-shaped; the mesh is unchanged"""


class RefinementIncomplete(MeshError):
    """Refinement stopped before all quality criteria were met"""

    def __init__(self, message, report=None):
        super(RefinementIncomplete, self).__init__(message)
        self.report = report
