"""The domain to be meshed: one outer boundary ring with zero or more hole
rings.

Validation of the rings, point in polygon tests and the classification of
the triangles that lie outside the domain.
"""
from cdtmesh.delaunay.preds import orientation, segments_intersect, \
    on_segment, LEFT, RIGHT, COLLINEAR, INSIDE, OUTSIDE, ON
from cdtmesh.delaunay.tds import INF, GHOST, HOLE
from cdtmesh.delaunay.errors import InvalidBoundary, HoleOutsideBoundary


def ring_edges(ring):
    """Edges of a closed ring, as pairs of consecutive points"""
    return [(ring[i], ring[(i + 1) % len(ring)]) for i in range(len(ring))]


def ring_area(ring):
    """Signed area of a ring (positive for counterclockwise), shoelace"""
    total = 0.
    for (x0, y0), (x1, y1) in ring_edges(ring):
        total += x0 * y1 - x1 * y0
    return 0.5 * total


def validate_ring(points):
    """Returns the ring as list of 2-tuples of floats, without a closing
    point that repeats the first point.

    Raises InvalidBoundary when the ring has fewer than 3 distinct points,
    has no area, has repeated points or intersects itself.
    """
    ring = [(float(pt[0]), float(pt[1])) for pt in points]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    if len(ring) < 3:
        raise InvalidBoundary(
            "Ring needs at least 3 distinct points, got {}".format(len(ring)))
    if len(set(ring)) != len(ring):
        raise InvalidBoundary("Ring has repeated points")
    if ring_area(ring) == 0.:
        raise InvalidBoundary("Ring has no area")
    edges = ring_edges(ring)
    n = len(edges)
    for i in range(n):
        p1, p2 = edges[i]
        for j in range(i + 1, n):
            q1, q2 = edges[j]
            if j == i + 1 or (i == 0 and j == n - 1):
                # adjacent edges share one point, they may not fold back
                shared = p2 if j == i + 1 else p1
                other = q2 if j == i + 1 else q1
                start = p1 if j == i + 1 else p2
                if orientation(start, shared, other) == COLLINEAR and \
                        (on_segment(start, shared, other) or
                         on_segment(shared, other, start)):
                    raise InvalidBoundary(
                        "Ring folds back on itself at {}".format(shared))
                continue
            if segments_intersect(p1, p2, q1, q2):
                raise InvalidBoundary(
                    "Ring intersects itself: {} {} x {} {}".format(
                        p1, p2, q1, q2))
    return ring


def ccw_ring(ring):
    """Ring oriented counterclockwise"""
    if ring_area(ring) < 0:
        return list(reversed(ring))
    return list(ring)


def point_in_ring(point, ring):
    """Where does point lie with respect to ring: INSIDE, OUTSIDE or ON

    Winding number test, with exact orientation predicates.
    """
    winding = 0
    y = point[1]
    for a, b in ring_edges(ring):
        if on_segment(a, b, point):
            return ON
        if a[1] <= y:
            if b[1] > y and orientation(a, b, point) == LEFT:
                winding += 1
        elif b[1] <= y and orientation(a, b, point) == RIGHT:
            winding -= 1
    return INSIDE if winding != 0 else OUTSIDE


def rings_intersect(ring0, ring1):
    """Do (the boundaries of) two rings touch or cross"""
    for p1, p2 in ring_edges(ring0):
        for q1, q2 in ring_edges(ring1):
            if segments_intersect(p1, p2, q1, q2):
                return True
    return False


def validate_holes(boundary, holes):
    """Check that every hole lies inside the boundary and that holes do not
    touch, cross or contain each other.

    Rings should be validated already.
    """
    for hole in holes:
        for pt in hole:
            if point_in_ring(pt, boundary) != INSIDE:
                raise HoleOutsideBoundary(
                    "Hole vertex {} not inside boundary".format(pt))
        if rings_intersect(hole, boundary):
            raise HoleOutsideBoundary("Hole crosses boundary")
    for i, hole in enumerate(holes):
        for other in holes[i + 1:]:
            if rings_intersect(hole, other):
                raise InvalidBoundary("Holes touch or intersect")
            if point_in_ring(other[0], hole) != OUTSIDE or \
                    point_in_ring(hole[0], other) != OUTSIDE:
                raise InvalidBoundary("Hole inside other hole")


def in_domain(point, boundary, holes):
    """INSIDE, ON (boundary of the domain) or OUTSIDE"""
    where = point_in_ring(point, boundary)
    if where != INSIDE:
        return where
    for hole in holes:
        inhole = point_in_ring(point, hole)
        if inhole == ON:
            return ON
        elif inhole == INSIDE:
            return OUTSIDE
    return INSIDE


def classify(tds, hole_rings):
    """Mark all triangles that are outside the domain as HOLE.

    Floods from every ghost triangle and from the inner side of every hole
    ring (given as counterclockwise lists of vertex indices), stopping at
    constrained edges. Returns the number of triangles marked.
    """
    triangles = tds.triangles
    stack = []
    for t in tds.alive_triangles(GHOST):
        tri = triangles[t]
        side = tri.vertices.index(INF)
        if not tri.constrained[side]:
            stack.append(tri.neighbours[side])
    for ring in hole_rings:
        # the inside of a ccw hole ring lies left of its first edge
        found = tds.edge_of(ring[0], ring[1])
        if found is None:
            raise InvalidBoundary("Hole edge {} -> {} missing".format(
                ring[0], ring[1]))
        stack.append(found[0])
    marked = 0
    while stack:
        t = stack.pop()
        tri = triangles[t]
        if tri.kind != GHOST and tri.kind != HOLE:
            tri.kind = HOLE
            marked += 1
            for side in range(3):
                if not tri.constrained[side]:
                    stack.append(tri.neighbours[side])
    return marked
