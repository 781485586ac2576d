'''
Created on Nov 13, 2018

@author: martijn
'''
from math import atan2, degrees, hypot

from geompreds import orient2d, incircle

# -- classification of orientation(a, b, c)
LEFT = 1
RIGHT = -1
COLLINEAR = 0

# -- classification of in_circle(a, b, c, d)
INSIDE = 1
OUTSIDE = -1
ON = 0


def _xy(p):
    """Coordinates of p as tuple of 2 floats (what geompreds expects)"""
    return (float(p[0]), float(p[1]))


def lexicographic(p):
    """Key for the total order used to break ties: x first, then y"""
    return (p[0], p[1])


def orientation(a, b, c):
    """Direction from a to c, via b:

    left:     LEFT  [ = ccw ]
    straight: COLLINEAR
    right:    RIGHT [ = cw ]

    Evaluated with adaptive precision, so the answer is exact.
    """
    det = orient2d(_xy(a), _xy(b), _xy(c))
    if det > 0:
        return LEFT
    elif det < 0:
        return RIGHT
    return COLLINEAR


def in_circle(a, b, c, d):
    """Tests whether d is in the circle defined by the 3 points a, b and c
    (a, b, c given counterclockwise). Exact, can answer ON.
    """
    det = incircle(_xy(a), _xy(b), _xy(c), _xy(d))
    if det > 0:
        return INSIDE
    elif det < 0:
        return OUTSIDE
    return ON


def in_circle_perturbed(a, b, c, d):
    """As in_circle, but never answers ON.

    Cocircular input is resolved by a symbolic perturbation of the lifted
    points, where the perturbation is ordered by the lexicographic order
    of the coordinates. Going from the largest point down, the first term
    with a non-zero coefficient decides. The outcome only depends on the
    positions of the four points, so every caller gets the same answer
    for the same configuration.
    """
    side = in_circle(a, b, c, d)
    if side != ON:
        return side
    points = (a, b, c, d)
    order = sorted(range(4), key=lambda i: lexicographic(points[i]))
    for i in range(3, 0, -1):
        largest = order[i]
        if largest == 3:
            return OUTSIDE
        if largest == 2:
            o = orientation(a, b, d)
        elif largest == 1:
            o = orientation(a, d, c)
        else:
            o = orientation(d, b, c)
        if o != COLLINEAR:
            return INSIDE if o == LEFT else OUTSIDE
    return OUTSIDE


def in_diametral_circle(a, b, p):
    """True if p lies inside or on the circle that has segment ab as its
    diameter (i.e. the angle apb is 90 degrees or more).
    """
    dot = (a[0] - p[0]) * (b[0] - p[0]) + (a[1] - p[1]) * (b[1] - p[1])
    return dot <= 0.


def on_segment(a, b, p):
    """True if p lies on the closed segment ab"""
    if orientation(a, b, p) != COLLINEAR:
        return False
    return min(a[0], b[0]) <= p[0] <= max(a[0], b[0]) and \
        min(a[1], b[1]) <= p[1] <= max(a[1], b[1])


def strictly_between(a, b, p):
    """True if p lies on the open segment ab"""
    if (p[0], p[1]) == (a[0], a[1]) or (p[0], p[1]) == (b[0], b[1]):
        return False
    return on_segment(a, b, p)


def segments_intersect(p1, p2, q1, q2):
    """Do the closed segments p1p2 and q1q2 share at least one point?"""
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)
    if o1 * o2 < 0 and o3 * o4 < 0:
        return True
    return (o1 == COLLINEAR and on_segment(p1, p2, q1)) or \
        (o2 == COLLINEAR and on_segment(p1, p2, q2)) or \
        (o3 == COLLINEAR and on_segment(q1, q2, p1)) or \
        (o4 == COLLINEAR and on_segment(q1, q2, p2))


def circumcenter(a, b, c):
    """Center of the circle through a, b and c"""
    bx = b[0] - a[0]
    by = b[1] - a[1]
    cx = c[0] - a[0]
    cy = c[1] - a[1]
    d = 2. * (bx * cy - by * cx)
    if d == 0.:
        raise ValueError("Collinear points have no circumcenter")
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (cy * b2 - by * c2) / d
    uy = (bx * c2 - cx * b2) / d
    return (a[0] + ux, a[1] + uy)


def area(a, b, c):
    """Signed area of triangle abc (positive when ccw)"""
    return 0.5 * orient2d(_xy(a), _xy(b), _xy(c))


def angle(apex, p, q):
    """Interior angle (degrees) at apex between the legs towards p and q"""
    ux, uy = p[0] - apex[0], p[1] - apex[1]
    vx, vy = q[0] - apex[0], q[1] - apex[1]
    return degrees(atan2(abs(ux * vy - uy * vx), ux * vx + uy * vy))


def angles(a, b, c):
    """The 3 interior angles of triangle abc, in degrees, per corner"""
    return (angle(a, b, c), angle(b, c, a), angle(c, a, b))


def min_angle(a, b, c):
    """Smallest interior angle of triangle abc (degrees)"""
    return min(angles(a, b, c))


def distance(a, b):
    """Cartesian distance between a and b"""
    return hypot(a[0] - b[0], a[1] - b[1])
