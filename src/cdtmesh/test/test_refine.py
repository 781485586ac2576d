import unittest

from cdtmesh import new_mesh, refine, triangles, mesh_stats, \
    RefinementIncomplete
from cdtmesh.delaunay.refine import RefinementReport
from cdtmesh.delaunay.tds import REAL
from cdtmesh.delaunay.preds import area, distance, in_circle, INSIDE

RECTANGLE = [(0, 0), (10, 0), (10, 1), (0, 1)]
UNIT = [(0, 0), (1, 0), (1, 1), (0, 1)]
HOLE_RING = [(0.25, 0.25), (0.75, 0.25), (0.75, 0.75), (0.25, 0.75)]


def areas(mesh):
    return [area(*(mesh.point(v) for v in tri.vertices))
            for tri in triangles(mesh)]


def segment_length(mesh, label):
    return sum(distance(mesh.point(a), mesh.point(b))
               for (a, b), lbl in mesh.segments.items() if lbl == label)


def segments_are_edges(mesh):
    tds = mesh.triangulation
    for a, b in mesh.segments:
        found = tds.edge_of(a, b)
        if found is None:
            return False
        t, side = found
        if not tds.triangles[t].constrained[side]:
            return False
    return True


def euler_holds(tds):
    faces = sum(1 for _ in tds.alive_triangles())
    return len(tds.vertices) - 3 * faces // 2 + faces == 2


def is_constrained_delaunay(tds):
    for t in tds.alive_triangles(REAL):
        tri = tds.triangles[t]
        a, b, c = tds.corners(t)
        for side in range(3):
            n = tri.neighbours[side]
            if tri.constrained[side] or tds.triangles[n].kind != REAL:
                continue
            opposite = tds.triangles[n].vertices[tds.opposite_side(t, side)]
            if in_circle(a, b, c, tds.point(opposite)) == INSIDE:
                return False
    return True


def well_formed(mesh):
    tds = mesh.triangulation
    return tds.check_consistency() and euler_holds(tds) and \
        is_constrained_delaunay(tds) and segments_are_edges(mesh)


class TestRefine(unittest.TestCase):

    def test_thin_rectangle(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        assert mesh_stats(mesh).min_angle_achieved < 20.
        report = refine(mesh, 20.)
        assert report.completed
        assert report.check() is report
        assert report.steiner_points_added > 0
        assert report.unresolved == 0
        stats = mesh_stats(mesh)
        assert stats.min_angle_achieved >= 20.
        assert stats.vertex_count == 4 + report.steiner_points_added
        self.assertAlmostEqual(sum(areas(mesh)), 10.)
        assert well_formed(mesh)
        self.assertAlmostEqual(segment_length(mesh, 'boundary'), 22.)

    def test_steiner_flag(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        refine(mesh, 20.)
        vertices = mesh.triangulation.vertices
        assert not any(vertex.steiner for vertex in vertices[1:5])
        assert all(vertex.steiner for vertex in vertices[5:])
        assert well_formed(mesh)

    def test_max_area_with_hole(self):
        mesh = new_mesh(UNIT, holes=[HOLE_RING], seed=2)
        report = refine(mesh, 20., max_area=0.01)
        assert report.completed
        for a in areas(mesh):
            assert a <= 0.01
        self.assertAlmostEqual(sum(areas(mesh)), 0.75)
        assert mesh_stats(mesh).min_angle_achieved >= 20.
        assert well_formed(mesh)
        self.assertAlmostEqual(segment_length(mesh, 'hole'), 2.)

    def test_interior_segment(self):
        mesh = new_mesh([(0, 0), (10, 0), (10, 10), (0, 10)],
                        points=[(2, 3), (7, 6)], segments=[(0, 1)], seed=4)
        length = segment_length(mesh, 'segment')
        report = refine(mesh, 20.)
        assert report.completed
        assert well_formed(mesh)
        self.assertAlmostEqual(segment_length(mesh, 'segment'), length)
        self.assertAlmostEqual(sum(areas(mesh)), 100.)

    def test_refine_again(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        refine(mesh, 20.)
        report = refine(mesh, 20.)
        assert report.completed
        assert report.steiner_points_added == 0
        assert report.iterations == 0
        assert well_formed(mesh)

    def test_no_iterations(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        report = refine(mesh, 20., max_iterations=0)
        assert not report.completed
        assert report.iterations == 0
        assert report.steiner_points_added == 0
        with self.assertRaises(RefinementIncomplete) as ctx:
            report.check()
        assert ctx.exception.report is report
        assert well_formed(mesh)

    def test_max_vertices(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        refine(mesh, 30., max_vertices=10)
        assert mesh.vertex_count <= 10
        assert well_formed(mesh)
        self.assertAlmostEqual(sum(areas(mesh)), 10.)

    def test_zero_angle(self):
        mesh = new_mesh(RECTANGLE, seed=1)
        report = refine(mesh, 0.)
        assert report.completed
        assert report.steiner_points_added == 0
        assert well_formed(mesh)

    def test_bounds(self):
        mesh = new_mesh(UNIT)
        for kwargs in ({'min_angle': 60.}, {'min_angle': -1.},
                       {'min_angle': 20., 'max_area': 0.},
                       {'min_angle': 20., 'max_iterations': -1},
                       {'min_angle': 20., 'max_vertices': -5}):
            with self.assertRaises(ValueError):
                refine(mesh, **kwargs)

    def test_report(self):
        report = RefinementReport(True, 3, 5)
        assert report.check() is report
        assert "steiner_points_added=3" in repr(report)


if __name__ == "__main__":
    unittest.main()
