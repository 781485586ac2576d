import unittest

from cdtmesh.delaunay.conflicts import ConflictGraph


class TestConflictGraph(unittest.TestCase):

    def setUp(self):
        self.graph = ConflictGraph()
        self.graph.register(7, 3)
        self.graph.register(7, 1)
        self.graph.register(8, 3)

    def test_pending(self):
        assert len(self.graph) == 2
        assert 7 in self.graph
        assert 9 not in self.graph
        assert self.graph.vertices_of(3) == set([7, 8])

    def test_next_conflict_is_lowest(self):
        assert self.graph.next_conflict(7) == 1
        assert self.graph.next_conflict(8) == 3
        assert self.graph.next_conflict(9) is None

    def test_release(self):
        affected = self.graph.release(3)
        assert affected == set([7, 8])
        assert self.graph.next_conflict(7) == 1
        # 8 lost its only conflict
        assert 8 not in self.graph
        assert self.graph.vertices_of(3) == ()

    def test_release_unknown(self):
        assert self.graph.release(42) == set()

    def test_discard(self):
        self.graph.discard(7)
        assert 7 not in self.graph
        assert self.graph.vertices_of(1) == ()
        assert self.graph.vertices_of(3) == set([8])
        self.graph.discard(8)
        assert len(self.graph) == 0


if __name__ == "__main__":
    unittest.main()
