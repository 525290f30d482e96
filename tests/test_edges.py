import unittest

from gearsig.core.edges import cam_cycle_edges, crank_cycle_edges, teeth_to_edges, to_tenths, wheel_edges
from gearsig.core.models import Edge, Tooth, Wheel
from gearsig.core.wheel import cmp_preset, default_wheels


def one_tooth(wheel_id, start, end):
    return Wheel(id=wheel_id, name="t", total_teeth=1, missing_teeth=[], teeth=[Tooth(1, start, end)])


class EdgeDerivationTests(unittest.TestCase):
    def test_half_up_rounding(self):
        self.assertEqual(to_tenths(12.25), 123)
        self.assertEqual(to_tenths(12.24), 122)
        self.assertEqual(to_tenths(0), 0)

    def test_crank_repeats_at_plus_360(self):
        edges = wheel_edges(one_tooth("ckp", 10, 20))
        self.assertEqual(
            edges,
            [Edge(100, 1), Edge(200, 0), Edge(3700, 1), Edge(3800, 0)],
        )

    def test_cam_stretches_over_cycle(self):
        self.assertEqual(wheel_edges(one_tooth("cmp1", 10, 20)), [Edge(200, 1), Edge(400, 0)])

    def test_disabled_teeth_produce_no_edges(self):
        teeth = [Tooth(1, 10, 20), Tooth(2, 30, 40, enabled=False)]
        self.assertEqual(teeth_to_edges(teeth), [Edge(100, 1), Edge(200, 0)])

    def test_end_at_360_wraps_to_zero(self):
        self.assertEqual(teeth_to_edges([Tooth(1, 350, 360)]), [Edge(0, 0), Edge(3500, 1)])

    def test_sixty_minus_two_edge_counts(self):
        ckp = default_wheels().ckp
        per_rev = teeth_to_edges(ckp.teeth)
        self.assertEqual(len(per_rev), 116)
        cycle = wheel_edges(ckp)
        self.assertEqual(len(cycle), 232)
        self.assertEqual(cycle[0], Edge(15, 1))
        self.assertEqual(cycle[116], Edge(3615, 1))
        self.assertTrue(all(e.angle_tenths < 7200 for e in cycle))

    def test_default_cam_edges(self):
        edges = wheel_edges(cmp_preset("cmp1", 4))
        self.assertEqual(len(edges), 8)
        self.assertEqual(edges[:2], [Edge(90, 1), Edge(810, 0)])

    def test_cycle_helpers(self):
        base = [Edge(5, 1)]
        self.assertEqual(crank_cycle_edges(base), [Edge(5, 1), Edge(3605, 1)])
        self.assertEqual(cam_cycle_edges(base), [Edge(10, 1)])


if __name__ == "__main__":
    unittest.main()
