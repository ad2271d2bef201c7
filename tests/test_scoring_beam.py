import unittest

from radixcrack.beam import adaptive_width, select_beam, violation_rate
from radixcrack.candidate import Candidate
from radixcrack.config import BeamConfig
from radixcrack.constraints import build_constraint_table
from radixcrack.oracle import build_orbit_table
from radixcrack.scoring import (
    ScoringPolicy, constraint_satisfaction, hybrid, orbit_distance, score_candidate, score_frontier,
)
from radixcrack.transforms import class_generators


class TestScoring(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        orbit = build_orbit_table(class_generators(), 96, 37)
        cls.table = build_constraint_table(orbit, 10)
        cls.tight = build_constraint_table(orbit, 0)

    def test_empty_history(self):
        root = Candidate.root()
        self.assertEqual(constraint_satisfaction(root, self.table), 1.0)
        self.assertEqual(orbit_distance(root, self.table), 1.0)
        self.assertAlmostEqual(hybrid(root, self.table), 1.0)

    def test_single_pair(self):
        c = Candidate((17,), (19,), 3)
        self.assertAlmostEqual(constraint_satisfaction(c, self.table), 1.22)
        self.assertAlmostEqual(orbit_distance(c, self.table), 1 / 1.9)
        self.assertAlmostEqual(hybrid(c, self.table), 0.7 * 1.22 + 0.3 / 1.9)

    def test_violated_margin(self):
        c = Candidate((37,), (37,), 14)
        self.assertEqual(constraint_satisfaction(c, self.tight), 0.0)
        self.assertAlmostEqual(constraint_satisfaction(c, self.table), 1.04)

    def test_zero_digits_skipped(self):
        c = Candidate((0,), (19,), 0)
        self.assertEqual(constraint_satisfaction(c, self.table), 1.0)
        self.assertAlmostEqual(orbit_distance(c, self.table), 0.5)

    def test_score_is_a_copy(self):
        c = Candidate((17,), (19,), 3)
        scored = score_candidate(c, self.table, ScoringPolicy.ORBIT_DISTANCE)
        self.assertEqual(c.score, 0.0)
        self.assertAlmostEqual(scored.score, 1 / 1.9)
        self.assertEqual(scored.p_digits, c.p_digits)

    def test_score_frontier_keeps_order(self):
        cs = [Candidate((p,), (q,), 0) for p, q in [(1, 35), (17, 19), (0, 0)]]
        out = score_frontier(cs, self.table, "hybrid")
        self.assertEqual([c.p_digits for c in out], [(1,), (17,), (0,)])

    def test_policy_parse(self):
        self.assertIs(ScoringPolicy.parse("orbit_distance"), ScoringPolicy.ORBIT_DISTANCE)
        self.assertIs(ScoringPolicy.parse("Hybrid"), ScoringPolicy.HYBRID)
        with self.assertRaises(ValueError):
            ScoringPolicy.parse("bogus")


class TestBeam(unittest.TestCase):
    def test_fixed_width(self):
        beam = BeamConfig(width=32)
        for v in (0.0, 0.5, 1.0):
            self.assertEqual(adaptive_width(beam, v), 32)

    def test_adaptive_width(self):
        beam = BeamConfig(width=32, adaptive=True, min_width=8, max_width=128)
        self.assertEqual(adaptive_width(beam, 0.5), 32)
        self.assertEqual(adaptive_width(beam, 1.0), 48)
        self.assertEqual(adaptive_width(beam, 0.0), 16)

    def test_adaptive_clamps(self):
        small = BeamConfig(width=10, adaptive=True, min_width=8, max_width=128)
        self.assertEqual(adaptive_width(small, 0.0), 8)
        self.assertEqual(adaptive_width(small, 0.25), 8)
        big = BeamConfig(width=100, adaptive=True, min_width=8, max_width=120)
        self.assertEqual(adaptive_width(big, 1.0), 120)

    def test_violation_rate(self):
        self.assertEqual(violation_rate(0, 0), 0.0)
        self.assertEqual(violation_rate(134, 128), 128 / 134)

    def test_select_stable_ties(self):
        cs = [Candidate((i,), (1,), 0, score=s) for i, s in enumerate([0.5, 0.9, 0.5, 0.9, 0.1])]
        picked = select_beam(cs, 3)
        self.assertEqual([c.p_digits[0] for c in picked], [1, 3, 0])
        self.assertEqual(len(select_beam(cs, 50)), 5)
        self.assertEqual(select_beam(cs, 0), [])


if __name__ == "__main__":
    unittest.main()
