import unittest

from radixcrack.candidate import Branch, Candidate
from radixcrack.constraints import build_constraint_table
from radixcrack.errors import ArithmeticOverflow
from radixcrack.expander import evaluate, expand_batch, split
from radixcrack.oracle import build_orbit_table
from radixcrack.transforms import class_generators


def _table(epsilon=10):
    return build_constraint_table(build_orbit_table(class_generators(), 96, 37), epsilon)


class TestSplit(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.table = _table()

    def test_level0_unit_digit(self):
        branches = split(Candidate.root(), 0, 35, self.table)
        self.assertEqual(len(branches), 32)
        self.assertEqual(branches[0], Branch(1, 35, 0))
        self.assertIn(Branch(17, 19, 3), branches)
        self.assertIn(Branch(19, 17, 3), branches)
        self.assertEqual([b.p for b in branches], sorted(b.p for b in branches))
        for b in branches:
            self.assertEqual(b.p * b.q % 96, 35)
            self.assertEqual(b.carry, b.p * b.q // 96)

    def test_level0_zero_digit_pads(self):
        branches = split(Candidate.root(), 0, 0, self.table)
        self.assertEqual(len(branches), 65)
        self.assertTrue(all(b.p == 0 or b.q == 0 for b in branches))

    def test_level1_uses_carry_and_cross_terms(self):
        c = Candidate((17,), (19,), 3)
        branches = split(c, 1, 3, self.table)
        self.assertIn(Branch(0, 0, 0), branches)
        for b in branches:
            s = 3 + 17 * b.q + b.p * 19
            self.assertEqual(s % 96, 3)
            self.assertEqual(b.carry, s // 96)

    def test_level_mismatch(self):
        with self.assertRaises(ValueError):
            split(Candidate.root(), 1, 0, self.table)

    def test_overflow_is_loud(self):
        c = Candidate((1,), (1,), 2**63)
        with self.assertRaises(ArithmeticOverflow):
            split(c, 1, 0, self.table)


class TestEvaluate(unittest.TestCase):
    def test_filter(self):
        table = _table()
        kept, rejected = evaluate([Branch(5, 7, 0), Branch(0, 7, 0), Branch(7, 0, 1)], 3, table)
        self.assertEqual(kept, [Branch(0, 7, 0), Branch(7, 0, 1)])
        self.assertEqual(rejected, 1)
        kept, rejected = evaluate([Branch(5, 7, 0)], 35, table)
        self.assertEqual((len(kept), rejected), (1, 0))

    def test_tight_slack_rejects(self):
        kept, rejected = evaluate([Branch(37, 37, 14)], 25, _table(0))
        self.assertEqual((kept, rejected), ([], 1))


class TestExpandBatch(unittest.TestCase):
    def test_root(self):
        out = expand_batch([Candidate.root()], 0, 35, _table())
        self.assertEqual(out.branches, 32)
        self.assertEqual(out.rejected, 0)
        self.assertEqual(len(out.children), 32)
        self.assertTrue(all(c.level == 1 for c in out.children))

    def test_trail_recorded(self):
        out = expand_batch([Candidate.root(keep_trail=True)], 0, 35, _table())
        child = next(c for c in out.children if c.p_digits == (17,))
        self.assertEqual(child.trail, ((0, 17, 19, 3),))
        self.assertIsNone(Candidate.root().extend(Branch(1, 1, 0)).trail)


if __name__ == "__main__":
    unittest.main()
