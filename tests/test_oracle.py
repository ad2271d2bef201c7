import unittest

import numpy as np

from radixcrack.errors import ConfigurationError
from radixcrack.oracle import UNREACHABLE, build_orbit_table
from radixcrack.transforms import (
    class_components, class_generators, class_index, cyclic_generators, mirror_d,
)


class TestClassGenerators(unittest.TestCase):
    def test_components_round_trip(self):
        for r in range(96):
            self.assertEqual(class_index(*class_components(r)), r)

    def test_mirror_fixes_d0(self):
        self.assertEqual(mirror_d(class_index(2, 0, 3)), class_index(2, 0, 3))
        self.assertEqual(mirror_d(class_index(2, 1, 3)), class_index(2, 2, 3))


class TestOrbitTable(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.table = build_orbit_table(class_generators(), 96, 37)

    def test_known_distances(self):
        t = self.table
        self.assertEqual(t.distance(37), 0)
        self.assertEqual(t.distance(38), 1)
        self.assertEqual(t.distance(45), 1)
        self.assertEqual(t.distance(61), 1)
        self.assertEqual(t.distance(36), 7)
        self.assertEqual(t.distance(35), 6)
        self.assertEqual(t.distance(17), 8)
        self.assertEqual(t.distance(19), 10)

    def test_statistics(self):
        s = self.table.statistics()
        self.assertEqual(s["reachable"], 96)
        self.assertEqual(s["unreachable"], 0)
        self.assertEqual(s["diameter"], 12)
        self.assertEqual(sum(s["histogram"].values()), 96)
        self.assertEqual(s["histogram"][0], 1)

    def test_path_replays_to_target(self):
        gens = self.table.generators
        for target in (36, 17, 0, 95):
            r = 37
            steps = self.table.path(target)
            for gi in steps:
                r = gens[gi](r)
            self.assertEqual(r, target)
            self.assertEqual(len(steps), self.table.distance(target))
        self.assertEqual(self.table.path(37), [])

    def test_verify_consistent(self):
        self.assertEqual(self.table.verify(), [])

    def test_read_only(self):
        with self.assertRaises(ValueError):
            self.table.distances[0] = 5

    def test_hop_bound_leaves_sentinel(self):
        t = build_orbit_table(class_generators(), 96, 37, max_hops=1)
        self.assertEqual(sorted(np.nonzero(t.distances != UNREACHABLE)[0].tolist()), [37, 38, 45, 61])
        self.assertEqual(t.distance(36), UNREACHABLE)
        self.assertEqual(t.statistics()["unreachable"], 92)
        self.assertEqual(t.verify(), [])
        with self.assertRaises(ValueError):
            t.path(36)

    def test_cyclic_set(self):
        t = build_orbit_table(cyclic_generators(10), 10, 3)
        self.assertEqual(t.distance(3), 0)
        self.assertEqual(t.distance(4), 1)
        self.assertEqual(t.distance(7), 1)
        self.assertEqual(t.verify(), [])


class TestOrbitConfigErrors(unittest.TestCase):
    def test_empty_generators(self):
        with self.assertRaises(ConfigurationError):
            build_orbit_table([], 96, 37)

    def test_out_of_range_generator(self):
        with self.assertRaises(ConfigurationError):
            build_orbit_table([lambda r: r + 96], 96, 37)

    def test_non_integer_generator(self):
        with self.assertRaises(ConfigurationError):
            build_orbit_table([lambda r: "x"], 96, 37)

    def test_bad_seed(self):
        with self.assertRaises(ConfigurationError):
            build_orbit_table(class_generators(), 96, 2)
        with self.assertRaises(ConfigurationError):
            build_orbit_table(class_generators(), 96, 96)

    def test_bad_radix(self):
        with self.assertRaises(ConfigurationError):
            build_orbit_table(cyclic_generators(1), 1, 0)


if __name__ == "__main__":
    unittest.main()
