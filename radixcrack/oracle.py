# radixcrack/oracle.py
# Orbit-distance oracle: BFS hop counts from a seed residue under an
# injected set of generator functions over Z/radix.

from __future__ import annotations
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError
from .transforms import Generator, generator_name

log = logging.getLogger(__name__)

UNREACHABLE = 999


@dataclass(frozen=True, eq=False)
class OrbitTable:
    radix: int
    seed: int
    max_hops: int
    distances: np.ndarray                         # int32, read-only
    parents: Tuple[Optional[Tuple[int, int]], ...]  # residue -> (parent, generator index)
    generators: Tuple[Generator, ...]

    def distance(self, r: int) -> int:
        return int(self.distances[r % self.radix])

    def reachable(self, r: int) -> bool:
        r %= self.radix
        return r == self.seed or self.parents[r] is not None

    def path(self, target: int) -> List[int]:
        """Generator indices leading from the seed to `target`."""
        target %= self.radix
        if not self.reachable(target):
            raise ValueError(f"residue {target} is not reachable from seed {self.seed}")
        steps: List[int] = []
        r = target
        while r != self.seed:
            parent, gi = self.parents[r]
            steps.append(gi)
            r = parent
        steps.reverse()
        return steps

    def statistics(self) -> dict:
        d = self.distances
        hit = d[d != UNREACHABLE]
        values, counts = np.unique(hit, return_counts=True)
        return {
            "radix": self.radix,
            "seed": self.seed,
            "generators": [generator_name(g) for g in self.generators],
            "reachable": int(hit.size),
            "unreachable": int(self.radix - hit.size),
            "diameter": int(hit.max()) if hit.size else 0,
            "mean_distance": float(hit.mean()) if hit.size else 0.0,
            "histogram": {int(v): int(c) for v, c in zip(values, counts)},
        }

    def verify(self) -> List[str]:
        """Consistency problems between distances, parents and generators (empty == ok)."""
        problems: List[str] = []
        d = self.distances
        if d[self.seed] != 0:
            problems.append(f"seed {self.seed} has distance {d[self.seed]}")
        for r in range(self.radix):
            if r == self.seed:
                continue
            link = self.parents[r]
            if link is None:
                if d[r] != UNREACHABLE:
                    problems.append(f"residue {r} has distance {d[r]} but no parent")
                continue
            parent, gi = link
            if self.generators[gi](parent) != r:
                problems.append(f"generator {gi} does not map {parent} to {r}")
            if d[r] != d[parent] + 1:
                problems.append(f"residue {r}: distance {d[r]} != parent distance + 1")
        # no edge may shortcut a recorded distance
        for u in range(self.radix):
            if not self.reachable(u) or d[u] >= self.max_hops:
                continue
            for g in self.generators:
                v = g(u)
                if d[v] > d[u] + 1:
                    problems.append(f"edge {u}->{v} shortcuts distance {d[v]}")
        return problems


def _apply(g: Generator, r: int, radix: int) -> int:
    v = g(r)
    if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
        raise ConfigurationError(f"generator {generator_name(g)} returned non-integer {v!r}")
    v = int(v)
    if not 0 <= v < radix:
        raise ConfigurationError(f"generator {generator_name(g)} mapped {r} to {v}, outside [0, {radix})")
    return v


def build_orbit_table(generators: Sequence[Generator], radix: int, seed: int,
                      max_hops: int | None = None) -> OrbitTable:
    if isinstance(radix, bool) or not isinstance(radix, int) or radix < 2:
        raise ConfigurationError(f"radix must be an integer >= 2, got {radix!r}")
    gens = tuple(generators or ())
    if not gens:
        raise ConfigurationError("generator set is empty")
    for g in gens:
        if not callable(g):
            raise ConfigurationError(f"generator {g!r} is not callable")
    if not isinstance(seed, int) or not 0 <= seed < radix:
        raise ConfigurationError(f"seed {seed!r} outside [0, {radix})")
    if math.gcd(seed, radix) != 1:
        raise ConfigurationError(f"seed {seed} is not coprime to radix {radix}")
    hops = radix if max_hops is None else max_hops
    if hops < 0:
        raise ConfigurationError("max_hops must be >= 0")

    dist = np.full(radix, UNREACHABLE, dtype=np.int32)
    seen = np.zeros(radix, dtype=bool)
    parents: List[Optional[Tuple[int, int]]] = [None] * radix
    dist[seed] = 0
    seen[seed] = True
    queue = deque([seed])
    while queue:
        u = queue.popleft()
        if dist[u] >= hops:
            continue
        for gi, g in enumerate(gens):
            v = _apply(g, u, radix)
            if not seen[v]:
                seen[v] = True
                dist[v] = dist[u] + 1
                parents[v] = (u, gi)
                queue.append(v)

    dist.flags.writeable = False
    table = OrbitTable(radix, seed, hops, dist, tuple(parents), gens)
    log.debug("orbit table radix=%d seed=%d reachable=%d", radix, seed, int(seen.sum()))
    return table
