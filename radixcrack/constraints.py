# radixcrack/constraints.py
# Precomputed (target digit, p, q) admissibility table.

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import ConfigurationError
from .oracle import OrbitTable

log = logging.getLogger(__name__)


def admissible_digits(radix: int) -> Tuple[int, ...]:
    """{0} plus every residue in [1, radix) coprime to radix, ascending."""
    return (0,) + tuple(r for r in range(1, radix) if math.gcd(r, radix) == 1)


@dataclass(frozen=True, eq=False)
class ConstraintTable:
    radix: int
    epsilon: float
    digits: Tuple[int, ...]     # admissible digit set
    digit_array: np.ndarray     # same, int64
    index: np.ndarray           # residue -> position in `digits`, -1 if not admissible
    distances: np.ndarray       # orbit distance per residue
    mask: np.ndarray            # bool[radix, R, R]

    @property
    def size(self) -> int:
        return len(self.digits)

    def admits(self, d: int, p: int, q: int) -> bool:
        i, j = self.index[p], self.index[q]
        if i < 0 or j < 0:
            return False
        return bool(self.mask[d, i, j])

    def margin(self, p: int, q: int) -> float:
        """dist(p) + dist(q) + epsilon - dist(p*q mod radix)."""
        dist = self.distances
        return float(dist[p] + dist[q] + self.epsilon - dist[(p * q) % self.radix])

    def admitted_count(self, d: int | None = None) -> int:
        if d is None:
            return int(self.mask.sum())
        return int(self.mask[d].sum())


def build_constraint_table(orbit: OrbitTable, epsilon: float = 10) -> ConstraintTable:
    if isinstance(epsilon, bool) or not isinstance(epsilon, (int, float)) \
            or not math.isfinite(epsilon) or epsilon < 0:
        raise ConfigurationError(f"epsilon must be a finite number >= 0, got {epsilon!r}")
    radix = orbit.radix
    digits = admissible_digits(radix)
    adm = np.array(digits, dtype=np.int64)
    n = adm.size

    dist = orbit.distances.astype(np.int64)
    prod = np.outer(adm, adm) % radix
    dp = dist[adm]
    ok = dist[prod] <= dp[:, None] + dp[None, :] + epsilon

    mask = np.zeros((radix, n, n), dtype=bool)
    ii, jj = np.indices((n, n))
    mask[prod, ii, jj] = ok

    index = np.full(radix, -1, dtype=np.int64)
    index[adm] = np.arange(n)

    for arr in (adm, index, dist, mask):
        arr.flags.writeable = False
    log.debug("constraint table radix=%d R=%d eps=%s admitted=%d",
              radix, n, epsilon, int(mask.sum()))
    return ConstraintTable(radix, epsilon, digits, adm, index, dist, mask)
