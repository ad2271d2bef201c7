# radixcrack/expander.py
# Digit-DP expansion (inverse schoolbook multiplication) and the
# constraint-table branch filter. Both run inside worker tasks.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from .candidate import Branch, Candidate
from .constraints import ConstraintTable
from .errors import ArithmeticOverflow

_INT64_LIMIT = 2**62


def _convolution_base(c: Candidate, level: int) -> int:
    """carry + sum_{j=1}^{L-1} P[j]*Q[L-j], the part not touching the new digits."""
    P, Q = c.p_digits, c.q_digits
    return c.carry + sum(P[j] * Q[level - j] for j in range(1, level))


def split(candidate: Candidate, level: int, digit: int, table: ConstraintTable) -> List[Branch]:
    """
    Every (p, q) over the admissible set whose column sum matches `digit`.
    Order is p-major, then q, both ascending.
    """
    if candidate.level != level:
        raise ValueError(f"candidate at level {candidate.level}, expected {level}")
    radix = table.radix
    adm = table.digit_array
    top = int(adm[-1])
    base = _convolution_base(candidate, level)
    if level == 0:
        reach = base + top * top
    else:
        reach = base + top * (candidate.q_digits[0] + candidate.p_digits[0])
    if reach >= _INT64_LIMIT:
        raise ArithmeticOverflow(f"column sum at level {level} exceeds int64 fast path")

    if level == 0:
        sums = base + np.outer(adm, adm)
    else:
        P0, Q0 = candidate.p_digits[0], candidate.q_digits[0]
        sums = base + np.add.outer(adm * Q0, P0 * adm)

    ii, jj = np.nonzero(sums % radix == digit)
    carries = sums[ii, jj] // radix
    return [Branch(int(adm[i]), int(adm[j]), int(k)) for i, j, k in zip(ii, jj, carries)]


def evaluate(branches: Sequence[Branch], digit: int, table: ConstraintTable) -> Tuple[List[Branch], int]:
    """Drop inadmissible branches. Zero-padded branches always pass. Returns (kept, rejected)."""
    kept: List[Branch] = []
    rejected = 0
    for b in branches:
        if b.p == 0 or b.q == 0 or table.admits(digit, b.p, b.q):
            kept.append(b)
        else:
            rejected += 1
    return kept, rejected


@dataclass
class BatchResult:
    children: List[Candidate] = field(default_factory=list)
    branches: int = 0
    rejected: int = 0


def expand_batch(batch: Sequence[Candidate], level: int, digit: int,
                 table: ConstraintTable) -> BatchResult:
    """Expand then filter one batch of the frontier."""
    out = BatchResult()
    for cand in batch:
        branches = split(cand, level, digit, table)
        kept, rejected = evaluate(branches, digit, table)
        out.branches += len(branches)
        out.rejected += rejected
        out.children.extend(cand.extend(b) for b in kept)
    return out
