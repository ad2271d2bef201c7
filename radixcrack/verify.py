# radixcrack/verify.py
# Exact final check. Acceptance never depends on the heuristic filter.

from __future__ import annotations
from typing import Optional, Sequence, Tuple

from gmpy2 import mpz
from sympy import primefactors

from .candidate import Candidate


def _from_digits(digits: Sequence[int], radix: int) -> mpz:
    acc = mpz(0)
    for d in reversed(digits):
        acc = acc * radix + d
    return acc


def verify_candidate(c: Candidate, n: int, radix: int) -> Optional[Tuple[int, int]]:
    """(P, Q) if the candidate's digits give a nontrivial exact factorization of n."""
    P = _from_digits(c.p_digits, radix)
    Q = _from_digits(c.q_digits, radix)
    if P > 1 and Q > 1 and P * Q == n:
        return int(P), int(Q)
    return None


def verify_frontier(frontier: Sequence[Candidate], n: int,
                    radix: int) -> Optional[Tuple[int, int, int]]:
    """First verified candidate in beam order as (rank, P, Q)."""
    for rank, c in enumerate(frontier):
        hit = verify_candidate(c, n, radix)
        if hit:
            return rank, hit[0], hit[1]
    return None


def radix_divisor_split(n: int, radix: int) -> Optional[Tuple[int, int]]:
    """
    Factors sharing a prime with the radix end in a non-admissible digit,
    so peel them off with one trial division per prime of the radix.
    """
    for r in primefactors(radix):
        if n > r and n % r == 0:
            return int(r), int(n // r)
    return None
