# radixcrack/candidate.py
# Immutable partial factor reconstructions.

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple


class Branch(NamedTuple):
    p: int
    q: int
    carry: int


@dataclass(frozen=True)
class Candidate:
    p_digits: Tuple[int, ...] = ()
    q_digits: Tuple[int, ...] = ()
    carry: int = 0
    score: float = 0.0
    trail: Optional[Tuple[Tuple[int, int, int, int], ...]] = None  # (level, p, q, carry)

    @property
    def level(self) -> int:
        return len(self.p_digits)

    @classmethod
    def root(cls, keep_trail: bool = False) -> "Candidate":
        return cls(trail=() if keep_trail else None)

    def extend(self, branch: Branch) -> "Candidate":
        """Child with one more digit on each factor; score is reset."""
        trail = self.trail
        if trail is not None:
            trail = trail + ((self.level, branch.p, branch.q, branch.carry),)
        return Candidate(self.p_digits + (branch.p,), self.q_digits + (branch.q,),
                         branch.carry, 0.0, trail)

    def with_score(self, score: float) -> "Candidate":
        return replace(self, score=float(score))
