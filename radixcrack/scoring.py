# radixcrack/scoring.py
# Candidate scoring policies. Pure functions of the digit history.

from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, List, Sequence

from .candidate import Candidate
from .constraints import ConstraintTable

MARGIN_BONUS = 0.01
DISTANCE_WEIGHT = 0.1
HYBRID_WEIGHTS = (0.7, 0.3)


class ScoringPolicy(str, Enum):
    CONSTRAINT_SATISFACTION = "constraint-satisfaction"
    ORBIT_DISTANCE = "orbit-distance"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value) -> "ScoringPolicy":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        return cls(key)


def constraint_satisfaction(c: Candidate, table: ConstraintTable) -> float:
    total = satisfied = 0
    bonus = 0.0
    for p, q in zip(c.p_digits, c.q_digits):
        if p == 0 or q == 0:
            continue
        total += 1
        m = table.margin(p, q)
        if m >= 0:
            satisfied += 1
            bonus += m
    if total == 0:
        return 1.0
    return satisfied / total + MARGIN_BONUS * bonus / total


def orbit_distance(c: Candidate, table: ConstraintTable) -> float:
    dist = table.distances
    used = [int(dist[x]) for x in c.p_digits + c.q_digits if x != 0]
    avg = sum(used) / len(used) if used else 0.0
    return 1.0 / (1.0 + DISTANCE_WEIGHT * avg)


def hybrid(c: Candidate, table: ConstraintTable) -> float:
    wc, wo = HYBRID_WEIGHTS
    return wc * constraint_satisfaction(c, table) + wo * orbit_distance(c, table)


_POLICIES: Dict[ScoringPolicy, Callable[[Candidate, ConstraintTable], float]] = {
    ScoringPolicy.CONSTRAINT_SATISFACTION: constraint_satisfaction,
    ScoringPolicy.ORBIT_DISTANCE: orbit_distance,
    ScoringPolicy.HYBRID: hybrid,
}


def score_candidate(c: Candidate, table: ConstraintTable,
                    policy: ScoringPolicy = ScoringPolicy.HYBRID) -> Candidate:
    return c.with_score(_POLICIES[ScoringPolicy.parse(policy)](c, table))


def score_frontier(frontier: Sequence[Candidate], table: ConstraintTable,
                   policy: ScoringPolicy = ScoringPolicy.HYBRID) -> List[Candidate]:
    fn = _POLICIES[ScoringPolicy.parse(policy)]
    return [c.with_score(fn(c, table)) for c in frontier]
