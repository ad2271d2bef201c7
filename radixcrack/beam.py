# radixcrack/beam.py
# Beam width policy and top-K selection.

from __future__ import annotations
import math
from operator import attrgetter
from typing import List, Sequence

from .candidate import Candidate
from .config import BeamConfig


def adaptive_width(beam: BeamConfig, violation_rate: float) -> int:
    """K for this level. Depends only on the config and this level's rejection rate."""
    if not beam.adaptive:
        return beam.width
    k = beam.width + math.floor((violation_rate - 0.5) * beam.width)
    return max(beam.min_width, min(beam.max_width, k))


def violation_rate(branches: int, rejected: int) -> float:
    return rejected / branches if branches else 0.0


def select_beam(candidates: Sequence[Candidate], width: int) -> List[Candidate]:
    # sorted() is stable under reverse=True, so ties keep merge order
    ranked = sorted(candidates, key=attrgetter("score"), reverse=True)
    return ranked[:max(0, width)]
