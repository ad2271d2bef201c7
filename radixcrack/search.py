# radixcrack/search.py
# Digit-by-digit factor search: decompose N, then per level
#   expand+filter (pool) -> barrier -> score -> select
# and finally verify the surviving beam with exact arithmetic.

from __future__ import annotations
import copy
import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from sympy import isprime

from .beam import adaptive_width, select_beam, violation_rate
from .candidate import Candidate
from .config import SearchConfig
from .constraints import ConstraintTable, build_constraint_table
from .digits import decompose
from .errors import BeamMiss, SearchAborted, SearchExhausted
from .oracle import OrbitTable, build_orbit_table
from .parallel import LevelCoordinator
from .scoring import score_frontier
from .transforms import Generator, default_generators
from .verify import radix_divisor_split, verify_frontier

log = logging.getLogger(__name__)


class SearchPhase(str, Enum):
    INIT = "init"
    DECOMPOSED = "decomposed"
    EXPANDING = "expanding"
    FILTERING = "filtering"
    SCORING = "scoring"
    SELECTING = "selecting"
    VERIFYING = "verifying"
    DONE = "done"


class SearchStatus(str, Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    BEAM_MISS = "beam_miss"
    ABORTED = "aborted"


# ---------- results ----------

@dataclass
class LevelStats:
    level: int
    digit: int
    frontier: int
    branches: int
    rejected: int
    children: int
    kept: int
    pruned: int
    violation_rate: float
    beam_width: int
    batches: int


@dataclass
class SearchDiagnostics:
    levels: List[LevelStats] = field(default_factory=list)
    elapsed_ms: int = 0

    @property
    def levels_explored(self) -> int:
        return len(self.levels)

    @property
    def candidates_generated(self) -> int:
        return sum(s.children for s in self.levels)

    @property
    def candidates_pruned(self) -> int:
        return sum(s.pruned for s in self.levels)

    def to_dict(self) -> dict:
        return {
            "levels_explored": self.levels_explored,
            "candidates_generated": self.candidates_generated,
            "candidates_pruned": self.candidates_pruned,
            "elapsed_ms": self.elapsed_ms,
            "levels": [asdict(s) for s in self.levels],
        }


@dataclass
class SearchResult:
    status: SearchStatus
    n: int
    radix: int
    digits: List[int]
    p: Optional[int] = None
    q: Optional[int] = None
    method: str = "digit_beam"
    rank: Optional[int] = None
    trail: Optional[tuple] = None
    diagnostics: SearchDiagnostics = field(default_factory=SearchDiagnostics)

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.SUCCESS

    def raise_for_status(self) -> "SearchResult":
        if self.status is SearchStatus.EXHAUSTED:
            raise SearchExhausted(f"frontier exhausted for N={self.n}", self)
        if self.status is SearchStatus.BEAM_MISS:
            raise BeamMiss(f"no beam candidate verified for N={self.n}", self)
        if self.status is SearchStatus.ABORTED:
            raise SearchAborted(f"search aborted for N={self.n}", self)
        return self

    def to_dict(self) -> dict:
        d = {
            "N": self.n,
            "radix": self.radix,
            "status": self.status.value,
            "method": self.method,
            "digits": list(self.digits),
            "p": self.p,
            "q": self.q,
            "rank": self.rank,
            "diagnostics": self.diagnostics.to_dict(),
        }
        if self.found:
            d["p_is_probable_prime"] = bool(isprime(self.p))
            d["q_is_probable_prime"] = bool(isprime(self.q))
        if self.trail is not None:
            d["trail"] = [list(step) for step in self.trail]
        return d


# ---------- tables ----------

@dataclass(frozen=True, eq=False)
class SearchTables:
    """Build-once, read-many handles shared by every level and worker."""
    orbit: OrbitTable
    constraints: ConstraintTable

    @classmethod
    def build(cls, config: SearchConfig,
              generators: Optional[Sequence[Generator]] = None) -> "SearchTables":
        gens = default_generators(config.radix) if generators is None else generators
        orbit = build_orbit_table(gens, config.radix, config.resolved_seed(), config.max_hops)
        return cls(orbit, build_constraint_table(orbit, config.epsilon))


# ---------- engine ----------

ProgressFn = Callable[[LevelStats], None]


class SearchEngine:
    def __init__(self, config: SearchConfig | None = None,
                 generators: Optional[Sequence[Generator]] = None,
                 tables: SearchTables | None = None):
        self.config = (config or SearchConfig()).validate()
        if tables is not None and tables.constraints.radix != self.config.radix:
            raise ValueError("tables were built for a different radix")
        self.tables = tables or SearchTables.build(self.config, generators)
        self.phase = SearchPhase.INIT

    def _enter(self, phase: SearchPhase) -> None:
        log.debug("phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def run(self, n: int, abort: threading.Event | None = None,
            progress: ProgressFn | None = None) -> SearchResult:
        cfg = self.config
        radix = cfg.radix
        table = self.tables.constraints
        t0 = time.perf_counter()
        self.phase = SearchPhase.INIT

        def finish(result: SearchResult) -> SearchResult:
            result.diagnostics.elapsed_ms = int((time.perf_counter() - t0) * 1000)
            self._enter(SearchPhase.DONE)
            log.info("N=%d status=%s p=%s q=%s levels=%d", n, result.status.value,
                     result.p, result.q, result.diagnostics.levels_explored)
            return result

        digits = decompose(n, radix)
        self._enter(SearchPhase.DECOMPOSED)

        if cfg.peel_radix_divisors:
            hit = radix_divisor_split(n, radix)
            if hit:
                return finish(SearchResult(SearchStatus.SUCCESS, n, radix, digits,
                                           hit[0], hit[1], method="radix_divisor"))

        levels = len(digits) if cfg.max_levels is None else min(cfg.max_levels, len(digits))
        frontier = [Candidate.root(cfg.keep_trail)]
        diag = SearchDiagnostics()

        def outcome(status: SearchStatus, **kw) -> SearchResult:
            return finish(SearchResult(status, n, radix, digits, diagnostics=diag, **kw))

        with LevelCoordinator(table, cfg.parallel) as coord:
            for level in range(levels):
                if abort is not None and abort.is_set():
                    log.info("abort requested before level %d", level)
                    return outcome(SearchStatus.ABORTED)
                d = digits[level]

                self._enter(SearchPhase.EXPANDING)
                size = len(frontier)
                step = coord.run_level(frontier, level, d)
                self._enter(SearchPhase.FILTERING)
                v = violation_rate(step.branches, step.rejected)

                self._enter(SearchPhase.SCORING)
                scored = score_frontier(step.children, table, cfg.beam.scoring)

                self._enter(SearchPhase.SELECTING)
                width = adaptive_width(cfg.beam, v)
                frontier = select_beam(scored, width)

                stats = LevelStats(level, d, size, step.branches, step.rejected,
                                   len(step.children), len(frontier), len(step.children) - len(frontier),
                                   v, width, step.batches)
                diag.levels.append(stats)
                log.info("level %d digit=%d branches=%d rejected=%d (%.1f%%) width=%d kept=%d",
                         level, d, step.branches, step.rejected, 100.0 * v, width, len(frontier))
                if progress is not None:
                    progress(stats)
                if not frontier:
                    return outcome(SearchStatus.EXHAUSTED)

        self._enter(SearchPhase.VERIFYING)
        hit = verify_frontier(frontier, n, radix)
        if hit is None:
            return outcome(SearchStatus.BEAM_MISS)
        rank, p, q = hit
        return outcome(SearchStatus.SUCCESS, p=p, q=q, rank=rank, trail=frontier[rank].trail)


def factor_digits(n: int, config: SearchConfig | None = None,
                  generators: Optional[Sequence[Generator]] = None,
                  abort: threading.Event | None = None,
                  progress: ProgressFn | None = None, **options) -> SearchResult:
    """One-shot search. Extra keyword options are applied to the config (width=, workers=, ...)."""
    cfg = copy.deepcopy(config) if config is not None else SearchConfig()
    if options:
        cfg.apply(**options)
    return SearchEngine(cfg, generators).run(n, abort=abort, progress=progress)
