# radixcrack/config.py
# Search configuration. Plain dataclasses, env overrides via RADIXCRACK_*.

from __future__ import annotations
import math
import os
from dataclasses import dataclass, field, fields
from typing import Mapping, Optional

from .errors import ConfigurationError
from .scoring import ScoringPolicy

EXECUTORS = ("process", "thread", "serial")
DEFAULT_RADIX = 96
DEFAULT_SEED_96 = 37


def _field_names(cls) -> set:
    return {f.name for f in fields(cls)}


def _require_int(name: str, value, optional: bool = False) -> None:
    if optional and value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class BeamConfig:
    width: int = 32
    scoring: ScoringPolicy = ScoringPolicy.HYBRID
    adaptive: bool = False
    min_width: int = 8
    max_width: int = 128

    def validate(self) -> "BeamConfig":
        try:
            self.scoring = ScoringPolicy.parse(self.scoring)
        except ValueError:
            raise ConfigurationError(f"unknown scoring policy {self.scoring!r}") from None
        for name in ("width", "min_width", "max_width"):
            _require_int(name, getattr(self, name))
        if self.width < 1:
            raise ConfigurationError("beam width must be >= 1")
        if self.min_width < 1 or self.max_width < self.min_width:
            raise ConfigurationError(
                f"beam bounds must satisfy 1 <= min_width <= max_width, got {self.min_width}..{self.max_width}")
        return self


@dataclass
class ParallelConfig:
    workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    batch_size: int = 64
    executor: str = "process"

    def validate(self) -> "ParallelConfig":
        _require_int("workers", self.workers)
        _require_int("batch_size", self.batch_size)
        if self.workers < 1:
            raise ConfigurationError("workers must be >= 1")
        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be >= 1")
        if self.executor not in EXECUTORS:
            raise ConfigurationError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")
        return self


@dataclass
class SearchConfig:
    radix: int = DEFAULT_RADIX
    epsilon: float = 10
    seed: Optional[int] = None
    max_hops: Optional[int] = None
    max_levels: Optional[int] = None
    peel_radix_divisors: bool = True
    keep_trail: bool = False
    beam: BeamConfig = field(default_factory=BeamConfig)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)

    def validate(self) -> "SearchConfig":
        if isinstance(self.radix, bool) or not isinstance(self.radix, int) or self.radix < 2:
            raise ConfigurationError(f"radix must be an integer >= 2, got {self.radix!r}")
        if isinstance(self.epsilon, bool) or not isinstance(self.epsilon, (int, float)) \
                or not math.isfinite(self.epsilon) or self.epsilon < 0:
            raise ConfigurationError(f"epsilon must be a finite number >= 0, got {self.epsilon!r}")
        _require_int("max_levels", self.max_levels, optional=True)
        _require_int("max_hops", self.max_hops, optional=True)
        _require_int("seed", self.seed, optional=True)
        if self.max_levels is not None and self.max_levels < 1:
            raise ConfigurationError("max_levels must be >= 1")
        if self.max_hops is not None and self.max_hops < 0:
            raise ConfigurationError("max_hops must be >= 0")
        self.resolved_seed()
        self.beam.validate()
        self.parallel.validate()
        return self

    def resolved_seed(self) -> int:
        """Explicit seed, else 37 for radix 96, else the smallest coprime residue > 1 (1 for radix 2)."""
        if self.seed is not None:
            if not 0 <= self.seed < self.radix or math.gcd(self.seed, self.radix) != 1:
                raise ConfigurationError(f"seed {self.seed} must be a residue coprime to {self.radix}")
            return self.seed
        if self.radix == DEFAULT_RADIX:
            return DEFAULT_SEED_96
        for r in range(2, self.radix):
            if math.gcd(r, self.radix) == 1:
                return r
        return 1

    # ---------- environment ----------

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides) -> "SearchConfig":
        env = os.environ if env is None else env

        def get(name, conv, default):
            raw = env.get(f"RADIXCRACK_{name}")
            if raw is None or raw.strip() == "":
                return default
            try:
                return conv(raw.strip())
            except ValueError:
                raise ConfigurationError(f"RADIXCRACK_{name}={raw!r} is not valid") from None

        def flag(raw: str) -> bool:
            low = raw.lower()
            if low in ("1", "true", "yes", "on"):
                return True
            if low in ("0", "false", "no", "off"):
                return False
            raise ValueError(raw)

        beam = BeamConfig(
            width=get("BEAM_WIDTH", int, 32),
            scoring=get("SCORING", str, ScoringPolicy.HYBRID.value),
            adaptive=get("ADAPTIVE", flag, False),
            min_width=get("MIN_WIDTH", int, 8),
            max_width=get("MAX_WIDTH", int, 128),
        )
        parallel = ParallelConfig(
            workers=get("WORKERS", int, os.cpu_count() or 1),
            batch_size=get("BATCH_SIZE", int, 64),
            executor=get("EXECUTOR", str, "process"),
        )
        cfg = cls(
            radix=get("RADIX", int, DEFAULT_RADIX),
            epsilon=get("EPSILON", float, 10),
            max_levels=get("MAX_LEVELS", int, None),
            beam=beam,
            parallel=parallel,
        )
        cfg.apply(**overrides)
        return cfg.validate()

    def apply(self, **overrides) -> "SearchConfig":
        """Set fields by name; beam/parallel fields are accepted flat (width=, workers=, ...)."""
        for key, value in overrides.items():
            if value is None:
                continue
            if key in _field_names(SearchConfig) - {"beam", "parallel"}:
                setattr(self, key, value)
            elif key in _field_names(BeamConfig):
                setattr(self.beam, key, value)
            elif key in _field_names(ParallelConfig):
                setattr(self.parallel, key, value)
            else:
                raise ConfigurationError(f"unknown option {key!r}")
        return self
