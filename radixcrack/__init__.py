# radixcrack: digit-by-digit factor search with orbit-distance pruning.

from .config import BeamConfig, ParallelConfig, SearchConfig
from .errors import (
    ArithmeticOverflow, BeamMiss, ConfigurationError, RadixCrackError,
    SearchAborted, SearchExhausted, WorkerFailure,
)
from .scoring import ScoringPolicy
from .search import (
    SearchDiagnostics, SearchEngine, SearchPhase, SearchResult, SearchStatus,
    SearchTables, factor_digits,
)

__version__ = "0.1.0"
__all__ = [
    "ArithmeticOverflow", "BeamConfig", "BeamMiss", "ConfigurationError", "ParallelConfig",
    "RadixCrackError", "ScoringPolicy", "SearchAborted", "SearchConfig", "SearchDiagnostics",
    "SearchEngine", "SearchExhausted", "SearchPhase", "SearchResult", "SearchStatus",
    "SearchTables", "WorkerFailure", "factor_digits",
]
