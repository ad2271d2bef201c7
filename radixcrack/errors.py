# radixcrack/errors.py
# Error taxonomy for the digit-level factor search.

from __future__ import annotations


class RadixCrackError(Exception):
    """Base class for everything the search raises."""


class ConfigurationError(RadixCrackError, ValueError):
    """Bad radix, generator set, epsilon, seed or beam/pool bounds."""


class ArithmeticOverflow(RadixCrackError, OverflowError):
    """A fixed-width fast path would have wrapped."""


# ---------- Reportable outcomes ----------
# These are returned as a status on SearchResult and only raised by
# SearchResult.raise_for_status().

class SearchOutcome(RadixCrackError):
    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class SearchExhausted(SearchOutcome):
    """Frontier went empty before the last digit level."""


class BeamMiss(SearchOutcome):
    """Frontier survived every level but nothing verified."""


class SearchAborted(SearchOutcome):
    """Abort was requested at a level boundary."""


class WorkerFailure(RadixCrackError):
    """A batch task raised; the whole level is discarded."""

    def __init__(self, level: int, batch_index: int, cause: BaseException | None = None):
        self.level = level
        self.batch_index = batch_index
        self.cause = cause
        name = cause.__class__.__name__ if cause is not None else "error"
        super().__init__(f"batch {batch_index} failed at level {level}: {name}: {cause}")
