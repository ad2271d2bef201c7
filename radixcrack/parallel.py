# radixcrack/parallel.py
# Level-synchronous fan-out: one task per frontier batch, a barrier per level,
# merge in batch order. Any failing batch discards the whole level.

from __future__ import annotations
import concurrent.futures
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from . import expander
from .candidate import Candidate
from .config import ParallelConfig
from .constraints import ConstraintTable
from .errors import WorkerFailure

log = logging.getLogger(__name__)

# ---------- worker side ----------

_WORKER_TABLE: Optional[ConstraintTable] = None


def _install_table(table: ConstraintTable) -> None:
    global _WORKER_TABLE
    _WORKER_TABLE = table


def _run_batch(batch: Sequence[Candidate], level: int, digit: int,
               table: Optional[ConstraintTable] = None) -> expander.BatchResult:
    table = table if table is not None else _WORKER_TABLE
    if table is None:
        raise RuntimeError("constraint table not installed in worker")
    return expander.expand_batch(batch, level, digit, table)


# ---------- coordinator ----------

def partition(frontier: Sequence[Candidate], batch_size: int) -> List[List[Candidate]]:
    return [list(frontier[i:i + batch_size]) for i in range(0, len(frontier), batch_size)]


@dataclass
class LevelOutcome:
    children: List[Candidate]
    branches: int
    rejected: int
    batches: int


class LevelCoordinator:
    """
    Owns the worker pool for one search run. Use as a context manager;
    the pool is created on enter and reused for every level.
    """

    def __init__(self, table: ConstraintTable, config: ParallelConfig):
        self.table = table
        self.config = config
        self._pool: Optional[concurrent.futures.Executor] = None

    def __enter__(self) -> "LevelCoordinator":
        kind, workers = self.config.executor, self.config.workers
        if kind == "process":
            self._pool = concurrent.futures.ProcessPoolExecutor(
                max_workers=workers, initializer=_install_table, initargs=(self.table,))
        elif kind == "thread":
            self._pool = concurrent.futures.ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="radixcrack")
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True, cancel_futures=True)
            self._pool = None

    def run_level(self, frontier: Sequence[Candidate], level: int, digit: int) -> LevelOutcome:
        batches = partition(frontier, self.config.batch_size)
        if self._pool is None:
            results = self._run_serial(batches, level, digit)
        else:
            results = self._run_pooled(batches, level, digit)
        out = LevelOutcome([], 0, 0, len(batches))
        for r in results:
            out.children.extend(r.children)
            out.branches += r.branches
            out.rejected += r.rejected
        return out

    def _run_serial(self, batches, level, digit) -> List[expander.BatchResult]:
        results = []
        for i, batch in enumerate(batches):
            try:
                results.append(_run_batch(batch, level, digit, self.table))
            except Exception as e:
                raise WorkerFailure(level, i, e) from e
        return results

    def _run_pooled(self, batches, level, digit) -> List[expander.BatchResult]:
        # process workers read the table installed by the initializer
        table = None if self.config.executor == "process" else self.table
        futures = [self._pool.submit(_run_batch, batch, level, digit, table) for batch in batches]
        done, pending = concurrent.futures.wait(futures, return_when=concurrent.futures.FIRST_EXCEPTION)
        if pending:
            for f in pending:
                f.cancel()
            concurrent.futures.wait([f for f in pending if not f.cancelled()])
        failed = [(i, f.exception()) for i, f in enumerate(futures)
                  if f.done() and not f.cancelled() and f.exception() is not None]
        if failed:
            i, e = failed[0]
            log.warning("level %d: %d batch(es) failed, first at batch %d", level, len(failed), i)
            raise WorkerFailure(level, i, e) from e
        return [f.result() for f in futures]
