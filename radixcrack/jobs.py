# radixcrack/jobs.py
# RQ job entry point. Enqueue as "radixcrack.jobs.search_job".

from __future__ import annotations
import logging
import time

from rq import get_current_job

from .config import SearchConfig
from .search import LevelStats, SearchEngine

log = logging.getLogger(__name__)


def _to_int(x) -> int:
    if isinstance(x, (bytes, bytearray)):
        x = x.decode()
    if isinstance(x, str):
        x = x.strip()
    return int(x)


def search_job(N, **options) -> dict:
    """
    Run one digit-beam search and return SearchResult.to_dict().
    Inside an RQ worker, per-level progress is written to job.meta.
    """
    n = _to_int(N)
    if n < 0:
        return {"N": n, "status": "error", "note": "N must be non-negative"}
    cfg = SearchConfig.from_env(**options)
    job = get_current_job()

    def progress(stats: LevelStats) -> None:
        if job is None:
            return
        job.meta.update({
            "level": stats.level,
            "beam_width": stats.beam_width,
            "kept": stats.kept,
            "violation_rate": round(stats.violation_rate, 4),
            "updated": time.time(),
        })
        job.save_meta()

    result = SearchEngine(cfg).run(n, progress=progress)
    log.info("job N=%d finished with %s", n, result.status.value)
    return result.to_dict()
