# radixcrack/api.py
# Flask surface: queued searches over Redis/RQ plus a small synchronous endpoint.

from __future__ import annotations
import os
import time
from datetime import datetime

from flask import Blueprint, Flask, current_app, jsonify, request
from redis import Redis
from rq import Queue
from rq.exceptions import NoSuchJobError
from rq.job import Job
from werkzeug.exceptions import BadRequest

from .config import SearchConfig
from .errors import ConfigurationError
from .search import factor_digits

search_bp = Blueprint("search_bp", __name__)

QUEUE_NAME = "search"
JOB_FUNC = "radixcrack.jobs.search_job"
MAX_BITS = int(os.getenv("RADIXCRACK_MAX_BITS", "512"))
SYNC_MAX_BITS = 64
MAX_RADIX = int(os.getenv("RADIXCRACK_MAX_RADIX", "256"))
MAX_WIDTH = int(os.getenv("RADIXCRACK_MAX_WIDTH", "4096"))
MAX_BATCH = int(os.getenv("RADIXCRACK_MAX_BATCH", "4096"))
CAPS = {"radix": MAX_RADIX, "width": MAX_WIDTH, "max_width": MAX_WIDTH, "batch_size": MAX_BATCH}
OPTION_TYPES = {
    "radix": int, "epsilon": float, "width": int, "scoring": str, "adaptive": bool,
    "min_width": int, "max_width": int, "max_levels": int, "batch_size": int,
}

# ------------------ helpers ------------------
def _queue() -> Queue:
    q = current_app.extensions.get("radixcrack.queue")
    if q is None:
        conn = Redis.from_url(os.getenv("REDIS_URL", "redis://localhost:6379/0"))
        q = Queue(QUEUE_NAME, connection=conn, default_timeout=60*60*12)  # 12h
        current_app.extensions["radixcrack.queue"] = q
    return q

def _age_secs(dt: datetime | None) -> float | None:
    if not dt:
        return None
    return max(0.0, time.time() - dt.timestamp())

def _job_dict(job: Job) -> dict:
    d = {
        "job_id": job.id,
        "status": job.get_status(),
        "meta": job.meta or {},
        "enqueued_at": job.enqueued_at.isoformat() if job.enqueued_at else None,
        "started_at": job.started_at.isoformat() if job.started_at else None,
        "ended_at": job.ended_at.isoformat() if job.ended_at else None,
        "age_sec": _age_secs(job.enqueued_at),
    }
    if job.is_finished:
        d["result"] = job.return_value()
    if job.is_failed:
        d["exc_info"] = (job.exc_info or "")[-1024:]
    return d

def _parse_options(data: dict) -> dict:
    """Pick known search options out of a JSON body and check them against SearchConfig."""
    opts = {}
    for key, conv in OPTION_TYPES.items():
        if data.get(key) is None:
            continue
        raw = data[key]
        if conv is bool:
            opts[key] = raw if isinstance(raw, bool) else str(raw).lower() in ("1", "true", "yes", "on")
        else:
            opts[key] = conv(raw)
    SearchConfig().apply(**opts).validate()
    for key, cap in CAPS.items():
        if key in opts and opts[key] > cap:
            raise ConfigurationError(f"{key} too large; cap is {cap}")
    return opts

def _parse_n(raw) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    raise ValueError("N must be an integer or a string of digits")

# ------------------ API ------------------
@search_bp.get("/api/health")
def health():
    q = _queue()
    ok, msg = True, "ok"
    try:
        q.connection.ping()
        size = q.count
    except Exception as e:
        ok, msg, size = False, f"redis error: {e.__class__.__name__}", None
    return jsonify({"ok": ok, "msg": msg, "queue": {"name": q.name, "size": size}, "time": int(time.time())})

@search_bp.post("/api/search/submit")
def search_submit():
    data = request.get_json(silent=True) or {}
    nstr = str(data.get("N", "")).strip()
    if not nstr.isdigit():
        return jsonify({"error": "Provide N as a non-negative integer string."}), 400
    N = int(nstr)
    bits = N.bit_length()
    if bits > MAX_BITS:
        return jsonify({"error": f"Max {MAX_BITS} bits."}), 400
    try:
        opts = _parse_options(data)
    except (ConfigurationError, ValueError, TypeError) as e:
        return jsonify({"error": str(e)}), 400

    q = _queue()
    job = q.enqueue(JOB_FUNC, args=(nstr,), kwargs=opts,
                    meta={"bits": bits, "options": opts, "submitted": time.time()})
    ids = q.get_job_ids()
    pos = ids.index(job.id) + 1 if job.id in ids else 1
    return jsonify({"job_id": job.id, "status": job.get_status(), "bits": bits, "queue_position": pos})

@search_bp.get("/api/job/<job_id>")
def job_status(job_id):
    try:
        job = Job.fetch(job_id, connection=_queue().connection)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    return jsonify(_job_dict(job))

@search_bp.post("/api/job/<job_id>/abort")
def job_abort(job_id):
    conn = _queue().connection
    try:
        job = Job.fetch(job_id, connection=conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    try:
        if job.get_status() == "started":
            from rq.command import send_stop_job_command
            send_stop_job_command(conn, job_id)
        job.cancel()
    except Exception as e:
        return jsonify({"error": f"cancel failed: {e.__class__.__name__}"}), 400
    return jsonify({"ok": True, "job_id": job_id, "status": job.get_status()})

@search_bp.post("/api/search")
def search_now():
    try:
        data = request.get_json(force=True, silent=False)
        n = _parse_n(data.get("N"))
        opts = _parse_options(data)
    except Exception as e:
        raise BadRequest(f"Invalid payload: {e}")
    if n < 0 or n.bit_length() > SYNC_MAX_BITS:
        raise BadRequest(f"N must be a non-negative integer of at most {SYNC_MAX_BITS} bits")
    opts["executor"] = "serial"
    result = factor_digits(n, **opts)
    return jsonify(result.to_dict())


def create_app(queue: Queue | None = None) -> Flask:
    app = Flask(__name__)
    if queue is not None:
        app.extensions["radixcrack.queue"] = queue
    app.register_blueprint(search_bp)
    return app
