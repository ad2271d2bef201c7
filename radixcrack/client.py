# radixcrack/client.py
# Thin requests client for the search API.

from __future__ import annotations
import logging
import os
import time

import requests

log = logging.getLogger(__name__)

TERMINAL = ("finished", "failed", "canceled", "stopped")


class SearchClient:
    def __init__(self, base_url: str | None = None, session: requests.Session | None = None,
                 timeout: float = 30.0):
        base = base_url or os.getenv("RADIXCRACK_URL", "http://localhost:8000")
        self.base_url = base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "radixcrack-client/1.0"})

    def _post(self, path: str, payload: dict) -> dict:
        r = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _get(self, path: str) -> dict:
        r = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def health(self) -> dict:
        return self._get("/api/health")

    def submit(self, n: int, **options) -> str:
        body = {"N": str(n)}
        body.update({k: v for k, v in options.items() if v is not None})
        return self._post("/api/search/submit", body)["job_id"]

    def status(self, job_id: str) -> dict:
        return self._get(f"/api/job/{job_id}")

    def abort(self, job_id: str) -> dict:
        return self._post(f"/api/job/{job_id}/abort", {})

    def search(self, n: int, **options) -> dict:
        """Synchronous search (small N only)."""
        body = {"N": str(n)}
        body.update({k: v for k, v in options.items() if v is not None})
        return self._post("/api/search", body)

    def wait(self, job_id: str, deadline_s: float = 600.0, poll_s: float = 1.0,
             max_poll_s: float = 15.0, sleep=time.sleep) -> dict:
        """Poll until the job reaches a terminal status; backoff doubles up to max_poll_s."""
        end = time.monotonic() + deadline_s
        delay = poll_s
        while True:
            info = self.status(job_id)
            log.debug("job %s status=%s meta=%s", job_id, info.get("status"), info.get("meta"))
            if info.get("status") in TERMINAL:
                return info
            if time.monotonic() + delay > end:
                raise TimeoutError(f"job {job_id} still {info.get('status')} after {deadline_s}s")
            sleep(delay)
            delay = min(max_poll_s, delay * 2)
