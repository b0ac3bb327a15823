"""Ids that tie log lines together.

- session id: one per process (a CLI invocation or a whole watch session)
- pipeline run id: one per run_pipeline() call
"""

from __future__ import annotations

import os
import threading
import uuid

_session_id: str | None = None
_pipeline_run_id: str | None = None

_lock = threading.Lock()


def get_session_id() -> str:
    """Return this process's session id, creating it on first use.

    A scheduler can pass its own id in PRAISE2SLIDES_SESSION_ID so our log lines
    line up with its own.
    """
    global _session_id
    with _lock:
        if _session_id is None:
            _session_id = os.environ.get("PRAISE2SLIDES_SESSION_ID") or _new_id()
        return _session_id


def start_pipeline_run() -> str:
    """Begin a new pipeline run and return its id."""
    global _pipeline_run_id
    with _lock:
        _pipeline_run_id = _new_id()
        return _pipeline_run_id


def get_pipeline_run_id() -> str:
    """Id of the current (or last) pipeline run; "Unknown" before the first one."""
    return _pipeline_run_id or "Unknown"


def _new_id() -> str:
    return uuid.uuid4().hex[:8]
