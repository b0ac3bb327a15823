"""Poll the responses workbook and run the pipeline whenever it changes.

This stands in for a spreadsheet's "on form submit" trigger when the workbook is a
local file (for example, one kept in sync by a cloud drive client).
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from praise2slides.internals import constants
from praise2slides.internals.define_config import UserConfig
from praise2slides.orchestrator import run_pipeline
from praise2slides.tracker import PropertyStore

log = logging.getLogger("praise2slides")


# region watch_workbook
def watch_workbook(
    cfg: UserConfig,
    interval: float = constants.DEFAULT_WATCH_INTERVAL,
    store: PropertyStore | None = None,
    max_checks: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run the pipeline at start and again each time the workbook's modification time changes.

    Runs happen one after another in this thread, never overlapping.

    Args:
        cfg: Pipeline config; must name a workbook.
        interval: Seconds to wait between checks.
        store: Property store passed through to run_pipeline().
        max_checks: Stop after this many checks. None watches until interrupted.
        sleep: Injected for tests.

    Returns:
        int: How many pipeline runs were started.
    """
    if interval <= 0:
        raise ValueError(f"Watch interval must be positive, got {interval}")

    workbook_path = cfg.get_workbook_path()
    if workbook_path is None:
        raise ValueError("Watch mode needs a workbook to watch. Please set workbook.")

    log.info(f"Watching {workbook_path} every {interval:g}s. Press Ctrl+C to stop.")

    last_mtime: float | None = None
    checks = 0
    runs = 0
    while max_checks is None or checks < max_checks:
        checks += 1
        mtime = _get_mtime(workbook_path)

        if mtime is not None and mtime != last_mtime:
            if last_mtime is not None:
                log.info(f"Change detected in {workbook_path.name}.")
            last_mtime = mtime
            result = run_pipeline(cfg, store=store)
            runs += 1
            log.info(f"Watch run {runs}: {result}")

        if max_checks is None or checks < max_checks:
            sleep(interval)

    return runs


def _get_mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except OSError as e:
        log.warning(f"Can't read {path} right now: {e}")
        return None


# endregion
