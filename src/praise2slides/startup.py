"""Startup logic needed before anything else happens.

Handles common setup tasks:
- Console encoding setup (status lines contain ✅/❌)
- Logging configuration
- User directory scaffolding (README, sample config, state folder)
"""

import logging
import sys

from praise2slides.internals.logger import setup_logger
from praise2slides.internals.scaffold import ensure_user_scaffold
from praise2slides.utils import get_debug_mode, setup_console_encoding


# region initialize_application
def initialize_application() -> logging.Logger:
    """Common startup tasks for every entry point. Exits with code 1 if the log folder can't be written."""

    # Must happen before any console output, including the logger's.
    setup_console_encoding()

    # No logger exists yet, so failures here can only go to stderr.
    try:
        log = setup_logger(enable_trace=_should_enable_trace_on_startup())
    except PermissionError as e:
        print(
            f"Cannot create log files: {e}\nCheck permissions on your Documents folder.",
            file=sys.stderr,
        )
        sys.exit(1)
    except OSError as e:
        print(
            f"Cannot start praise2slides (disk full or I/O error): {e}",
            file=sys.stderr,
        )
        sys.exit(1)

    log.info("Starting praise2slides Log.")

    log.debug("Checking for existing praise2slides user folders and scaffolding if needed.")
    ensure_user_scaffold()

    return log


# endregion


# region _should_enable_trace_on_startup
def _should_enable_trace_on_startup() -> bool:
    """Trace logging starts immediately when debug mode is on (PRAISE2SLIDES_DEBUG, else DEBUG_MODE_DEFAULT)."""
    return get_debug_mode()


# endregion
