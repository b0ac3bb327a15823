"""Small helpers shared by the entry points."""

import io
import logging
import os
import platform
import sys

from praise2slides.internals import constants

log = logging.getLogger("praise2slides")

DEBUG_ENV_VAR = "PRAISE2SLIDES_DEBUG"

_TRUE_STRINGS = {"true", "t", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "f", "0", "no", "n"}


def setup_console_encoding() -> None:
    """Use UTF-8 for stdout on Windows so the ✅/❌ status lines can be printed."""
    if platform.system() == "Windows":
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")


def get_debug_mode() -> bool:
    """Debug mode from PRAISE2SLIDES_DEBUG, or DEBUG_MODE_DEFAULT when unset or unreadable."""
    raw = os.environ.get(DEBUG_ENV_VAR)
    if raw is None:
        return constants.DEBUG_MODE_DEFAULT

    try:
        return str_to_bool(raw)
    except ValueError:
        log.warning(f"Ignoring {DEBUG_ENV_VAR}={raw!r}; expected true/false.")
        return constants.DEBUG_MODE_DEFAULT


def str_to_bool(value: str) -> bool:
    """Parse yes/no style strings ("true", "0", "Y", ...). Raises ValueError otherwise."""
    normalized = value.strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise ValueError(f"{value!r} is not a valid boolean value.")
