"""Handlers for the "praise2slides" logger: console, log file, and an optional trace file."""

import logging

from praise2slides.internals.paths import user_log_dir_path
from praise2slides.internals.run_context import get_session_id

LOG_FILENAME = "praise2slides.log"
TRACE_LOG_FILENAME = "trace_praise2slides.log"


def setup_logger(
    name: str = "praise2slides",
    level: int = logging.DEBUG,
    enable_trace: bool = False,
) -> logging.Logger:
    """
    Attach our handlers to the named logger and return it.

    Console gets INFO and up; the log file in the user logs folder gets everything.
    With `enable_trace`, a second file also records file/function/line for each record.
    Each line ends with the session id. Calling this again returns the logger as is.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    logger.propagate = False

    session_id = get_session_id()
    formatter = logging.Formatter(
        f"%(asctime)s [%(levelname)s] %(message)s [run:{session_id}]",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_file = user_log_dir_path() / LOG_FILENAME

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if enable_trace:
        trace_handler = logging.FileHandler(
            user_log_dir_path() / TRACE_LOG_FILENAME, encoding="utf-8"
        )
        trace_handler.setLevel(logging.DEBUG)
        trace_handler.setFormatter(
            logging.Formatter(
                f"%(filename)s:%(lineno)d %(funcName)s() [%(levelname)s] %(asctime)s %(message)s [run:{session_id}]",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(trace_handler)

    logger.info(f"Logging to {log_file}")
    return logger
