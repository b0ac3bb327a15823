"""Entry point for the praise2slides command."""

from __future__ import annotations

import logging
import sys

from praise2slides import startup
from praise2slides.cli import run as run_cli


def main() -> None:
    """Application entry point - handles initialization and runs the CLI.

    Call like:
    ```
    python -m praise2slides
    praise2slides --workbook responses.xlsx
    ```
    """

    log: logging.Logger = startup.initialize_application()

    try:
        exit_code = run_cli()
    except Exception:
        log.exception("Unhandled exception - program crashed.")  # Logs full traceback
        raise

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
