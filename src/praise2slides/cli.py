"""CLI Interface Logic (argparse etc)"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path

from praise2slides.internals import constants
from praise2slides.internals.define_config import UserConfig
from praise2slides.internals.paths import (
    get_default_config_path,
    resolve_path,
    user_input_dir,
)
from praise2slides.orchestrator import run_pipeline
from praise2slides.tracker import JsonFilePropertyStore, ProcessedSetTracker

log = logging.getLogger("praise2slides")

# Arguments that only make sense on the command line and have no UserConfig field
CLI_ONLY_ARGS = [
    "help",
    "config",
    "watch",
    "interval",
    "reset_processed",
    "save_config",
]


def run() -> int:
    """Run CLI interface and return the process exit code. Assumes startup.initialize_application() was already called."""

    args = parse_args()

    # Build config from args (with proper prioritization CLI args > config file > defaults)
    cfg = build_config_from_args(args)

    if args.save_config:
        # Relative paths in a config file are read relative to the file, so store absolute ones.
        for name in ("workbook", "template_pptx", "target_pptx", "state_file"):
            value = getattr(cfg, name)
            if value is not None:
                setattr(cfg, name, resolve_path(value))
        cfg.save_toml(Path(args.save_config))
        return 0

    if args.reset_processed:
        ProcessedSetTracker(JsonFilePropertyStore(cfg.get_state_file_path())).reset()
        log.info("Processed submissions cleared; the next run will add slides for every row.")
        return 0

    if args.watch:
        from praise2slides.trigger import watch_workbook

        try:
            watch_workbook(cfg, interval=args.interval)
        except KeyboardInterrupt:
            log.info("Stopped watching.")
        return 0

    result = run_pipeline(cfg)
    return 0 if result.succeeded else 1


def parse_args() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns argparse.Namespace with all the UserConfig fields as attributes.
    Validates that all config fields have corresponding CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="praise2slides",
        description="Add a praise slide to a shared deck for every new form submission in a responses workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Use the default config ({constants.DEFAULT_CONFIG_FILENAME} in the user configs folder) or defaults
  praise2slides

  # Point at a workbook whose Setup sheet names the decks
  praise2slides --workbook responses.xlsx

  # Override the Setup sheet's deck paths
  praise2slides --config settings.toml --target-pptx praise_wall.pptx

  # Save the current settings so later runs only need --config
  praise2slides --workbook responses.xlsx --target-pptx praise_wall.pptx --save-config settings.toml

  # Keep running and merge new submissions as the workbook changes
  praise2slides --workbook responses.xlsx --watch --interval 60
        """,
    )

    # Config file (special - loads other values)
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help=f"Path to TOML configuration file. Defaults to {constants.DEFAULT_CONFIG_FILENAME} in the user configs folder when it exists.",
    )

    # Input
    parser.add_argument(
        "--workbook",
        type=str,
        dest="workbook",
        metavar="PATH",
        help="Form responses workbook (.xlsx file)",
    )
    parser.add_argument(
        "--responses-sheet",
        type=str,
        dest="responses_sheet",
        metavar="NAME",
        help=f"Sheet holding the form responses (default: {constants.RESPONSES_SHEET_NAME})",
    )
    parser.add_argument(
        "--setup-sheet",
        type=str,
        dest="setup_sheet",
        metavar="NAME",
        help=f"Sheet holding the deck paths in {constants.TEMPLATE_PPTX_CELL}/{constants.TARGET_PPTX_CELL} (default: {constants.SETUP_SHEET_NAME})",
    )

    # Decks
    parser.add_argument(
        "--template-pptx",
        type=str,
        dest="template_pptx",
        metavar="PATH",
        help="Deck whose first slide is the template (overrides the Setup sheet)",
    )
    parser.add_argument(
        "--target-pptx",
        type=str,
        dest="target_pptx",
        metavar="PATH",
        help="Deck the new slides are appended to (overrides the Setup sheet)",
    )

    # State
    parser.add_argument(
        "--state-file",
        type=str,
        dest="state_file",
        metavar="PATH",
        help="JSON file remembering processed submissions (default: in the user state folder)",
    )
    parser.add_argument(
        "--reset-processed",
        action="store_true",
        dest="reset_processed",
        help="Forget every processed submission and exit. The next run adds slides for all rows again.",
    )

    parser.add_argument(
        "--save-config",
        type=str,
        dest="save_config",
        metavar="PATH",
        help="Write the combined settings (config file plus the arguments given here) to a TOML file and exit",
    )

    # Trigger
    parser.add_argument(
        "--watch",
        action="store_true",
        dest="watch",
        help="Keep running and merge new submissions whenever the workbook changes",
    )
    parser.add_argument(
        "--interval",
        type=float,
        dest="interval",
        metavar="SECONDS",
        default=constants.DEFAULT_WATCH_INTERVAL,
        help=f"Seconds between workbook checks in --watch mode (default: {constants.DEFAULT_WATCH_INTERVAL:g})",
    )

    _validate_args_match_config(parser)

    return parser.parse_args()


def build_config_from_args(args: argparse.Namespace) -> UserConfig:
    """
    Build UserConfig from parsed arguments with proper priority.

    Priority order (highest to lowest):
    1. CLI arguments (if explicitly provided)
    2. Config file values (--config, else the default config file if present)
    3. UserConfig defaults

    Args:
        args: Parsed command line arguments

    Returns:
        UserConfig instance with all values set
    """
    if args.config:
        config_path = Path(args.config)
        log.info(f"Loading config from {config_path}")
        cfg = UserConfig.from_toml(config_path)
    elif get_default_config_path().exists():
        cfg = UserConfig.from_default_location()
    else:
        cfg = UserConfig()

    # Override with CLI args (only if explicitly provided)
    if args.workbook is not None:
        cfg.workbook = Path(args.workbook)
    if args.responses_sheet is not None:
        cfg.responses_sheet = args.responses_sheet
    if args.setup_sheet is not None:
        cfg.setup_sheet = args.setup_sheet
    if args.template_pptx is not None:
        cfg.template_pptx = Path(args.template_pptx)
    if args.target_pptx is not None:
        cfg.target_pptx = Path(args.target_pptx)
    if args.state_file is not None:
        cfg.state_file = Path(args.state_file)

    if cfg.workbook is None:
        cfg.workbook = user_input_dir() / constants.DEFAULT_WORKBOOK_FILENAME
        log.info(f"No workbook given; looking for {cfg.workbook}")

    return cfg


def _validate_args_match_config(parser: argparse.ArgumentParser) -> None:
    """
    Ensure all UserConfig fields have corresponding CLI arguments.

    Catches someone adding a field to UserConfig but forgetting the CLI argument (or vice versa).

    Raises:
        RuntimeError: If there's a mismatch between config fields and CLI args
    """
    config_fields = {f.name for f in fields(UserConfig)}

    arg_names = {
        action.dest for action in parser._actions if action.dest not in CLI_ONLY_ARGS
    }

    missing_in_args = config_fields - arg_names
    extra_in_args = arg_names - config_fields

    if missing_in_args:
        log.error(
            "UserConfig fields must have corresponding arg added to cli.parse_args() to ensure parity between config file and CLI."
        )
        raise RuntimeError(
            f"CLI arguments missing for UserConfig fields: {missing_in_args}\n"
            "These config fields need corresponding arguments added to parse_args()"
        )

    if extra_in_args:
        log.error(
            "We detected unexpected CLI args that do not match UserConfig fields. New argparse fields must either "
            "have a corresponding UserConfig field, or be added to CLI_ONLY_ARGS."
        )
        raise RuntimeError(
            f"CLI arguments don't match UserConfig fields: {extra_in_args}\n"
            "Either remove these CLI args or add corresponding fields to UserConfig"
        )


def main() -> None:
    """Development entry point - run CLI directly with `python -m praise2slides.cli`"""
    import sys

    from praise2slides import startup

    log = startup.initialize_application()
    try:
        exit_code = run()
    except Exception:
        log.exception("Fatal error in CLI")
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
