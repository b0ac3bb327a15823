"""User directory structure creation and initialization.
Auto-creates ~/Documents/praise2slides/ with a README and a sample config.

On first run, this creates:
- ~/Documents/praise2slides/
  ├── README.md           (explains what each folder is for)
  ├── input/              (put form_responses.xlsx here, or point the config elsewhere)
  ├── configs/            (sample_config.toml; praise2slides.toml is picked up automatically)
  ├── logs/               (praise2slides.log lives here)
  └── state/              (script_properties.json remembers processed submissions)

Safe to call repeatedly - won't overwrite existing user files.
"""

import logging
from pathlib import Path

from praise2slides.internals import constants
from praise2slides.internals.paths import (
    user_base_dir,
    user_configs_dir,
    user_input_dir,
    user_log_dir_path,
    user_state_dir,
)

log = logging.getLogger("praise2slides")

README_TEXT = f"""# praise2slides

Folders created automatically:

- `input/`   Default home of the form responses workbook (`{constants.DEFAULT_WORKBOOK_FILENAME}`).
- `configs/` `{constants.DEFAULT_CONFIG_FILENAME}` here is loaded when no `--config` is given.
             `sample_config.toml` shows every option.
- `logs/`    Run logs.
- `state/`   `{constants.STATE_FILENAME}` remembers which submissions already have a slide.
             Delete it (or run `praise2slides --reset-processed`) to make slides for every row again.

The workbook needs a `{constants.RESPONSES_SHEET_NAME}` sheet and a `{constants.SETUP_SHEET_NAME}` sheet with
the template deck path in {constants.TEMPLATE_PPTX_CELL} and the target deck path in {constants.TARGET_PPTX_CELL}.
"""

SAMPLE_CONFIG_TEXT = f"""# praise2slides sample config. Copy to {constants.DEFAULT_CONFIG_FILENAME} to use it by default.
# Relative paths are relative to this file.

# === Input ===
workbook = "../input/{constants.DEFAULT_WORKBOOK_FILENAME}"
responses_sheet = "{constants.RESPONSES_SHEET_NAME}"
setup_sheet = "{constants.SETUP_SHEET_NAME}"

# === Decks (optional; override the {constants.SETUP_SHEET_NAME} sheet's {constants.TEMPLATE_PPTX_CELL}/{constants.TARGET_PPTX_CELL}) ===
# template_pptx = "~/Slides/praise_template.pptx"
# target_pptx = "~/Slides/praise_wall.pptx"

# === State ===
# state_file = "../state/{constants.STATE_FILENAME}"
"""


def ensure_user_scaffold() -> None:
    """
    Create folder structure, README, and sample config on first run.

    Safe to call every time - won't overwrite existing user files.
    """
    base = user_base_dir()

    # paths.py functions do the mkdir
    user_input_dir()
    user_log_dir_path()
    user_state_dir()
    configs = user_configs_dir()

    _write_if_missing(base / "README.md", README_TEXT)
    _write_if_missing(configs / "sample_config.toml", SAMPLE_CONFIG_TEXT)

    log.debug(f"User scaffold ready at {base}")


def _write_if_missing(path: Path, text: str) -> None:
    if path.exists():
        log.debug(f"Already exists (not overwriting): {path}")
        return

    path.write_text(text, encoding="utf-8")
    log.info(f"Created {path}")
