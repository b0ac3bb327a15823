"""Cross-platform path resolution for user directories.

Uses platformdirs to find OS-appropriate locations for:
- Logs (where praise2slides.log lives)
- Input (default home of the form responses workbook)
- Configs (default TOML config file)
- State (the persisted "script properties", including processed timestamps)
"""

import os
from pathlib import Path

from platformdirs import (
    user_documents_dir,
)  # Gives us the "right" place for files on each OS

from praise2slides.internals import constants

PACKAGE_NAME = "praise2slides"


# region user_base_dir
def user_base_dir() -> Path:
    """
    Base directory for all praise2slides user files.

    Returns:
        Path to ~/Documents/praise2slides/ (or OS equivalent)

    Examples:
        Windows: C:/Users/YourName/Documents/praise2slides/
        macOS: /Users/YourName/Documents/praise2slides/
        Linux: /home/yourname/Documents/praise2slides/
    """
    base = Path(user_documents_dir()) / PACKAGE_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


# endregion


# region user_log_dir_path
def user_log_dir_path() -> Path:
    """
    Directory for log files.

    Returns:
        Path to ~/Documents/praise2slides/logs/
    """
    log_dir = user_base_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


# endregion


# region user_input_dir
def user_input_dir() -> Path:
    """
    Default location of the form responses workbook.

    Returns:
        Path to ~/Documents/praise2slides/input/
    """
    input_dir = user_base_dir() / "input"
    input_dir.mkdir(parents=True, exist_ok=True)
    return input_dir


# endregion


# region user_configs_dir
def user_configs_dir() -> Path:
    """
    Directory for saved configuration files.

    Returns:
        Path to ~/Documents/praise2slides/configs/
    """
    configs_dir = user_base_dir() / "configs"
    configs_dir.mkdir(parents=True, exist_ok=True)
    return configs_dir


# endregion


# region user_state_dir
def user_state_dir() -> Path:
    """
    Directory for state that must survive between runs.

    Returns:
        Path to ~/Documents/praise2slides/state/
    """
    state_dir = user_base_dir() / "state"
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


# endregion


# region get_default_state_file_path
def get_default_state_file_path() -> Path:
    """The property store used when the config doesn't name one."""
    return user_state_dir() / constants.STATE_FILENAME


# endregion


# region get_default_config_path
def get_default_config_path() -> Path:
    """The config file picked up by the zero-argument entry point and by the CLI when --config is absent."""
    return user_configs_dir() / constants.DEFAULT_CONFIG_FILENAME


# endregion


# region resolve_path
def resolve_path(raw: str | Path, base: Path | None = None) -> Path:
    """
    Expand ~ and ${VARS}; resolve to absolute path.

    Relative paths resolve relative to `base` when given, otherwise to the current working directory.
    """
    expanded = os.path.expandvars(str(raw))
    p = Path(expanded).expanduser()

    if not p.is_absolute() and base is not None:
        p = base / p

    return p.resolve()


# endregion
