# internals/define_config.py
"""User configuration dataclass and validation."""

# region imports
from __future__ import annotations

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    # Python 3.10
    import tomli as tomllib  # type: ignore[no-redef]

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import tomli_w  # For writing (no stdlib equivalent yet)

from praise2slides.internals import constants
from praise2slides.internals.paths import (
    get_default_config_path,
    get_default_state_file_path,
    resolve_path,
    user_input_dir,
)

log = logging.getLogger("praise2slides")
# endregion


# region class UserConfig
@dataclass
class UserConfig:
    """All user-configurable settings for praise2slides."""

    # region class fields
    # The form responses workbook (.xlsx). It also holds the Setup sheet.
    workbook: Optional[Path] = None

    responses_sheet: str = constants.RESPONSES_SHEET_NAME
    setup_sheet: str = constants.SETUP_SHEET_NAME

    # Optional overrides; when unset, the deck paths come from the Setup sheet (B2/B3).
    template_pptx: Optional[Path] = None
    target_pptx: Optional[Path] = None

    # JSON property store that remembers processed timestamps between runs
    state_file: Optional[Path] = None
    # endregion

    # region post_init
    def __post_init__(self) -> None:
        """Convert string inputs of path fields into Path objects."""
        if self.workbook is not None:
            self.workbook = Path(self.workbook)
        if self.template_pptx is not None:
            self.template_pptx = Path(self.template_pptx)
        if self.target_pptx is not None:
            self.target_pptx = Path(self.target_pptx)
        if self.state_file is not None:
            self.state_file = Path(self.state_file)

    # endregion

    # region class methods (populate a new instance)

    # region with_defaults
    @classmethod
    def with_defaults(cls) -> UserConfig:
        """
        Create a config object pointing at the workbook in the user input folder.

        Used when no config file exists, so `praise2slides` with no arguments
        still has somewhere to look.
        """
        cfg = cls()
        cfg.workbook = user_input_dir() / constants.DEFAULT_WORKBOOK_FILENAME
        return cfg

    # endregion

    # region from_default_location
    @classmethod
    def from_default_location(cls) -> UserConfig:
        """Load the default config file if it exists, otherwise fall back to with_defaults()."""
        path = get_default_config_path()
        if path.exists():
            log.info(f"Loading config from {path}")
            cfg = cls.from_toml(path)
            if cfg.workbook is None:
                cfg.workbook = user_input_dir() / constants.DEFAULT_WORKBOOK_FILENAME
            return cfg

        log.debug(f"No config file at {path}; using defaults.")
        return cls.with_defaults()

    # endregion

    # region from_toml
    @classmethod
    def from_toml(cls, path: Path) -> UserConfig:
        """
        Load configuration from a TOML file.

        The TOML file should have flat key-value pairs matching the UserConfig field names.

        Example TOML:
            workbook = "~/Documents/praise2slides/input/form_responses.xlsx"
            responses_sheet = "Form Responses 1"
            target_pptx = "~/Shared/panther_praise_wall.pptx"

        Args:
            path: Path to the .toml config file

        Returns:
            UserConfig: Populated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If TOML is invalid or the path is a directory
        """
        path = Path(path)
        if not path.exists():
            error_msg = f"Config file not found: {path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if path.is_dir():
            error_msg = f"This is a directory (folder), not a toml file: {path}"
            log.error(error_msg)
            raise ValueError(error_msg)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML syntax in {path}. Check for missing or mismatched quote marks."
            log.error(error_msg)
            raise ValueError(error_msg) from e
        except UnicodeDecodeError as e:
            error_msg = f"Could not decode {path} as text. Is it really a .toml file?"
            log.error(error_msg)
            raise ValueError(error_msg) from e
        except PermissionError as e:
            error_msg = f"We hit a permission error when trying to access {path}"
            log.error(error_msg)
            raise ValueError(error_msg) from e

        if not data:
            log.warning(
                f"Config toml file loaded as empty, so no UserConfig fields were set from: {path}."
            )

        valid_fields = {f.name for f in fields(cls)}
        unexpected = set(data.keys()) - valid_fields

        if unexpected:
            log.warning(
                f"Ignoring unexpected fields in TOML config: {', '.join(sorted(unexpected))}. "
                f"Check for typos. Valid fields: {', '.join(sorted(valid_fields))}"
            )
            data = {k: v for k, v in data.items() if k in valid_fields}

        # Relative paths in a config file are relative to the file, not to wherever we were launched from.
        for key in ("workbook", "template_pptx", "target_pptx", "state_file"):
            if isinstance(data.get(key), str):
                data[key] = resolve_path(data[key], base=path.parent)

        return cls(**data)

    # endregion

    # endregion

    # region instance getters/helpers
    def get_workbook_path(self) -> Path | None:
        """Get the responses workbook path, or None if not specified."""
        if self.workbook:
            return resolve_path(self.workbook)
        return None

    def get_state_file_path(self) -> Path:
        """Get the property store path, with fallback to the default in the user state folder."""
        if self.state_file:
            return resolve_path(self.state_file)
        return get_default_state_file_path()

    def get_template_pptx_override(self) -> Path | None:
        """Template deck given directly in the config, which wins over the Setup sheet."""
        return resolve_path(self.template_pptx) if self.template_pptx else None

    def get_target_pptx_override(self) -> Path | None:
        """Target deck given directly in the config, which wins over the Setup sheet."""
        return resolve_path(self.target_pptx) if self.target_pptx else None

    # endregion

    # region save_toml
    def save_toml(self, path: Path) -> None:
        """
        Save configuration to a TOML file.

        Args:
            path: Where to save the .toml file
        """
        path = Path(path)

        if path.exists() and path.is_dir():
            error_msg = f"Cannot save config: path is a directory, not a file: {path}."
            log.error(error_msg)
            raise ValueError(error_msg)

        path.parent.mkdir(parents=True, exist_ok=True)

        # TOML can't serialize None
        data = {k: v for k, v in self.config_to_dict().items() if v is not None}
        log.debug(f"Data to be written to toml file is: \n{data}")

        try:
            log.info(f"Attempting to save to {path}")
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
            log.info(f"Saved toml config file at {path}")
        except PermissionError as e:
            error_msg = f"Permission denied writing to: {path}"
            log.error(error_msg)
            raise PermissionError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to write config file to {path}"
            log.error(error_msg)
            raise OSError(error_msg) from e

    # endregion

    # region config_to_dict
    def config_to_dict(self) -> dict[str, Any]:
        """Convert config to a TOML-serializable dict with forward-slash paths."""
        return {
            "workbook": self.workbook.as_posix() if self.workbook else None,
            "responses_sheet": self.responses_sheet,
            "setup_sheet": self.setup_sheet,
            "template_pptx": (
                self.template_pptx.as_posix() if self.template_pptx else None
            ),
            "target_pptx": self.target_pptx.as_posix() if self.target_pptx else None,
            "state_file": self.state_file.as_posix() if self.state_file else None,
        }

    # endregion

    # region validate
    def validate(self) -> None:
        """
        Validate intrinsic config values (no filesystem access).

        Catches:
            - Someone accidentally passing wrong types
            - Empty strings where a sheet name is required
        """
        for field_name in ("responses_sheet", "setup_sheet"):
            val = getattr(self, field_name)
            if not isinstance(val, str):
                raise ValueError(
                    f"{field_name} must be a string, got {type(val).__name__}"
                )
            if not val.strip():
                raise ValueError(f"{field_name} cannot be an empty string")

        for field_name in ("workbook", "template_pptx", "target_pptx", "state_file"):
            val = getattr(self, field_name)
            if val is not None and not isinstance(val, Path):
                raise ValueError(
                    f"{field_name} must be a path, got {type(val).__name__}"
                )

        if self.workbook is None:
            raise ValueError(
                "No responses workbook specified. Please set workbook before running the pipeline."
            )

    # endregion


# endregion
