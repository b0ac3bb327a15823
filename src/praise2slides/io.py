# io.py
"""File I/O for the responses workbook and the pptx decks."""

import logging
from pathlib import Path
from typing import Any

import openpyxl
import pptx
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet
from pptx import presentation

from praise2slides.internals import constants
from praise2slides.internals.paths import resolve_path
from praise2slides.internals.run_context import get_pipeline_run_id
from praise2slides.models import DEFAULT_LAYOUT, ColumnLayout

log = logging.getLogger("praise2slides")


# region Path Helpers
def validate_path(user_path: str | Path) -> Path:
    """Ensure filepath exists and is a file."""
    path = Path(user_path)
    pipeline_id = get_pipeline_run_id()
    if not path.exists():
        log.error(f"File not found: {user_path} [pipeline:{pipeline_id}]")
        raise FileNotFoundError(f"File not found: {user_path}")
    if not path.is_file():
        log.error(
            f"Path is not a file (might be a directory): {user_path} [pipeline:{pipeline_id}]"
        )
        raise ValueError(f"Path is not a file: {user_path}")
    return path


def validate_pptx_path(user_path: str | Path) -> Path:
    """Validates the filepath exists and is actually a pptx file."""
    path = validate_path(user_path)
    pipeline_id = get_pipeline_run_id()

    if path.suffix.lower() == ".ppt":
        log.error(f"Unsupported .ppt file: {path} [pipeline:{pipeline_id}]")
        raise ValueError(
            "This tool only supports .pptx files right now. Please convert your .ppt file to .pptx format first."
        )
    if path.suffix.lower() != ".pptx":
        log.error(
            f"Wrong file extension: expected .pptx, got {path.suffix} [pipeline:{pipeline_id}]"
        )
        raise ValueError(f"Expected a .pptx file, but got: {path.suffix}")
    return path


def validate_xlsx_path(user_path: str | Path) -> Path:
    """Validates the filepath exists and is a workbook openpyxl can read."""
    path = validate_path(user_path)
    pipeline_id = get_pipeline_run_id()

    if path.suffix.lower() == ".xls":
        log.error(f"Unsupported .xls file: {path} [pipeline:{pipeline_id}]")
        raise ValueError(
            "This tool only supports .xlsx workbooks. Please re-save your .xls file (or download the Google Sheet) as .xlsx first."
        )
    if path.suffix.lower() not in {".xlsx", ".xlsm"}:
        log.error(
            f"Wrong file extension: expected .xlsx, got {path.suffix} [pipeline:{pipeline_id}]"
        )
        raise ValueError(f"Expected a .xlsx file, but got: {path.suffix}")
    return path


# endregion


# region Workbook - Read
def load_workbook(workbook_path: Path | str) -> Workbook:
    """Read the responses workbook with cached formula values instead of formulas."""
    pipeline_id = get_pipeline_run_id()
    path = validate_xlsx_path(workbook_path)

    try:
        wb = openpyxl.load_workbook(path, data_only=True)
    except Exception as e:
        log.error(
            f"Could not load workbook {str(path)} [pipeline:{pipeline_id}]. Error: {e} "
        )
        raise ValueError(f"Workbook appears to be corrupted: {e}") from e

    log.debug(f"Workbook {path} has sheets: {wb.sheetnames} [pipeline:{pipeline_id}]")
    return wb


def get_sheet(wb: Workbook, sheet_name: str) -> Worksheet:
    """Look up a sheet by name, raising ValueError with the available names when it's missing."""
    if sheet_name not in wb.sheetnames:
        log.error(
            f"Sheet '{sheet_name}' not found. Available sheets: {wb.sheetnames} [pipeline:{get_pipeline_run_id()}]"
        )
        raise ValueError(
            f"Sheet '{sheet_name}' not found. Available sheets: {', '.join(wb.sheetnames)}"
        )
    return wb[sheet_name]


def read_setup_values(
    setup_sheet: Worksheet,
    template_cell: str = constants.TEMPLATE_PPTX_CELL,
    target_cell: str = constants.TARGET_PPTX_CELL,
) -> tuple[str | None, str | None]:
    """Read the template and target deck locations from the Setup sheet. Blank cells come back as None."""
    return (
        _cell_to_str(setup_sheet[template_cell].value),
        _cell_to_str(setup_sheet[target_cell].value),
    )


def _cell_to_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def read_response_rows(
    sheet: Worksheet, layout: ColumnLayout = DEFAULT_LAYOUT
) -> list[tuple[Any, ...]]:
    """
    Return every response row below the header.

    Rows are at least RESPONSE_COLUMN_COUNT cells wide, wider when `layout` maps a
    column past that. Cells past the sheet's used range read as None.
    """
    if sheet.max_row < 2:
        return []

    width = max(constants.RESPONSE_COLUMN_COUNT, layout.width)
    rows = [
        tuple(row)
        for row in sheet.iter_rows(
            min_row=2, max_row=sheet.max_row, min_col=1, max_col=width, values_only=True
        )
    ]
    log.debug(
        f"Read {len(rows)} response row(s) from sheet '{sheet.title}' [pipeline:{get_pipeline_run_id()}]"
    )
    return rows


def resolve_deck_path(raw: str, workbook_path: Path) -> Path:
    """Deck paths in the Setup sheet are relative to the workbook's folder."""
    return resolve_path(raw, base=workbook_path.parent)


# endregion


# region Decks - Read
def load_presentation(pptx_path: Path | str) -> presentation.Presentation:
    """Read in a pptx deck and report its slide count."""
    pipeline_id = get_pipeline_run_id()
    path = validate_pptx_path(pptx_path)

    try:
        prs = pptx.Presentation(str(path))
    except Exception as e:
        log.error(
            f"Could not load PowerPoint file {str(path)} [pipeline:{pipeline_id}]. Error: {e} "
        )
        raise ValueError(f"Presentation appears to be corrupted: {e}") from e

    log.info(
        f"The pptx file {path} has {len(prs.slides)} slide(s) in it. [pipeline:{pipeline_id}]"
    )
    return prs


# endregion


# region Decks - Write
def save_presentation(prs: presentation.Presentation, pptx_path: Path) -> None:
    """Save the deck back to where it was loaded from."""
    pipeline_id = get_pipeline_run_id()

    _validate_content_size(prs)

    try:
        prs.save(str(pptx_path))
        log.info(f"Successfully saved to {pptx_path}. [pipeline:{pipeline_id}]")
    except PermissionError as e:
        log.error(f"Save failed due to permission error [pipeline:{pipeline_id}]: {e}")
        raise PermissionError(
            "Save failed: File may be open in another program"
        ) from e
    except OSError as e:
        log.error(f"Save failed in [pipeline:{pipeline_id}]: {e}")
        raise OSError(f"Save failed (disk space or IO issue): {e}") from e


def _validate_content_size(prs: presentation.Presentation) -> None:
    """Report if the deck we're about to save is excessively large."""
    max_s_count = 1000
    if len(prs.slides) > max_s_count:
        log.warning(
            f"This is about to save a pptx file with over {max_s_count} slides ... that seems a bit long!"
        )


# endregion
