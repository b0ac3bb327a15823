"""Shared test helper functions."""

# mypy: disable-error-code="import-untyped"

from pathlib import Path
from typing import Any

import openpyxl
import pptx
from pptx import presentation
from pptx.slide import Slide
from pptx.util import Inches

from praise2slides.internals import constants
from praise2slides.merge import iter_text_frames

RESPONSES_HEADER = [
    "Timestamp",
    "Email Address",
    "YOUR first and last name:",
    "Name of the OC Staff member you are praising:",
    "What is the email of the person you are rewarding?",
    "Why are they so awesome? This will appear in the email to the recipient.",
]

BLANK_LAYOUT_INDEX = 6  # "Blank" in python-pptx's default template


def response_row(
    timestamp: Any,
    from_name: Any,
    teacher_name: Any,
    praise: Any,
    submitter_email: str = "submitter@school.org",
    teacher_email: str = "teacher@school.org",
) -> list[Any]:
    """A raw response row laid out the way the praise form writes it."""
    return [timestamp, submitter_email, from_name, teacher_name, teacher_email, praise]


def build_template_pptx(path: Path) -> Path:
    """Write a deck with one slide holding the three placeholders in separate text boxes."""
    prs = pptx.Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])
    _add_textbox(slide, 1, f"Panther Praise for {constants.TEACHER_NAME_PLACEHOLDER}!")
    _add_textbox(slide, 2, constants.PRAISE_PLACEHOLDER)
    _add_textbox(slide, 3, f"From: {constants.FROM_NAME_PLACEHOLDER}")
    prs.save(str(path))
    return path


def build_empty_pptx(path: Path) -> Path:
    """Write a deck with no slides."""
    pptx.Presentation().save(str(path))
    return path


def _add_textbox(slide: Slide, row: int, text: str) -> None:
    box = slide.shapes.add_textbox(Inches(0.5), Inches(row * 1.5), Inches(9), Inches(1))
    box.text_frame.text = text


def build_workbook(
    path: Path,
    rows: list[list[Any]],
    template: str | None = None,
    target: str | None = None,
    include_setup: bool = True,
    responses_sheet: str = constants.RESPONSES_SHEET_NAME,
) -> Path:
    """Write a responses workbook; the Setup sheet gets whatever template/target values are given."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = responses_sheet
    ws.append(RESPONSES_HEADER)
    for row in rows:
        ws.append(list(row))

    if include_setup:
        setup = wb.create_sheet(constants.SETUP_SHEET_NAME)
        setup["A2"] = constants.TEMPLATE_PPTX_LABEL
        setup["A3"] = constants.TARGET_PPTX_LABEL
        if template is not None:
            setup[constants.TEMPLATE_PPTX_CELL] = template
        if target is not None:
            setup[constants.TARGET_PPTX_CELL] = target

    wb.save(path)
    return path


def slide_text(slide: Slide) -> str:
    """All text on a slide, one text frame per line."""
    return "\n".join(tf.text for tf in iter_text_frames(slide.shapes))


def deck_texts(prs_or_path: presentation.Presentation | Path) -> list[str]:
    """slide_text() for every slide in a deck (or a deck on disk)."""
    prs = (
        pptx.Presentation(str(prs_or_path))
        if isinstance(prs_or_path, Path)
        else prs_or_path
    )
    return [slide_text(slide) for slide in prs.slides]
