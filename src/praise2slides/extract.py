"""Turn raw response rows into the submissions that still need a slide."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone
from typing import Any, Sequence

from openpyxl.utils.datetime import from_excel

from praise2slides.models import DEFAULT_LAYOUT, ColumnLayout, ProcessedSet, SubmissionRow

log = logging.getLogger("praise2slides")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Timestamp shapes a Google Sheets download (or a hand-typed row) may hold as plain text
_TEXT_TIMESTAMP_FORMATS = (
    # fromisoformat on Python 3.10 only takes 3 or 6 fractional digits
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%Y-%m-%d %H:%M:%S",
)


# region normalize_timestamp
def normalize_timestamp(raw: Any) -> str | None:
    """
    Normalize a raw timestamp cell to `YYYY-MM-DDTHH:MM:SS.mmmZ` (UTC, millisecond precision).

    Equivalent moments produce the same string, so the result can be compared
    against previously persisted timestamps. Naive datetimes are taken as UTC.

    Returns None when the cell is empty or can't be understood as a moment in time.
    """
    moment = _to_datetime(raw)
    if moment is None:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    # Offsets can push moments at the edge of the calendar out of range.
    try:
        moment = moment.astimezone(timezone.utc)
        return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    except (OverflowError, ValueError):
        return None


def _to_datetime(raw: Any) -> datetime | None:
    if raw is None:
        return None
    # bool is an int subclass; a checkbox column is never a timestamp.
    if isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time.min)
    if isinstance(raw, (int, float)):
        try:
            converted = from_excel(raw)
        except (ValueError, OverflowError, TypeError):
            return None
        return converted if isinstance(converted, datetime) else None
    if isinstance(raw, str):
        return _parse_timestamp_text(raw.strip())
    return None


def _parse_timestamp_text(text: str) -> datetime | None:
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in _TEXT_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(iso_text, fmt)
        except ValueError:
            continue

    return None


# endregion


# region collapse_line_breaks
def collapse_line_breaks(text: str) -> str:
    """Replace each line break with a single space so the text stays on one line on the slide."""
    return _LINE_BREAK_RE.sub(" ", text)


# endregion


# region row_to_submission
def row_to_submission(
    raw_row: Sequence[Any],
    processed: ProcessedSet,
    layout: ColumnLayout = DEFAULT_LAYOUT,
) -> SubmissionRow | None:
    """
    Build a SubmissionRow from one raw row, or return None if the row should be skipped.

    A row is skipped when its timestamp is empty or unparseable, when the timestamp is
    already in `processed`, or when any of the name/praise fields is blank after trimming.
    """
    raw_timestamp = _cell(raw_row, layout.timestamp)
    if raw_timestamp is None or raw_timestamp == "":
        return None

    timestamp = normalize_timestamp(raw_timestamp)
    if timestamp is None:
        log.warning(f"Skipping row with unreadable timestamp: {raw_timestamp!r}")
        return None

    if timestamp in processed:
        log.debug(f"Skipping already processed submission {timestamp}")
        return None

    teacher_name = _cell_text(raw_row, layout.teacher_name)
    praise = collapse_line_breaks(_cell_text(raw_row, layout.praise))
    from_name = _cell_text(raw_row, layout.from_name)

    if not teacher_name or not praise or not from_name:
        log.debug(f"Skipping incomplete submission {timestamp}")
        return None

    return SubmissionRow(
        timestamp=timestamp,
        teacher_name=teacher_name,
        praise=praise,
        from_name=from_name,
    )


def _cell(raw_row: Sequence[Any], index: int) -> Any:
    return raw_row[index] if index < len(raw_row) else None


def _cell_text(raw_row: Sequence[Any], index: int) -> str:
    value = _cell(raw_row, index)
    return "" if value is None else str(value).strip()


# endregion


# region get_unprocessed_rows
def get_unprocessed_rows(
    raw_rows: Sequence[Sequence[Any]],
    processed: ProcessedSet,
    layout: ColumnLayout = DEFAULT_LAYOUT,
) -> list[SubmissionRow]:
    """Return the new, complete submissions in their original sheet order."""
    unprocessed: list[SubmissionRow] = []
    for raw_row in raw_rows:
        submission = row_to_submission(raw_row, processed, layout)
        if submission is not None:
            unprocessed.append(submission)

    log.info(
        f"Found {len(unprocessed)} new submission(s) out of {len(raw_rows)} row(s)."
    )
    return unprocessed


# endregion
