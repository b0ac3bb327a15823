# models.py
"""Data models for form submissions, processed-set state, and pipeline results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


# region SubmissionRow
@dataclass(frozen=True)
class SubmissionRow:
    """One new form submission, ready to be merged into a slide.

    All four fields are non-empty. `timestamp` is the normalized ISO-8601 string
    that identifies the submission; `praise` is already collapsed to a single line.
    """

    timestamp: str
    teacher_name: str
    praise: str
    from_name: str


# endregion


# region ColumnLayout
@dataclass(frozen=True)
class ColumnLayout:
    """
    Zero-based column positions of the fields we read from a response row.

    Defaults follow the praise form's question order:
        0 Timestamp
        1 Email address (collected by the form)
        2 YOUR first and last name
        3 Name of the OC Staff member you are praising
        4 Recipient email (dropdown)
        5 Why are they so awesome?
    """

    timestamp: int = 0
    from_name: int = 2
    teacher_name: int = 3
    praise: int = 5

    @property
    def width(self) -> int:
        """Smallest row length that covers every mapped column."""
        return max(self.timestamp, self.from_name, self.teacher_name, self.praise) + 1


DEFAULT_LAYOUT = ColumnLayout()
# endregion


# region ProcessedSet
class ProcessedSet:
    """Ordered, duplicate-free collection of timestamps already merged into the target deck."""

    def __init__(self, timestamps: Iterable[str] = ()) -> None:
        self._ordered: list[str] = []
        self._members: set[str] = set()
        self._extend(timestamps)

    def _extend(self, timestamps: Iterable[str]) -> None:
        for ts in timestamps:
            if ts not in self._members:
                self._members.add(ts)
                self._ordered.append(ts)

    def union(self, timestamps: Iterable[str]) -> ProcessedSet:
        """Return a new set holding our timestamps followed by any new ones, in order."""
        merged = ProcessedSet(self._ordered)
        merged._extend(timestamps)
        return merged

    def to_list(self) -> list[str]:
        return list(self._ordered)

    def __contains__(self, timestamp: object) -> bool:
        return timestamp in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __eq__(self, other: object) -> bool:
        # Order-independent, like the persisted slot's contract.
        if isinstance(other, ProcessedSet):
            return self._members == other._members
        return NotImplemented

    def __repr__(self) -> str:
        return f"ProcessedSet({self._ordered!r})"


# endregion


# region PipelineStage
class PipelineStage(Enum):
    """States of a single pipeline run. DONE and FAILED are terminal."""

    IDLE = "idle"
    LOADING_CONFIG = "loading_config"
    OPENING_RESOURCES = "opening_resources"
    EXTRACTING_ROWS = "extracting_rows"
    MERGING = "merging"
    PERSISTING_STATE = "persisting_state"
    DONE = "done"
    FAILED = "failed"


# endregion


# region PipelineResult
@dataclass
class PipelineResult:
    """Outcome of one pipeline run. `str(result)` is the human-readable status line."""

    succeeded: bool
    message: str
    slides_added: int = 0
    stage: PipelineStage = PipelineStage.IDLE
    # Where the run was when it failed; None on success.
    failed_stage: PipelineStage | None = None
    new_timestamps: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.message


# endregion
