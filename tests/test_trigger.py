"""Tests for watch mode."""

import os
from pathlib import Path

import pytest

from praise2slides.internals.define_config import UserConfig
from praise2slides.models import PipelineResult, PipelineStage
from praise2slides.trigger import watch_workbook


@pytest.fixture
def fake_pipeline(monkeypatch: pytest.MonkeyPatch) -> list[UserConfig]:
    """Record pipeline runs instead of performing them."""
    runs: list[UserConfig] = []

    def _run(cfg, store=None):  # type: ignore[no-untyped-def]
        runs.append(cfg)
        return PipelineResult(
            succeeded=True,
            message="✅ Successfully added 0 new slides.",
            stage=PipelineStage.DONE,
        )

    monkeypatch.setattr("praise2slides.trigger.run_pipeline", _run)
    return runs


@pytest.fixture
def workbook(tmp_path: Path) -> Path:
    path = tmp_path / "responses.xlsx"
    path.write_bytes(b"placeholder")
    return path


def test_runs_once_at_start_and_not_again_without_changes(
    fake_pipeline: list[UserConfig], workbook: Path
) -> None:
    """The first check runs the pipeline; unchanged files don't trigger more runs."""
    sleeps: list[float] = []

    runs = watch_workbook(
        UserConfig(workbook=workbook), interval=7, max_checks=3, sleep=sleeps.append
    )

    assert runs == 1
    assert len(fake_pipeline) == 1
    assert sleeps == [7, 7]


def test_runs_again_when_the_workbook_changes(
    fake_pipeline: list[UserConfig], workbook: Path
) -> None:
    """A new modification time triggers another run."""
    mtime = workbook.stat().st_mtime

    def _touch(_: float) -> None:
        nonlocal mtime
        mtime += 10
        os.utime(workbook, (mtime, mtime))

    runs = watch_workbook(UserConfig(workbook=workbook), interval=1, max_checks=3, sleep=_touch)

    assert runs == 3
    assert len(fake_pipeline) == 3


def test_missing_workbook_waits_without_running(
    fake_pipeline: list[UserConfig], tmp_path: Path
) -> None:
    """Until the file appears there is nothing to merge."""
    runs = watch_workbook(
        UserConfig(workbook=tmp_path / "not_yet.xlsx"),
        interval=1,
        max_checks=2,
        sleep=lambda _: None,
    )

    assert runs == 0
    assert fake_pipeline == []


@pytest.mark.parametrize("interval", [0, -5])
def test_non_positive_interval_is_rejected(interval: float, workbook: Path) -> None:
    with pytest.raises(ValueError, match="positive"):
        watch_workbook(UserConfig(workbook=workbook), interval=interval, max_checks=1)


def test_watch_without_workbook_is_rejected() -> None:
    with pytest.raises(ValueError, match="workbook"):
        watch_workbook(UserConfig(), interval=1, max_checks=1)
