"""Run the merge pipeline: load state, find new submissions, add their slides, remember them."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from openpyxl.workbook.workbook import Workbook
from pptx import presentation
from pptx.slide import Slide

from praise2slides import io
from praise2slides.errors import (
    ConfigurationError,
    MergeError,
    ResourceOpenError,
)
from praise2slides.extract import get_unprocessed_rows
from praise2slides.internals import constants
from praise2slides.internals.define_config import UserConfig
from praise2slides.internals.run_context import get_session_id, start_pipeline_run
from praise2slides.merge import create_praise_slide
from praise2slides.models import PipelineResult, PipelineStage
from praise2slides.tracker import (
    JsonFilePropertyStore,
    ProcessedSetTracker,
    PropertyStore,
)

log = logging.getLogger("praise2slides")

# One pipeline at a time per process; two overlapping runs would both merge the same rows.
_run_lock = threading.Lock()


# region text_merging
def text_merging() -> str:
    """
    Zero-argument entry point for triggers and manual runs.

    Loads the default config file (or defaults), runs the pipeline, and returns the
    status line. Never raises.
    """
    try:
        cfg = UserConfig.from_default_location()
    except Exception as e:
        error_msg = _failure_message(e)
        log.error(error_msg)
        return error_msg

    return str(run_pipeline(cfg))


# endregion


# region run_pipeline
def run_pipeline(cfg: UserConfig, store: PropertyStore | None = None) -> PipelineResult:
    """
    Add a slide for every new submission and record them as processed.

    Args:
        cfg: Where the workbook, decks and state live.
        store: Property store holding the processed timestamps. Defaults to the
            JSON file named by cfg.state_file (or the per-user default).

    Returns:
        PipelineResult; failures are reported in it rather than raised.
    """
    with _run_lock:
        pipeline_id = start_pipeline_run()
        log.info(f"Initializing pipeline run. [pipeline:{pipeline_id}]")
        return _PipelineRun(cfg, store, pipeline_id).execute()


# endregion


# region _PipelineRun
class _PipelineRun:
    """A single pass through the pipeline's stages. Not reused between runs."""

    def __init__(
        self, cfg: UserConfig, store: PropertyStore | None, pipeline_id: str
    ) -> None:
        self.cfg = cfg
        self.store = store
        self.pipeline_id = pipeline_id
        self.stage = PipelineStage.IDLE

    def _advance(self, stage: PipelineStage) -> None:
        log.debug(
            f"Stage {self.stage.value} -> {stage.value} [pipeline:{self.pipeline_id}]"
        )
        self.stage = stage

    def execute(self) -> PipelineResult:
        try:
            self._advance(PipelineStage.LOADING_CONFIG)
            workbook_path, wb, template_path, target_path = self._load_config()
            log_pipeline_info(workbook_path, template_path, target_path)

            self._advance(PipelineStage.OPENING_RESOURCES)
            raw_rows = self._read_responses(wb)
            template_slide, target_prs = self._open_decks(template_path, target_path)

            self._advance(PipelineStage.EXTRACTING_ROWS)
            tracker = ProcessedSetTracker(
                self.store or JsonFilePropertyStore(self.cfg.get_state_file_path())
            )
            processed = tracker.load()
            rows = get_unprocessed_rows(raw_rows, processed)

            self._advance(PipelineStage.MERGING)
            new_processed: list[str] = []
            for row in rows:
                create_praise_slide(template_slide, target_prs, row)
                new_processed.append(row.timestamp)

            self._advance(PipelineStage.PERSISTING_STATE)
            if new_processed:
                self._save_target(target_prs, target_path)
            tracker.save(processed.union(new_processed))

            self._advance(PipelineStage.DONE)

        except Exception as e:
            failed_stage = self.stage
            self._advance(PipelineStage.FAILED)
            error_msg = _failure_message(e)
            log.error(
                f"{error_msg} (during {failed_stage.value}) [pipeline:{self.pipeline_id}]"
            )
            log.debug("Pipeline failure traceback:", exc_info=True)
            return PipelineResult(
                succeeded=False,
                message=error_msg,
                stage=PipelineStage.FAILED,
                failed_stage=failed_stage,
            )

        log.info(
            f"{constants.SUCCESS_MARKER} Completed: {len(new_processed)} new slides added. [pipeline:{self.pipeline_id}]"
        )
        return PipelineResult(
            succeeded=True,
            message=f"{constants.SUCCESS_MARKER} Successfully added {len(new_processed)} new slides.",
            slides_added=len(new_processed),
            stage=PipelineStage.DONE,
            new_timestamps=new_processed,
        )

    # region stage helpers
    def _load_config(self) -> tuple[Path, Workbook, Path, Path]:
        """Validate the config and find both decks, from the config or the workbook's Setup sheet."""
        try:
            self.cfg.validate()
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        workbook_path = self.cfg.get_workbook_path()
        if workbook_path is None:
            raise ConfigurationError("No responses workbook specified.")

        try:
            wb = io.load_workbook(workbook_path)
        except (OSError, ValueError) as e:
            raise ResourceOpenError(
                f"Failed to open spreadsheet or retrieve data: {e}"
            ) from e

        template_path = self.cfg.get_template_pptx_override()
        target_path = self.cfg.get_target_pptx_override()

        if template_path is None or target_path is None:
            template_raw, target_raw = self._read_setup_sheet(wb)
            if template_path is None and template_raw:
                template_path = io.resolve_deck_path(template_raw, workbook_path)
            if target_path is None and target_raw:
                target_path = io.resolve_deck_path(target_raw, workbook_path)

        if template_path is None or target_path is None:
            raise ConfigurationError(
                f"Template or Target Presentation path is missing in the '{self.cfg.setup_sheet}' sheet "
                f"(expected in {constants.TEMPLATE_PPTX_CELL} and {constants.TARGET_PPTX_CELL})."
            )

        return workbook_path, wb, template_path, target_path

    def _read_setup_sheet(self, wb: Workbook) -> tuple[str | None, str | None]:
        try:
            setup_sheet = io.get_sheet(wb, self.cfg.setup_sheet)
        except ValueError as e:
            raise ConfigurationError(
                f"{self.cfg.setup_sheet} sheet not found. Please create a '{self.cfg.setup_sheet}' sheet with the "
                f"template deck path in {constants.TEMPLATE_PPTX_CELL} and the target deck path in {constants.TARGET_PPTX_CELL}."
            ) from e
        return io.read_setup_values(setup_sheet)

    def _read_responses(self, wb: Workbook) -> list[tuple]:
        try:
            sheet = io.get_sheet(wb, self.cfg.responses_sheet)
            return io.read_response_rows(sheet)
        except ValueError as e:
            raise ResourceOpenError(
                f"Failed to open spreadsheet or retrieve data: {e}"
            ) from e

    def _open_decks(
        self, template_path: Path, target_path: Path
    ) -> tuple[Slide, presentation.Presentation]:
        try:
            template_prs = io.load_presentation(template_path)
            if len(template_prs.slides) == 0:
                raise ValueError(
                    f"Template presentation {template_path} has no slides; its first slide is the template."
                )
            template_slide = template_prs.slides[0]

            # Template and target may be the same deck.
            if target_path == template_path:
                target_prs = template_prs
            else:
                target_prs = io.load_presentation(target_path)
        except (OSError, ValueError) as e:
            raise ResourceOpenError(f"Failed to open presentations: {e}") from e

        return template_slide, target_prs

    def _save_target(self, target_prs: presentation.Presentation, target_path: Path) -> None:
        try:
            io.save_presentation(target_prs, target_path)
        except OSError as e:
            raise MergeError(f"Failed to save the target presentation: {e}") from e

    # endregion


# endregion


# region helpers
def _failure_message(error: BaseException) -> str:
    return f"{constants.FAILURE_MARKER} Failed with error: {str(error) or type(error).__name__}"


def log_pipeline_info(workbook_path: Path, template_path: Path, target_path: Path) -> None:
    """Print this run's session ID and the resources it will touch to the log."""
    log.info(f"=== Pipeline Run Started ===")
    log.info(f"Session ID: {get_session_id()}")
    log.info(f"Spreadsheet: {workbook_path}")
    log.info(f"Template: {template_path}")
    log.info(f"Target: {target_path}")


# endregion
