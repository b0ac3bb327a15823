"""Shared fixtures"""

# tests/conftest.py
from pathlib import Path

import pytest

from praise2slides.internals.define_config import UserConfig
from praise2slides.tracker import InMemoryPropertyStore
from tests.helpers import build_empty_pptx, build_template_pptx, build_workbook


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test's user folders (logs, configs, state) out of the real ~/Documents."""
    documents = tmp_path / "Documents"
    documents.mkdir()
    monkeypatch.setattr(
        "praise2slides.internals.paths.user_documents_dir", lambda: str(documents)
    )
    return documents


@pytest.fixture
def clean_debug_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Ensure debug env var is not set before test."""
    monkeypatch.delenv("PRAISE2SLIDES_DEBUG", raising=False)
    return monkeypatch


@pytest.fixture
def decks_dir(tmp_path: Path) -> Path:
    """Folder holding the test workbook and decks, like a shared drive folder."""
    folder = tmp_path / "decks"
    folder.mkdir()
    return folder


@pytest.fixture
def template_pptx(decks_dir: Path) -> Path:
    """Deck whose first slide carries all three placeholders."""
    return build_template_pptx(decks_dir / "praise_template.pptx")


@pytest.fixture
def target_pptx(decks_dir: Path) -> Path:
    """Empty deck the pipeline appends to."""
    return build_empty_pptx(decks_dir / "praise_wall.pptx")


@pytest.fixture
def make_workbook(decks_dir: Path, template_pptx: Path, target_pptx: Path):  # type: ignore[no-untyped-def]
    """Factory: write a responses workbook with the given rows and a Setup sheet pointing at the test decks."""

    def _make(rows: list[list], **kwargs) -> Path:  # type: ignore[no-untyped-def]
        kwargs.setdefault("template", template_pptx.name)
        kwargs.setdefault("target", target_pptx.name)
        return build_workbook(decks_dir / "form_responses.xlsx", rows, **kwargs)

    return _make


@pytest.fixture
def memory_store() -> InMemoryPropertyStore:
    """Fresh in-memory stand-in for the persisted properties."""
    return InMemoryPropertyStore()


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    """Location for a JSON property store that doesn't exist yet."""
    return tmp_path / "state" / "script_properties.json"


@pytest.fixture
def cfg_for(state_file: Path):  # type: ignore[no-untyped-def]
    """Factory: config pointed at a given workbook."""

    def _cfg(workbook: Path, **kwargs) -> UserConfig:  # type: ignore[no-untyped-def]
        kwargs.setdefault("state_file", state_file)
        return UserConfig(workbook=workbook, **kwargs)

    return _cfg
