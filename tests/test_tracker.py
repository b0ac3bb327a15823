"""Tests for the processed-set tracker and its property stores."""

import json
import logging
from pathlib import Path

import pytest

from praise2slides.errors import SerializationError
from praise2slides.internals import constants
from praise2slides.models import ProcessedSet
from praise2slides.tracker import (
    InMemoryPropertyStore,
    JsonFilePropertyStore,
    PropertyStore,
    ProcessedSetTracker,
    deserialize_timestamps,
)


# region ProcessedSet
def test_processed_set_drops_duplicates_and_keeps_order() -> None:
    """First occurrence wins; later duplicates are ignored."""
    processed = ProcessedSet(["b", "a", "b", "c", "a"])

    assert processed.to_list() == ["b", "a", "c"]
    assert len(processed) == 3
    assert "a" in processed
    assert "z" not in processed


def test_processed_set_union_appends_only_new_ids() -> None:
    """union() returns a new set and leaves the original alone."""
    original = ProcessedSet(["a", "b"])

    merged = original.union(["b", "c", "d", "c"])

    assert merged.to_list() == ["a", "b", "c", "d"]
    assert original.to_list() == ["a", "b"]


def test_processed_set_equality_ignores_order() -> None:
    """Two sets with the same members are equal regardless of order."""
    assert ProcessedSet(["a", "b"]) == ProcessedSet(["b", "a"])
    assert ProcessedSet(["a"]) != ProcessedSet(["a", "b"])


# endregion


# region ProcessedSetTracker
def test_load_on_first_run_returns_empty_set(memory_store: InMemoryPropertyStore) -> None:
    """No stored property means nothing has been processed yet."""
    assert len(ProcessedSetTracker(memory_store).load()) == 0


@pytest.mark.parametrize(
    "timestamps",
    [
        [],
        ["2024-01-01T10:00:00.000Z"],
        ["2024-01-02T10:00:00.000Z", "2024-01-01T10:00:00.000Z", "2024-01-03T10:00:00.000Z"],
    ],
)
def test_load_after_save_returns_the_saved_set(
    memory_store: InMemoryPropertyStore, timestamps: list[str]
) -> None:
    """load() after save(S) gives back S."""
    tracker = ProcessedSetTracker(memory_store)

    tracker.save(timestamps)

    assert tracker.load() == ProcessedSet(timestamps)


def test_save_writes_a_json_list_under_the_processed_key(
    memory_store: InMemoryPropertyStore,
) -> None:
    """The stored value is a JSON list without duplicates, under processedTimestamps."""
    ProcessedSetTracker(memory_store).save(["a", "b", "a"])

    raw = memory_store.get(constants.PROCESSED_TIMESTAMPS_KEY)
    assert raw is not None
    assert json.loads(raw) == ["a", "b"]


def test_save_is_a_full_replace(memory_store: InMemoryPropertyStore) -> None:
    """save() overwrites; callers pass the complete set."""
    tracker = ProcessedSetTracker(memory_store)
    tracker.save(["a", "b"])

    tracker.save(["c"])

    assert tracker.load().to_list() == ["c"]


@pytest.mark.parametrize("bad_value", ["not json", "{\"a\": 1}", "[1, 2]", "\"a\""])
def test_unreadable_stored_value_loads_as_empty(
    bad_value: str, caplog: pytest.LogCaptureFixture
) -> None:
    """A corrupt property must not wedge the automation."""
    store = InMemoryPropertyStore({constants.PROCESSED_TIMESTAMPS_KEY: bad_value})

    with caplog.at_level(logging.WARNING, logger="praise2slides"):
        processed = ProcessedSetTracker(store).load()

    assert len(processed) == 0
    assert "treating it as empty" in caplog.text


def test_reset_clears_only_the_processed_key() -> None:
    """reset() removes the processed timestamps and leaves other properties alone."""
    store = InMemoryPropertyStore({"other": "keep me"})
    tracker = ProcessedSetTracker(store)
    tracker.save(["a"])

    tracker.reset()

    assert store.get(constants.PROCESSED_TIMESTAMPS_KEY) is None
    assert store.get("other") == "keep me"
    assert len(tracker.load()) == 0


def test_deserialize_timestamps_raises_serialization_error() -> None:
    """The parser reports bad content with our taxonomy's error."""
    with pytest.raises(SerializationError, match="list of strings"):
        deserialize_timestamps("[\"a\", 3]")


# endregion


# region JsonFilePropertyStore
def test_json_store_missing_file_reads_as_empty(state_file: Path) -> None:
    """First run: no file, no properties, and nothing gets created by reading."""
    store = JsonFilePropertyStore(state_file)

    assert store.get("anything") is None
    assert not state_file.exists()


def test_json_store_survives_a_new_instance(state_file: Path) -> None:
    """Values written by one store object are visible to the next, like a later invocation."""
    JsonFilePropertyStore(state_file).set("processedTimestamps", "[\"a\"]")

    assert JsonFilePropertyStore(state_file).get("processedTimestamps") == "[\"a\"]"
    assert json.loads(state_file.read_text(encoding="utf-8")) == {
        "processedTimestamps": "[\"a\"]"
    }


def test_json_store_keeps_other_keys_and_deletes(state_file: Path) -> None:
    """set() and delete() only touch their own key."""
    store = JsonFilePropertyStore(state_file)
    store.set("one", "1")
    store.set("two", "2")

    store.delete("one")
    store.delete("never-set")

    assert store.get("one") is None
    assert store.get("two") == "2"


def test_json_store_corrupt_file_reads_as_empty_and_is_replaced_on_write(
    state_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """A damaged state file is ignored with a warning and rewritten by the next set()."""
    state_file.parent.mkdir(parents=True)
    state_file.write_text("{not json", encoding="utf-8")
    store = JsonFilePropertyStore(state_file)

    with caplog.at_level(logging.WARNING, logger="praise2slides"):
        assert store.get("processedTimestamps") is None
    assert "Ignoring unreadable property store" in caplog.text

    store.set("processedTimestamps", "[]")
    assert json.loads(state_file.read_text(encoding="utf-8")) == {
        "processedTimestamps": "[]"
    }


def test_tracker_round_trip_through_json_file(state_file: Path) -> None:
    """The tracker and file store together persist across instances."""
    ProcessedSetTracker(JsonFilePropertyStore(state_file)).save(["x", "y"])

    loaded = ProcessedSetTracker(JsonFilePropertyStore(state_file)).load()

    assert loaded == ProcessedSet(["y", "x"])


def test_json_store_leaves_no_temp_files(state_file: Path) -> None:
    """Atomic writes clean up after themselves."""
    store = JsonFilePropertyStore(state_file)
    store.set("a", "1")
    store.set("a", "2")

    assert [p.name for p in state_file.parent.iterdir()] == [state_file.name]


# endregion


# region PropertyStore
def test_property_store_base_cannot_be_instantiated() -> None:
    """Only concrete stores can be handed to the tracker."""
    with pytest.raises(TypeError):
        PropertyStore()  # type: ignore[abstract]


def test_partial_property_store_cannot_be_instantiated() -> None:
    """A store that forgets delete() fails at construction, not at reset time."""

    class NoDeleteStore(PropertyStore):
        def get(self, key: str) -> str | None:
            return None

        def set(self, key: str, value: str) -> None:
            pass

    with pytest.raises(TypeError):
        NoDeleteStore()  # type: ignore[abstract]


# endregion
