"""Remember which submissions already have a slide, across runs.

State lives in a small string key-value "property store". The processed
timestamps are one JSON-encoded list under a single key.
"""

from __future__ import annotations

import abc
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from praise2slides.errors import SerializationError
from praise2slides.internals import constants
from praise2slides.models import ProcessedSet

log = logging.getLogger("praise2slides")


# region PropertyStore
class PropertyStore(abc.ABC):
    """Durable string key-value slot store. Subclasses decide where the values live."""

    @abc.abstractmethod
    def get(self, key: str) -> str | None:
        """Stored value for `key`, or None when nothing is stored."""

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Forget `key`. Deleting a missing key is not an error."""


# endregion


# region InMemoryPropertyStore
class InMemoryPropertyStore(PropertyStore):
    """Keeps properties in a dict. Useful for tests and for embedding the pipeline elsewhere."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


# endregion


# region JsonFilePropertyStore
class JsonFilePropertyStore(PropertyStore):
    """
    Properties persisted as a flat JSON object in one file.

    A missing file is an empty store. A file that can't be parsed is also treated
    as empty (with a warning) so a damaged state file never wedges the automation;
    the next write replaces it.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read_all()
        values[key] = value
        self._write_all(values)

    def delete(self, key: str) -> None:
        values = self._read_all()
        if key in values:
            del values[key]
            self._write_all(values)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            return _parse_properties(self.path.read_text(encoding="utf-8"))
        except SerializationError as e:
            log.warning(f"Ignoring unreadable property store {self.path}: {e}")
            return {}
        except OSError as e:
            log.warning(f"Could not read property store {self.path}: {e}")
            return {}

    def _write_all(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write beside the real file, then swap it in, so a crash never leaves half a file.
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                json.dump(values, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            log.error(f"Failed to write property store {self.path}: {e}")
            raise


def _parse_properties(text: str) -> dict[str, str]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"not valid JSON ({e})") from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise SerializationError("expected a JSON object of string values")

    return data


# endregion


# region ProcessedSetTracker
class ProcessedSetTracker:
    """Loads and saves the ProcessedSet under one named property."""

    def __init__(
        self,
        store: PropertyStore,
        key: str = constants.PROCESSED_TIMESTAMPS_KEY,
    ) -> None:
        self.store = store
        self.key = key

    def load(self) -> ProcessedSet:
        """Return the persisted set; empty on first run or when the stored value is unreadable."""
        raw = self.store.get(self.key)
        if raw is None:
            log.debug(f"No '{self.key}' property yet; starting from an empty set.")
            return ProcessedSet()

        try:
            processed = ProcessedSet(deserialize_timestamps(raw))
        except SerializationError as e:
            log.warning(
                f"Stored '{self.key}' could not be read ({e}); treating it as empty. "
                "Earlier submissions may get slides again."
            )
            return ProcessedSet()

        log.debug(f"Loaded {len(processed)} processed timestamp(s).")
        return processed

    def save(self, processed: Iterable[str]) -> None:
        """Replace the stored value with `processed`. Pass the complete set, not just the new entries."""
        timestamps = ProcessedSet(processed).to_list()
        self.store.set(self.key, json.dumps(timestamps))
        log.debug(f"Saved {len(timestamps)} processed timestamp(s).")

    def reset(self) -> None:
        """Forget every processed timestamp, so the next run makes slides for all rows again."""
        self.store.delete(self.key)
        log.info(f"Cleared the '{self.key}' property.")


def deserialize_timestamps(raw: str) -> list[str]:
    """Parse the stored JSON list of timestamp strings."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SerializationError(f"not valid JSON ({e})") from e

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise SerializationError("expected a JSON list of strings")

    return data


# endregion
