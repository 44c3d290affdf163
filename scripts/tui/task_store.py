"""
Concrete implementation of TaskStore backed by a single JSON file.

The file holds one JSON array of task objects. Appends hold an exclusive
lock on a sidecar ``.lock`` file for the whole read-modify-write and
replace the target through a temporary file in the same directory.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from jsonschema import SchemaError, ValidationError, validate

# Add scripts to path for imports
SCRIPT_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from tui.providers import Task  # noqa: E402

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"
COLLECTION_SCHEMA = "task-collection"
DEFAULT_TASKS_FILE = Path("db") / "tasks.json"
FILE_MODE = 0o644


class StoreError(Exception):
    """Unrecoverable task store failure."""


class StoreIOError(StoreError):
    """The task file could not be created, locked, read or written."""


class DecodeError(StoreError):
    """The task file is not a JSON array of task objects."""


def load_schema(schema_name: str = COLLECTION_SCHEMA) -> dict:
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    try:
        return json.loads(schema_path.read_text())
    except OSError as e:
        raise StoreIOError(f"Schema not found: {schema_path}") from e


def validate_collection(data: Any) -> None:
    """Check decoded file contents against the collection schema."""
    try:
        validate(instance=data, schema=load_schema())
    except SchemaError as e:
        raise DecodeError(f"Invalid schema: {e.message}") from e
    except ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        raise DecodeError(f"Validation error at '{path}': {e.message}") from e


def decode_collection(raw: str) -> list[dict[str, Any]]:
    """Decode file contents; an empty file is an empty collection."""
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Task file is not valid JSON: {e}") from e
    validate_collection(data)
    return data


class FileTaskStore:
    """TaskStore implementation that appends to tasks.json."""

    def __init__(self, tasks_file: Path | None = None):
        if tasks_file is None:
            tasks_file = DEFAULT_TASKS_FILE
        self._tasks_file = Path(tasks_file)
        self._lock_file = self._tasks_file.with_name(self._tasks_file.name + ".lock")

    @property
    def path(self) -> Path:
        return self._tasks_file

    def load(self) -> list[Task]:
        """Load every stored task. Never creates the file."""
        if not self._tasks_file.exists():
            return []
        records = decode_collection(self._read())
        return [Task.from_dict(record) for record in records]

    def append(self, task: Task) -> None:
        """Append one task, preserving every prior record as stored."""
        with self._locked():
            try:
                self._tasks_file.touch(mode=FILE_MODE, exist_ok=True)
            except OSError as e:
                raise StoreIOError(f"Cannot create {self._tasks_file}: {e}") from e

            records = decode_collection(self._read())
            records.append(task.to_dict())
            self._atomic_write(records)

        logger.info(
            "Appended task %r to %s (%d total)", task.title, self._tasks_file, len(records)
        )

    def _read(self) -> str:
        try:
            return self._tasks_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Task file is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreIOError(f"Cannot read {self._tasks_file}: {e}") from e

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive lock for a read-modify-write window."""
        try:
            self._tasks_file.parent.mkdir(parents=True, exist_ok=True)
            fd = open(self._lock_file, "a")
        except OSError as e:
            raise StoreIOError(f"Cannot open lock file {self._lock_file}: {e}") from e

        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            logger.debug("Acquired lock %s", self._lock_file)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            fd.close()

    def _atomic_write(self, records: list[dict[str, Any]]) -> None:
        """Write JSON atomically via temp file + rename."""
        try:
            tmp_fd, tmp_path = tempfile.mkstemp(
                dir=str(self._tasks_file.parent), prefix=".tmp_", suffix=".json"
            )
        except OSError as e:
            raise StoreIOError(f"Cannot write {self._tasks_file}: {e}") from e

        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, FILE_MODE)
            os.replace(tmp_path, self._tasks_file)
        except OSError as e:
            _discard(tmp_path)
            raise StoreIOError(f"Cannot write {self._tasks_file}: {e}") from e
        except BaseException:
            _discard(tmp_path)
            raise


def _discard(tmp_path: str) -> None:
    try:
        os.unlink(tmp_path)
    except OSError:
        pass
