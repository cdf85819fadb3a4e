import json
import logging
import os
import tempfile
import threading
import warnings
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from string_analyzer import config
from string_analyzer.errors import ConflictError, NotFoundError, PersistenceWarning
from string_analyzer.models import AnalysisRecord

logger = logging.getLogger(__name__)


def _copy(record: Optional[AnalysisRecord]) -> Optional[AnalysisRecord]:
    # Records are frozen but character_frequency_map is still a plain dict
    return record.model_copy(deep=True) if record is not None else None


class StringStore:
    """
    Ordered collection of analysis records backed by a single JSON file.

    Records are kept in insertion order and indexed by value and by id.
    The whole collection is rewritten to disk after every insert or delete.
    Reads never touch the file.
    """

    def __init__(self, path: str, atomic_writes: bool = False):
        self.path = path
        self.atomic_writes = atomic_writes
        self._records: List[AnalysisRecord] = []
        self._by_value: Dict[str, AnalysisRecord] = {}
        self._by_id: Dict[str, AnalysisRecord] = {}
        self._lock = threading.Lock()
        self._load()

    # --------------------------------------------------------------------------
    # QUERIES
    # --------------------------------------------------------------------------

    def all(self) -> List[AnalysisRecord]:
        """Snapshot of all records in insertion order"""
        return [_copy(record) for record in self._records]

    def find_by_value(self, value: str) -> Optional[AnalysisRecord]:
        return _copy(self._by_value.get(value))

    def find_by_id(self, record_id: str) -> Optional[AnalysisRecord]:
        return _copy(self._by_id.get(record_id))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, value: object) -> bool:
        return value in self._by_value

    # --------------------------------------------------------------------------
    # MUTATIONS
    # --------------------------------------------------------------------------

    def insert(self, record: AnalysisRecord) -> AnalysisRecord:
        """Append a record and persist. Raises ConflictError on duplicate value."""
        with self._lock:
            if record.value in self._by_value:
                raise ConflictError("String already exists in the system")

            # Keep a private copy so the caller cannot reach the stored frequency map
            record = _copy(record)
            self._records.append(record)
            self._by_value[record.value] = record
            self._by_id[record.id] = record
            self._save()

        logger.info(f"Stored string {record.id[:12]} ({len(self._records)} total)")
        return _copy(record)

    def delete_by_value(self, value: str) -> None:
        """Remove the record with this value and persist. Raises NotFoundError."""
        with self._lock:
            record = self._by_value.pop(value, None)
            if record is None:
                raise NotFoundError("String does not exist in the system")

            self._records = [r for r in self._records if r.value != value]
            self._by_id.pop(record.id, None)
            self._save()

        logger.info(f"Deleted string {record.id[:12]} ({len(self._records)} total)")

    # --------------------------------------------------------------------------
    # PERSISTENCE
    # --------------------------------------------------------------------------

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.info(f"No data file at {self.path}, starting with an empty store")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
            data = json.loads(raw) if raw.strip() else []
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            records = [AnalysisRecord.model_validate(item) for item in data]
        except (OSError, ValueError, PydanticValidationError) as e:
            # json.JSONDecodeError is a ValueError
            self._warn(f"Failed to load data file {self.path}: {e}; starting with an empty store")
            return

        for record in records:
            if record.value in self._by_value:
                logger.warning(f"Skipping duplicate record {record.id[:12]} in {self.path}")
                continue
            self._records.append(record)
            self._by_value[record.value] = record
            self._by_id[record.id] = record

        logger.info(f"Loaded {len(self._records)} strings from {self.path}")

    def _save(self) -> None:
        payload = json.dumps(
            [record.model_dump() for record in self._records],
            indent=2,
            ensure_ascii=True,
        )
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            if self.atomic_writes:
                self._write_atomic(directory, payload)
            else:
                with open(self.path, "w", encoding="utf-8") as f:
                    f.write(payload)
        except OSError as e:
            self._warn(f"Failed to save data file {self.path}: {e}")

    def _write_atomic(self, directory: str, payload: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".strings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    @staticmethod
    def _warn(message: str) -> None:
        logger.error(message)
        warnings.warn(message, PersistenceWarning, stacklevel=3)


# ------------------------------------------------------------------------------
# STORE DEPENDENCY
# ------------------------------------------------------------------------------

_store: Optional[StringStore] = None


def init_store(path: Optional[str] = None, atomic_writes: Optional[bool] = None) -> StringStore:
    """Create the process-wide store (runs once on startup)."""
    global _store
    _store = StringStore(
        path or config.DATA_FILE,
        atomic_writes=config.ATOMIC_WRITES if atomic_writes is None else atomic_writes,
    )
    return _store


def get_store() -> StringStore:
    """Dependency to provide the store."""
    if _store is None:
        raise RuntimeError("Store is not initialized; call init_store() first")
    return _store
