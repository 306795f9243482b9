"""Record store - append-only persistence for extracted port entries (no LLM calls)."""

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from src.core.exceptions import PersistenceError
from src.models.schema import PortOperationRecord
from src.config.settings import get_settings
from src.config.logging_config import get_logger

logger = get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class RecordStore:
    """Store port entries in a JSON file, or in memory when no path is given.

    The store owns identity and ordering: it assigns increasing ids and
    UTC creation timestamps under a lock, so concurrent ingestions never
    collide. Only create and list-recent are supported.

    File layout::

        {"entries": [{"id": 1, "createdAt": "...", "port": "...", ...}, ...]}
    """

    def __init__(self, path: Optional[Path] = None, list_limit: int = None):
        """
        Initialize the store.

        Args:
            path: JSON file to persist entries to (None keeps entries in memory)
            list_limit: Default number of entries returned by list_recent (defaults to config)
        """
        self.path = Path(path) if path is not None else None
        self.list_limit = list_limit or get_settings().list_limit
        self._lock = threading.Lock()
        self._records: List[PortOperationRecord] = self._load() if self.path else []

    @classmethod
    def from_settings(cls) -> "RecordStore":
        """Create a file-backed store at the configured location."""
        settings = get_settings()
        project_dir = Path(__file__).parent.parent.parent
        return cls(settings.get_records_path(project_dir), settings.list_limit)

    def _load(self) -> List[PortOperationRecord]:
        if not self.path.exists():
            return []

        logger.info(f"Loading port entries from: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e

        records = []
        for entry in data.get("entries", []):
            try:
                records.append(PortOperationRecord.model_validate(entry))
            except Exception as e:
                logger.warning(f"Skipping unreadable entry: {e}")
                logger.debug(f"Entry data: {entry}")

        logger.info(f"Loaded {len(records)} port entries")
        return records

    def _save(self, records: List[PortOperationRecord]) -> None:
        data = {"entries": [record.to_entry() for record in records]}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e

    def create(self, record: PortOperationRecord) -> PortOperationRecord:
        """
        Persist a record, assigning its id and creation time.

        Args:
            record: Record built by the extraction workflow

        Returns:
            Stored copy of the record carrying id and created_at

        Raises:
            PersistenceError: If the store file cannot be written
        """
        with self._lock:
            next_id = max((r.id or 0 for r in self._records), default=0) + 1
            stored = record.model_copy(update={
                "id": next_id,
                "created_at": datetime.now(timezone.utc),
            })

            records = self._records + [stored]
            if self.path:
                self._save(records)
            self._records = records

        logger.debug(f"Stored port entry #{stored.id}")
        return stored

    def list_recent(self, limit: int = None) -> List[PortOperationRecord]:
        """
        Return the most recent entries, newest first.

        Args:
            limit: Maximum number of entries (defaults to the store's list_limit)

        Returns:
            List of stored records
        """
        limit = limit or self.list_limit
        with self._lock:
            records = list(self._records)
        records.sort(key=lambda r: (r.created_at or _EPOCH, r.id or 0), reverse=True)
        return records[:limit]
