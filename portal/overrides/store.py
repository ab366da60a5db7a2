"""
Durable local override store.

Maps an entity id to the last value applied locally, with the time it was applied.
Each store persists to a single JSON file. Writes are last-write-wins and
entries are never expired or evicted.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Union
import json
import logging
import os
import tempfile
import uuid

logger = logging.getLogger(__name__)

EntityId = Union[str, uuid.UUID]


@dataclass(frozen=True)
class OverrideEntry:
    """A stored override value and the time it was set."""
    value: Any
    updated_at: datetime

    def to_json(self) -> Dict[str, Any]:
        return {"value": self.value, "updated_at": self.updated_at.isoformat()}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OverrideEntry":
        return cls(
            value=data["value"],
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


class OverrideStore:
    """
    Key-value override cache backed by a JSON file.

    Entries are loaded once when the store is created. Every ``set_override``
    rewrites the whole file atomically, so a store created later from the same
    path sees every value set before it.
    """

    def __init__(self, path: str, namespace: Optional[str] = None):
        self.path = path
        self.namespace = namespace or os.path.splitext(os.path.basename(path))[0]
        self._entries: Dict[str, OverrideEntry] = {}
        self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entity_id: EntityId) -> bool:
        return self._key(entity_id) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    @staticmethod
    def _key(entity_id: EntityId) -> str:
        return str(entity_id)

    def set_override(self, entity_id: EntityId, value: Any) -> OverrideEntry:
        """
        Store ``value`` for ``entity_id``, replacing any previous value.

        Args:
            entity_id: Id of the entity being overridden
            value: JSON-serializable replacement value

        Returns:
            The stored entry

        Raises:
            TypeError: If value is not JSON serializable
            OSError: If the backing file cannot be written
        """
        entry = OverrideEntry(value=value, updated_at=datetime.now(timezone.utc))
        key = self._key(entity_id)

        previous = self._entries.get(key)
        self._entries[key] = entry
        try:
            self._persist()
        except (OSError, TypeError, ValueError):
            # Keep memory consistent with disk when the write fails
            if previous is None:
                self._entries.pop(key, None)
            else:
                self._entries[key] = previous
            raise

        logger.debug(f"Override set [{self.namespace}] {key}")
        return entry

    def get_override(self, entity_id: EntityId) -> Optional[Any]:
        """Return the stored value for ``entity_id`` or None."""
        entry = self._entries.get(self._key(entity_id))
        return entry.value if entry else None

    def get_entry(self, entity_id: EntityId) -> Optional[OverrideEntry]:
        """Return the stored entry (value and timestamp) for ``entity_id`` or None."""
        return self._entries.get(self._key(entity_id))

    def snapshot(self) -> Dict[str, Any]:
        """Return a copy of all stored values keyed by entity id."""
        return {key: entry.value for key, entry in self._entries.items()}

    def reload(self) -> None:
        """Discard in-memory entries and read them back from disk."""
        self._entries = {}
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return

        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                f"Override store [{self.namespace}] unreadable, starting empty: {e}",
                extra={"path": self.path, "namespace": self.namespace}
            )
            return

        if not isinstance(raw, dict):
            logger.warning(
                f"Override store [{self.namespace}] holds {type(raw).__name__}, not an object; starting empty",
                extra={"path": self.path, "namespace": self.namespace}
            )
            return

        for key, data in raw.items():
            try:
                self._entries[key] = OverrideEntry.from_json(data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed override [{self.namespace}] {key}: {e}")

        logger.info(f"Loaded {len(self._entries)} overrides from {self.path}")

    def _persist(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        payload = {key: entry.to_json() for key, entry in self._entries.items()}
        serialized = json.dumps(payload, sort_keys=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.namespace}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(serialized)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
