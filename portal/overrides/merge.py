"""
Merge locally stored overrides into authoritative records.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
import enum
import logging

from portal.overrides.store import OverrideStore

logger = logging.getLogger(__name__)


class MergePolicy(str, enum.Enum):
    """How an override competes with the authoritative value."""
    OVERRIDE_WINS = "override_wins"
    PREFER_NEWER = "prefer_newer"


def _as_utc(value: Any) -> Optional[datetime]:
    """Parse a record timestamp; naive timestamps are treated as UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def merge_record(
    record: Dict[str, Any],
    field: str,
    store: OverrideStore,
    policy: MergePolicy = MergePolicy.OVERRIDE_WINS,
    id_key: str = "id",
    timestamp_key: str = "updated_at",
) -> Dict[str, Any]:
    """
    Return a copy of ``record`` with ``field`` replaced by its override, if any.

    With OVERRIDE_WINS a stored override always replaces the authoritative
    value. With PREFER_NEWER the override is applied only when it was set
    after the record's ``timestamp_key``; a record without a usable
    timestamp loses to the override.
    """
    merged = dict(record)
    entry = store.get_entry(record[id_key])
    if entry is None:
        return merged

    if policy == MergePolicy.PREFER_NEWER:
        record_time = _as_utc(record.get(timestamp_key))
        if record_time is not None and record_time > entry.updated_at:
            return merged

    merged[field] = entry.value
    return merged


def apply_overrides(
    records: Iterable[Dict[str, Any]],
    field: str,
    store: OverrideStore,
    policy: MergePolicy = MergePolicy.OVERRIDE_WINS,
    id_key: str = "id",
    timestamp_key: str = "updated_at",
) -> List[Dict[str, Any]]:
    """Merge overrides into every record, preserving order."""
    return [
        merge_record(record, field, store, policy=policy, id_key=id_key, timestamp_key=timestamp_key)
        for record in records
    ]
