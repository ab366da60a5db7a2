"""
Local override cache for order status, payment status and assets.
"""

from portal.overrides.store import OverrideStore, OverrideEntry
from portal.overrides.merge import MergePolicy, merge_record, apply_overrides
from portal.overrides.registry import OverrideRegistry, get_override_registry

__all__ = [
    "OverrideStore",
    "OverrideEntry",
    "MergePolicy",
    "merge_record",
    "apply_overrides",
    "OverrideRegistry",
    "get_override_registry",
]
