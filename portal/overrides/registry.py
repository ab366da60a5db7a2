"""
Override stores used to shadow order records.

Three namespaces exist: order status, order payment status, and order assets.
The asset override holds the complete asset list for an order and replaces
its deliverables when merged.
"""

from functools import lru_cache
from typing import Any, Dict
import logging
import os

from portal.config import settings
from portal.overrides.merge import MergePolicy, merge_record
from portal.overrides.store import OverrideStore

logger = logging.getLogger(__name__)


class OverrideRegistry:
    """Holds the order override stores and merges them into order records."""

    # namespace -> order record field it shadows
    FIELDS = {
        "order_status": "status",
        "payment_status": "payment_status",
        "order_assets": "deliverables",
    }

    def __init__(self, state_dir: str, policy: MergePolicy = MergePolicy.OVERRIDE_WINS):
        self.state_dir = state_dir
        self.policy = MergePolicy(policy)
        self.order_status = OverrideStore(os.path.join(state_dir, "order_status.json"), "order_status")
        self.payment_status = OverrideStore(os.path.join(state_dir, "payment_status.json"), "payment_status")
        self.order_assets = OverrideStore(os.path.join(state_dir, "order_assets.json"), "order_assets")

    def stores(self) -> Dict[str, OverrideStore]:
        return {
            "order_status": self.order_status,
            "payment_status": self.payment_status,
            "order_assets": self.order_assets,
        }

    def merge_order(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Apply every order override to a single order record."""
        merged = record
        for namespace, store in self.stores().items():
            merged = merge_record(merged, self.FIELDS[namespace], store, policy=self.policy)
        return merged

    def reload(self) -> None:
        for store in self.stores().values():
            store.reload()

    def stats(self) -> Dict[str, Any]:
        return {
            "policy": self.policy.value,
            "state_dir": self.state_dir,
            "entries": {namespace: len(store) for namespace, store in self.stores().items()},
        }


@lru_cache()
def get_override_registry() -> OverrideRegistry:
    """
    Get the process-wide override registry.
    Used as a FastAPI dependency.
    """
    logger.info(f"Opening override stores in {settings.override_state_dir}")
    return OverrideRegistry(settings.override_state_dir, MergePolicy(settings.override_policy))
