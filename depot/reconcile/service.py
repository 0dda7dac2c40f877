"""
Inventory Service - the operations collaborators call.

Wraps the pure state functions in store transactions so every operation
either commits fully or leaves the stored state untouched.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from .catalog import add_barcode
from .config import Config, default_config
from .costing import receive_stock
from .ledger import sync_from_purchase_order
from .models import (
    BackfillResult,
    InventoryItemView,
    POLine,
    Product,
    ProductHistory,
    ReceiveResult,
    SavedPurchaseOrder,
    Supplier,
    SyncResult,
)
from .purchasing import PurchaseOrderDraft, backfill_transit, save_purchase_order
from .snapshot import build_snapshot, product_history, summarize_snapshot
from .store import StateStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InventoryService:
    """
    Facade over a StateStore.

    Args:
        store: Where state is loaded from and committed to
        config: Matching/costing configuration (defaults if omitted)
        clock: Callable returning "now"; injectable for tests
    """

    def __init__(
        self,
        store: StateStore,
        config: Optional[Config] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.config = config or default_config()
        self._clock = clock or utc_now

    @property
    def settings(self):
        return self.config.settings

    def sync_from_purchase_order(
        self,
        supplier_id: str,
        purchase_order_id: str,
        lines: Iterable[POLine],
    ) -> SyncResult:
        """Put a purchase order's lines in transit. Not idempotent."""
        with self.store.transaction() as state:
            return sync_from_purchase_order(
                state, supplier_id, purchase_order_id, list(lines), self.settings, self._clock()
            )

    def receive(self, product_id: str, quantity: Any) -> ReceiveResult:
        with self.store.transaction() as state:
            return receive_stock(state, product_id, quantity, self.settings, self._clock())

    def add_barcode(self, product_id: str, barcode: str) -> Product:
        with self.store.transaction() as state:
            product, _ = add_barcode(state, product_id, barcode, self.settings, self._clock())
            return product

    def save_purchase_order(self, draft: PurchaseOrderDraft) -> SavedPurchaseOrder:
        with self.store.transaction() as state:
            saved = save_purchase_order(state, draft, self.settings, self._clock())
        logger.info(
            "Saved purchase order %s with %d line(s)", saved.purchase_order_id, saved.saved_lines
        )
        return saved

    def backfill(self) -> BackfillResult:
        """Sync historical purchase orders that never produced transit."""
        with self.store.transaction() as state:
            return backfill_transit(state, self.settings, self._clock())

    def snapshot(self) -> list[InventoryItemView]:
        with self.store.read() as state:
            return build_snapshot(state)

    def list_suppliers(self) -> list[Supplier]:
        with self.store.read() as state:
            return list(state.suppliers)

    def summary(self) -> dict:
        return summarize_snapshot(self.snapshot())

    def product_history(self, product_id: str) -> ProductHistory:
        with self.store.read() as state:
            return product_history(state, product_id)
