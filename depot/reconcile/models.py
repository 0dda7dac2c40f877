"""
Data models for inventory reconciliation.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Money and quantity values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransitStatus(str, Enum):
    """
    Lifecycle of a transit record.

    Always derived from remaining vs original quantity, never set directly.
    """
    IN_TRANSIT = "in_transit"                    # remaining == quantity
    PARTIALLY_RECEIVED = "partially_received"    # 0 < remaining < quantity
    RECEIVED = "received"                        # remaining == 0


class MatchMethod(str, Enum):
    """How a purchase-order line was resolved to a product."""
    EXACT = "exact"      # SKU / barcode hit
    FUZZY = "fuzzy"      # description similarity >= threshold
    CREATED = "created"  # no match, new product


@dataclass
class Supplier:
    id: str
    name: str
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    vat_number: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class PurchaseOrder:
    id: str
    supplier_id: str
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    currency: str = "GBP"
    payment_terms: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class POLine:
    """
    A single line from a supplier purchase order.

    Quantity and cost are kept exactly as extracted upstream (they may be
    None or garbage); the ledger sanitizes them when creating transit.
    """
    id: str
    purchase_order_id: str
    description: str
    supplier_sku: Optional[str] = None
    quantity: Any = None
    unit_cost_ex_vat: Any = None
    line_total_ex_vat: Any = None


@dataclass
class Invoice:
    id: str
    purchase_order_id: str
    supplier_id: str
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    currency: str = "GBP"
    created_at: Optional[datetime] = None


@dataclass
class Product:
    """
    A catalog entry.

    Aliases accumulate every purchase-order description that resolved to
    this product; they are never removed.
    """
    id: str
    name: str
    primary_sku: Optional[str] = None
    supplier_sku: Optional[str] = None
    barcodes: list[str] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)
    supplier_id: Optional[str] = None
    category: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class InventoryRecord:
    """On-hand stock for one product. Absent record means zero on hand."""
    id: str
    product_id: str
    quantity_on_hand: Decimal = Decimal("0")
    average_cost_gbp: Decimal = Decimal("0")
    last_updated: Optional[datetime] = None


@dataclass
class TransitRecord:
    """Ordered quantity from one PO line that has not been fully received."""
    id: str
    product_id: str
    purchase_order_id: str
    po_line_id: str
    supplier_id: str
    quantity: Decimal
    remaining_quantity: Decimal
    unit_cost_gbp: Decimal
    status: TransitStatus = TransitStatus.IN_TRANSIT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class InventoryState:
    """
    Full persisted state.

    List order is catalog scan order, which makes matching deterministic.
    """
    suppliers: list[Supplier] = field(default_factory=list)
    purchase_orders: list[PurchaseOrder] = field(default_factory=list)
    po_lines: list[POLine] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)
    inventory: list[InventoryRecord] = field(default_factory=list)
    transit: list[TransitRecord] = field(default_factory=list)
    invoices: list[Invoice] = field(default_factory=list)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_inventory(self, product_id: str) -> Optional[InventoryRecord]:
        return next((i for i in self.inventory if i.product_id == product_id), None)

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        return next((s for s in self.suppliers if s.id == supplier_id), None)


@dataclass
class MatchOutcome:
    """Result of resolving one description to a product."""
    product: Product
    method: MatchMethod
    score: float = 0.0

    @property
    def created(self) -> bool:
        return self.method == MatchMethod.CREATED


@dataclass
class SyncResult:
    products_created: int = 0
    products_matched: int = 0
    transit_created: int = 0


@dataclass
class BackfillResult:
    purchase_orders_processed: int = 0
    products_created: int = 0
    products_matched: int = 0
    transit_created: int = 0


@dataclass
class ReceiveResult:
    """
    Output of a stock receipt.

    remaining_requested_quantity is the part of the request that could not
    be filled from transit (normally zero).
    """
    product_id: str
    received_quantity: Decimal
    remaining_requested_quantity: Decimal
    new_quantity_on_hand: Decimal
    new_average_cost_gbp: Decimal
    affected_transit_ids: list[str] = field(default_factory=list)


@dataclass
class InventoryItemView:
    """One row of the inventory snapshot."""
    product: Product
    inventory: Optional[InventoryRecord]
    quantity_in_transit: Decimal


@dataclass
class TransitHistoryEntry:
    transit: TransitRecord
    po_line: Optional[POLine] = None
    purchase_order: Optional[PurchaseOrder] = None
    invoice: Optional[Invoice] = None


@dataclass
class ProductHistory:
    product: Product
    inventory: Optional[InventoryRecord]
    supplier: Optional[Supplier]
    transit: list[TransitHistoryEntry] = field(default_factory=list)


@dataclass
class SavedPurchaseOrder:
    supplier_id: str
    purchase_order_id: str
    saved_lines: int
    inventory_sync: SyncResult
    invoice: Invoice
