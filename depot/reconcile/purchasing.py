"""
Purchasing records - suppliers, purchase orders, lines and invoices.

These are the collaborator records around the ledger: saving an approved
purchase order creates them and then syncs the lines into transit.
All amounts arrive already converted to GBP.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .config import MatchSettings
from .errors import ValidationError
from .ledger import sync_from_purchase_order
from .models import (
    BackfillResult,
    Invoice,
    InventoryState,
    POLine,
    PurchaseOrder,
    SavedPurchaseOrder,
    Supplier,
)

logger = logging.getLogger(__name__)

CURRENCY = "GBP"


@dataclass
class LineDraft:
    """A PO line as extracted upstream, before it gets an id."""
    description: str
    supplier_sku: Optional[str] = None
    quantity: Any = None
    unit_cost_ex_vat: Any = None
    line_total_ex_vat: Any = None


@dataclass
class PurchaseOrderDraft:
    """An approved purchase order ready to be saved."""
    supplier_name: str
    lines: list[LineDraft] = field(default_factory=list)
    supplier_address: Optional[str] = None
    supplier_email: Optional[str] = None
    supplier_phone: Optional[str] = None
    supplier_vat_number: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    payment_terms: Optional[str] = None


def find_or_create_supplier(
    state: InventoryState,
    name: str,
    now: datetime,
    address: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    vat_number: Optional[str] = None,
) -> Supplier:
    """Find a supplier by name (case-insensitive) or create it."""
    if not name or not name.strip():
        raise ValidationError("Supplier name is required")

    name_lower = name.lower()
    existing = next((s for s in state.suppliers if (s.name or "").lower() == name_lower), None)
    if existing is not None:
        return existing

    supplier = Supplier(
        id=str(uuid.uuid4()),
        name=name,
        address=address,
        email=email,
        phone=phone,
        vat_number=vat_number,
        created_at=now,
    )
    state.suppliers.append(supplier)
    return supplier


def create_purchase_order(
    state: InventoryState,
    supplier_id: str,
    now: datetime,
    invoice_number: Optional[str] = None,
    invoice_date: Optional[str] = None,
    payment_terms: Optional[str] = None,
) -> PurchaseOrder:
    order = PurchaseOrder(
        id=str(uuid.uuid4()),
        supplier_id=supplier_id,
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        currency=CURRENCY,
        payment_terms=payment_terms,
        created_at=now,
    )
    state.purchase_orders.append(order)
    return order


def create_po_lines(
    state: InventoryState,
    purchase_order_id: str,
    drafts: list[LineDraft],
) -> list[POLine]:
    lines = [
        POLine(
            id=str(uuid.uuid4()),
            purchase_order_id=purchase_order_id,
            description=draft.description,
            supplier_sku=draft.supplier_sku or None,
            quantity=draft.quantity,
            unit_cost_ex_vat=draft.unit_cost_ex_vat,
            line_total_ex_vat=draft.line_total_ex_vat,
        )
        for draft in drafts
    ]
    state.po_lines.extend(lines)
    return lines


def upsert_invoice(
    state: InventoryState,
    purchase_order_id: str,
    supplier_id: str,
    now: datetime,
    invoice_number: Optional[str] = None,
    invoice_date: Optional[str] = None,
) -> Invoice:
    """Create the purchase order's invoice, or update it if one exists."""
    existing = next(
        (inv for inv in state.invoices if inv.purchase_order_id == purchase_order_id), None
    )
    if existing is not None:
        existing.supplier_id = supplier_id
        existing.invoice_number = invoice_number
        existing.invoice_date = invoice_date
        existing.currency = CURRENCY
        return existing

    invoice = Invoice(
        id=str(uuid.uuid4()),
        purchase_order_id=purchase_order_id,
        supplier_id=supplier_id,
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        currency=CURRENCY,
        created_at=now,
    )
    state.invoices.append(invoice)
    return invoice


def has_transit(state: InventoryState, purchase_order_id: str) -> bool:
    """Whether this purchase order has already produced transit records."""
    return any(t.purchase_order_id == purchase_order_id for t in state.transit)


def save_purchase_order(
    state: InventoryState,
    draft: PurchaseOrderDraft,
    settings: MatchSettings,
    now: datetime,
) -> SavedPurchaseOrder:
    """
    Save an approved purchase order and put its lines in transit.

    Supplier -> purchase order -> invoice -> lines -> ledger sync.
    """
    if not draft.supplier_name or not draft.supplier_name.strip():
        raise ValidationError("Supplier name is required")
    if not draft.lines:
        raise ValidationError("At least one line item is required")

    supplier = find_or_create_supplier(
        state,
        draft.supplier_name,
        now,
        address=draft.supplier_address or None,
        email=draft.supplier_email or None,
        phone=draft.supplier_phone or None,
        vat_number=draft.supplier_vat_number or None,
    )
    order = create_purchase_order(
        state,
        supplier.id,
        now,
        invoice_number=draft.invoice_number or None,
        invoice_date=draft.invoice_date or None,
        payment_terms=draft.payment_terms or None,
    )
    invoice = upsert_invoice(
        state,
        order.id,
        supplier.id,
        now,
        invoice_number=draft.invoice_number or None,
        invoice_date=draft.invoice_date or None,
    )
    lines = create_po_lines(state, order.id, draft.lines)
    sync = sync_from_purchase_order(state, supplier.id, order.id, lines, settings, now)

    return SavedPurchaseOrder(
        supplier_id=supplier.id,
        purchase_order_id=order.id,
        saved_lines=len(lines),
        inventory_sync=sync,
        invoice=invoice,
    )


def backfill_transit(
    state: InventoryState,
    settings: MatchSettings,
    now: datetime,
) -> BackfillResult:
    """
    Sync every purchase order that has lines but no transit records yet.

    Purchase orders whose lines all had zero quantity never produce
    transit, so they are re-matched on every backfill; that only adds
    aliases that are already present.
    """
    synced = {t.purchase_order_id for t in state.transit}

    lines_by_po: dict[str, list[POLine]] = defaultdict(list)
    for line in state.po_lines:
        lines_by_po[line.purchase_order_id].append(line)

    result = BackfillResult()
    for order in state.purchase_orders:
        lines = lines_by_po.get(order.id, [])
        if not lines or order.id in synced:
            continue

        sync = sync_from_purchase_order(state, order.supplier_id, order.id, lines, settings, now)
        result.purchase_orders_processed += 1
        result.products_created += sync.products_created
        result.products_matched += sync.products_matched
        result.transit_created += sync.transit_created

    logger.info(
        "Backfill processed %d purchase order(s), %d transit record(s) created",
        result.purchase_orders_processed, result.transit_created,
    )
    return result
