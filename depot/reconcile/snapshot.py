"""
Inventory Snapshot - read-side aggregation over products, stock and transit.

Nothing here mutates state.
"""

from datetime import datetime, timezone
from decimal import Decimal

from .errors import NotFoundError, ValidationError
from .ledger import quantize_cost
from .models import (
    InventoryItemView,
    InventoryState,
    ProductHistory,
    TransitHistoryEntry,
)


def quantity_in_transit(state: InventoryState, product_id: str) -> Decimal:
    """Sum of remaining quantity over the product's open transit records."""
    return sum(
        (t.remaining_quantity for t in state.transit
         if t.product_id == product_id and t.remaining_quantity > 0),
        Decimal("0"),
    )


def build_snapshot(state: InventoryState) -> list[InventoryItemView]:
    """One view per product, in catalog order."""
    return [
        InventoryItemView(
            product=product,
            inventory=state.get_inventory(product.id),
            quantity_in_transit=quantity_in_transit(state, product.id),
        )
        for product in state.products
    ]


def summarize_snapshot(items: list[InventoryItemView]) -> dict:
    """Generate summary statistics for a snapshot."""
    summary = {
        "products": len(items),
        "stocked_products": 0,
        "awaiting_receipt": 0,
        "units_on_hand": Decimal("0"),
        "units_in_transit": Decimal("0"),
        "stock_value_gbp": Decimal("0"),
    }

    for item in items:
        if item.inventory is not None and item.inventory.quantity_on_hand > 0:
            summary["stocked_products"] += 1
            summary["units_on_hand"] += item.inventory.quantity_on_hand
            summary["stock_value_gbp"] += (
                item.inventory.quantity_on_hand * item.inventory.average_cost_gbp
            )
        if item.quantity_in_transit > 0:
            summary["awaiting_receipt"] += 1
            summary["units_in_transit"] += item.quantity_in_transit

    summary["stock_value_gbp"] = quantize_cost(summary["stock_value_gbp"], Decimal("0.01"))
    return summary


def product_history(state: InventoryState, product_id: str) -> ProductHistory:
    """
    Product detail with every transit record, newest first.

    Each transit record is joined to its PO line, purchase order and
    invoice where those still exist.
    """
    if not product_id:
        raise ValidationError("Product id is required")

    product = state.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")

    supplier = state.get_supplier(product.supplier_id) if product.supplier_id else None

    lines_by_id = {line.id: line for line in state.po_lines}
    orders_by_id = {po.id: po for po in state.purchase_orders}
    invoices_by_po = {inv.purchase_order_id: inv for inv in state.invoices}

    oldest = datetime.min.replace(tzinfo=timezone.utc)
    records = sorted(
        (t for t in state.transit if t.product_id == product_id),
        key=lambda t: t.created_at or oldest,
        reverse=True,
    )

    entries = []
    for record in records:
        order = orders_by_id.get(record.purchase_order_id)
        entries.append(TransitHistoryEntry(
            transit=record,
            po_line=lines_by_id.get(record.po_line_id),
            purchase_order=order,
            invoice=invoices_by_po.get(order.id) if order else None,
        ))

    return ProductHistory(
        product=product,
        inventory=state.get_inventory(product_id),
        supplier=supplier,
        transit=entries,
    )
