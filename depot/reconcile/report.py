"""
Report Generator - Format inventory snapshots for human consumption.

Produces console output, CSV and XLSX exports.
"""

import csv
import io
from datetime import datetime
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import TextIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .ledger import quantize_cost
from .models import InventoryItemView, ProductHistory, ReceiveResult
from .snapshot import summarize_snapshot

EXPORT_COLUMNS = [
    "product_id",
    "name",
    "primary_sku",
    "supplier_sku",
    "barcodes",
    "quantity_on_hand",
    "average_cost_gbp",
    "stock_value_gbp",
    "quantity_in_transit",
]


def _row(item: InventoryItemView) -> list:
    product = item.product
    on_hand = item.inventory.quantity_on_hand if item.inventory else Decimal("0")
    avg = item.inventory.average_cost_gbp if item.inventory else Decimal("0")
    return [
        product.id,
        product.name,
        product.primary_sku or "",
        product.supplier_sku or "",
        ";".join(product.barcodes),
        on_hand,
        avg,
        quantize_cost(on_hand * avg, Decimal("0.01")),
        item.quantity_in_transit,
    ]


def format_console(items: list[InventoryItemView], show_empty: bool = False) -> str:
    """
    Format a snapshot for console display.

    Products with nothing on hand and nothing in transit are hidden
    unless show_empty is set.
    """
    if not items:
        return "No products in catalog.\n"

    lines = []
    lines.append(f"\n{'SKU':<15} {'PRODUCT':<40} {'ON HAND':>10} {'AVG £':>10} {'IN TRANSIT':>11}")
    lines.append("=" * 90)

    for item in items:
        on_hand = item.inventory.quantity_on_hand if item.inventory else Decimal("0")
        if not show_empty and on_hand <= 0 and item.quantity_in_transit <= 0:
            continue
        avg = item.inventory.average_cost_gbp if item.inventory else Decimal("0")
        sku = item.product.primary_sku or "-"
        lines.append(
            f"{sku[:15]:<15} {item.product.name[:40]:<40} "
            f"{on_hand:>10} {avg:>10} {item.quantity_in_transit:>11}"
        )

    summary = summarize_snapshot(items)
    lines.append("\n" + "=" * 90)
    lines.append("SUMMARY")
    lines.append(f"  Products:          {summary['products']}")
    lines.append(f"  In stock:          {summary['stocked_products']}")
    lines.append(f"  Awaiting receipt:  {summary['awaiting_receipt']}")
    lines.append(f"  Units on hand:     {summary['units_on_hand']}")
    lines.append(f"  Units in transit:  {summary['units_in_transit']}")
    lines.append(f"  Stock value (GBP): {summary['stock_value_gbp']}")
    lines.append("=" * 90)

    return "\n".join(lines)


def format_receipt(result: ReceiveResult) -> str:
    lines = [
        f"Received {result.received_quantity} of product {result.product_id}",
        f"  On hand now:   {result.new_quantity_on_hand}",
        f"  Average cost:  {result.new_average_cost_gbp}",
        f"  Transit used:  {len(result.affected_transit_ids)} record(s)",
    ]
    if result.remaining_requested_quantity > 0:
        lines.append(f"  Not in transit: {result.remaining_requested_quantity} (request only partly filled)")
    return "\n".join(lines)


def format_history(history: ProductHistory) -> str:
    product = history.product
    lines = [f"\n{product.name} ({product.id})", "-" * 70]
    lines.append(f"  SKU:       {product.primary_sku or '-'}")
    lines.append(f"  Barcodes:  {', '.join(product.barcodes) or '-'}")
    lines.append(f"  Supplier:  {history.supplier.name if history.supplier else '-'}")
    if history.inventory:
        lines.append(
            f"  On hand:   {history.inventory.quantity_on_hand} @ {history.inventory.average_cost_gbp}"
        )
    lines.append(f"  Aliases:   {len(product.aliases)}")

    if history.transit:
        lines.append("\n  TRANSIT (newest first)")
        for entry in history.transit:
            t = entry.transit
            invoice = entry.purchase_order.invoice_number if entry.purchase_order else None
            created = t.created_at.strftime("%Y-%m-%d") if t.created_at else "----------"
            lines.append(
                f"  {created} {t.status.value:<19} "
                f"{t.remaining_quantity}/{t.quantity} @ {t.unit_cost_gbp} "
                f"invoice {invoice or '-'}"
            )
    return "\n".join(lines)


def export_csv(
    items: list[InventoryItemView],
    output: TextIO | None = None,
) -> str:
    """
    Export a snapshot to CSV format.

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for item in items:
        writer.writerow([str(v) for v in _row(item)])

    csv_content = buffer.getvalue()
    if output:
        output.write(csv_content)
    return csv_content


def create_snapshot_workbook(items: list[InventoryItemView]) -> BytesIO:
    """
    Build an XLSX workbook of the snapshot.

    Returns:
        BytesIO buffer containing the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Inventory"

    for col_idx, header in enumerate(EXPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, item in enumerate(items, start=2):
        for col_idx, value in enumerate(_row(item), start=1):
            ws.cell(row=row_idx, column=col_idx, value=float(value) if isinstance(value, Decimal) else value)

    for col_idx, header in enumerate(EXPORT_COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(len(header) + 2, 14)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def export_xlsx(items: list[InventoryItemView], path: str | Path) -> Path:
    """Write the snapshot workbook to path."""
    path = Path(path)
    path.write_bytes(create_snapshot_workbook(items).getvalue())
    return path


def generate_report_filename(extension: str = "csv") -> str:
    """
    Generate a filename for the report.

    Returns:
        Filename like "inventory_snapshot_2026-01-08.csv"
    """
    date_str = datetime.now().strftime("%Y-%m-%d")
    return f"inventory_snapshot_{date_str}.{extension}"
