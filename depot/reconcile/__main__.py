"""
CLI entry point for inventory reconciliation.

Usage:
    python -m depot.reconcile --state data/state.json snapshot
    python -m depot.reconcile --state data/state.json sync --supplier "Acme Ltd" lines.xlsx
    python -m depot.reconcile --state data/state.json receive PRODUCT_ID 6
    python -m depot.reconcile --state data/state.json add-barcode PRODUCT_ID 5012345678900
    python -m depot.reconcile --state data/state.json backfill
    python -m depot.reconcile --state data/state.json history PRODUCT_ID
"""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .config import DEFAULT_CONFIG_PATH, load_config
from .errors import ReconcileError
from .po_loader import load_po_lines
from .purchasing import PurchaseOrderDraft
from .report import export_csv, export_xlsx, format_console, format_history, format_receipt
from .service import InventoryService
from .store import JsonFileStore


def _decimal_arg(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reconcile",
        description="Inventory reconciliation - purchase orders, transit and on-hand stock",
    )
    parser.add_argument(
        "--state",
        default="data/state.json",
        metavar="FILE",
        help="JSON state file (default: data/state.json)",
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Reconcile config file (default: module's reconcile_config.json)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    snap = sub.add_parser("snapshot", help="Show on-hand and in-transit stock")
    snap.add_argument("--show-empty", action="store_true", help="Include products with no stock")
    snap.add_argument("--output-csv", metavar="FILE", help="Output CSV file path")
    snap.add_argument("--output-xlsx", metavar="FILE", help="Output XLSX file path")

    sync = sub.add_parser("sync", help="Save a purchase order and put its lines in transit")
    sync.add_argument("lines", metavar="FILE", help="PO lines file (CSV, JSON or XLSX)")
    sync.add_argument("--supplier", required=True, help="Supplier name")
    sync.add_argument("--invoice-number", default=None)
    sync.add_argument("--invoice-date", default=None)
    sync.add_argument("--payment-terms", default=None)

    receive = sub.add_parser("receive", help="Receive stock from transit")
    receive.add_argument("product_id")
    receive.add_argument("quantity", type=_decimal_arg)

    barcode = sub.add_parser("add-barcode", help="Attach a scanner barcode to a product")
    barcode.add_argument("product_id")
    barcode.add_argument("barcode")

    sub.add_parser("backfill", help="Create transit for purchase orders that have none")

    history = sub.add_parser("history", help="Show a product's transit history")
    history.add_argument("product_id")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)
        service = InventoryService(JsonFileStore(args.state), config)

        if args.command == "snapshot":
            items = service.snapshot()
            print(format_console(items, show_empty=args.show_empty))
            if args.output_csv:
                with open(args.output_csv, "w", newline="") as f:
                    export_csv(items, output=f)
                print(f"\nCSV exported to: {args.output_csv}")
            if args.output_xlsx:
                export_xlsx(items, args.output_xlsx)
                print(f"\nXLSX exported to: {args.output_xlsx}")

        elif args.command == "sync":
            draft = PurchaseOrderDraft(
                supplier_name=args.supplier,
                lines=load_po_lines(args.lines),
                invoice_number=args.invoice_number,
                invoice_date=args.invoice_date,
                payment_terms=args.payment_terms,
            )
            saved = service.save_purchase_order(draft)
            sync = saved.inventory_sync
            print(f"Saved purchase order {saved.purchase_order_id} ({saved.saved_lines} lines)")
            print(f"  Products created: {sync.products_created}")
            print(f"  Products matched: {sync.products_matched}")
            print(f"  Transit created:  {sync.transit_created}")

        elif args.command == "receive":
            print(format_receipt(service.receive(args.product_id, args.quantity)))

        elif args.command == "add-barcode":
            product = service.add_barcode(args.product_id, args.barcode)
            print(f"{product.name}: {', '.join(product.barcodes)}")

        elif args.command == "backfill":
            result = service.backfill()
            print(f"Purchase orders processed: {result.purchase_orders_processed}")
            print(f"  Products created: {result.products_created}")
            print(f"  Products matched: {result.products_matched}")
            print(f"  Transit created:  {result.transit_created}")

        elif args.command == "history":
            print(format_history(service.product_history(args.product_id)))

    except ReconcileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
