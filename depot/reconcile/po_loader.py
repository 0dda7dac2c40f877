"""
PO Loader - read purchase-order lines from supplier exports.

Accepts CSV, JSON (list of line objects) or XLSX. Spreadsheet headers
vary by supplier, so columns are found by matching known header names
rather than by position.
"""

import csv
import json
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

from openpyxl import load_workbook

from .purchasing import LineDraft

COLUMN_PATTERNS = {
    "description": ["description", "item description", "product", "item", "details"],
    "supplier_sku": ["supplier sku", "supplier_sku", "sku", "item number", "part number", "code"],
    "quantity": ["quantity", "qty", "units"],
    "unit_cost_ex_vat": ["unit cost", "unit_cost_ex_vat", "unit price", "price", "cost"],
    "line_total_ex_vat": ["line total", "line_total_ex_vat", "total", "net"],
}


def _find_column_index(headers: list[Any], patterns: list[str]) -> Optional[int]:
    """Find column index matching any of the patterns (case-insensitive)."""
    normalized = [str(h).lower().strip() if h is not None else "" for h in headers]
    for pattern in patterns:
        if pattern in normalized:
            return normalized.index(pattern)
    return None


def parse_amount(value: Any) -> Any:
    """
    Parse a numeric cell leniently.

    Currency symbols and thousands separators are stripped. Values that
    still don't parse are returned unchanged for the ledger to sanitize.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))

    str_value = re.sub(r"[£$€,\s]", "", str(value))
    if not str_value:
        return None
    try:
        return Decimal(str_value)
    except InvalidOperation:
        return value


# Extraction output uses camelCase keys
JSON_KEY_ALIASES = {
    "supplierSku": "supplier_sku",
    "unitCostExVAT": "unit_cost_ex_vat",
    "lineTotalExVAT": "line_total_ex_vat",
}


def _draft_from_row(row: dict) -> LineDraft:
    row = {JSON_KEY_ALIASES.get(k, k): v for k, v in row.items()}

    sku = row.get("supplier_sku")
    if sku is not None:
        sku = str(sku).strip() or None

    return LineDraft(
        description=str(row.get("description") or "").strip(),
        supplier_sku=sku,
        quantity=parse_amount(row.get("quantity")),
        unit_cost_ex_vat=parse_amount(row.get("unit_cost_ex_vat")),
        line_total_ex_vat=parse_amount(row.get("line_total_ex_vat")),
    )


def _rows_from_table(headers: list[Any], rows: list[list[Any]]) -> list[dict]:
    col_idx = {f: _find_column_index(headers, p) for f, p in COLUMN_PATTERNS.items()}
    if col_idx["description"] is None:
        raise ValueError(f"Missing description column, headers were: {headers}")

    result = []
    for row in rows:
        if not any(cell not in (None, "") for cell in row):
            continue
        result.append({
            f: row[idx] if idx is not None and idx < len(row) else None
            for f, idx in col_idx.items()
        })
    return result


def _load_csv(path: Path) -> list[dict]:
    with open(path, "r", newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        table = list(reader)
    if not table:
        return []
    return _rows_from_table(table[0], table[1:])


def _load_json(path: Path) -> list[dict]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("lines", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of lines in {path}")
    return [row for row in data if isinstance(row, dict)]


def _load_xlsx(path: Path) -> list[dict]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.active
        table = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    if not table:
        return []
    return _rows_from_table(table[0], table[1:])


def load_po_lines(file_path: str | Path) -> list[LineDraft]:
    """
    Load purchase-order lines from a file.

    Args:
        file_path: CSV, JSON or XLSX export

    Returns:
        LineDraft per row, in file order. Blank descriptions are kept;
        sync skips them.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Purchase order file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        rows = _load_csv(path)
    elif suffix == ".json":
        rows = _load_json(path)
    elif suffix in (".xlsx", ".xlsm"):
        rows = _load_xlsx(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

    return [_draft_from_row(row) for row in rows]
