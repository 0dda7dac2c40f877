"""
State Stores - full-state persistence for the reconciliation core.

The adapter pattern lets us swap implementations (in-memory for testing,
JSON file for production) without changing ledger logic. The core only
needs an atomic full-state read and full-state write.

Mutations go through transaction(): a single lock serializes writers,
the block works on a freshly loaded copy, and the copy is written back
only if the block finishes without raising.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

from .models import (
    Invoice,
    InventoryRecord,
    InventoryState,
    POLine,
    Product,
    PurchaseOrder,
    Supplier,
    TransitRecord,
    TransitStatus,
)

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "suppliers", "purchase_orders", "po_lines", "products",
    "inventory", "transit", "invoices",
)


class StateStore(ABC):
    """
    Abstract interface for state persistence.

    Implementations read and write the whole state at once.
    """

    def __init__(self):
        self._lock = threading.RLock()

    @abstractmethod
    def load(self) -> InventoryState:
        """Return a fresh copy of the persisted state."""
        pass

    @abstractmethod
    def save(self, state: InventoryState) -> None:
        """Replace the persisted state."""
        pass

    @contextmanager
    def transaction(self) -> Iterator[InventoryState]:
        """Load, yield for mutation, and save only on success."""
        with self._lock:
            state = self.load()
            yield state
            self.save(state)

    @contextmanager
    def read(self) -> Iterator[InventoryState]:
        """Load a consistent copy for read-only use."""
        with self._lock:
            yield self.load()


class InMemoryStore(StateStore):
    """
    In-memory store for programmatic test setup.

    Copies on load and save, so a failed transaction leaves no trace.
    """

    def __init__(self, state: Optional[InventoryState] = None):
        super().__init__()
        self._state = copy.deepcopy(state) if state is not None else InventoryState()

    def load(self) -> InventoryState:
        return copy.deepcopy(self._state)

    def save(self, state: InventoryState) -> None:
        self._state = copy.deepcopy(state)


class JsonFileStore(StateStore):
    """
    Store that keeps the whole state in one JSON document.

    Writes go to a temp file in the same directory and are swapped in with
    os.replace, so readers never see a half-written file.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> InventoryState:
        if not self._path.exists():
            return InventoryState()

        with open(self._path, "r") as f:
            data = json.load(f)
        return state_from_dict(data or {})

    def save(self, state: InventoryState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(state_to_dict(state), indent=2, default=_json_default)

        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote state to %s", self._path)


# ============== Serialization ==============

def _json_default(value: Any):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def state_to_dict(state: InventoryState) -> dict:
    """Plain dict of the state; Decimals/datetimes are left for the encoder."""
    return asdict(state)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _parse_decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal(default)


def _maybe_decimal(value: Any) -> Any:
    """Keep raw extracted numbers as-is unless they parse cleanly."""
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return value
    return value


def _supplier(row: dict) -> Supplier:
    return Supplier(
        id=row["id"],
        name=row.get("name", ""),
        address=row.get("address"),
        email=row.get("email"),
        phone=row.get("phone"),
        vat_number=row.get("vat_number"),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _purchase_order(row: dict) -> PurchaseOrder:
    return PurchaseOrder(
        id=row["id"],
        supplier_id=row["supplier_id"],
        invoice_number=row.get("invoice_number"),
        invoice_date=row.get("invoice_date"),
        currency=row.get("currency") or "GBP",
        payment_terms=row.get("payment_terms"),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _po_line(row: dict) -> POLine:
    return POLine(
        id=row["id"],
        purchase_order_id=row["purchase_order_id"],
        description=row.get("description") or "",
        supplier_sku=row.get("supplier_sku"),
        quantity=_maybe_decimal(row.get("quantity")),
        unit_cost_ex_vat=_maybe_decimal(row.get("unit_cost_ex_vat")),
        line_total_ex_vat=_maybe_decimal(row.get("line_total_ex_vat")),
    )


def _product(row: dict) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        primary_sku=row.get("primary_sku"),
        supplier_sku=row.get("supplier_sku"),
        barcodes=list(row.get("barcodes") or []),
        aliases=list(row.get("aliases") or []),
        supplier_id=row.get("supplier_id"),
        category=row.get("category"),
        tags=list(row.get("tags") or []),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _inventory(row: dict) -> InventoryRecord:
    return InventoryRecord(
        id=row["id"],
        product_id=row["product_id"],
        quantity_on_hand=_parse_decimal(row.get("quantity_on_hand")),
        average_cost_gbp=_parse_decimal(row.get("average_cost_gbp")),
        last_updated=_parse_datetime(row.get("last_updated")),
    )


def _transit(row: dict) -> TransitRecord:
    return TransitRecord(
        id=row["id"],
        product_id=row["product_id"],
        purchase_order_id=row["purchase_order_id"],
        po_line_id=row["po_line_id"],
        supplier_id=row["supplier_id"],
        quantity=_parse_decimal(row.get("quantity")),
        remaining_quantity=_parse_decimal(row.get("remaining_quantity")),
        unit_cost_gbp=_parse_decimal(row.get("unit_cost_gbp")),
        status=TransitStatus(row.get("status") or TransitStatus.IN_TRANSIT.value),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _invoice(row: dict) -> Invoice:
    return Invoice(
        id=row["id"],
        purchase_order_id=row["purchase_order_id"],
        supplier_id=row["supplier_id"],
        invoice_number=row.get("invoice_number"),
        invoice_date=row.get("invoice_date"),
        currency=row.get("currency") or "GBP",
        created_at=_parse_datetime(row.get("created_at")),
    )


_ROW_PARSERS = {
    "suppliers": _supplier,
    "purchase_orders": _purchase_order,
    "po_lines": _po_line,
    "products": _product,
    "inventory": _inventory,
    "transit": _transit,
    "invoices": _invoice,
}


def state_from_dict(data: dict) -> InventoryState:
    """
    Rebuild state from its JSON form.

    Missing or malformed collections come back as empty lists, so older
    files without newer collections still load.
    """
    state = InventoryState()
    for name in COLLECTIONS:
        rows = data.get(name)
        if not isinstance(rows, list):
            continue
        parser = _ROW_PARSERS[name]
        setattr(state, name, [parser(row) for row in rows])
    return state
