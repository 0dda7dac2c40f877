"""
Test configuration and fixtures for the Depot backend test suite.

Provides:
- In-memory state store (isolated per test)
- FastAPI TestClient fixture wired to it
- Factory functions for creating test data
"""
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from depot.reconcile import InMemoryStore, InventoryService
from depot.reconcile.models import POLine, Product, PurchaseOrder, Supplier, TransitRecord


T0 = datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc)


class StepClock:
    """Each call returns one minute after the previous one."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store():
    """Provide a fresh in-memory store for each test."""
    return InMemoryStore()


@pytest.fixture()
def service(store):
    return InventoryService(store, clock=StepClock())


@pytest.fixture()
def client(service):
    """
    Provide a FastAPI TestClient using the in-memory service.

    The lifespan hook is patched so startup never touches the real state file.
    """
    from backend.api.main import app
    from backend.core.inventory import get_inventory_service

    app.dependency_overrides[get_inventory_service] = lambda: service
    with patch("backend.api.main.get_inventory_service", return_value=service):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------

def create_product(
    store: InMemoryStore,
    *,
    product_id: Optional[str] = None,
    name: str = "Dragon Shield Matte Sleeves Black",
    primary_sku: Optional[str] = None,
    supplier_id: Optional[str] = None,
) -> str:
    """Insert a product and return its ID."""
    pid = product_id or str(uuid.uuid4())
    with store.transaction() as state:
        state.products.append(Product(
            id=pid,
            name=name,
            primary_sku=primary_sku,
            aliases=[name],
            supplier_id=supplier_id,
            created_at=T0,
            updated_at=T0,
        ))
    return pid


def create_transit(
    store: InMemoryStore,
    product_id: str,
    *,
    quantity: str = "5",
    unit_cost: str = "2.0000",
    created_at: datetime = T0,
    purchase_order_id: str = "po-1",
) -> str:
    """Insert a purchase order line plus its transit record and return the transit ID."""
    tid = str(uuid.uuid4())
    line_id = str(uuid.uuid4())
    with store.transaction() as state:
        if state.get_supplier("sup-1") is None:
            state.suppliers.append(Supplier(id="sup-1", name="Asmodee UK", created_at=T0))
        if not any(po.id == purchase_order_id for po in state.purchase_orders):
            state.purchase_orders.append(PurchaseOrder(
                id=purchase_order_id, supplier_id="sup-1", created_at=T0
            ))
        state.po_lines.append(POLine(
            id=line_id,
            purchase_order_id=purchase_order_id,
            description="Dragon Shield Matte Sleeves Black",
            quantity=Decimal(quantity),
            unit_cost_ex_vat=Decimal(unit_cost),
        ))
        state.transit.append(TransitRecord(
            id=tid,
            product_id=product_id,
            purchase_order_id=purchase_order_id,
            po_line_id=line_id,
            supplier_id="sup-1",
            quantity=Decimal(quantity),
            remaining_quantity=Decimal(quantity),
            unit_cost_gbp=Decimal(unit_cost),
            created_at=created_at,
            updated_at=created_at,
        ))
    return tid
