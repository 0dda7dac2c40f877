"""
Tests for stock receipt and weighted-average costing.

Run with: pytest depot/reconcile/tests/test_costing.py -v
"""

import logging
import math
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from depot.reconcile.config import MatchSettings
from depot.reconcile.costing import receive_stock, weighted_average_cost
from depot.reconcile.errors import (
    InsufficientTransitError,
    NotFoundError,
    ReconcileError,
    ValidationError,
)
from depot.reconcile.models import (
    InventoryRecord,
    InventoryState,
    Product,
    TransitRecord,
    TransitStatus,
)


T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)
LATER = T0 + timedelta(days=3)


def transit(record_id, quantity, cost, created_at, product_id="p1"):
    return TransitRecord(
        id=record_id,
        product_id=product_id,
        purchase_order_id="po-1",
        po_line_id=f"line-{record_id}",
        supplier_id="sup-1",
        quantity=Decimal(quantity),
        remaining_quantity=Decimal(quantity),
        unit_cost_gbp=Decimal(cost),
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def settings():
    return MatchSettings()


@pytest.fixture
def state():
    """One product with two open transit records: 5 @ 2.00 then 3 @ 3.00."""
    return InventoryState(
        products=[
            Product(id="p1", name="Sleeves Matte Black"),
            Product(id="p2", name="Deck Box Red"),
        ],
        transit=[
            transit("newer", "3", "3.0000", T0 + timedelta(hours=2)),
            transit("older", "5", "2.0000", T0),
        ],
    )


class TestWeightedAverageCost:

    def test_first_receipt(self):
        assert weighted_average_cost(
            Decimal("0"), Decimal("0"), Decimal("6"), Decimal("13")
        ) == Decimal("2.1667")

    def test_blends_with_existing(self):
        # 6 @ 2.1667 + 2 @ 3.00
        assert weighted_average_cost(
            Decimal("6"), Decimal("2.1667"), Decimal("2"), Decimal("6")
        ) == Decimal("2.3750")

    def test_very_large_values(self):
        assert weighted_average_cost(
            Decimal("0"), Decimal("0"), Decimal("1"), Decimal("1e25")
        ) == Decimal("1e25")

    def test_zero_on_hand_is_zero_cost(self):
        assert weighted_average_cost(
            Decimal("0"), Decimal("5"), Decimal("0"), Decimal("0")
        ) == Decimal("0")

    def test_rounds_half_up(self):
        # 1 / 8 = 0.125 -> 0.13 at two places
        assert weighted_average_cost(
            Decimal("0"), Decimal("0"), Decimal("8"), Decimal("1"), Decimal("0.01")
        ) == Decimal("0.13")


class TestReceiveStock:
    """Receipts draw transit oldest-first and re-average the cost."""

    def test_receive_across_two_records(self, state, settings):
        result = receive_stock(state, "p1", 6, settings, LATER)

        assert result.received_quantity == Decimal("6")
        assert result.remaining_requested_quantity == Decimal("0")
        assert result.new_quantity_on_hand == Decimal("6")
        assert result.new_average_cost_gbp == Decimal("2.1667")
        assert result.affected_transit_ids == ["older", "newer"]

        older = next(t for t in state.transit if t.id == "older")
        newer = next(t for t in state.transit if t.id == "newer")
        assert older.remaining_quantity == Decimal("0")
        assert older.status == TransitStatus.RECEIVED
        assert newer.remaining_quantity == Decimal("2")
        assert newer.status == TransitStatus.PARTIALLY_RECEIVED

    def test_second_receipt_blends(self, state, settings):
        receive_stock(state, "p1", 6, settings, LATER)
        result = receive_stock(state, "p1", 2, settings, LATER + timedelta(hours=1))

        assert result.new_quantity_on_hand == Decimal("8")
        assert result.new_average_cost_gbp == Decimal("2.3750")
        assert result.affected_transit_ids == ["newer"]
        assert all(t.status == TransitStatus.RECEIVED for t in state.transit)

    def test_creates_inventory_record_lazily(self, state, settings):
        assert state.get_inventory("p1") is None
        receive_stock(state, "p1", 1, settings, LATER)

        record = state.get_inventory("p1")
        assert record.quantity_on_hand == Decimal("1")
        assert record.average_cost_gbp == Decimal("2.0000")
        assert record.last_updated == LATER

    def test_uses_existing_inventory_record(self, state, settings):
        state.inventory.append(InventoryRecord(
            id="inv-1", product_id="p1",
            quantity_on_hand=Decimal("2"), average_cost_gbp=Decimal("5.0000"),
        ))
        result = receive_stock(state, "p1", 2, settings, LATER)

        # (2 * 5 + 2 * 2) / 4
        assert result.new_average_cost_gbp == Decimal("3.5000")
        assert len(state.inventory) == 1

    def test_shortfall_is_reported(self, state, settings, caplog):
        with caplog.at_level(logging.WARNING, logger="depot.reconcile.costing"):
            result = receive_stock(state, "p1", 10, settings, LATER)

        assert result.received_quantity == Decimal("8")
        assert result.remaining_requested_quantity == Decimal("2")
        assert result.new_quantity_on_hand == Decimal("8")
        assert "short by 2" in caplog.text

    def test_fractional_quantity(self, state, settings):
        result = receive_stock(state, "p1", 0.5, settings, LATER)
        assert result.received_quantity == Decimal("0.5")

    def test_no_transit_at_all(self, state, settings):
        with pytest.raises(InsufficientTransitError):
            receive_stock(state, "p2", 1, settings, LATER)
        assert state.get_inventory("p2") is None

    def test_all_transit_received(self, state, settings):
        receive_stock(state, "p1", 8, settings, LATER)
        with pytest.raises(InsufficientTransitError):
            receive_stock(state, "p1", 1, settings, LATER)

    def test_unknown_product(self, state, settings):
        with pytest.raises(NotFoundError):
            receive_stock(state, "missing", 1, settings, LATER)

    def test_empty_product_id(self, state, settings):
        with pytest.raises(ValidationError, match="product_id"):
            receive_stock(state, "", 1, settings, LATER)

    @pytest.mark.parametrize("quantity", [0, -1, None, "3", math.nan, math.inf, True])
    def test_invalid_quantity(self, state, settings, quantity):
        with pytest.raises(ValidationError, match="positive number"):
            receive_stock(state, "p1", quantity, settings, LATER)
        assert all(t.remaining_quantity == t.quantity for t in state.transit)

    def test_errors_share_a_base(self):
        for error in (ValidationError, NotFoundError, InsufficientTransitError):
            assert issubclass(error, ReconcileError)
