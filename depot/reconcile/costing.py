"""
Cost Averager - move stock from transit to on hand.

A receipt pulls quantity from the product's oldest open transit records
and blends the incoming value into the on-hand weighted-average cost:

    new_avg = (on_hand * avg + sum(consumed * unit_cost)) / (on_hand + consumed)

Unlike purchase-order sync, receipt inputs are validated strictly: this
is a direct user action, not noisy upstream extraction.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from .config import MatchSettings
from .errors import InsufficientTransitError, NotFoundError, ValidationError
from .ledger import consume_fifo, open_transit_for_product, quantize_cost
from .models import InventoryRecord, InventoryState, ReceiveResult

logger = logging.getLogger(__name__)


def weighted_average_cost(
    on_hand: Decimal,
    average_cost: Decimal,
    received_quantity: Decimal,
    incoming_total_value: Decimal,
    quantum: Decimal = Decimal("0.0001"),
) -> Decimal:
    """
    Blend existing stock value with incoming value.

    Returns 0 when the resulting on-hand quantity is 0.
    """
    new_on_hand = on_hand + received_quantity
    if new_on_hand <= 0:
        return Decimal("0")
    value = on_hand * average_cost + incoming_total_value
    return quantize_cost(value / new_on_hand, quantum)


def _validate_quantity(quantity: Any) -> Decimal:
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float, Decimal)):
        raise ValidationError("Quantity must be a positive number")
    number = quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))
    if not number.is_finite() or number <= 0:
        raise ValidationError("Quantity must be a positive number")
    return number


def receive_stock(
    state: InventoryState,
    product_id: str,
    quantity: Any,
    settings: MatchSettings,
    now: datetime,
) -> ReceiveResult:
    """
    Receive up to quantity of a product from its open transit records.

    Requests larger than what is in transit are filled as far as possible
    and the shortfall is reported, not rejected.

    Raises:
        ValidationError: empty product_id or quantity not a finite number > 0
        NotFoundError: product does not exist
        InsufficientTransitError: nothing left in transit for the product
    """
    if not product_id:
        raise ValidationError("product_id is required")
    requested = _validate_quantity(quantity)

    product = state.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")

    records = open_transit_for_product(state, product_id)
    if not records:
        raise InsufficientTransitError("No in-transit quantity available for this product")

    consumption = consume_fifo(records, requested, now)
    if consumption.received_quantity <= 0:
        raise InsufficientTransitError(
            "Unable to receive stock: no available in-transit quantity for this product"
        )

    inventory = state.get_inventory(product_id)
    if inventory is None:
        inventory = InventoryRecord(
            id=str(uuid.uuid4()),
            product_id=product_id,
            quantity_on_hand=Decimal("0"),
            average_cost_gbp=Decimal("0"),
            last_updated=now,
        )
        state.inventory.append(inventory)

    new_avg = weighted_average_cost(
        inventory.quantity_on_hand,
        inventory.average_cost_gbp,
        consumption.received_quantity,
        consumption.incoming_total_value,
        settings.cost_quantum,
    )
    inventory.quantity_on_hand += consumption.received_quantity
    inventory.average_cost_gbp = new_avg
    inventory.last_updated = now

    if consumption.unfilled_quantity > 0:
        logger.warning(
            "Receipt for %s short by %s (requested %s, received %s)",
            product_id, consumption.unfilled_quantity, requested, consumption.received_quantity,
        )
    logger.info(
        "Received %s of %s from %d transit record(s); on hand %s @ %s",
        consumption.received_quantity, product_id, len(consumption.affected_transit_ids),
        inventory.quantity_on_hand, new_avg,
    )

    return ReceiveResult(
        product_id=product_id,
        received_quantity=consumption.received_quantity,
        remaining_requested_quantity=consumption.unfilled_quantity,
        new_quantity_on_hand=inventory.quantity_on_hand,
        new_average_cost_gbp=new_avg,
        affected_transit_ids=consumption.affected_transit_ids,
    )
