"""
Transit Ledger - ordered-but-not-received stock.

Purchase-order sync creates one transit record per line with a positive
quantity. Receipts draw records down oldest-first (FIFO by creation time,
regardless of unit cost).

Status is always derived from remaining vs original quantity:
    remaining == quantity      -> in_transit
    0 < remaining < quantity   -> partially_received
    remaining == 0             -> received
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Iterable

from .config import MatchSettings
from .matcher import match_or_create
from .models import InventoryState, POLine, SyncResult, TransitRecord, TransitStatus

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _to_decimal(value: Any) -> Decimal | None:
    """Parse a number from upstream extraction; None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


def quantize_cost(value: Decimal, quantum: Decimal) -> Decimal:
    """Round half-up to quantum, widening precision so large values still fit."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - quantum.adjusted() + 2)
        return value.quantize(quantum, rounding=ROUND_HALF_UP)


def sanitize_quantity(value: Any) -> Decimal:
    """Quantity if it is a finite number > 0, else 0."""
    number = _to_decimal(value)
    if number is None or not number.is_finite() or number <= 0:
        return ZERO
    return number


def sanitize_unit_cost(value: Any, quantum: Decimal = Decimal("0.0001")) -> Decimal:
    """Unit cost rounded to quantum if it is a finite number >= 0, else 0."""
    number = _to_decimal(value)
    if number is None or not number.is_finite() or number < 0:
        return ZERO
    return quantize_cost(number, quantum)


def transit_status(remaining: Decimal, quantity: Decimal) -> TransitStatus:
    if remaining <= 0:
        return TransitStatus.RECEIVED
    if remaining < quantity:
        return TransitStatus.PARTIALLY_RECEIVED
    return TransitStatus.IN_TRANSIT


def sync_from_purchase_order(
    state: InventoryState,
    supplier_id: str,
    purchase_order_id: str,
    lines: Iterable[POLine],
    settings: MatchSettings,
    now: datetime,
) -> SyncResult:
    """
    Resolve each line to a product and record its quantity as in transit.

    Lines with a blank description are skipped entirely. Lines whose
    sanitized quantity is zero still match/create their product but get
    no transit record.

    Not idempotent: callers must not sync the same purchase order twice
    (see has_transit in purchasing).

    Returns:
        SyncResult with products created/matched and transit created
    """
    result = SyncResult()

    for line in lines:
        description = (line.description or "").strip()
        if not description:
            continue

        outcome = match_or_create(
            state, description, line.supplier_sku, supplier_id, settings, now
        )
        if outcome.created:
            result.products_created += 1
        else:
            result.products_matched += 1

        quantity = sanitize_quantity(line.quantity)
        unit_cost = sanitize_unit_cost(line.unit_cost_ex_vat, settings.cost_quantum)
        if quantity <= 0:
            continue

        state.transit.append(TransitRecord(
            id=str(uuid.uuid4()),
            product_id=outcome.product.id,
            purchase_order_id=purchase_order_id,
            po_line_id=line.id,
            supplier_id=supplier_id,
            quantity=quantity,
            remaining_quantity=quantity,
            unit_cost_gbp=unit_cost,
            status=TransitStatus.IN_TRANSIT,
            created_at=now,
            updated_at=now,
        ))
        result.transit_created += 1

    logger.info(
        "Synced purchase order %s: %d created, %d matched, %d transit",
        purchase_order_id, result.products_created,
        result.products_matched, result.transit_created,
    )
    return result


def open_transit_for_product(state: InventoryState, product_id: str) -> list[TransitRecord]:
    """
    Transit records with quantity left to receive, oldest first.

    Sort is stable, so records created at the same instant keep their
    insertion order. Records without a timestamp sort first.
    """
    records = [
        t for t in state.transit
        if t.product_id == product_id and t.remaining_quantity > 0
    ]
    return sorted(records, key=lambda t: (t.created_at is not None, t.created_at))


@dataclass
class Consumption:
    """What a FIFO walk drew from transit."""
    received_quantity: Decimal = ZERO
    incoming_total_value: Decimal = ZERO
    unfilled_quantity: Decimal = ZERO
    affected_transit_ids: list[str] = field(default_factory=list)


def consume_fifo(records: list[TransitRecord], quantity: Decimal, now: datetime) -> Consumption:
    """
    Draw up to quantity from records in the given order.

    Each touched record has its remaining quantity, status and updated_at
    changed in place.
    """
    consumption = Consumption()
    left = quantity

    for record in records:
        if left <= 0:
            break
        available = record.remaining_quantity
        if available <= 0:
            continue

        take = min(left, available)
        unit_cost = record.unit_cost_gbp if record.unit_cost_gbp >= 0 else ZERO

        consumption.incoming_total_value += take * unit_cost
        consumption.received_quantity += take
        record.remaining_quantity = available - take
        record.status = transit_status(record.remaining_quantity, record.quantity)
        record.updated_at = now
        consumption.affected_transit_ids.append(record.id)

        left -= take

    consumption.unfilled_quantity = left
    return consumption
