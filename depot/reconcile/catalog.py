"""
Catalog maintenance - scanner barcodes attached to products.
"""

import logging
from datetime import datetime

from .config import MatchSettings
from .errors import NotFoundError, ValidationError
from .models import InventoryState, Product

logger = logging.getLogger(__name__)


def add_barcode(
    state: InventoryState,
    product_id: str,
    barcode: str | None,
    settings: MatchSettings,
    now: datetime,
) -> tuple[Product, bool]:
    """
    Attach a barcode to a product.

    Adding a barcode the product already has is a no-op (updated_at is
    left alone).

    Returns:
        (product, changed) - changed is False for the no-op case
    """
    trimmed = (barcode or "").strip()
    if not product_id:
        raise ValidationError("product_id is required")
    if not trimmed:
        raise ValidationError("Barcode is required")
    if len(trimmed) > settings.max_barcode_length:
        raise ValidationError("Barcode is too long")

    product = state.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")

    if trimmed in product.barcodes:
        return product, False

    product.barcodes.append(trimmed)
    product.updated_at = now
    logger.info("Added barcode %s to product %s", trimmed, product_id)
    return product, True
