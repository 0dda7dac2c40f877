"""
Product Matcher - resolve purchase-order lines to catalog products.

Resolution order, first hit wins:
| Step  | Compares                                         | Accept when        |
|-------|--------------------------------------------------|--------------------|
| exact | line SKU vs primary SKU / supplier SKU / barcode | case-insensitive = |
| fuzzy | description tokens vs name + alias tokens        | score >= threshold |
| new   | -                                                | always             |

Every match teaches the catalog: the raw description becomes an alias
and an unlinked product picks up the supplier.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from .config import MatchSettings
from .models import InventoryState, MatchMethod, MatchOutcome, Product
from .text import normalize_text, token_similarity

logger = logging.getLogger(__name__)


def _clean_sku(sku: Optional[str]) -> Optional[str]:
    if sku is None:
        return None
    return str(sku).strip() or None


def find_exact_match(products: list[Product], sku: Optional[str]) -> Optional[Product]:
    """
    Find a product whose primary SKU, supplier SKU or barcode equals sku.

    Comparison is case-insensitive; products are scanned in list order.
    """
    sku = _clean_sku(sku)
    if not sku:
        return None

    sku_lower = sku.lower()
    for product in products:
        if product.primary_sku and product.primary_sku.lower() == sku_lower:
            return product
        if product.supplier_sku and product.supplier_sku.lower() == sku_lower:
            return product
        if any(code.lower() == sku_lower for code in product.barcodes):
            return product
    return None


def _candidate_score(line_tokens: list[str], product: Product, settings: MatchSettings) -> float:
    """Best similarity between the line and the product name or any alias."""
    score = token_similarity(
        line_tokens,
        normalize_text(product.name, settings.stop_words, settings.min_token_length),
    )
    for alias in product.aliases:
        alias_score = token_similarity(
            line_tokens,
            normalize_text(alias, settings.stop_words, settings.min_token_length),
        )
        if alias_score > score:
            score = alias_score
    return score


def find_fuzzy_match(
    products: list[Product],
    description: str,
    settings: MatchSettings,
) -> tuple[Optional[Product], float]:
    """
    Find the product whose name/aliases best match the description.

    Ties keep the first product found.

    Returns:
        (product, score) - product is None when best score < threshold
    """
    line_tokens = normalize_text(description, settings.stop_words, settings.min_token_length)
    if not line_tokens:
        return None, 0.0

    best_product = None
    best_score = 0.0
    for candidate in products:
        score = _candidate_score(line_tokens, candidate, settings)
        if score > best_score:
            best_score = score
            best_product = candidate

    if best_score < settings.fuzzy_threshold:
        return None, best_score
    return best_product, best_score


def match_or_create(
    state: InventoryState,
    description: str,
    supplier_sku: Optional[str],
    supplier_id: Optional[str],
    settings: MatchSettings,
    now: datetime,
) -> MatchOutcome:
    """
    Resolve a line description to a product, creating one if needed.

    Args:
        state: State whose product list is searched (and appended to)
        description: Raw line description, already trimmed and non-blank
        supplier_sku: Line SKU, may be None
        supplier_id: Supplier that sent the purchase order
        settings: Matching heuristics
        now: Timestamp for created/updated fields

    Returns:
        MatchOutcome with the product and how it was found
    """
    sku = _clean_sku(supplier_sku)

    product = find_exact_match(state.products, sku)
    method = MatchMethod.EXACT
    score = 1.0

    if product is None:
        product, score = find_fuzzy_match(state.products, description, settings)
        method = MatchMethod.FUZZY

    if product is not None:
        if description not in product.aliases:
            product.aliases.append(description)
        if not product.supplier_id:
            product.supplier_id = supplier_id
        product.updated_at = now
        logger.debug("Matched %r to product %s (%s, %.3f)", description, product.id, method.value, score)
        return MatchOutcome(product=product, method=method, score=score)

    product = Product(
        id=str(uuid.uuid4()),
        name=description,
        primary_sku=sku,
        supplier_sku=sku,
        barcodes=[],
        aliases=[description],
        supplier_id=supplier_id,
        created_at=now,
        updated_at=now,
    )
    state.products.append(product)
    logger.debug("Created product %s for %r (best fuzzy score %.3f)", product.id, description, score)
    return MatchOutcome(product=product, method=MatchMethod.CREATED, score=score)
