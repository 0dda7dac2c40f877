# Inventory reconciliation core
# Siloed module - no imports from backend

from .models import (
    Product,
    InventoryRecord,
    TransitRecord,
    TransitStatus,
    InventoryState,
    POLine,
    MatchMethod,
    MatchOutcome,
    SyncResult,
    ReceiveResult,
    InventoryItemView,
)
from .errors import ReconcileError, ValidationError, NotFoundError, InsufficientTransitError
from .config import load_config, default_config, Config, MatchSettings, DEFAULT_STOP_WORDS
from .text import normalize_text, token_similarity
from .matcher import match_or_create, find_exact_match, find_fuzzy_match
from .ledger import sync_from_purchase_order, transit_status
from .costing import receive_stock, weighted_average_cost
from .snapshot import build_snapshot, summarize_snapshot, product_history
from .catalog import add_barcode
from .store import StateStore, InMemoryStore, JsonFileStore
from .service import InventoryService

__version__ = "1.0.0"

__all__ = [
    # Models
    "Product",
    "InventoryRecord",
    "TransitRecord",
    "TransitStatus",
    "InventoryState",
    "POLine",
    "MatchMethod",
    "MatchOutcome",
    "SyncResult",
    "ReceiveResult",
    "InventoryItemView",
    # Errors
    "ReconcileError",
    "ValidationError",
    "NotFoundError",
    "InsufficientTransitError",
    # Config
    "Config",
    "MatchSettings",
    "DEFAULT_STOP_WORDS",
    "load_config",
    "default_config",
    # Matching
    "normalize_text",
    "token_similarity",
    "match_or_create",
    "find_exact_match",
    "find_fuzzy_match",
    # Ledger / costing
    "sync_from_purchase_order",
    "transit_status",
    "receive_stock",
    "weighted_average_cost",
    # Snapshot
    "build_snapshot",
    "summarize_snapshot",
    "product_history",
    # Catalog
    "add_barcode",
    # Stores
    "StateStore",
    "InMemoryStore",
    "JsonFileStore",
    # Service
    "InventoryService",
]
