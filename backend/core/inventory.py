"""
Wiring between the backend and the reconciliation core.

One InventoryService per process; its store lock serializes every
read-modify-write coming from the API.
"""
import logging
from functools import lru_cache
from pathlib import Path

from backend.core.config import settings
from depot.reconcile import InventoryService, JsonFileStore, load_config
from depot.reconcile.config import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)


@lru_cache
def get_inventory_service() -> InventoryService:
    """Build the shared service from settings (cached)."""
    config_path = Path(settings.CONFIG_PATH) if settings.CONFIG_PATH else DEFAULT_CONFIG_PATH
    config = load_config(config_path)
    store = JsonFileStore(settings.STATE_PATH)
    logger.info("Inventory state at %s, config %s", store.path, config_path)
    return InventoryService(store, config)
