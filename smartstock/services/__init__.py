from smartstock.services.inventory_store import InventoryStore, StockChange
from smartstock.services.persistence_service import attach_persistence, load_store, save_store

__all__ = [
    "InventoryStore",
    "StockChange",
    "attach_persistence",
    "load_store",
    "save_store",
]
