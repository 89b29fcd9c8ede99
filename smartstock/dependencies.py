from fastapi import HTTPException, Request

from smartstock.config import Settings, get_settings
from smartstock.services.inventory_store import InventoryStore


def get_store(request: Request) -> InventoryStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Inventory store is not loaded.")
    return store


def get_app_settings() -> Settings:
    return get_settings()


def not_found(kind: str):
    return HTTPException(status_code=404, detail=f"{kind} not found.")


__all__ = ["get_app_settings", "get_store", "not_found"]
