from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from smartstock.dependencies import get_store, not_found
from smartstock.schemas.inventory import (
    Furniture,
    FurnitureCountRequest,
    FurnitureCreate,
    FurnitureUpdate,
)
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/furniture", tags=["Furniture"])


@router.get("", response_model=List[Furniture])
def list_furniture(
    site: Optional[str] = Query(None),
    drift_only: bool = Query(False, alias="driftOnly"),
    store: InventoryStore = Depends(get_store),
):
    items = store.furniture
    if site and site != "all":
        items = [item for item in items if item.site_id == site]
    if drift_only:
        items = [item for item in items if item.current_count != item.previous_count]
    return items


@router.post("", response_model=Furniture, status_code=201)
def create_furniture(payload: FurnitureCreate, store: InventoryStore = Depends(get_store)):
    item = store.upsert_furniture(payload)
    if item is None:
        raise HTTPException(status_code=409, detail="Furniture code already in use.")
    return item


@router.patch("/{furniture_id}", response_model=Furniture)
def update_furniture(
    furniture_id: str,
    payload: FurnitureUpdate,
    store: InventoryStore = Depends(get_store),
):
    if store.get_furniture(furniture_id) is None:
        raise not_found("Furniture")
    item = store.upsert_furniture(payload, existing_id=furniture_id)
    if item is None:
        raise HTTPException(status_code=409, detail="Furniture code already in use.")
    return item


@router.delete("/{furniture_id}", status_code=204)
def delete_furniture(furniture_id: str, store: InventoryStore = Depends(get_store)):
    if not store.delete_furniture(furniture_id):
        raise not_found("Furniture")


@router.post("/{furniture_id}/count")
def count_furniture(
    furniture_id: str,
    payload: FurnitureCountRequest,
    store: InventoryStore = Depends(get_store),
):
    result = store.record_furniture_count(
        furniture_id, payload.counted, payload.responsible, payload.reason
    )
    if result is None:
        raise not_found("Furniture")
    item, log = result
    return {"furniture": item, "log": log}


__all__ = ["router"]
