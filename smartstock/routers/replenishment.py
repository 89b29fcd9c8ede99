from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from smartstock.dependencies import get_store, not_found
from smartstock.schemas.inventory import RefillRequest
from smartstock.schemas.report import ReplenishmentRow
from smartstock.services.inventory_store import InventoryStore
from smartstock.services.replenishment_service import replenishment_list

router = APIRouter(prefix="/replenishment", tags=["Replenishment"])


@router.get("", response_model=List[ReplenishmentRow])
def list_replenishment(store: InventoryStore = Depends(get_store)):
    return replenishment_list(store.products)


@router.post("/refill-all")
def refill_all(
    payload: Optional[RefillRequest] = Body(None),
    store: InventoryStore = Depends(get_store),
):
    changes = store.apply_refill_all(payload.responsible if payload else None)
    return {
        "refilled": len(changes),
        "logs": [change.log for change in changes],
    }


@router.post("/{product_id}/refill")
def refill_product(
    product_id: str,
    payload: Optional[RefillRequest] = Body(None),
    store: InventoryStore = Depends(get_store),
):
    if store.get_product(product_id) is None:
        raise not_found("Product")
    change = store.apply_refill(product_id, payload.responsible if payload else None)
    if change is None:
        return {"refilled": False, "product": store.get_product(product_id)}
    return {"refilled": True, "product": change.product, "log": change.log}


__all__ = ["router"]
