from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from smartstock.dependencies import get_store, not_found
from smartstock.schemas.inventory import (
    InventoryLog,
    Product,
    ProductCreate,
    ProductUpdate,
    StockChangeRequest,
    StockMovementRequest,
    TransferRequest,
)
from smartstock.services.catalog_service import ProductFilter, filter_products, sort_products
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/products", tags=["Products"])


def _change_response(change):
    return {"product": change.product, "log": change.log}


@router.get("", response_model=List[Product])
def list_products(
    search: str = Query("", description="Case-insensitive name search"),
    site: Optional[str] = Query(None, description="Site id, 'all' for every site"),
    category: Optional[str] = Query(None, description="Category, 'all' for every category"),
    status: str = Query("all", pattern="^(all|alert|sufficient)$"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_value: Optional[float] = Query(None, alias="minValue"),
    max_value: Optional[float] = Query(None, alias="maxValue"),
    sort: str = Query("name", pattern="^(name|stock|price|category)$"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    store: InventoryStore = Depends(get_store),
):
    criteria = ProductFilter(
        search=search,
        site_id=site,
        category=category,
        status=status,
        min_price=min_price,
        max_price=max_price,
        min_value=min_value,
        max_value=max_value,
    )
    return sort_products(filter_products(store.products, criteria), sort, order)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, store: InventoryStore = Depends(get_store)):
    product = store.get_product(product_id)
    if product is None:
        raise not_found("Product")
    return product


@router.post("", response_model=Product, status_code=201)
def create_product(payload: ProductCreate, store: InventoryStore = Depends(get_store)):
    return store.upsert_product(payload)


@router.patch("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    store: InventoryStore = Depends(get_store),
):
    product = store.upsert_product(payload, existing_id=product_id)
    if product is None:
        raise not_found("Product")
    return product


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, store: InventoryStore = Depends(get_store)):
    if not store.delete_product(product_id):
        raise not_found("Product")


@router.post("/{product_id}/stock")
def change_stock(
    product_id: str,
    payload: StockChangeRequest,
    store: InventoryStore = Depends(get_store),
):
    change = store.apply_stock_change(
        product_id,
        payload.delta,
        payload.type,
        payload.responsible,
        payload.reason,
    )
    if change is None:
        raise not_found("Product")
    return _change_response(change)


@router.post("/{product_id}/movement")
def record_movement(
    product_id: str,
    payload: StockMovementRequest,
    store: InventoryStore = Depends(get_store),
):
    change = store.record_movement(
        product_id,
        payload.quantity,
        payload.movement,
        payload.responsible,
        site_id=payload.site_id,
    )
    if change is None:
        raise not_found("Product at this site")
    return _change_response(change)


@router.post("/{product_id}/transfer")
def transfer_stock(
    product_id: str,
    payload: TransferRequest,
    store: InventoryStore = Depends(get_store),
):
    if store.get_product(product_id) is None:
        raise not_found("Product")
    result = store.transfer_stock(
        product_id,
        payload.quantity,
        payload.to_site_id,
        payload.responsible,
        payload.reason,
    )
    if result is None:
        return {"transferred": 0, "logs": []}
    outgoing, incoming = result
    return {
        "transferred": incoming.log.change_amount,
        "source": outgoing.product,
        "target": incoming.product,
        "logs": [outgoing.log, incoming.log],
    }


@router.get("/{product_id}/history", response_model=List[InventoryLog])
def product_history(product_id: str, store: InventoryStore = Depends(get_store)):
    return store.logs_for_product(product_id)


__all__ = ["router"]
