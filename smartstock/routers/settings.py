from typing import List

from fastapi import APIRouter, Depends

from smartstock.dependencies import get_store, not_found
from smartstock.schemas.inventory import CategoryCreate, Site, SiteCreate
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(tags=["Settings"])


@router.get("/sites", response_model=List[Site])
def list_sites(store: InventoryStore = Depends(get_store)):
    return store.sites


@router.post("/sites", response_model=Site, status_code=201)
def create_site(payload: SiteCreate, store: InventoryStore = Depends(get_store)):
    return store.add_site(payload.name)


@router.patch("/sites/{site_id}", response_model=Site)
def rename_site(site_id: str, payload: SiteCreate, store: InventoryStore = Depends(get_store)):
    site = store.rename_site(site_id, payload.name)
    if site is None:
        raise not_found("Site")
    return site


@router.get("/categories", response_model=List[str])
def list_categories(store: InventoryStore = Depends(get_store)):
    return store.categories


@router.post("/categories", response_model=List[str])
def create_category(payload: CategoryCreate, store: InventoryStore = Depends(get_store)):
    store.add_category(payload.name)
    return store.categories


@router.delete("/categories/{name}", response_model=List[str])
def delete_category(name: str, store: InventoryStore = Depends(get_store)):
    if not store.remove_category(name):
        raise not_found("Category")
    return store.categories


__all__ = ["router"]
