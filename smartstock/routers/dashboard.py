from fastapi import APIRouter, Depends

from smartstock.dependencies import get_store
from smartstock.schemas.report import DashboardSummary
from smartstock.services.dashboard_service import dashboard_summary, value_by_category
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def summary(store: InventoryStore = Depends(get_store)):
    return dashboard_summary(store)


@router.get("/value-by-category")
def category_values(store: InventoryStore = Depends(get_store)):
    return value_by_category(store.products)


__all__ = ["router"]
