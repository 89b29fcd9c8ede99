from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from smartstock.dependencies import get_store
from smartstock.schemas.inventory import InventoryLog
from smartstock.schemas.report import ArchiveRequest, MonthlyAggregate
from smartstock.services.dashboard_service import monthly_aggregates
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", response_model=List[InventoryLog])
def list_history(
    product_id: Optional[str] = Query(None, alias="productId"),
    type: Optional[str] = Query(None, description="Log type tag"),
    limit: int = Query(500, ge=1, le=5000),
    store: InventoryStore = Depends(get_store),
):
    logs = store.logs
    if product_id:
        logs = [log for log in logs if log.product_id == product_id]
    if type:
        logs = [log for log in logs if log.type == type]
    return logs[:limit]


@router.get("/archive", response_model=List[InventoryLog])
def list_archive(store: InventoryStore = Depends(get_store)):
    return store.archived_logs


@router.post("/archive")
def archive_history(payload: ArchiveRequest, store: InventoryStore = Depends(get_store)):
    return {"archived": store.archive_logs(payload.before)}


@router.get("/monthly", response_model=List[MonthlyAggregate])
def monthly_history(
    include_archive: bool = Query(False, alias="includeArchive"),
    store: InventoryStore = Depends(get_store),
):
    logs = store.logs
    if include_archive:
        logs = logs + store.archived_logs
    return monthly_aggregates(logs)


__all__ = ["router"]
