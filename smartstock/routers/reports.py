from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from smartstock.config import Settings
from smartstock.dependencies import get_app_settings, get_store
from smartstock.schemas.report import AIReport
from smartstock.services.ai_payload_service import (
    AIResponseError,
    build_analysis_input,
    build_extraction_input,
    coerce_report,
)
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/ai-input")
def ai_analysis_input(
    window: Optional[int] = Query(None, ge=0, le=1000),
    store: InventoryStore = Depends(get_store),
):
    return build_analysis_input(store.products, store.logs, window)


@router.get("/ai-report-input")
def ai_report_input(
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return build_analysis_input(store.products, store.logs, settings.AI_REPORT_WINDOW)


@router.post("/ai-extraction-input")
def ai_extraction_input(
    raw_text: str = Body(..., embed=True, alias="rawText"),
    store: InventoryStore = Depends(get_store),
):
    return build_extraction_input(raw_text, store.categories)


@router.post("/ai", response_model=AIReport)
def ai_report(payload: Any = Body(...)):
    try:
        return coerce_report(payload)
    except AIResponseError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


__all__ = ["router"]
