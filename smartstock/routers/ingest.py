from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from openpyxl.utils.exceptions import InvalidFileException

from smartstock.config import Settings
from smartstock.dependencies import get_app_settings, get_store
from smartstock.schemas.report import AIImportRequest, SpreadsheetIngestRequest
from smartstock.services.ai_payload_service import AIResponseError, coerce_extracted_products
from smartstock.services.ingestion_service import import_spreadsheet
from smartstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/ingest", tags=["Ingest"])


def _resolve_import_path(raw_path, import_dir):
    """Relative paths are taken from the import directory; nothing may leave it."""
    base = Path(import_dir).resolve()
    path = Path(raw_path)
    if not path.is_absolute():
        path = base / path
    path = path.resolve()
    if not path.is_relative_to(base):
        raise HTTPException(status_code=403, detail="Path is outside the import directory.")
    return path


@router.post("/spreadsheet")
def ingest_spreadsheet(
    payload: SpreadsheetIngestRequest,
    store: InventoryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    path = _resolve_import_path(payload.path, settings.IMPORT_DIR)
    try:
        result = import_spreadsheet(
            store,
            path,
            site_id=payload.site_id,
            actor=payload.responsible,
            dry_run=payload.dry_run,
        )
    except (OSError, ValueError, InvalidFileException) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"result": result}


@router.post("/ai-products")
def ingest_ai_products(payload: AIImportRequest, store: InventoryStore = Depends(get_store)):
    try:
        items = coerce_extracted_products(payload.payload, store.categories)
    except AIResponseError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    created = store.import_products(items, actor=payload.responsible, site_id=payload.site_id)
    return {"imported": len(created), "products": created}


__all__ = ["router"]
