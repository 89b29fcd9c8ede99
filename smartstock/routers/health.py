from datetime import datetime, timezone

from fastapi import APIRouter, Request

from smartstock.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request):
    settings = get_settings()
    store = getattr(request.app.state, "store", None)
    return {
        "status": "ok" if store is not None else "starting",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": datetime.now(timezone.utc).isoformat(),
    }
