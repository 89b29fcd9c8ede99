from smartstock.routers.dashboard import router as dashboard_router
from smartstock.routers.furniture import router as furniture_router
from smartstock.routers.health import router as health_router
from smartstock.routers.history import router as history_router
from smartstock.routers.ingest import router as ingest_router
from smartstock.routers.products import router as products_router
from smartstock.routers.replenishment import router as replenishment_router
from smartstock.routers.reports import router as reports_router
from smartstock.routers.settings import router as settings_router

__all__ = [
    "dashboard_router",
    "furniture_router",
    "health_router",
    "history_router",
    "ingest_router",
    "products_router",
    "replenishment_router",
    "reports_router",
    "settings_router",
]
