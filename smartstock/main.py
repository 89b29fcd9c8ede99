import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from smartstock.config import Settings, get_settings
from smartstock.core.logging import setup_logging
from smartstock.database import SessionLocal, engine, ensure_schema
from smartstock.database.kv_store import SqlKeyValueStore
from smartstock.routers import (
    dashboard_router,
    furniture_router,
    health_router,
    history_router,
    ingest_router,
    products_router,
    replenishment_router,
    reports_router,
    settings_router,
)
from smartstock.services.persistence_service import attach_persistence, load_store

logger = logging.getLogger(__name__)


def _default_backend():
    ensure_schema(engine)
    return SqlKeyValueStore(SessionLocal)


def create_app(backend=None, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        kv_backend = backend if backend is not None else _default_backend()
        store = load_store(kv_backend, settings)
        attach_persistence(store, kv_backend)
        app.state.store = store
        logger.info(
            "Loaded %d products, %d log entries, %d sites",
            len(store.products),
            len(store.logs),
            len(store.sites),
        )
        try:
            yield
        finally:
            app.state.store = None

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.store = None

    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(products_router)
    app.include_router(replenishment_router)
    app.include_router(history_router)
    app.include_router(furniture_router)
    app.include_router(settings_router)
    app.include_router(ingest_router)
    app.include_router(reports_router)

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/dashboard/summary", status_code=302)

    return app


setup_logging()
app = create_app()


__all__ = ["app", "create_app"]
