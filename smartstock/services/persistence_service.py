import json
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from smartstock.config import get_settings
from smartstock.core.constants import (
    DEFAULT_CATEGORIES,
    KEY_ARCHIVE,
    KEY_CATEGORIES,
    KEY_FURNITURE,
    KEY_HISTORY,
    KEY_PRODUCTS,
    KEY_SITES,
    SEED_PRODUCTS,
    SEED_SITES,
)
from smartstock.core.dates import utc_now_iso
from smartstock.schemas.inventory import Furniture, InventoryLog, Product, Site
from smartstock.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)


def _read_entry(backend, key, expected_type):
    try:
        raw = backend.get(key)
    except SQLAlchemyError as exc:
        logger.info("Reading %s failed (%s); using defaults", key, exc)
        return None
    if raw is None:
        logger.info("No stored entry for %s; using defaults", key)
        return None
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.info("Stored entry %s is not valid JSON; using defaults", key)
        return None
    if not isinstance(value, expected_type):
        logger.info(
            "Stored entry %s is a %s, expected %s; using defaults",
            key,
            type(value).__name__,
            expected_type.__name__,
        )
        return None
    return value


def _validate_records(model, records, key):
    valid = []
    skipped = 0
    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue
        try:
            valid.append(model.model_validate(record))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.info("Skipped %d unreadable records in %s", skipped, key)
    return valid


def seed_products(now=None):
    now = now or utc_now_iso()
    return [Product.model_validate({**record, "lastInventoryDate": now}) for record in SEED_PRODUCTS]


def seed_sites():
    return [Site.model_validate(record) for record in SEED_SITES]


def _load_collection(backend, key, model, default_factory):
    records = _read_entry(backend, key, list)
    if records is None:
        return default_factory()
    return _validate_records(model, records, key)


def load_store(backend, settings=None, **store_kwargs) -> InventoryStore:
    categories = _read_entry(backend, KEY_CATEGORIES, list)
    if categories is None:
        categories = list(DEFAULT_CATEGORIES)
    else:
        categories = [str(name) for name in categories if isinstance(name, str) and name.strip()]

    return InventoryStore(
        products=_load_collection(backend, KEY_PRODUCTS, Product, seed_products),
        logs=_load_collection(backend, KEY_HISTORY, InventoryLog, list),
        furniture=_load_collection(backend, KEY_FURNITURE, Furniture, list),
        sites=_load_collection(backend, KEY_SITES, Site, seed_sites),
        archived_logs=_load_collection(backend, KEY_ARCHIVE, InventoryLog, list),
        categories=categories,
        settings=settings or get_settings(),
        **store_kwargs,
    )


def serialize_store(store) -> dict[str, str]:
    collections = {
        KEY_PRODUCTS: [product.to_storage() for product in store.products],
        KEY_HISTORY: [log.to_storage() for log in store.logs],
        KEY_FURNITURE: [item.to_storage() for item in store.furniture],
        KEY_SITES: [site.to_storage() for site in store.sites],
        KEY_CATEGORIES: store.categories,
        KEY_ARCHIVE: [log.to_storage() for log in store.archived_logs],
    }
    return {key: json.dumps(value, ensure_ascii=False) for key, value in collections.items()}


def save_store(backend, store) -> None:
    payload = serialize_store(store)
    set_many = getattr(backend, "set_many", None)
    if set_many is not None:
        set_many(payload)
        return
    for key, value in payload.items():
        backend.set(key, value)


def attach_persistence(store, backend):
    def _persist(changed_store):
        save_store(backend, changed_store)

    return store.subscribe(_persist)


__all__ = [
    "attach_persistence",
    "load_store",
    "save_store",
    "seed_products",
    "seed_sites",
    "serialize_store",
]
