"""In-memory inventory store.

The store owns every collection of the application (products, furniture,
sites, categories, the live audit log and its archive). All mutations are
synchronous and go through the methods below; a mutation that changes stock
updates the record and appends its audit entry in the same call.

Business-rule violations (unknown ids, decreases larger than the stock on
hand) never raise: they are absorbed as no-ops returning ``None`` or as a
clamp at zero. Listeners registered with :meth:`InventoryStore.subscribe`
are called after every successful change.
"""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

from smartstock.config import Settings, get_settings
from smartstock.core.constants import (
    LOG_TYPE_ADJUSTMENT,
    LOG_TYPE_ENTRY,
    LOG_TYPE_EXIT,
    LOG_TYPE_FURNITURE_CHECK,
    LOG_TYPE_REFILL,
    LOG_TYPE_TRANSFER,
)
from smartstock.core.dates import parse_timestamp, utc_now_iso
from smartstock.schemas.inventory import Furniture, InventoryLog, Product, Site
from smartstock.services.replenishment_service import compute_replenishment_need, is_in_alert

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id"}
_COUNT_FIELDS = {"current_count", "previous_count"}
# Optional fields a patch may clear with an explicit null.
_CLEARABLE_FIELDS = {"supplier", "purchase_date"}


@dataclass(frozen=True)
class StockChange:
    product: Product
    log: InventoryLog


def _new_id(taken=()):
    while True:
        candidate = uuid.uuid4().hex[:12]
        if candidate not in taken:
            return candidate


def _as_fields(data) -> dict:
    """Normalize a patch (pydantic model or mapping, camel or snake keys)."""
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        raw = data.model_dump(exclude_unset=True)
    elif isinstance(data, Mapping):
        raw = dict(data)
    else:
        raise TypeError("data must be a mapping or a pydantic model")
    fields = {}
    for key, value in raw.items():
        name = to_snake(str(key))
        if value is not None or name in _CLEARABLE_FIELDS:
            fields[name] = value
    return fields


class InventoryStore:
    def __init__(
        self,
        *,
        products=(),
        furniture=(),
        sites=(),
        categories=(),
        logs=(),
        archived_logs=(),
        settings: Optional[Settings] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self._settings = settings or get_settings()
        self._clock = clock
        self._products: list[Product] = list(products)
        self._furniture: list[Furniture] = list(furniture)
        self._sites: list[Site] = list(sites)
        self._categories: list[str] = list(categories)
        # Newest first.
        self._logs: list[InventoryLog] = list(logs)
        self._archived_logs: list[InventoryLog] = list(archived_logs)
        self._listeners: list[Callable[["InventoryStore"], None]] = []

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener):
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self):
        # A failing listener must not turn a completed mutation into an error.
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def products(self) -> list[Product]:
        return [product.model_copy() for product in self._products]

    @property
    def furniture(self) -> list[Furniture]:
        return [item.model_copy() for item in self._furniture]

    @property
    def sites(self) -> list[Site]:
        return [site.model_copy() for site in self._sites]

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    @property
    def logs(self) -> list[InventoryLog]:
        return list(self._logs)

    @property
    def archived_logs(self) -> list[InventoryLog]:
        return list(self._archived_logs)

    def get_product(self, product_id) -> Optional[Product]:
        index = self._product_index(product_id)
        return None if index is None else self._products[index].model_copy()

    def get_furniture(self, furniture_id) -> Optional[Furniture]:
        index = self._furniture_index(furniture_id)
        return None if index is None else self._furniture[index].model_copy()

    def get_site(self, site_id) -> Optional[Site]:
        for site in self._sites:
            if site.id == site_id:
                return site.model_copy()
        return None

    def logs_for_product(self, product_id) -> list[InventoryLog]:
        return [log for log in self._logs if log.product_id == product_id]

    def _product_index(self, product_id):
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    def _furniture_index(self, furniture_id):
        for index, item in enumerate(self._furniture):
            if item.id == furniture_id:
                return index
        return None

    def _actor(self, actor):
        return (actor or "").strip() or self._settings.DEFAULT_RESPONSIBLE

    def _append_log(self, **fields) -> InventoryLog:
        taken = {log.id for log in self._logs}
        log = InventoryLog(id=_new_id(taken), **fields)
        self._logs.insert(0, log)
        return log

    # ------------------------------------------------------------------
    # Stock mutations
    # ------------------------------------------------------------------
    def _apply_stock_change(
        self,
        product_id,
        delta,
        change_type,
        actor,
        reason=None,
        *,
        from_site_id=None,
        to_site_id=None,
    ) -> Optional[StockChange]:
        index = self._product_index(product_id)
        if index is None:
            logger.debug("Stock change ignored, unknown product %s", product_id)
            return None

        product = self._products[index]
        delta = int(delta)
        new_stock = max(0, product.current_stock + delta)
        now = self._clock()
        updated = product.model_copy(
            update={"current_stock": new_stock, "last_inventory_date": now}
        )
        log = self._append_log(
            date=now,
            type=change_type,
            product_id=product.id,
            product_name=product.name,
            # Requested delta, not the clamped effective change.
            change_amount=delta,
            final_stock=new_stock,
            responsible=self._actor(actor),
            reason=reason,
            from_site_id=from_site_id,
            to_site_id=to_site_id,
        )
        self._products[index] = updated
        logger.debug(
            "Stock %s for %s: %+d -> %d", change_type, product.id, delta, new_stock
        )
        return StockChange(product=updated.model_copy(), log=log)

    def apply_stock_change(
        self,
        product_id,
        delta,
        change_type,
        actor=None,
        reason=None,
        *,
        from_site_id=None,
        to_site_id=None,
    ) -> Optional[StockChange]:
        change = self._apply_stock_change(
            product_id,
            delta,
            change_type,
            actor,
            reason,
            from_site_id=from_site_id,
            to_site_id=to_site_id,
        )
        if change is not None:
            self._changed()
        return change

    def record_movement(self, product_id, quantity, movement, actor=None, site_id=None):
        """Entry/exit helper: the sign comes from ``movement``, not ``quantity``."""
        product = self.get_product(product_id)
        if product is None:
            return None
        if site_id and product.site_id != site_id:
            return None
        if movement == LOG_TYPE_ENTRY:
            delta = abs(int(quantity))
        elif movement == LOG_TYPE_EXIT:
            delta = -abs(int(quantity))
        else:
            return None
        return self.apply_stock_change(
            product_id, delta, movement, actor, from_site_id=product.site_id
        )

    def apply_refill(self, product_id, actor=None) -> Optional[StockChange]:
        product = self.get_product(product_id)
        if product is None:
            return None
        needed = compute_replenishment_need(product)
        if needed <= 0:
            return None
        return self.apply_stock_change(product_id, needed, LOG_TYPE_REFILL, actor)

    def apply_refill_all(self, actor=None) -> list[StockChange]:
        changes = []
        for product in self.products:
            if not is_in_alert(product):
                continue
            change = self.apply_refill(product.id, actor)
            if change is not None:
                changes.append(change)
        logger.info("Refilled %d of %d products", len(changes), len(self._products))
        return changes

    def transfer_stock(self, product_id, quantity, to_site_id, actor=None, reason=None):
        index = self._product_index(product_id)
        if index is None or self.get_site(to_site_id) is None:
            return None
        source = self._products[index]
        if source.site_id == to_site_id:
            return None
        moved = min(abs(int(quantity)), source.current_stock)
        if moved <= 0:
            return None

        target = self._find_product_at_site(source.name, to_site_id)
        if target is None:
            target = source.model_copy(
                update={
                    "id": _new_id({p.id for p in self._products}),
                    "current_stock": 0,
                    "site_id": to_site_id,
                    "last_inventory_date": self._clock(),
                }
            )
            self._products.append(target)

        outgoing = self._apply_stock_change(
            source.id,
            -moved,
            LOG_TYPE_TRANSFER,
            actor,
            reason,
            from_site_id=source.site_id,
            to_site_id=to_site_id,
        )
        incoming = self._apply_stock_change(
            target.id,
            moved,
            LOG_TYPE_TRANSFER,
            actor,
            reason,
            from_site_id=source.site_id,
            to_site_id=to_site_id,
        )
        self._changed()
        return outgoing, incoming

    def _find_product_at_site(self, name, site_id):
        key = name.strip().lower()
        for product in self._products:
            if product.site_id == site_id and product.name.strip().lower() == key:
                return product
        return None

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def _product_defaults(self) -> dict:
        settings = self._settings
        if "Autre" in self._categories:
            category = "Autre"
        else:
            category = self._categories[-1] if self._categories else ""
        return {
            "category": category,
            "current_stock": 0,
            "min_stock": settings.DEFAULT_MIN_STOCK,
            "monthly_need": settings.DEFAULT_MONTHLY_NEED,
            "unit": settings.DEFAULT_UNIT,
            "unit_price": 0.0,
            "currency": settings.DEFAULT_CURRENCY,
            "site_id": self._sites[0].id if self._sites else "",
        }

    def _create_product(self, fields, actor) -> Product:
        values = self._product_defaults()
        values.update({k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS})
        values["id"] = _new_id({p.id for p in self._products})
        values["last_inventory_date"] = self._clock()
        product = Product.model_validate(values)
        product = product.model_copy(update={"current_stock": max(0, product.current_stock)})
        self._products.append(product)

        if self._settings.LOG_OPENING_BALANCE:
            self._append_log(
                date=product.last_inventory_date,
                type=LOG_TYPE_ENTRY,
                product_id=product.id,
                product_name=product.name,
                change_amount=product.current_stock,
                final_stock=product.current_stock,
                responsible=self._actor(actor),
                reason="Opening balance",
            )
        return product

    def _update_product(self, index, fields, actor) -> Product:
        existing = self._products[index]
        patch = {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
        merged = existing.model_dump()
        merged.update(patch)
        updated = Product.model_validate(merged)

        if "current_stock" in patch:
            new_stock = max(0, updated.current_stock)
            updated = updated.model_copy(update={"current_stock": new_stock})
            if new_stock != existing.current_stock:
                now = self._clock()
                updated = updated.model_copy(update={"last_inventory_date": now})
                self._append_log(
                    date=now,
                    type=LOG_TYPE_ADJUSTMENT,
                    product_id=existing.id,
                    product_name=updated.name,
                    change_amount=new_stock - existing.current_stock,
                    final_stock=new_stock,
                    responsible=self._actor(actor),
                    reason="Manual edit",
                )
        self._products[index] = updated
        return updated

    def upsert_product(self, data, existing_id=None, *, actor=None) -> Optional[Product]:
        fields = _as_fields(data)
        if existing_id is None:
            product = self._create_product(fields, actor)
            logger.info("Created product %s (%s)", product.id, product.name)
        else:
            index = self._product_index(existing_id)
            if index is None:
                return None
            product = self._update_product(index, fields, actor)
        self._changed()
        return product.model_copy()

    def import_products(self, items, *, actor=None, site_id=None) -> list[Product]:
        created = []
        for item in items:
            fields = _as_fields(item)
            if site_id and not fields.get("site_id"):
                fields["site_id"] = site_id
            created.append(self._create_product(fields, actor))
        if created:
            logger.info("Imported %d products", len(created))
            self._changed()
        return [product.model_copy() for product in created]

    def delete_product(self, product_id) -> bool:
        index = self._product_index(product_id)
        if index is None:
            return False
        removed = self._products.pop(index)
        logger.info("Deleted product %s (%s)", removed.id, removed.name)
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Furniture
    # ------------------------------------------------------------------
    def upsert_furniture(self, data, existing_id=None) -> Optional[Furniture]:
        fields = _as_fields(data)
        fields = {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}

        if existing_id is None:
            code = str(fields.get("code") or "").strip()
            if not code or any(item.code == code for item in self._furniture):
                logger.warning("Furniture code %r is missing or already used", code)
                return None
            count = max(0, int(fields.get("current_count") or 0))
            values = {
                "currency": self._settings.DEFAULT_CURRENCY,
                "site_id": self._sites[0].id if self._sites else "",
                **fields,
                "code": code,
                "current_count": count,
                "previous_count": count,
                "id": _new_id({item.id for item in self._furniture}),
                "last_inventory_date": self._clock(),
            }
            item = Furniture.model_validate(values)
            self._furniture.append(item)
        else:
            index = self._furniture_index(existing_id)
            if index is None:
                return None
            existing = self._furniture[index]
            patch = {k: v for k, v in fields.items() if k not in _COUNT_FIELDS}
            if "code" in patch:
                code = str(patch["code"] or "").strip()
                if not code:
                    logger.warning("Blank furniture code ignored for %s", existing_id)
                    return None
                if code != existing.code and any(i.code == code for i in self._furniture):
                    logger.warning("Furniture code %r already used", code)
                    return None
                patch["code"] = code
            merged = existing.model_dump()
            merged.update(patch)
            item = Furniture.model_validate(merged)
            self._furniture[index] = item
        self._changed()
        return item.model_copy()

    def record_furniture_count(self, furniture_id, counted, actor=None, reason=None):
        index = self._furniture_index(furniture_id)
        if index is None:
            return None
        existing = self._furniture[index]
        counted = max(0, int(counted))
        now = self._clock()
        updated = existing.model_copy(
            update={
                "previous_count": existing.current_count,
                "current_count": counted,
                "last_inventory_date": now,
            }
        )
        self._furniture[index] = updated
        log = self._append_log(
            date=now,
            type=LOG_TYPE_FURNITURE_CHECK,
            product_id=existing.id,
            product_name=existing.name or existing.code,
            change_amount=counted - existing.current_count,
            final_stock=counted,
            responsible=self._actor(actor),
            reason=reason,
            from_site_id=existing.site_id or None,
        )
        self._changed()
        return updated.model_copy(), log

    def delete_furniture(self, furniture_id) -> bool:
        index = self._furniture_index(furniture_id)
        if index is None:
            return False
        removed = self._furniture.pop(index)
        logger.info("Deleted furniture %s (%s)", removed.id, removed.code)
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------
    def add_site(self, name) -> Site:
        taken = {site.id for site in self._sites}
        number = len(self._sites) + 1
        while f"S{number}" in taken:
            number += 1
        site = Site(id=f"S{number}", name=name.strip())
        self._sites.append(site)
        self._changed()
        return site.model_copy()

    def rename_site(self, site_id, name) -> Optional[Site]:
        for index, site in enumerate(self._sites):
            if site.id == site_id:
                renamed = site.model_copy(update={"name": name.strip()})
                self._sites[index] = renamed
                self._changed()
                return renamed.model_copy()
        return None

    def add_category(self, name) -> bool:
        name = name.strip()
        if not name or name in self._categories:
            return False
        self._categories.append(name)
        self._changed()
        return True

    def remove_category(self, name) -> bool:
        if name not in self._categories:
            return False
        self._categories.remove(name)
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Archival
    # ------------------------------------------------------------------
    def archive_logs(self, before) -> int:
        cutoff = parse_timestamp(before)
        if cutoff is None:
            return 0
        kept, moved = [], []
        for log in self._logs:
            logged_at = parse_timestamp(log.date)
            if logged_at is not None and logged_at < cutoff:
                moved.append(log)
            else:
                kept.append(log)
        if not moved:
            return 0
        self._logs = kept
        self._archived_logs = moved + self._archived_logs
        logger.info("Archived %d log entries older than %s", len(moved), cutoff.isoformat())
        self._changed()
        return len(moved)


__all__ = ["InventoryStore", "StockChange"]
