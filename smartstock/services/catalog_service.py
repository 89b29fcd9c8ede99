from dataclasses import dataclass
from typing import Optional

from smartstock.core.constants import MATCH_ALL_VALUES
from smartstock.services.replenishment_service import is_in_alert


@dataclass(frozen=True)
class ProductFilter:
    search: str = ""
    site_id: Optional[str] = None
    category: Optional[str] = None
    status: str = "all"
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None


def _is_match_all(value):
    if value is None:
        return True
    return str(value).strip().lower() in MATCH_ALL_VALUES


def _in_range(value, lower, upper):
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def matches_search(product, search):
    if not search:
        return True
    return search.strip().lower() in product.name.lower()


def matches_site(product, site_id):
    return _is_match_all(site_id) or product.site_id == site_id


def matches_category(product, category):
    return _is_match_all(category) or product.category == category


def matches_status(product, status):
    status = (status or "all").strip().lower()
    if status == "alert":
        return is_in_alert(product)
    if status == "sufficient":
        return not is_in_alert(product)
    return True


def matches_price(product, min_price=None, max_price=None):
    return _in_range(product.unit_price, min_price, max_price)


def matches_value(product, min_value=None, max_value=None):
    return _in_range(product.current_stock * product.unit_price, min_value, max_value)


def filter_products(products, criteria: Optional[ProductFilter] = None):
    criteria = criteria or ProductFilter()
    return [
        product
        for product in products
        if matches_search(product, criteria.search)
        and matches_site(product, criteria.site_id)
        and matches_category(product, criteria.category)
        and matches_status(product, criteria.status)
        and matches_price(product, criteria.min_price, criteria.max_price)
        and matches_value(product, criteria.min_value, criteria.max_value)
    ]


_SORT_KEYS = {
    "name": lambda product: product.name.lower(),
    "stock": lambda product: product.current_stock,
    "price": lambda product: product.unit_price,
    "category": lambda product: product.category,
}


def sort_products(products, key="name", order="asc"):
    key_func = _SORT_KEYS.get(key)
    if key_func is None:
        return list(products)
    return sorted(products, key=key_func, reverse=(order == "desc"))


__all__ = [
    "ProductFilter",
    "filter_products",
    "matches_category",
    "matches_price",
    "matches_search",
    "matches_site",
    "matches_status",
    "matches_value",
    "sort_products",
]
