from collections import defaultdict

from smartstock.core.dates import month_key
from smartstock.schemas.report import DashboardSummary, MonthlyAggregate
from smartstock.services.replenishment_service import count_alerts


def stock_value(products):
    return sum(product.current_stock * product.unit_price for product in products)


def value_by_currency(products):
    totals = defaultdict(float)
    for product in products:
        totals[product.currency or "?"] += product.current_stock * product.unit_price
    return dict(totals)


def value_by_category(products):
    totals = defaultdict(float)
    for product in products:
        totals[product.category or "Autre"] += product.current_stock * product.unit_price
    return dict(sorted(totals.items()))


def dashboard_summary(store) -> DashboardSummary:
    products = store.products
    furniture = store.furniture
    return DashboardSummary(
        article_count=len(products),
        alert_count=count_alerts(products),
        stock_value=stock_value(products),
        value_by_currency=value_by_currency(products),
        site_count=len(store.sites),
        furniture_count=sum(item.current_count for item in furniture),
        furniture_value=sum(item.current_count * item.purchase_price for item in furniture),
    )


def monthly_aggregates(logs) -> list[MonthlyAggregate]:
    months = {}
    for log in logs:
        key = month_key(log.date)
        if key is None:
            continue
        bucket = months.setdefault(key, {"inflow": 0, "outflow": 0, "movements": 0})
        if log.change_amount > 0:
            bucket["inflow"] += log.change_amount
        elif log.change_amount < 0:
            bucket["outflow"] += -log.change_amount
        bucket["movements"] += 1
    return [MonthlyAggregate(month=key, **months[key]) for key in sorted(months)]


__all__ = [
    "dashboard_summary",
    "monthly_aggregates",
    "stock_value",
    "value_by_category",
    "value_by_currency",
]
