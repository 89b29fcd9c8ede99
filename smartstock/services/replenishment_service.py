from smartstock.schemas.report import ReplenishmentRow


def compute_replenishment_need(product) -> int:
    """Shortfall needed to bring stock back to threshold plus one month of use."""
    return (product.min_stock + product.monthly_need) - product.current_stock


def is_in_alert(product) -> bool:
    return product.current_stock <= product.min_stock


def products_in_alert(products):
    return [product for product in products if is_in_alert(product)]


def count_alerts(products) -> int:
    return sum(1 for product in products if is_in_alert(product))


def replenishment_list(products) -> list[ReplenishmentRow]:
    rows = []
    for product in products_in_alert(products):
        needed = compute_replenishment_need(product)
        rows.append(
            ReplenishmentRow(
                product=product,
                needed=needed,
                order_value=max(needed, 0) * product.unit_price,
            )
        )
    return rows


__all__ = [
    "compute_replenishment_need",
    "count_alerts",
    "is_in_alert",
    "products_in_alert",
    "replenishment_list",
]
