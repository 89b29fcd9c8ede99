from smartstock.schemas.inventory import Furniture, InventoryLog, Product, Site
from smartstock.schemas.report import AIReport, DashboardSummary, MonthlyAggregate

__all__ = [
    "AIReport",
    "DashboardSummary",
    "Furniture",
    "InventoryLog",
    "MonthlyAggregate",
    "Product",
    "Site",
]
