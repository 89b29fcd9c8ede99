from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from smartstock.schemas.base import CamelModel
from smartstock.schemas.inventory import Product


class ReplenishmentRow(CamelModel):
    product: Product
    needed: int
    order_value: float


class DashboardSummary(CamelModel):
    article_count: int
    alert_count: int
    stock_value: float
    value_by_currency: Dict[str, float] = Field(default_factory=dict)
    site_count: int
    furniture_count: int
    furniture_value: float


class MonthlyAggregate(CamelModel):
    month: str
    inflow: int = 0
    outflow: int = 0
    movements: int = 0


class ChartPoint(CamelModel):
    name: str
    value: float = 0.0


class AIReport(CamelModel):
    summary: str = ""
    alerts: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    chart_data: List[ChartPoint] = Field(default_factory=list)


class ArchiveRequest(CamelModel):
    before: datetime


class SpreadsheetIngestRequest(CamelModel):
    path: str
    site_id: Optional[str] = None
    dry_run: bool = False
    responsible: Optional[str] = None


class AIImportRequest(CamelModel):
    payload: Any
    site_id: Optional[str] = None
    responsible: Optional[str] = None


__all__ = [
    "AIImportRequest",
    "AIReport",
    "ArchiveRequest",
    "ChartPoint",
    "DashboardSummary",
    "MonthlyAggregate",
    "ReplenishmentRow",
    "SpreadsheetIngestRequest",
]
