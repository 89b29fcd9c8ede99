from typing import Optional

from pydantic import ConfigDict, Field

from smartstock.schemas.base import CamelModel


class Site(CamelModel):
    id: str
    name: str


class Product(CamelModel):
    id: str
    name: str
    category: str = ""
    current_stock: int = 0
    min_stock: int = 0
    monthly_need: int = 0
    unit: str = ""
    unit_price: float = 0.0
    currency: str = "$"
    supplier: Optional[str] = None
    site_id: str = ""
    last_inventory_date: str = ""

    @property
    def stock_value(self):
        return self.current_stock * self.unit_price


class Furniture(CamelModel):
    id: str
    code: str
    name: str = ""
    category: str = ""
    current_count: int = 0
    previous_count: int = 0
    condition: str = "Good"
    assigned_to: str = ""
    purchase_price: float = 0.0
    purchase_date: Optional[str] = None
    currency: str = "$"
    site_id: str = ""
    last_inventory_date: str = ""


class InventoryLog(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    type: str
    product_id: str
    product_name: str = ""
    change_amount: int = 0
    final_stock: int = 0
    responsible: str = ""
    reason: Optional[str] = None
    from_site_id: Optional[str] = None
    to_site_id: Optional[str] = None


class ProductCreate(CamelModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    current_stock: Optional[int] = None
    min_stock: Optional[int] = None
    monthly_need: Optional[int] = None
    unit: Optional[str] = None
    unit_price: Optional[float] = None
    currency: Optional[str] = None
    supplier: Optional[str] = None
    site_id: Optional[str] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    current_stock: Optional[int] = None
    min_stock: Optional[int] = None
    monthly_need: Optional[int] = None
    unit: Optional[str] = None
    unit_price: Optional[float] = None
    currency: Optional[str] = None
    supplier: Optional[str] = None
    site_id: Optional[str] = None


class FurnitureCreate(CamelModel):
    code: str = Field(min_length=1)
    name: Optional[str] = None
    category: Optional[str] = None
    current_count: Optional[int] = None
    condition: Optional[str] = None
    assigned_to: Optional[str] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[str] = None
    currency: Optional[str] = None
    site_id: Optional[str] = None


class FurnitureUpdate(CamelModel):
    code: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    assigned_to: Optional[str] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[str] = None
    currency: Optional[str] = None
    site_id: Optional[str] = None


class StockChangeRequest(CamelModel):
    delta: int
    type: str = "adjustment"
    responsible: Optional[str] = None
    reason: Optional[str] = None


class StockMovementRequest(CamelModel):
    quantity: int
    movement: str = Field(pattern="^(entry|exit)$")
    site_id: Optional[str] = None
    responsible: Optional[str] = None


class TransferRequest(CamelModel):
    quantity: int
    to_site_id: str
    responsible: Optional[str] = None
    reason: Optional[str] = None


class FurnitureCountRequest(CamelModel):
    counted: int
    responsible: Optional[str] = None
    reason: Optional[str] = None


class RefillRequest(CamelModel):
    responsible: Optional[str] = None


class SiteCreate(CamelModel):
    name: str = Field(min_length=1)


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1)


__all__ = [
    "CategoryCreate",
    "Furniture",
    "FurnitureCountRequest",
    "FurnitureCreate",
    "FurnitureUpdate",
    "InventoryLog",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "RefillRequest",
    "Site",
    "SiteCreate",
    "StockChangeRequest",
    "StockMovementRequest",
    "TransferRequest",
]
