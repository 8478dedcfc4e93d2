from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from inventory_tracker.schemas.movement import EntryRead, ExitRead


class StockLevelRead(BaseModel):
    product_id: str
    name: str
    unit: str
    min_stock: int
    price: float
    total_entries: int
    total_exits: int
    balance: int
    low_stock: bool
    status: str

    model_config = ConfigDict(from_attributes=True)


class StockListResponse(BaseModel):
    count: int
    total_count: int
    low_stock_count: int
    results: List[StockLevelRead] = Field(default_factory=list)


class LowStockNotification(BaseModel):
    product_id: str
    name: str
    balance: int
    min_stock: int
    last_exit_date: Optional[date] = None


class LowStockResponse(BaseModel):
    count: int
    results: List[LowStockNotification] = Field(default_factory=list)


class ProductHistory(BaseModel):
    product_id: str
    name: str
    balance: int
    entries: List[EntryRead] = Field(default_factory=list)
    exits: List[ExitRead] = Field(default_factory=list)


class ConsumptionRead(BaseModel):
    product_id: str
    name: str
    consumption_unit: str
    consumption_rate: float
    planned_consumption: float
    actual_consumption: int
    balance: float
    consumption_percentage: float
    progress_width: float
    level: str


class ConsumptionResponse(BaseModel):
    monthly_forecast: int
    window_days: int
    since: date
    results: List[ConsumptionRead] = Field(default_factory=list)


class ForecastUpdate(BaseModel):
    monthly_forecast: int = Field(ge=0)


class ReportProductLine(BaseModel):
    product_id: str
    name: str
    balance: int
    min_stock: int
    total_exits: int


class ReportSummary(BaseModel):
    total_stock_value: float
    low_stock_count: int
    total_items_in_stock: int
    product_diversity: int
    low_stock_products: List[ReportProductLine] = Field(default_factory=list)
    most_moved_products: List[ReportProductLine] = Field(default_factory=list)


class UserProfileRead(BaseModel):
    id: str
    email: str
    is_admin: bool
    monthly_forecast: int

    model_config = ConfigDict(from_attributes=True)
