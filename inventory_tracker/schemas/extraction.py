import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class InvoiceItem(BaseModel):
    name: str
    quantity: float


class InvoiceEntries(BaseModel):
    supplier: str = ""
    date: str = ""
    items: List[InvoiceItem]


class InvoiceProductName(BaseModel):
    name: str


class InvoiceProducts(BaseModel):
    items: List[InvoiceProductName]


class EntrySuggestion(BaseModel):
    key: str
    original_name: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    score: float = 0.0
    quantity: int
    quantity_rounded: bool = False


class EntryImportPreview(BaseModel):
    supplier: str
    date: datetime.date
    items: List[EntrySuggestion] = Field(default_factory=list)
    unmatched_count: int = 0


class ProductSuggestion(BaseModel):
    key: str
    name: str
    unit: str = ""
    min_stock: int = 10
    price: float = 0.0


class ProductImportPreview(BaseModel):
    items: List[ProductSuggestion] = Field(default_factory=list)


class EntryImportLine(BaseModel):
    product_id: Optional[str] = None
    # whole units are enforced by confirm_entry_import
    quantity: float = 0


class EntryImportConfirm(BaseModel):
    supplier: str = Field(min_length=1)
    date: datetime.date
    items: List[EntryImportLine]


class ProductImportLine(BaseModel):
    name: str = ""
    unit: str = ""
    min_stock: int = 0
    price: float = 0.0
    consumption_unit: Optional[str] = None
    consumption_rate: Optional[float] = None


class ProductImportConfirm(BaseModel):
    items: List[ProductImportLine]
