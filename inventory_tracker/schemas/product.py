from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    min_stock: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    consumption_unit: Optional[str] = None
    consumption_rate: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[str] = Field(default=None, min_length=1)
    min_stock: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    consumption_unit: Optional[str] = None
    consumption_rate: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class ProductRead(ProductBase):
    id: str

    model_config = ConfigDict(from_attributes=True)
