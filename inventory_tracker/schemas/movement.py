import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryBase(BaseModel):
    date: datetime.date
    product_id: str = Field(min_length=1)
    supplier: str = Field(min_length=1)
    quantity: int = Field(gt=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class EntryCreate(EntryBase):
    pass


class EntryUpdate(BaseModel):
    date: Optional[datetime.date] = None
    product_id: Optional[str] = Field(default=None, min_length=1)
    supplier: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class EntryRead(EntryBase):
    id: str

    model_config = ConfigDict(from_attributes=True)


class ExitBase(BaseModel):
    date: datetime.date
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class ExitCreate(ExitBase):
    pass


class ExitUpdate(BaseModel):
    date: Optional[datetime.date] = None
    product_id: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class ExitRead(ExitBase):
    id: str

    model_config = ConfigDict(from_attributes=True)
