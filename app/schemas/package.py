"""Pydantic schemas for Packaging."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PackagingBase(BaseModel):
    """Base packaging fields."""

    size: Decimal = Field(..., gt=0)
    unit: str = Field(..., description="'L' or 'Kg'")
    price: Decimal = Field(..., ge=0)


class PackagingCreate(PackagingBase):
    pass


class PackagingUpdate(PackagingBase):
    """Full replacement. A changed price marks dependent recipes stale."""

    pass


class PackagingResponse(PackagingBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class PackagingList(BaseModel):
    packages: list[PackagingResponse]
    count: int


class PackagePriceItem(BaseModel):
    package_id: int
    price: Decimal


class PackagePriceBatchRequest(BaseModel):
    prices: list[PackagePriceItem] = Field(..., min_length=1)


class PackagePriceBatchResponse(BaseModel):
    message: str
    updated: list[int]
    stale_recipes: int
