"""Pydantic schemas for raw materials (stock) and price updates."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NutrientFields(BaseModel):
    """Nutrient content of a raw material. None = not measured."""

    n_content: Optional[Decimal] = None
    p_content: Optional[Decimal] = None
    k_content: Optional[Decimal] = None
    mg_content: Optional[Decimal] = None
    ca_content: Optional[Decimal] = None
    s_content: Optional[Decimal] = None
    fe_content: Optional[Decimal] = None
    zn_content: Optional[Decimal] = None
    b_content: Optional[Decimal] = None
    mn_content: Optional[Decimal] = None
    cu_content: Optional[Decimal] = None
    mo_content: Optional[Decimal] = None
    na_content: Optional[Decimal] = None
    si_content: Optional[Decimal] = None
    h_content: Optional[Decimal] = None
    c_content: Optional[Decimal] = None
    o_content: Optional[Decimal] = None
    cl_content: Optional[Decimal] = None
    al_content: Optional[Decimal] = None
    organic_content: Optional[Decimal] = None
    alginic_acid_content: Optional[Decimal] = None
    mgo_content: Optional[Decimal] = None
    protein_content: Optional[Decimal] = None
    moisture_content: Optional[Decimal] = None
    ash_content: Optional[Decimal] = None
    ph_content: Optional[Decimal] = None


class RawMaterialBase(BaseModel):
    """Base raw material fields."""

    name: str = Field(..., min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    quantity: Decimal = Field(Decimal("0"), ge=0)
    min_quantity: Decimal = Field(Decimal("0"), ge=0, description="Critical stock level")
    unit: str = Field("kg", max_length=10)
    category: str = Field("raw_material", max_length=50)


class RawMaterialCreate(RawMaterialBase, NutrientFields):
    """Schema for creating a raw material."""

    price: Decimal = Field(Decimal("0"), ge=0)


class RawMaterialUpdate(NutrientFields):
    """Schema for updating a raw material. All fields optional.

    A changed price goes through the price ledger and marks dependent
    recipes stale.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    code: Optional[str] = Field(None, max_length=50)
    quantity: Optional[Decimal] = Field(None, ge=0)
    min_quantity: Optional[Decimal] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=10)
    category: Optional[str] = Field(None, max_length=50)
    price: Optional[Decimal] = None


class RawMaterialResponse(RawMaterialBase, NutrientFields):
    """Schema for raw material response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    price: Decimal
    created_at: datetime
    updated_at: datetime


class RawMaterialList(BaseModel):
    stock: list[RawMaterialResponse]
    count: int


class StockCount(BaseModel):
    total: int


# ============================================================================
# Price Schemas (shared with packaging)
# ============================================================================


class PriceUpdateRequest(BaseModel):
    new_price: Decimal


class PriceUpdateResponse(BaseModel):
    """Result of a single price change."""

    item_id: int
    previous_price: Decimal
    new_price: Decimal
    stale_recipes: int = Field(..., description="Recipes marked as needing a price refresh")


class PriceHistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_kind: str
    item_id: int
    old_price: Decimal
    new_price: Decimal
    changed_at: datetime
