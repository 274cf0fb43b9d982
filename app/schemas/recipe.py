"""Pydantic schemas for Recipe and related models."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Recipe Ingredient Schemas
# ============================================================================


class RecipeIngredientCreate(BaseModel):
    """Ingredient line as submitted. Prices are taken from stock, not the client."""

    stock_id: int
    quantity: Decimal = Field(..., gt=0, description="Amount in the material's unit")


class RecipeIngredientResponse(BaseModel):
    """Ingredient line with its price snapshot and the material's current price."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_id: int
    name: str
    quantity: Decimal
    price: Decimal = Field(..., description="Unit price captured when the line was written")
    total: Decimal
    stock_code: Optional[str] = None
    unit: Optional[str] = None
    current_price: Optional[Decimal] = None


# ============================================================================
# Recipe Schemas
# ============================================================================


class RecipeBase(BaseModel):
    """Base recipe fields."""

    name: str = Field(..., min_length=1, max_length=200)
    customer_id: int
    density: Optional[str] = Field(None, max_length=50, description="e.g. '1.25 g/ml'")


class RecipeCreate(RecipeBase):
    """Schema for creating a recipe. Needs at least one package and one ingredient."""

    packages: list[int] = Field(default_factory=list, description="Package ids")
    ingredients: list[RecipeIngredientCreate] = Field(default_factory=list)


class RecipeUpdate(RecipeCreate):
    """Full replacement of a recipe's fields, packages and ingredients."""

    pass


class RecipeResponse(RecipeBase):
    """Recipe as listed."""

    id: int
    customer_name: Optional[str] = None
    total_cost: Decimal
    is_price_updated: Optional[bool] = None
    last_price_update: Optional[datetime] = None
    packages: list[int] = []
    created_at: datetime
    updated_at: datetime


class RecipeWithDetails(RecipeResponse):
    """Recipe with ingredient lines and nutrient profile."""

    ingredients: list[RecipeIngredientResponse] = []
    nutrients: dict[str, Decimal] = {}


class RecipeList(BaseModel):
    """Schema for list of recipes."""

    recipes: list[RecipeResponse]
    count: int


# ============================================================================
# Recompute Schemas
# ============================================================================


class SkippedRecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recipe_id: int
    name: str
    reason: str


class RecomputeAllResponse(BaseModel):
    """Result of the bulk price refresh."""

    message: str
    updated_count: int
    skipped: list[SkippedRecipeResponse] = []


class RecomputeOneResponse(BaseModel):
    recipe_id: int
    total_cost: Decimal
    is_price_updated: bool
    last_price_update: Optional[datetime] = None
