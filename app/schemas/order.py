"""Pydantic schemas for Order."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.order import Order


class OrderCreate(BaseModel):
    customer_id: int
    recipe_id: int
    quantity: Decimal = Field(..., gt=0)
    charge_count: Decimal = Field(Decimal("0"), ge=0)
    total: Decimal = Field(Decimal("0"), ge=0)
    status: str = Field(Order.STATUS_PENDING, description="New orders always start as pending")


class OrderStatusUpdate(BaseModel):
    status: str


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    recipe_id: int
    quantity: Decimal
    charge_count: Decimal
    total: Decimal
    status: str
    created_at: datetime
    customer_name: Optional[str] = None
    recipe_name: Optional[str] = None


class OrderList(BaseModel):
    orders: list[OrderResponse]
    count: int
