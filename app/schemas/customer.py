"""Pydantic schemas for Customer."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.customer import Customer


class CustomerBase(BaseModel):
    """Base customer fields."""

    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field(..., description=f"One of: {', '.join(Customer.TYPES)}")
    email: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    """Full replacement of a customer's editable fields."""

    pass


class CustomerResponse(CustomerBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    balance: Decimal
    created_at: datetime


class CustomerList(BaseModel):
    customers: list[CustomerResponse]
    count: int


class CustomerBulkRequest(BaseModel):
    customers: list[CustomerCreate] = Field(..., min_length=1)


class CustomerBulkResult(BaseModel):
    message: str
    added: int
