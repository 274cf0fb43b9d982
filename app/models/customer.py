"""Customer (cari) model."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, Numeric
from sqlalchemy.orm import relationship

from . import Base
from .mixins import SoftDeleteMixin


class Customer(SoftDeleteMixin, Base):
    """Trading partner account: customers, suppliers, contract manufacturers."""

    __tablename__ = "customers"

    # Type constants
    TYPE_CUSTOMER = "customer"
    TYPE_SUPPLIER = "supplier"
    TYPE_CONTRACT_MANUFACTURER = "contract_manufacturer"
    TYPE_OTHER = "other"
    TYPE_BIOPLANT = "bioplant"
    TYPES = (
        TYPE_CUSTOMER,
        TYPE_SUPPLIER,
        TYPE_CONTRACT_MANUFACTURER,
        TYPE_OTHER,
        TYPE_BIOPLANT,
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)  # Unique case-insensitively among live rows
    type = Column(String(30), nullable=False)
    email = Column(String(200))
    phone = Column(String(50))
    address = Column(Text)
    balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    # Relationships
    recipes = relationship("Recipe", back_populates="customer")
    orders = relationship("Order", back_populates="customer")

    def __repr__(self):
        return f"<Customer(name='{self.name}', type='{self.type}')>"
