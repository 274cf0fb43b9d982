"""Packaging model."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, TIMESTAMP, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from . import Base
from .mixins import SoftDeleteMixin


class Packaging(SoftDeleteMixin, Base):
    """Container a product can be filled into (1 L bottle, 25 Kg sack, ...)."""

    __tablename__ = "packages"
    __table_args__ = (
        CheckConstraint("unit IN ('L', 'Kg')", name="ck_packages_unit"),
    )

    UNIT_LITER = "L"
    UNIT_KILOGRAM = "Kg"
    UNITS = (UNIT_LITER, UNIT_KILOGRAM)

    id = Column(Integer, primary_key=True, autoincrement=True)
    size = Column(Numeric(10, 3), nullable=False)
    unit = Column(String(5), nullable=False)
    price = Column(Numeric(14, 4), nullable=False, default=Decimal("0"))
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    recipe_packages = relationship("RecipePackage", back_populates="package")

    def __repr__(self):
        return f"<Packaging(size={self.size}, unit='{self.unit}', price={self.price})>"
