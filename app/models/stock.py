"""RawMaterial model (the ``stock`` table)."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, TIMESTAMP, Numeric, Index
from sqlalchemy.orm import relationship

from . import Base
from .mixins import SoftDeleteMixin


class RawMaterial(SoftDeleteMixin, Base):
    """Raw material held in stock, with its current unit price and nutrient content."""

    __tablename__ = "stock"
    __table_args__ = (
        Index("idx_stock_name", "name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)  # Unique case-insensitively among live rows
    code = Column(String(50))
    quantity = Column(Numeric(14, 3), nullable=False, default=Decimal("0"))
    min_quantity = Column(Numeric(14, 3), nullable=False, default=Decimal("0"))
    unit = Column(String(10), nullable=False, default="kg")
    category = Column(String(50), nullable=False, default="raw_material")
    price = Column(Numeric(14, 4), nullable=False, default=Decimal("0"))

    # Nutrient content (percent, pH for ph_content); NULL = not measured
    n_content = Column(Numeric(8, 3))
    p_content = Column(Numeric(8, 3))
    k_content = Column(Numeric(8, 3))
    mg_content = Column(Numeric(8, 3))
    ca_content = Column(Numeric(8, 3))
    s_content = Column(Numeric(8, 3))
    fe_content = Column(Numeric(8, 3))
    zn_content = Column(Numeric(8, 3))
    b_content = Column(Numeric(8, 3))
    mn_content = Column(Numeric(8, 3))
    cu_content = Column(Numeric(8, 3))
    mo_content = Column(Numeric(8, 3))
    na_content = Column(Numeric(8, 3))
    si_content = Column(Numeric(8, 3))
    h_content = Column(Numeric(8, 3))
    c_content = Column(Numeric(8, 3))
    o_content = Column(Numeric(8, 3))
    cl_content = Column(Numeric(8, 3))
    al_content = Column(Numeric(8, 3))
    organic_content = Column(Numeric(8, 3))
    alginic_acid_content = Column(Numeric(8, 3))
    mgo_content = Column(Numeric(8, 3))
    protein_content = Column(Numeric(8, 3))
    moisture_content = Column(Numeric(8, 3))
    ash_content = Column(Numeric(8, 3))
    ph_content = Column(Numeric(8, 3))

    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    recipe_ingredients = relationship("RecipeIngredient", back_populates="raw_material")

    def __repr__(self):
        return f"<RawMaterial(name='{self.name}', price={self.price})>"
