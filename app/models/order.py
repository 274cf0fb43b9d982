"""Order model."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column, String, Integer, TIMESTAMP,
    ForeignKey, Numeric, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from . import Base
from .mixins import SoftDeleteMixin


class Order(SoftDeleteMixin, Base):
    """Customer order for a quantity of a recipe."""

    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_status", "status"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="ck_orders_status"
        ),
    )

    # Status constants
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_CANCELLED = "cancelled"
    STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED)

    # Allowed forward moves; confirmed and cancelled are final
    TRANSITIONS = {
        STATUS_PENDING: (STATUS_CONFIRMED, STATUS_CANCELLED),
        STATUS_CONFIRMED: (),
        STATUS_CANCELLED: (),
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    charge_count = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    total = Column(Numeric(16, 2), nullable=False, default=Decimal("0"))
    status = Column(String(20), nullable=False, default=STATUS_PENDING)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    recipe = relationship("Recipe", back_populates="orders")

    def can_transition_to(self, status: str) -> bool:
        return status in self.TRANSITIONS.get(self.status, ())

    def __repr__(self):
        return f"<Order(status='{self.status}', recipe_id={self.recipe_id})>"
