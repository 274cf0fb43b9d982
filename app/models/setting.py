"""Setting model (single row) and PriceHistory model."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, TIMESTAMP, Numeric, Index

from . import Base


class Setting(Base):
    """Company-wide pricing settings. Only the row with id=1 is used."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    usd_exchange_rate = Column(Numeric(12, 4), nullable=False, default=Decimal("36.0"))
    list_a_margin = Column(Numeric(6, 2), nullable=False, default=Decimal("20.0"))  # percent
    list_b_margin = Column(Numeric(6, 2), nullable=False, default=Decimal("35.0"))
    list_c_margin = Column(Numeric(6, 2), nullable=False, default=Decimal("50.0"))
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Setting(usd_exchange_rate={self.usd_exchange_rate})>"


class PriceHistory(Base):
    """Track price changes of raw materials and packaging."""

    __tablename__ = "price_history"
    __table_args__ = (
        Index("idx_price_history_lookup", "item_kind", "item_id", "changed_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_kind = Column(String(10), nullable=False)  # 'stock', 'package'
    item_id = Column(Integer, nullable=False)
    old_price = Column(Numeric(14, 4), nullable=False)
    new_price = Column(Numeric(14, 4), nullable=False)
    changed_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<PriceHistory(item_kind='{self.item_kind}', item_id={self.item_id}, new_price={self.new_price})>"
