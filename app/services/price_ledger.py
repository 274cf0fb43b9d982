"""Price ledger for raw materials and packaging.

Every price change goes through the ledger: the new price, its history row
and the staleness marking of dependent recipes are written in one
transaction. ``set_prices`` owns that transaction; ``apply_prices`` joins one
the caller already holds.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Mapping, Optional

from sqlalchemy.orm import Session

from app.database import transaction
from app.errors import NotFoundError, ValidationError
from app.models import Packaging, PriceHistory, RawMaterial, active_only, include_deleted
from app.services.staleness import StalenessTracker

logger = logging.getLogger(__name__)


class PriceKind(str, Enum):
    """Kinds of priced items."""
    RAW_MATERIAL = "stock"
    PACKAGING = "package"


MODELS = {
    PriceKind.RAW_MATERIAL: RawMaterial,
    PriceKind.PACKAGING: Packaging,
}

LABELS = {
    PriceKind.RAW_MATERIAL: "Raw material",
    PriceKind.PACKAGING: "Package",
}


@dataclass
class PriceUpdateResult:
    """Outcome of a price update."""

    previous: dict[int, Decimal] = field(default_factory=dict)
    changed_ids: list[int] = field(default_factory=list)
    stale_count: int = 0


def validate_price(value) -> Decimal:
    """Parse a price, rejecting negative, NaN, infinite and non-numeric input."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Price must be a number")
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Price must be a number, got {value!r}") from e
    if not price.is_finite():
        raise ValidationError("Price must be a finite number")
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return price


class PriceLedger:
    """Current prices of raw materials and packaging."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.clock = clock
        self.tracker = StalenessTracker(db, clock=clock)

    def _get_live(self, kind: PriceKind, item_id: int):
        model = MODELS[kind]
        item = active_only(self.db, model).filter(model.id == item_id).first()
        if item is None:
            raise NotFoundError(f"{LABELS[kind]} {item_id} not found")
        return item

    def get_price(self, kind: PriceKind, item_id: int) -> Decimal:
        return Decimal(self._get_live(kind, item_id).price)

    def set_price(self, kind: PriceKind, item_id: int, new_price) -> Decimal:
        """Set one price and return the previous one."""
        result = self.set_prices(kind, {item_id: new_price})
        return result.previous[item_id]

    def set_prices(self, kind: PriceKind, prices: Mapping[int, object]) -> PriceUpdateResult:
        """
        Set several prices of one kind in a single transaction.

        All ids and prices are validated before anything is written. Items
        whose price does not actually change are left alone: no history row
        and no staleness marking.
        """
        with transaction(self.db, f"{kind.value} price update"):
            return self.apply_prices(kind, prices)

    def apply_prices(self, kind: PriceKind, prices: Mapping[int, object]) -> PriceUpdateResult:
        """Validate and write prices without committing; the caller owns the transaction."""
        if not prices:
            raise ValidationError("No prices given")

        parsed = {item_id: validate_price(value) for item_id, value in prices.items()}
        items = {item_id: self._get_live(kind, item_id) for item_id in parsed}

        result = PriceUpdateResult()
        now = self.clock()
        for item_id, new_price in parsed.items():
            item = items[item_id]
            old_price = Decimal(item.price)
            result.previous[item_id] = old_price
            if old_price == new_price:
                continue
            item.price = new_price
            item.updated_at = now
            self.db.add(PriceHistory(
                item_kind=kind.value,
                item_id=item_id,
                old_price=old_price,
                new_price=new_price,
                changed_at=now,
            ))
            result.changed_ids.append(item_id)

        if result.changed_ids:
            self.db.flush()
            if kind is PriceKind.RAW_MATERIAL:
                result.stale_count = self.tracker.mark_stale(raw_material_ids=result.changed_ids)
            else:
                result.stale_count = self.tracker.mark_stale(package_ids=result.changed_ids)

        logger.info(
            f"Updated {len(result.changed_ids)} {kind.value} prices, "
            f"{result.stale_count} recipes marked stale"
        )
        return result

    def lookup(self, stock_id: int) -> Optional[Decimal]:
        """
        Price lookup for cost calculation.

        Soft-deleted materials still return their last stored price; the
        ledger refuses updates to deleted rows, so that price is frozen.
        Returns None only when the row does not exist at all.
        """
        material = include_deleted(self.db, RawMaterial).filter(RawMaterial.id == stock_id).first()
        if material is None:
            return None
        return Decimal(material.price)

    def raw_material_prices(self) -> dict[int, Decimal]:
        """All raw material prices (deleted rows included) in one query."""
        rows = include_deleted(self.db, RawMaterial).with_entities(RawMaterial.id, RawMaterial.price).all()
        return {stock_id: Decimal(price) for stock_id, price in rows}

    def history(self, kind: PriceKind, item_id: int) -> list[PriceHistory]:
        model = MODELS[kind]
        if include_deleted(self.db, model).filter(model.id == item_id).first() is None:
            raise NotFoundError(f"{LABELS[kind]} {item_id} not found")
        return (
            self.db.query(PriceHistory)
            .filter(PriceHistory.item_kind == kind.value, PriceHistory.item_id == item_id)
            .order_by(PriceHistory.changed_at.desc(), PriceHistory.id.desc())
            .all()
        )
