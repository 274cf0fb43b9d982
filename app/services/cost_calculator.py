"""Cost and nutrient calculation for recipes.

Both calculations are pure: they read the ingredient lines they are given and
never touch the session or mutate the lines.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Callable, Iterable, Optional, Protocol

from app.errors import ComputationError
from app.services.nutrients import NUTRIENT_FIELDS

logger = logging.getLogger(__name__)

COST_QUANT = Decimal("0.0001")
NUTRIENT_QUANT = Decimal("0.01")
ZERO = Decimal("0")

# stock_id -> current unit price, or None when the material row does not exist
PriceLookup = Callable[[int], Optional[Decimal]]


class CostedLine(Protocol):
    stock_id: int
    quantity: Decimal


def to_decimal(value) -> Decimal:
    """Coerce floats/ints/strings from the database or JSON to Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def line_cost(quantity, unit_price) -> Decimal:
    return (to_decimal(quantity) * to_decimal(unit_price)).quantize(COST_QUANT, rounding=ROUND_HALF_UP)


def compute_cost(lines: Iterable[CostedLine], price_lookup: PriceLookup) -> Decimal:
    """
    Total ingredient cost at current prices.

    Each line contributes quantity * price_lookup(stock_id). A material that
    no longer exists contributes zero instead of failing the whole recipe.
    Packaging is priced at order time and is not part of this total.
    """
    total = ZERO
    try:
        for line in lines:
            price = price_lookup(line.stock_id)
            if price is None:
                logger.warning(f"Raw material {line.stock_id} not found; counting it as zero cost")
                continue
            quantity = to_decimal(line.quantity)
            price = to_decimal(price)
            if not quantity.is_finite() or not price.is_finite():
                raise ComputationError(f"Non-finite quantity or price for raw material {line.stock_id}")
            total += quantity * price
    except (InvalidOperation, ArithmeticError) as e:
        raise ComputationError(f"Cost calculation failed: {e}") from e
    return total.quantize(COST_QUANT, rounding=ROUND_HALF_UP)


def _is_active(material) -> bool:
    return material is not None and getattr(material, "deleted_at", None) is None


def compute_nutrient_profile(lines: Iterable) -> dict[str, Decimal]:
    """
    Quantity-weighted nutrient content of a recipe.

    ``lines`` are recipe ingredients exposing ``quantity`` and ``raw_material``.
    Ingredients whose material is soft-deleted or missing are ignored. For each
    field the numerator sums quantity * value over ingredients that have a value
    for that field; the denominator is the total quantity of all active
    ingredients. Zero active quantity yields an all-zero profile.
    """
    active = [line for line in lines if _is_active(line.raw_material)]
    total_quantity = sum((to_decimal(line.quantity) for line in active), ZERO)

    profile = {field: ZERO for field in NUTRIENT_FIELDS}
    if total_quantity == 0:
        return {field: ZERO.quantize(NUTRIENT_QUANT) for field in NUTRIENT_FIELDS}

    for line in active:
        quantity = to_decimal(line.quantity)
        for field in NUTRIENT_FIELDS:
            value = getattr(line.raw_material, field, None)
            if value is not None:
                profile[field] += quantity * to_decimal(value)

    return {
        field: (weighted / total_quantity).quantize(NUTRIENT_QUANT, rounding=ROUND_HALF_UP)
        for field, weighted in profile.items()
    }
