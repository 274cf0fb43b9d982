"""Staleness tracking for recipe costs.

A recipe is Fresh (``is_price_updated`` True) when its stored ``total_cost``
reflects current prices, and Stale otherwise. Price changes mark recipes
Stale; only a recompute marks them Fresh again.

Every stale marking also bumps ``Recipe.price_version``. A recompute reads the
version before it reads prices and clears staleness with a compare-and-set on
that version, so a price change committed in between keeps the recipe Stale.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.models import Recipe, RecipeIngredient, RecipePackage, active_only

logger = logging.getLogger(__name__)


class StalenessTracker:
    """Set-based Fresh/Stale bookkeeping. Never commits; callers own the transaction."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.clock = clock

    def mark_stale(
        self,
        raw_material_ids: Iterable[int] = (),
        package_ids: Iterable[int] = (),
    ) -> int:
        """
        Mark every live recipe that uses any of the given materials or packages Stale.

        Returns the number of recipes matched (including ones already Stale).
        """
        raw_material_ids = sorted(set(raw_material_ids))
        package_ids = sorted(set(package_ids))
        if not raw_material_ids and not package_ids:
            return 0

        conditions = []
        if raw_material_ids:
            conditions.append(
                Recipe.id.in_(
                    select(RecipeIngredient.recipe_id)
                    .where(RecipeIngredient.stock_id.in_(raw_material_ids))
                )
            )
        if package_ids:
            conditions.append(
                Recipe.id.in_(
                    select(RecipePackage.recipe_id)
                    .where(RecipePackage.package_id.in_(package_ids))
                )
            )

        result = self.db.execute(
            update(Recipe)
            .where(Recipe.deleted_at.is_(None), or_(*conditions))
            .values(is_price_updated=False, price_version=Recipe.price_version + 1)
            .execution_options(synchronize_session="fetch")
        )
        count = result.rowcount or 0
        logger.info(
            f"Marked {count} recipes stale "
            f"(raw materials={raw_material_ids}, packages={package_ids})"
        )
        return count

    def mark_fresh(self, recipe: Recipe, total_cost: Decimal, seen_version: int) -> bool:
        """
        Store ``total_cost`` and mark the recipe Fresh, unless it was marked
        stale again after ``seen_version`` was read.

        Returns False, leaving the row untouched, when the version moved on.
        """
        result = self.db.execute(
            update(Recipe)
            .where(Recipe.id == recipe.id, Recipe.price_version == seen_version)
            .values(total_cost=total_cost, is_price_updated=True, last_price_update=self.clock())
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount != 1:
            logger.warning(
                f"Recipe {recipe.id} was repriced during recompute; leaving it stale"
            )
            return False
        return True

    def stale_recipes(self) -> list[Recipe]:
        """Live recipes whose cost does not reflect current prices (flag False or NULL)."""
        return (
            active_only(self.db, Recipe)
            .filter(or_(Recipe.is_price_updated == False, Recipe.is_price_updated.is_(None)))  # noqa: E712
            .order_by(Recipe.id)
            .all()
        )
