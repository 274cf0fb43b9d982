"""Recompute engine - refreshes recipe costs from current prices."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import Session, selectinload

from app.database import transaction
from app.errors import ComputationError, NotFoundError
from app.models import Recipe, active_only
from app.services.cost_calculator import compute_cost, line_cost
from app.services.price_ledger import PriceLedger
from app.services.staleness import StalenessTracker

logger = logging.getLogger(__name__)

REPRICED_REASON = "Prices changed while recomputing; recipe left stale"


@dataclass
class SkippedRecipe:
    recipe_id: int
    name: str
    reason: str


@dataclass
class RecomputeResult:
    """Summary of a recompute pass."""

    updated_count: int = 0
    skipped: list[SkippedRecipe] = field(default_factory=list)


class RecomputeEngine:
    """
    Recalculate recipe costs and clear staleness.

    A pass is atomic at the storage level: every write goes into one
    transaction, and a storage failure rolls all of it back. It is best-effort
    per recipe: a recipe whose calculation fails is skipped, stays Stale, and
    is reported in ``RecomputeResult.skipped`` while the others commit.

    Recipe versions are read before prices. A recipe repriced after that read
    fails the compare-and-set in ``StalenessTracker.mark_fresh`` and is
    skipped the same way, so its staleness survives.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.ledger = PriceLedger(db, clock=clock)
        self.tracker = StalenessTracker(db, clock=clock)

    def _versions(self, recipe_id: Optional[int] = None) -> dict[int, int]:
        """Current price versions, read straight from the database."""
        query = active_only(self.db, Recipe).with_entities(Recipe.id, Recipe.price_version)
        if recipe_id is not None:
            query = query.filter(Recipe.id == recipe_id)
        rows = query.all()
        return {recipe_id: version for recipe_id, version in rows}

    def _apply(self, recipe: Recipe, prices: dict[int, Decimal], seen_version: int) -> bool:
        """
        Compute and write one recipe's cost, refreshing its ingredient snapshots.

        Returns False when the recipe was marked stale after ``seen_version``
        was read; nothing is written for it then.
        """
        total = compute_cost(recipe.ingredients, prices.get)
        if not self.tracker.mark_fresh(recipe, total, seen_version):
            return False
        for ingredient in recipe.ingredients:
            price = prices.get(ingredient.stock_id)
            if price is None:
                continue
            ingredient.price = price
            ingredient.total = line_cost(ingredient.quantity, price)
        return True

    def recompute_all(self) -> RecomputeResult:
        """Recompute every live recipe, stale or not."""
        result = RecomputeResult()
        with transaction(self.db, "recipe price recompute"):
            recipes = (
                active_only(self.db, Recipe)
                .options(selectinload(Recipe.ingredients))
                .order_by(Recipe.id)
                .all()
            )
            versions = self._versions()
            prices = self.ledger.raw_material_prices()
            for recipe in recipes:
                try:
                    fresh = self._apply(recipe, prices, versions.get(recipe.id, recipe.price_version))
                except ComputationError as e:
                    logger.error(f"Skipping recipe {recipe.id} ({recipe.name}): {e.message}")
                    result.skipped.append(SkippedRecipe(recipe.id, recipe.name, e.message))
                    continue
                if not fresh:
                    result.skipped.append(SkippedRecipe(recipe.id, recipe.name, REPRICED_REASON))
                    continue
                result.updated_count += 1

        logger.info(
            f"Recomputed {result.updated_count} recipes, skipped {len(result.skipped)}"
        )
        return result

    def recompute_one(self, recipe_id: int) -> Decimal:
        """
        Recompute a single recipe and return its stored total cost.

        If the recipe is repriced mid-way it keeps its previous total and
        stays Stale.
        """
        recipe = active_only(self.db, Recipe).filter(Recipe.id == recipe_id).first()
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")

        with transaction(self.db, f"recompute of recipe {recipe_id}"):
            seen_version = self._versions(recipe_id).get(recipe_id, recipe.price_version)
            prices = self.ledger.raw_material_prices()
            fresh = self._apply(recipe, prices, seen_version)

        total = Decimal(recipe.total_cost)
        if fresh:
            logger.info(f"Recomputed recipe {recipe_id}: total_cost={total}")
        return total
