"""Recipe store - creation, replacement, copy and soft delete of recipes."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable

from sqlalchemy.orm import Session, selectinload

from app.database import transaction
from app.errors import NotFoundError, ValidationError
from app.models import Customer, Packaging, RawMaterial, Recipe, RecipeIngredient, RecipePackage, active_only
from app.schemas.recipe import RecipeCreate, RecipeIngredientCreate
from app.services.catalog import get_live
from app.services.cost_calculator import compute_cost, compute_nutrient_profile, line_cost
from app.services.price_ledger import PriceLedger

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


class RecipeStore:
    """Owns recipe composition: ingredient lines and package associations."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.clock = clock
        self.ledger = PriceLedger(db, clock=clock)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_recipes(self) -> list[Recipe]:
        return (
            active_only(self.db, Recipe)
            .options(selectinload(Recipe.packages), selectinload(Recipe.customer))
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .all()
        )

    def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = (
            active_only(self.db, Recipe)
            .options(
                selectinload(Recipe.ingredients).selectinload(RecipeIngredient.raw_material),
                selectinload(Recipe.packages),
                selectinload(Recipe.customer),
            )
            .filter(Recipe.id == recipe_id)
            .first()
        )
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    def nutrients(self, recipe: Recipe) -> dict[str, Decimal]:
        return compute_nutrient_profile(recipe.ingredients)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _validate(self, data: RecipeCreate) -> tuple[list[RawMaterial], list[int]]:
        """Check references before any write. Returns materials and de-duplicated package ids."""
        if not data.packages:
            raise ValidationError("Recipe needs at least one package")
        if not data.ingredients:
            raise ValidationError("Recipe needs at least one ingredient")

        get_live(self.db, Customer, data.customer_id, "Customer")

        package_ids = list(dict.fromkeys(data.packages))
        for package_id in package_ids:
            get_live(self.db, Packaging, package_id, "Package")

        materials = []
        for line in data.ingredients:
            materials.append(get_live(self.db, RawMaterial, line.stock_id, "Raw material"))
        return materials, package_ids

    def _build_lines(
        self, lines: Iterable[RecipeIngredientCreate], materials: Iterable[RawMaterial]
    ) -> list[RecipeIngredient]:
        """Ingredient rows with the materials' current prices as snapshots."""
        rows = []
        for line, material in zip(lines, materials):
            price = Decimal(material.price)
            rows.append(RecipeIngredient(
                stock_id=material.id,
                name=material.name,
                quantity=line.quantity,
                price=price,
                total=line_cost(line.quantity, price),
            ))
        return rows

    def _set_composition(self, recipe: Recipe, ingredients: list[RecipeIngredient], package_ids: list[int]) -> None:
        """Replace ingredient and package rows, recompute cost, mark Fresh."""
        # Old association rows go first so re-adding the same package id
        # does not collide with uq_recipe_packages.
        recipe.ingredients.clear()
        recipe.packages.clear()
        self.db.flush()

        recipe.ingredients.extend(ingredients)
        recipe.packages.extend(RecipePackage(package_id=pid) for pid in package_ids)
        prices = {row.stock_id: row.price for row in ingredients}
        recipe.total_cost = compute_cost(ingredients, prices.get)
        recipe.is_price_updated = True
        recipe.last_price_update = self.clock()

    def create_recipe(self, data: RecipeCreate) -> Recipe:
        materials, package_ids = self._validate(data)
        with transaction(self.db, "recipe creation"):
            recipe = Recipe(
                name=data.name.strip(),
                customer_id=data.customer_id,
                density=data.density,
            )
            self.db.add(recipe)
            self._set_composition(recipe, self._build_lines(data.ingredients, materials), package_ids)

        logger.info(f"Created recipe {recipe.id} ({recipe.name}) total_cost={recipe.total_cost}")
        return recipe

    def update_recipe(self, recipe_id: int, data: RecipeCreate) -> Recipe:
        recipe = get_live(self.db, Recipe, recipe_id, "Recipe")
        materials, package_ids = self._validate(data)
        with transaction(self.db, f"update of recipe {recipe_id}"):
            recipe.name = data.name.strip()
            recipe.customer_id = data.customer_id
            recipe.density = data.density
            recipe.updated_at = self.clock()
            self._set_composition(recipe, self._build_lines(data.ingredients, materials), package_ids)

        logger.info(f"Updated recipe {recipe.id} total_cost={recipe.total_cost}")
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        """Soft delete the recipe and hard delete its ingredient and package rows."""
        recipe = get_live(self.db, Recipe, recipe_id, "Recipe")
        with transaction(self.db, f"deletion of recipe {recipe_id}"):
            recipe.soft_delete(self.clock())
            recipe.ingredients.clear()
            recipe.packages.clear()
        logger.info(f"Deleted recipe {recipe_id}")

    def copy_recipe(self, recipe_id: int) -> Recipe:
        """
        Duplicate a recipe with its ingredients and packages.

        Ingredient snapshots are copied as they are; the copy's total cost is
        computed from current prices, so it starts Fresh.
        """
        source = self.get_recipe(recipe_id)
        with transaction(self.db, f"copy of recipe {recipe_id}"):
            copy = Recipe(
                name=f"{source.name}{COPY_SUFFIX}",
                customer_id=source.customer_id,
                density=source.density,
            )
            copy.ingredients = [
                RecipeIngredient(
                    stock_id=line.stock_id,
                    name=line.name,
                    quantity=line.quantity,
                    price=line.price,
                    total=line.total,
                )
                for line in source.ingredients
            ]
            copy.packages = [RecipePackage(package_id=pid) for pid in source.package_ids]
            copy.total_cost = compute_cost(copy.ingredients, self.ledger.lookup)
            copy.is_price_updated = True
            copy.last_price_update = self.clock()
            self.db.add(copy)

        logger.info(f"Copied recipe {recipe_id} to {copy.id}")
        return copy
