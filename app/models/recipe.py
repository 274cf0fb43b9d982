"""Recipe, RecipeIngredient, and RecipePackage models."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column, String, Integer, Boolean, TIMESTAMP,
    ForeignKey, Numeric, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship

from . import Base
from .mixins import SoftDeleteMixin


class Recipe(SoftDeleteMixin, Base):
    """Fertilizer formulation owned by a customer.

    ``total_cost`` caches the ingredient cost at the last recompute;
    ``is_price_updated`` is False while a referenced price has changed since.
    ``price_version`` is bumped every time the recipe is marked stale, so a
    recompute only clears staleness it actually observed.
    """

    __tablename__ = "recipes"
    __table_args__ = (
        Index("idx_recipes_customer", "customer_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    density = Column(String(50))  # Free text, e.g. "1.25 g/ml"
    total_cost = Column(Numeric(16, 4), nullable=False, default=Decimal("0"))
    is_price_updated = Column(Boolean, default=True)
    price_version = Column(Integer, nullable=False, default=0)
    last_price_update = Column(TIMESTAMP)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = relationship("Customer", back_populates="recipes")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
    )
    packages = relationship(
        "RecipePackage",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipePackage.id",
    )
    orders = relationship("Order", back_populates="recipe")

    @property
    def package_ids(self) -> list[int]:
        return [rp.package_id for rp in self.packages]

    @property
    def is_stale(self) -> bool:
        # NULL counts as stale (rows written before the flag existed)
        return not self.is_price_updated

    def __repr__(self):
        return f"<Recipe(name='{self.name}', total_cost={self.total_cost})>"


class RecipeIngredient(Base):
    """Raw material line in a recipe with the price captured when it was added."""

    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("idx_recipe_ingredients_recipe", "recipe_id"),
        Index("idx_recipe_ingredients_stock", "stock_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    stock_id = Column(Integer, ForeignKey("stock.id"), nullable=False)
    name = Column(String(200), nullable=False)  # Material name at time of adding
    quantity = Column(Numeric(14, 4), nullable=False)
    price = Column(Numeric(14, 4), nullable=False)  # Unit price snapshot
    total = Column(Numeric(16, 4), nullable=False)  # quantity * price snapshot
    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    # Relationships
    recipe = relationship("Recipe", back_populates="ingredients")
    raw_material = relationship("RawMaterial", back_populates="recipe_ingredients")

    def __repr__(self):
        return f"<RecipeIngredient(recipe_id={self.recipe_id}, stock_id={self.stock_id}, quantity={self.quantity})>"


class RecipePackage(Base):
    """Packaging option offered for a recipe."""

    __tablename__ = "recipe_packages"
    __table_args__ = (
        UniqueConstraint("recipe_id", "package_id", name="uq_recipe_packages"),
        Index("idx_recipe_packages_package", "package_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    # Relationships
    recipe = relationship("Recipe", back_populates="packages")
    package = relationship("Packaging", back_populates="recipe_packages")

    def __repr__(self):
        return f"<RecipePackage(recipe_id={self.recipe_id}, package_id={self.package_id})>"
