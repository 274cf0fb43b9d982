"""SQLAlchemy models for the formulation costing backend."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models to register them with Base.metadata
from .mixins import Active, Deleted, Lifecycle, SoftDeleteMixin, active_only, include_deleted
from .customer import Customer
from .stock import RawMaterial
from .package import Packaging
from .recipe import Recipe, RecipeIngredient, RecipePackage
from .order import Order
from .setting import Setting, PriceHistory

__all__ = [
    "Base",
    "Active",
    "Deleted",
    "Lifecycle",
    "SoftDeleteMixin",
    "active_only",
    "include_deleted",
    "Customer",
    "RawMaterial",
    "Packaging",
    "Recipe",
    "RecipeIngredient",
    "RecipePackage",
    "Order",
    "Setting",
    "PriceHistory",
]
