"""Initial schema - all core tables

Revision ID: 001
Revises:
Create Date: 2024-12-11

Creates:
- customers
- stock
- packages
- recipes
- recipe_ingredients
- recipe_packages
- orders
- settings
- price_history
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.services.nutrients import NUTRIENT_FIELDS

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === CUSTOMERS ===
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("email", sa.String(200)),
        sa.Column("phone", sa.String(50)),
        sa.Column("address", sa.Text),
        sa.Column("balance", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP),
    )

    # === STOCK (raw materials) ===
    op.create_table(
        "stock",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("code", sa.String(50)),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("min_quantity", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(10), nullable=False, server_default="kg"),
        sa.Column("category", sa.String(50), nullable=False, server_default="raw_material"),
        sa.Column("price", sa.Numeric(14, 4), nullable=False, server_default="0"),
        *[sa.Column(field, sa.Numeric(8, 3)) for field in NUTRIENT_FIELDS],
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP),
    )
    op.create_index("idx_stock_name", "stock", ["name"])

    # === PACKAGES ===
    op.create_table(
        "packages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("size", sa.Numeric(10, 3), nullable=False),
        sa.Column("unit", sa.String(5), nullable=False),
        sa.Column("price", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP),
        sa.CheckConstraint("unit IN ('L', 'Kg')", name="ck_packages_unit"),
    )

    # === RECIPES ===
    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("density", sa.String(50)),
        sa.Column("total_cost", sa.Numeric(16, 4), nullable=False, server_default="0"),
        sa.Column("is_price_updated", sa.Boolean, server_default=sa.true()),
        sa.Column("last_price_update", sa.TIMESTAMP),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP),
    )
    op.create_index("idx_recipes_customer", "recipes", ["customer_id"])

    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("stock_id", sa.Integer, sa.ForeignKey("stock.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False),
        sa.Column("price", sa.Numeric(14, 4), nullable=False),
        sa.Column("total", sa.Numeric(16, 4), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
    )
    op.create_index("idx_recipe_ingredients_recipe", "recipe_ingredients", ["recipe_id"])
    op.create_index("idx_recipe_ingredients_stock", "recipe_ingredients", ["stock_id"])

    op.create_table(
        "recipe_packages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("package_id", sa.Integer, sa.ForeignKey("packages.id"), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.UniqueConstraint("recipe_id", "package_id", name="uq_recipe_packages"),
    )
    op.create_index("idx_recipe_packages_package", "recipe_packages", ["package_id"])

    # === ORDERS ===
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.id"), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        sa.Column("charge_count", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'cancelled')", name="ck_orders_status"),
    )
    op.create_index("idx_orders_status", "orders", ["status"])

    # === SETTINGS ===
    op.create_table(
        "settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("usd_exchange_rate", sa.Numeric(12, 4), nullable=False, server_default="36.0"),
        sa.Column("list_a_margin", sa.Numeric(6, 2), nullable=False, server_default="20.0"),
        sa.Column("list_b_margin", sa.Numeric(6, 2), nullable=False, server_default="35.0"),
        sa.Column("list_c_margin", sa.Numeric(6, 2), nullable=False, server_default="50.0"),
        sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP, server_default=sa.func.now()),
    )

    # === PRICE HISTORY ===
    op.create_table(
        "price_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("item_kind", sa.String(10), nullable=False),
        sa.Column("item_id", sa.Integer, nullable=False),
        sa.Column("old_price", sa.Numeric(14, 4), nullable=False),
        sa.Column("new_price", sa.Numeric(14, 4), nullable=False),
        sa.Column("changed_at", sa.TIMESTAMP, nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "idx_price_history_lookup", "price_history", ["item_kind", "item_id", "changed_at"]
    )


def downgrade() -> None:
    op.drop_table("price_history")
    op.drop_table("settings")
    op.drop_table("orders")
    op.drop_table("recipe_packages")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("packages")
    op.drop_table("stock")
    op.drop_table("customers")
