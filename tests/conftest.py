"""Test fixtures and configuration."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import enable_sqlite_foreign_keys
from app.models import Base
from app.models.customer import Customer
from app.models.order import Order
from app.models.package import Packaging
from app.models.recipe import Recipe, RecipeIngredient, RecipePackage
from app.models.setting import Setting
from app.models.stock import RawMaterial
from app.services.cost_calculator import line_cost


@pytest.fixture(scope="function")
def engine():
    """Create an in-memory SQLite engine for testing."""
    # Use check_same_thread=False for compatibility with FastAPI TestClient
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_foreign_keys(engine)

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Clean up
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Create a test database session with the settings row in place."""
    Session = sessionmaker(bind=engine)
    session = Session()
    session.add(Setting(id=1))
    session.commit()
    yield session
    session.rollback()
    session.close()


class FakeClock:
    """Deterministic clock for services that timestamp their writes."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def customer_factory(db):
    """Factory to create test customers."""
    def _create(name="Test Farm", type=Customer.TYPE_CUSTOMER, **kwargs):
        customer = Customer(name=name, type=type, **kwargs)
        db.add(customer)
        db.flush()
        return customer
    return _create


@pytest.fixture
def raw_material_factory(db):
    """Factory to create test raw materials."""
    def _create(name="Test Material", price=Decimal("10"), **kwargs):
        material = RawMaterial(
            name=name,
            price=Decimal(str(price)),
            quantity=kwargs.pop("quantity", Decimal("100")),
            **kwargs,
        )
        db.add(material)
        db.flush()
        return material
    return _create


@pytest.fixture
def package_factory(db):
    """Factory to create test packages."""
    def _create(size=Decimal("1"), unit="L", price=Decimal("2.5"), **kwargs):
        package = Packaging(size=Decimal(str(size)), unit=unit, price=Decimal(str(price)), **kwargs)
        db.add(package)
        db.flush()
        return package
    return _create


@pytest.fixture
def recipe_factory(db, customer_factory):
    """Factory to create test recipes.

    ``ingredients`` is a list of (raw_material, quantity) pairs; prices are
    snapshotted from the materials and total_cost is their sum, so the recipe
    starts Fresh.
    """
    def _create(name="Test Recipe", customer=None, ingredients=(), packages=(), **kwargs):
        customer = customer or customer_factory(name=f"Owner of {name}")
        recipe = Recipe(
            name=name,
            customer_id=customer.id,
            density=kwargs.pop("density", None),
            is_price_updated=kwargs.pop("is_price_updated", True),
            last_price_update=kwargs.pop("last_price_update", datetime.utcnow()),
            **kwargs,
        )
        total = Decimal("0")
        for material, quantity in ingredients:
            quantity = Decimal(str(quantity))
            price = Decimal(material.price)
            recipe.ingredients.append(RecipeIngredient(
                stock_id=material.id,
                name=material.name,
                quantity=quantity,
                price=price,
                total=line_cost(quantity, price),
            ))
            total += line_cost(quantity, price)
        for package in packages:
            recipe.packages.append(RecipePackage(package_id=package.id))
        recipe.total_cost = total
        db.add(recipe)
        db.flush()
        return recipe
    return _create


@pytest.fixture
def order_factory(db):
    """Factory to create test orders."""
    def _create(recipe, customer=None, quantity=Decimal("100"), status=Order.STATUS_PENDING, **kwargs):
        order = Order(
            customer_id=(customer or recipe.customer).id,
            recipe_id=recipe.id,
            quantity=Decimal(str(quantity)),
            status=status,
            **kwargs,
        )
        db.add(order)
        db.flush()
        return order
    return _create
