"""Database connection and session management."""
import logging
from contextlib import contextmanager
from decimal import Decimal
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from app.config import get_settings
from app.errors import TransactionError

logger = logging.getLogger(__name__)

DEFAULT_STOCK = [
    {"name": "MAP", "quantity": 1000, "min_quantity": 100, "price": Decimal("15.0")},
    {"name": "Potassium Sulfate", "quantity": 800, "min_quantity": 100, "price": Decimal("12.0")},
    {"name": "Urea", "quantity": 1200, "min_quantity": 150, "price": Decimal("8.0")},
    {"name": "Ammonium Sulfate", "quantity": 900, "min_quantity": 100, "price": Decimal("10.0")},
    {"name": "Magnesium Sulfate", "quantity": 500, "min_quantity": 50, "price": Decimal("9.0")},
]

DEFAULT_PACKAGES = [
    {"size": Decimal("1"), "unit": "L", "price": Decimal("2.5")},
    {"size": Decimal("5"), "unit": "L", "price": Decimal("5.0")},
    {"size": Decimal("20"), "unit": "L", "price": Decimal("15.0")},
    {"size": Decimal("25"), "unit": "Kg", "price": Decimal("12.5")},
]


def get_database_url() -> str:
    """Database URL from settings; SQLite file in the working directory by default."""
    return get_settings().DATABASE_URL


def is_sqlite_url(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement for every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@lru_cache
def get_engine():
    """Create SQLAlchemy engine (cached)."""
    url = get_database_url()
    if is_sqlite_url(url):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        enable_sqlite_foreign_keys(engine)
        return engine
    return create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)


def get_session() -> Session:
    """Create a new database session."""
    SessionLocal = sessionmaker(bind=get_engine())
    return SessionLocal()


def get_db():
    """Dependency for FastAPI routes that need a database session."""
    db = get_session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, description: str) -> Iterator[Session]:
    """Commit the enclosed writes as one unit, rolling back on any failure.

    Domain errors raised inside the block propagate unchanged after the
    rollback; storage errors are wrapped in TransactionError.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction failed ({description}): {e}")
        raise TransactionError(f"{description} failed and was rolled back") from e
    except Exception:
        db.rollback()
        raise


def seed_defaults(db: Session) -> None:
    """Insert the settings row, and starter stock/packaging on an empty database."""
    from app.models import Packaging, RawMaterial, Setting

    if db.get(Setting, 1) is None:
        db.add(Setting(id=1))

    if db.query(RawMaterial).filter(RawMaterial.deleted_at.is_(None)).count() == 0:
        for item in DEFAULT_STOCK:
            db.add(RawMaterial(**item))
        logger.info("Seeded default stock")

    if db.query(Packaging).filter(Packaging.deleted_at.is_(None)).count() == 0:
        for pkg in DEFAULT_PACKAGES:
            db.add(Packaging(**pkg))
        logger.info("Seeded default packaging")

    db.commit()


def init_db() -> None:
    """Create tables if missing and seed defaults."""
    from app.models import Base, Setting

    engine = get_engine()
    Base.metadata.create_all(engine)
    db = get_session()
    try:
        if get_settings().SEED_DEFAULTS:
            seed_defaults(db)
        elif db.get(Setting, 1) is None:
            db.add(Setting(id=1))
            db.commit()
    finally:
        db.close()
